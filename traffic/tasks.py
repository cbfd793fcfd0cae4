# traffic/tasks.py
from celery import shared_task
from .management.commands.reconcile_traffic import Command as ReconcileCommand


@shared_task
def reconcile_traffic_cache():
    cmd = ReconcileCommand()
    cmd.handle()
