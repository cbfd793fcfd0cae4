# traffic/management/commands/reconcile_traffic.py
from django.core.management.base import BaseCommand
from traffic.services import reconcile_all


class Command(BaseCommand):
    help = "Recompute every field's traffic consensus and repair stale cached levels"

    def add_arguments(self, parser):
        parser.add_argument("--window", type=int, default=None, help="Reports considered per field")

    def handle(self, *args, **options):
        checked, drifted = reconcile_all(options.get("window"))
        if not checked:
            self.stdout.write("No fields to reconcile.")
            return
        self.stdout.write(f"Reconciled {checked} fields, {drifted} had drifted.")
