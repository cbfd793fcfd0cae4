# catalog/signals.py
import logging
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import FieldSuggestion

logger = logging.getLogger(__name__)


@receiver(post_save, sender=FieldSuggestion)
def on_suggestion_created(sender, instance, created, **kwargs):
    """
    Tell the admins about a new suggestion once it is committed.
    A broker outage must not lose the suggestion, so enqueue failures are only logged.
    """
    if not created:
        return

    def enqueue():
        from .tasks import notify_admins_of_suggestion
        try:
            notify_admins_of_suggestion.delay(instance.pk)
        except Exception as e:
            logger.warning(f"Could not queue admin notification for suggestion {instance.pk}: {e}")

    transaction.on_commit(enqueue)
