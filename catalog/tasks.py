from celery import shared_task
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import send_mail

from .models import FieldSuggestion


def admin_recipients():
    staff = get_user_model().objects.filter(is_staff=True).exclude(email="").values_list("email", flat=True)
    return sorted({e.lower() for e in list(settings.FOOTY_ADMIN_EMAILS) + list(staff)})


@shared_task
def notify_admins_of_suggestion(suggestion_id):
    suggestion = FieldSuggestion.objects.filter(pk=suggestion_id).first()
    recipients = admin_recipients()
    if suggestion is None or not recipients:
        return 0
    return send_mail(
        f"New field suggestion: {suggestion.name}",
        f"{suggestion.name}\n{suggestion.address}\nSurface: {suggestion.surface}\n"
        f"Amenities: {', '.join(suggestion.amenities) or 'none'}",
        settings.DEFAULT_FROM_EMAIL,
        recipients,
    )
