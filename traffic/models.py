# traffic/models.py
from django.conf import settings
from django.db import models
from catalog.models import Field

from .consensus import LOW, MEDIUM, HIGH
from .exceptions import ImmutableReportError


class TrafficReport(models.Model):
    LEVEL_CHOICES = [
        (LOW, "Low"),
        (MEDIUM, "Medium"),
        (HIGH, "High"),
    ]

    field = models.ForeignKey(Field, on_delete=models.CASCADE, related_name="traffic_reports")
    level = models.CharField(max_length=20, choices=LEVEL_CHOICES)
    comment = models.TextField(blank=True, default="")
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name="traffic_reports",
    )
    # server clock only
    submitted_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['-submitted_at', '-id']
        indexes = [
            models.Index(fields=['field', '-submitted_at'], name='traffic_field_recent_idx'),
            models.Index(fields=['submitted_by', '-submitted_at'], name='traffic_user_recent_idx'),
        ]

    def __str__(self):
        return f"{self.field_id}: {self.level} @ {self.submitted_at}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableReportError(f"Traffic report {self.pk} cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableReportError(f"Traffic report {self.pk} cannot be deleted.")
