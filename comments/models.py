from django.conf import settings
from django.db import models
from catalog.models import Field

from .categorize import CATEGORIES, GENERAL


class FieldComment(models.Model):
    field = models.ForeignKey(Field, on_delete=models.CASCADE, related_name="comments")
    text = models.TextField()
    category = models.CharField(max_length=20, choices=CATEGORIES, default=GENERAL, db_index=True)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name="field_comments",
    )
    author_name = models.CharField(max_length=150, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Comment: {self.text[:50]}"
