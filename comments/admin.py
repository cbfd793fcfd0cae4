# comments/admin.py
from django.contrib import admin
from .models import FieldComment


@admin.register(FieldComment)
class FieldCommentAdmin(admin.ModelAdmin):
    list_display = ('field', 'category', 'author_name', 'created_at')
    list_filter = ('category',)
    search_fields = ('text', 'author_name')
