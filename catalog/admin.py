# catalog/admin.py
from django.contrib import admin
from .models import Field, FieldSuggestion


@admin.register(Field)
class FieldAdmin(admin.ModelAdmin):
    list_display = ('name', 'address', 'surface', 'current_traffic', 'from_suggestion')
    list_filter = ('surface', 'from_suggestion')
    search_fields = ('name', 'address')
    readonly_fields = ('current_traffic', 'traffic_updated_at', 'created_at')


@admin.register(FieldSuggestion)
class FieldSuggestionAdmin(admin.ModelAdmin):
    list_display = ('name', 'address', 'status', 'submitted_by', 'created_at')
    list_filter = ('status',)
    search_fields = ('name', 'address')
