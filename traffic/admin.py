# traffic/admin.py
from django.contrib import admin
from .models import TrafficReport


@admin.register(TrafficReport)
class TrafficReportAdmin(admin.ModelAdmin):
    list_display = ('field', 'level', 'submitted_by', 'submitted_at')
    list_filter = ('level', 'field')
    readonly_fields = ('field', 'level', 'comment', 'submitted_by', 'submitted_at')

    # reports are append-only
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
