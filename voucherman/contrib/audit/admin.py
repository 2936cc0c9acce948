"""Audit admin."""

from django.contrib import admin

from voucherman.contrib.audit.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ["created_at", "action", "actor_identity", "source_address", "details"]
    list_filter = ["action"]
    search_fields = ["action", "actor_identity", "details"]
    readonly_fields = ["action", "details", "actor_identity", "source_address", "created_at"]
    date_hierarchy = "created_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
