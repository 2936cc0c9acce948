"""Loyalty admin."""

from django.contrib import admin

from voucherman.contrib.loyalty.models import Visit


@admin.register(Visit)
class VisitAdmin(admin.ModelAdmin):
    list_display = [
        "customer_phone_number",
        "created_at",
        "processed_by",
        "is_reward_generated",
        "revoked_at",
    ]
    list_filter = ["is_reward_generated"]
    search_fields = ["customer_phone_number", "processed_by"]
    raw_id_fields = ["reward_voucher"]
    readonly_fields = [
        "customer_phone_number",
        "processed_by",
        "created_at",
        "revoked_at",
        "revoked_by",
        "revocation_reason",
        "is_reward_generated",
        "reward_voucher",
    ]
    date_hierarchy = "created_at"

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
