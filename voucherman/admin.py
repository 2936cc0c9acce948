"""Voucherman admin (CORE only).

Contrib models have their own admin in their respective modules:
- voucherman.contrib.loyalty.admin: VisitAdmin
- voucherman.contrib.audit.admin: AuditLogAdmin
"""

from django.contrib import admin
from django.utils.html import format_html

from voucherman.models import Customer, Redemption, Voucher, VoucherStatus, VoucherTemplate


# ===========================================
# VoucherTemplate Admin
# ===========================================


@admin.register(VoucherTemplate)
class VoucherTemplateAdmin(admin.ModelAdmin):
    list_display = ["name", "voucher_count", "created_at"]
    search_fields = ["name"]
    readonly_fields = ["created_at"]

    def voucher_count(self, obj):
        return obj.vouchers.count()

    voucher_count.short_description = "Vouchers"


# ===========================================
# Customer Admin
# ===========================================


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ["phone_number", "name", "total_spending", "created_at", "deleted_at"]
    search_fields = ["phone_number", "name"]
    readonly_fields = ["total_spending", "created_at", "updated_at"]

    fieldsets = [
        ("Identification", {"fields": ["phone_number", "name", "date_of_birth"]}),
        ("Ledger", {"fields": ["total_spending"]}),
        (
            "System",
            {
                "fields": ["created_at", "updated_at", "deleted_at"],
                "classes": ["collapse"],
            },
        ),
    ]


# ===========================================
# Voucher Admin
# ===========================================


@admin.register(Voucher)
class VoucherAdmin(admin.ModelAdmin):
    """
    Voucher admin.

    Status is read-only here; it moves only through VoucherService.
    """

    list_display = [
        "code",
        "name",
        "status_badge",
        "binded_to_phone_number",
        "expiry_date",
        "created_at",
    ]
    list_filter = ["status"]
    search_fields = ["code", "name", "binded_to_phone_number"]
    raw_id_fields = ["template"]
    readonly_fields = [
        "id",
        "code",
        "status",
        "binded_to_phone_number",
        "approved_at",
        "approved_by",
        "used_at",
        "claim_requested_at",
        "spent_amount",
        "created_at",
        "deleted_at",
    ]
    date_hierarchy = "created_at"

    def status_badge(self, obj):
        colors = {
            VoucherStatus.AVAILABLE: "#6c757d",
            VoucherStatus.ACTIVE: "#28a745",
            VoucherStatus.CLAIMED: "#17a2b8",
        }
        status = obj.display_status
        color = colors.get(status, "#dc3545")
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            color,
            status,
        )

    status_badge.short_description = "Status"


# ===========================================
# Redemption Admin (read-only ledger)
# ===========================================


@admin.register(Redemption)
class RedemptionAdmin(admin.ModelAdmin):
    list_display = ["created_at", "customer_phone_number", "voucher", "amount", "processed_by"]
    search_fields = ["customer_phone_number", "voucher__code", "processed_by"]
    readonly_fields = ["voucher", "customer_phone_number", "amount", "processed_by", "created_at"]
    date_hierarchy = "created_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
