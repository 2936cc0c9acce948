import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="VoucherTemplate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("image_url", models.CharField(blank=True, max_length=500, verbose_name="image url")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "voucher template",
                "verbose_name_plural": "voucher templates",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "phone_number",
                    models.CharField(
                        db_index=True,
                        help_text="Stored without leading 0",
                        max_length=20,
                        verbose_name="phone number",
                    ),
                ),
                ("name", models.CharField(blank=True, max_length=200, verbose_name="name")),
                ("date_of_birth", models.DateField(blank=True, null=True, verbose_name="date of birth")),
                (
                    "total_spending",
                    models.PositiveBigIntegerField(
                        default=0,
                        help_text="Sum of claimed amounts (smallest currency unit)",
                        verbose_name="total spending",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("deleted_at", models.DateTimeField(blank=True, db_index=True, null=True, verbose_name="deleted at")),
            ],
            options={
                "verbose_name": "customer",
                "verbose_name_plural": "customers",
                "ordering": ["-id"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(deleted_at__isnull=True),
                        fields=("phone_number",),
                        name="voucherman_customer_live_phone_unique",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Voucher",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("code", models.CharField(db_index=True, max_length=16, verbose_name="code")),
                ("name", models.CharField(blank=True, db_index=True, max_length=200, verbose_name="name")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("image_url", models.CharField(blank=True, max_length=500, verbose_name="image url")),
                (
                    "status",
                    models.CharField(
                        choices=[("available", "Available"), ("active", "Active"), ("claimed", "Claimed")],
                        db_index=True,
                        default="available",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                (
                    "binded_to_phone_number",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        max_length=20,
                        null=True,
                        verbose_name="bound to phone number",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name="created at"),
                ),
                ("expiry_date", models.DateTimeField(blank=True, null=True, verbose_name="expiry date")),
                ("approved_at", models.DateTimeField(blank=True, null=True, verbose_name="approved at")),
                ("approved_by", models.CharField(blank=True, max_length=150, verbose_name="approved by")),
                ("used_at", models.DateTimeField(blank=True, null=True, verbose_name="used at")),
                ("claim_requested_at", models.DateTimeField(blank=True, null=True, verbose_name="claim requested at")),
                ("spent_amount", models.PositiveBigIntegerField(blank=True, null=True, verbose_name="spent amount")),
                ("deleted_at", models.DateTimeField(blank=True, db_index=True, null=True, verbose_name="deleted at")),
                (
                    "template",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="vouchers",
                        to="voucherman.vouchertemplate",
                        verbose_name="template",
                    ),
                ),
            ],
            options={
                "verbose_name": "voucher",
                "verbose_name_plural": "vouchers",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["status", "name"], name="vm_voucher_status_name_idx")],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(deleted_at__isnull=True, status__in=["available", "active"]),
                        fields=("code",),
                        name="voucherman_voucher_live_code_unique",
                    ),
                    models.CheckConstraint(
                        condition=~models.Q(status="available")
                        | models.Q(binded_to_phone_number__isnull=True, expiry_date__isnull=True),
                        name="voucherman_voucher_available_unbound",
                    ),
                    models.CheckConstraint(
                        condition=~models.Q(status="active")
                        | models.Q(binded_to_phone_number__isnull=False, expiry_date__isnull=False),
                        name="voucherman_voucher_active_bound",
                    ),
                    models.CheckConstraint(
                        condition=~models.Q(status="claimed")
                        | (
                            models.Q(used_at__isnull=False, spent_amount__isnull=False, claim_requested_at__isnull=True)
                            & ~models.Q(approved_by="")
                        ),
                        name="voucherman_voucher_claimed_complete",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(claim_requested_at__isnull=True) | models.Q(status="active"),
                        name="voucherman_voucher_claim_request_only_active",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Redemption",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "customer_phone_number",
                    models.CharField(db_index=True, max_length=20, verbose_name="customer phone number"),
                ),
                ("amount", models.PositiveBigIntegerField(help_text="Smallest currency unit", verbose_name="amount")),
                ("processed_by", models.CharField(max_length=150, verbose_name="processed by")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                (
                    "voucher",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="redemptions",
                        to="voucherman.voucher",
                        verbose_name="voucher",
                    ),
                ),
            ],
            options={
                "verbose_name": "redemption",
                "verbose_name_plural": "redemptions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["customer_phone_number", "-created_at"], name="vm_redemption_phone_idx"),
                ],
            },
        ),
    ]
