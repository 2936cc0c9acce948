import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("voucherman", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Visit",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "customer_phone_number",
                    models.CharField(db_index=True, max_length=20, verbose_name="customer phone number"),
                ),
                ("processed_by", models.CharField(max_length=150, verbose_name="processed by")),
                (
                    "created_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name="created at"),
                ),
                ("revoked_at", models.DateTimeField(blank=True, null=True, verbose_name="revoked at")),
                ("revoked_by", models.CharField(blank=True, max_length=150, verbose_name="revoked by")),
                ("revocation_reason", models.TextField(blank=True, verbose_name="revocation reason")),
                ("is_reward_generated", models.BooleanField(default=False, verbose_name="reward generated")),
                (
                    "reward_voucher",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="consumed_visits",
                        to="voucherman.voucher",
                        verbose_name="reward voucher",
                    ),
                ),
            ],
            options={
                "verbose_name": "visit",
                "verbose_name_plural": "visits",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["customer_phone_number", "created_at"], name="vm_visit_phone_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(revoked_at__isnull=True) | models.Q(is_reward_generated=False),
                        name="voucherman_visit_revoked_or_rewarded",
                    ),
                ],
            },
        ),
    ]
