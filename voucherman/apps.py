from django.apps import AppConfig


class VouchermanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "voucherman"
    verbose_name = "Voucherman - Vouchers & Loyalty"
