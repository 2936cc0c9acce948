"""Loyalty app config."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class LoyaltyConfig(AppConfig):
    name = "voucherman.contrib.loyalty"
    label = "voucherman_loyalty"
    verbose_name = _("Loyalty stamp card")
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        from voucherman.contrib.loyalty import receivers  # noqa: F401
