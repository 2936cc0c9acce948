"""VoucherTemplate model - shared presentation for a family of vouchers."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class VoucherTemplate(models.Model):
    name = models.CharField(_("name"), max_length=200)
    description = models.TextField(_("description"), blank=True)
    image_url = models.CharField(_("image url"), max_length=500, blank=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("voucher template")
        verbose_name_plural = _("voucher templates")
        ordering = ["-created_at"]

    def __str__(self):
        return self.name
