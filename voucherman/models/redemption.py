"""Redemption model - the append-only ledger of claimed amounts."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Redemption(models.Model):
    """
    Immutable record of one successful claim on a bound voucher.

    Rows are never updated or deleted; later voucher mutations (soft delete,
    customer phone change) leave the ledger untouched.
    """

    voucher = models.ForeignKey(
        "voucherman.Voucher",
        on_delete=models.PROTECT,
        related_name="redemptions",
        verbose_name=_("voucher"),
    )
    customer_phone_number = models.CharField(_("customer phone number"), max_length=20, db_index=True)
    amount = models.PositiveBigIntegerField(_("amount"), help_text=_("Smallest currency unit"))
    processed_by = models.CharField(_("processed by"), max_length=150)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("redemption")
        verbose_name_plural = _("redemptions")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["customer_phone_number", "-created_at"], name="vm_redemption_phone_idx"),
        ]

    def __str__(self):
        return f"{self.amount} - {self.customer_phone_number}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            from voucherman.exceptions import ConflictError

            raise ConflictError("LEDGER_IMMUTABLE", redemption_id=self.pk)
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        from voucherman.exceptions import ConflictError

        raise ConflictError("LEDGER_IMMUTABLE", redemption_id=self.pk)
