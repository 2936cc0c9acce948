"""Customer model.

Only the fields the voucher core depends on. The phone number is the key
vouchers, redemptions and visits reference, so it is stored normalized
(no leading "0") and is unique among non-deleted customers.
"""

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _


class CustomerQuerySet(models.QuerySet):
    def alive(self):
        return self.filter(deleted_at__isnull=True)

    def by_phone(self, phone: str):
        from voucherman.utils import normalize_phone

        return self.alive().filter(phone_number=normalize_phone(phone))


class Customer(models.Model):
    """
    Registered loyalty customer.

    ``total_spending`` is the running sum of every redemption amount, in the
    smallest currency unit. It only ever grows.
    """

    phone_number = models.CharField(
        _("phone number"),
        max_length=20,
        db_index=True,
        help_text=_("Stored without leading 0"),
    )
    name = models.CharField(_("name"), max_length=200, blank=True)
    date_of_birth = models.DateField(_("date of birth"), null=True, blank=True)
    total_spending = models.PositiveBigIntegerField(
        _("total spending"),
        default=0,
        help_text=_("Sum of claimed amounts (smallest currency unit)"),
    )

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)
    deleted_at = models.DateTimeField(_("deleted at"), null=True, blank=True, db_index=True)

    objects = CustomerQuerySet.as_manager()

    class Meta:
        verbose_name = _("customer")
        verbose_name_plural = _("customers")
        ordering = ["-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["phone_number"],
                condition=Q(deleted_at__isnull=True),
                name="voucherman_customer_live_phone_unique",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.phone_number})" if self.name else self.phone_number

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def save(self, *args, **kwargs):
        if self.phone_number:
            from voucherman.utils import normalize_phone

            self.phone_number = normalize_phone(self.phone_number)
        super().save(*args, **kwargs)
