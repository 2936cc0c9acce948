"""Loyalty models - one row per stamped visit."""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class VisitQuerySet(models.QuerySet):
    def for_phone(self, phone: str):
        return self.filter(customer_phone_number=phone)

    def active(self):
        """Visits that count toward the stamp card."""
        return self.filter(revoked_at__isnull=True, is_reward_generated=False)


class Visit(models.Model):
    """
    A staff-recorded customer visit (one stamp).

    A visit stops counting once it is revoked or consumed by a reward, and
    neither change is ever undone. A rewarded visit cannot be revoked.
    """

    customer_phone_number = models.CharField(_("customer phone number"), max_length=20, db_index=True)
    processed_by = models.CharField(_("processed by"), max_length=150)
    created_at = models.DateTimeField(_("created at"), default=timezone.now, db_index=True)

    revoked_at = models.DateTimeField(_("revoked at"), null=True, blank=True)
    revoked_by = models.CharField(_("revoked by"), max_length=150, blank=True)
    revocation_reason = models.TextField(_("revocation reason"), blank=True)

    is_reward_generated = models.BooleanField(_("reward generated"), default=False)
    reward_voucher = models.ForeignKey(
        "voucherman.Voucher",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="consumed_visits",
        verbose_name=_("reward voucher"),
    )

    objects = VisitQuerySet.as_manager()

    class Meta:
        verbose_name = _("visit")
        verbose_name_plural = _("visits")
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["customer_phone_number", "created_at"], name="vm_visit_phone_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(revoked_at__isnull=True) | models.Q(is_reward_generated=False),
                name="voucherman_visit_revoked_or_rewarded",
            ),
        ]

    def __str__(self):
        return f"{self.customer_phone_number} @ {self.created_at:%Y-%m-%d %H:%M}"

    @property
    def is_active(self) -> bool:
        return self.revoked_at is None and not self.is_reward_generated
