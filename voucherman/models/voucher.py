"""Voucher model and its state machine fields.

States move forward only:

    available ──bind──▶ active ──claim──▶ claimed
        └──────────────claim──────────────┘

"Expired" is not a stored state: an active voucher whose ``expiry_date``
has passed is expired at read time. "Claim requested" is a marker on an
active voucher (``claim_requested_at``).
"""

import uuid as uuid_lib

from django.db import models
from django.db.models import Case, IntegerField, Q, Value, When
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class VoucherStatus(models.TextChoices):
    AVAILABLE = "available", _("Available")
    ACTIVE = "active", _("Active")
    CLAIMED = "claimed", _("Claimed")


LIVE_STATUSES = [VoucherStatus.AVAILABLE, VoucherStatus.ACTIVE]


class VoucherQuerySet(models.QuerySet):
    def alive(self):
        """Exclude soft-deleted vouchers."""
        return self.filter(deleted_at__isnull=True)

    def live(self):
        """Non-deleted vouchers whose code is reserved (available or active)."""
        return self.alive().filter(status__in=LIVE_STATUSES)

    def bound_to(self, phone: str):
        return self.alive().filter(binded_to_phone_number=phone)

    def expired(self, now=None):
        now = now or timezone.now()
        return self.filter(
            status=VoucherStatus.ACTIVE,
            expiry_date__isnull=False,
            expiry_date__lt=now,
        )

    def unexpired_active(self, now=None):
        now = now or timezone.now()
        return self.filter(status=VoucherStatus.ACTIVE).filter(
            Q(expiry_date__isnull=True) | Q(expiry_date__gt=now)
        )

    def claim_requested(self):
        return self.filter(
            status=VoucherStatus.ACTIVE,
            claim_requested_at__isnull=False,
            used_at__isnull=True,
        )

    def with_listing_rank(self, now=None):
        """
        Annotate ``listing_rank``: 1 active and not expired, 2 available,
        3 claimed, 4 active and expired.
        """
        now = now or timezone.now()
        not_expired = Q(expiry_date__isnull=True) | Q(expiry_date__gt=now)
        return self.annotate(
            listing_rank=Case(
                When(Q(status=VoucherStatus.ACTIVE) & not_expired, then=Value(1)),
                When(status=VoucherStatus.AVAILABLE, then=Value(2)),
                When(status=VoucherStatus.CLAIMED, then=Value(3)),
                When(status=VoucherStatus.ACTIVE, expiry_date__lte=now, then=Value(4)),
                default=Value(5),
                output_field=IntegerField(),
            )
        )

    def ordered_for_listing(self, now=None):
        return self.with_listing_rank(now).order_by("listing_rank", "-created_at")


class Voucher(models.Model):
    """
    A single reward code.

    Presentation (name, description, image) is copied from the template at
    issuance so later template edits do not rewrite issued vouchers.

    Every ``save()`` runs the state invariant gate (V1). The same rules are
    also declared as database check constraints.
    """

    id = models.UUIDField(primary_key=True, default=uuid_lib.uuid4, editable=False)
    code = models.CharField(_("code"), max_length=16, db_index=True)

    template = models.ForeignKey(
        "voucherman.VoucherTemplate",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="vouchers",
        verbose_name=_("template"),
    )
    name = models.CharField(_("name"), max_length=200, blank=True, db_index=True)
    description = models.TextField(_("description"), blank=True)
    image_url = models.CharField(_("image url"), max_length=500, blank=True)

    status = models.CharField(
        _("status"),
        max_length=20,
        choices=VoucherStatus.choices,
        default=VoucherStatus.AVAILABLE,
        db_index=True,
    )
    binded_to_phone_number = models.CharField(
        _("bound to phone number"),
        max_length=20,
        null=True,
        blank=True,
        db_index=True,
    )

    created_at = models.DateTimeField(_("created at"), default=timezone.now, db_index=True)
    expiry_date = models.DateTimeField(_("expiry date"), null=True, blank=True)
    approved_at = models.DateTimeField(_("approved at"), null=True, blank=True)
    approved_by = models.CharField(_("approved by"), max_length=150, blank=True)
    used_at = models.DateTimeField(_("used at"), null=True, blank=True)
    claim_requested_at = models.DateTimeField(_("claim requested at"), null=True, blank=True)
    spent_amount = models.PositiveBigIntegerField(_("spent amount"), null=True, blank=True)

    deleted_at = models.DateTimeField(_("deleted at"), null=True, blank=True, db_index=True)

    objects = VoucherQuerySet.as_manager()

    class Meta:
        verbose_name = _("voucher")
        verbose_name_plural = _("vouchers")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "name"], name="vm_voucher_status_name_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["code"],
                condition=Q(deleted_at__isnull=True, status__in=["available", "active"]),
                name="voucherman_voucher_live_code_unique",
            ),
            models.CheckConstraint(
                condition=~Q(status="available")
                | Q(binded_to_phone_number__isnull=True, expiry_date__isnull=True),
                name="voucherman_voucher_available_unbound",
            ),
            models.CheckConstraint(
                condition=~Q(status="active")
                | Q(binded_to_phone_number__isnull=False, expiry_date__isnull=False),
                name="voucherman_voucher_active_bound",
            ),
            models.CheckConstraint(
                condition=~Q(status="claimed")
                | (
                    Q(used_at__isnull=False, spent_amount__isnull=False, claim_requested_at__isnull=True)
                    & ~Q(approved_by="")
                ),
                name="voucherman_voucher_claimed_complete",
            ),
            models.CheckConstraint(
                condition=Q(claim_requested_at__isnull=True) | Q(status="active"),
                name="voucherman_voucher_claim_request_only_active",
            ),
        ]

    def __str__(self):
        return f"{self.code} ({self.status})"

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def is_expired(self, now=None) -> bool:
        if self.status != VoucherStatus.ACTIVE or self.expiry_date is None:
            return False
        return self.expiry_date < (now or timezone.now())

    @property
    def display_status(self) -> str:
        """Status as shown to users: ``expired`` for active vouchers past expiry."""
        if self.is_expired():
            return "expired"
        return self.status

    def save(self, *args, **kwargs):
        from voucherman.gates import Gates

        Gates.voucher_state_invariant(self)
        super().save(*args, **kwargs)
