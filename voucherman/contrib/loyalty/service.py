"""Loyalty service - visits, stamp-card progress and rewards."""

import logging
from dataclasses import dataclass, field

from django.db import transaction
from django.utils import timezone

from voucherman import audit
from voucherman.conf import voucherman_settings
from voucherman.contrib.loyalty.models import Visit
from voucherman.exceptions import NotFoundError, ValidationError
from voucherman.gates import Gates
from voucherman.models import Customer, Voucher
from voucherman.service import VoucherService
from voucherman.services import template as template_service
from voucherman.signals import reward_issued
from voucherman.utils import normalize_phone

logger = logging.getLogger(__name__)


@dataclass
class RewardResult:
    voucher: Voucher
    consumed_visit_ids: list[int]
    remaining_active: int


@dataclass
class StampCardProgress:
    """Active stamp count plus the full visit history."""

    phone_number: str
    customer_name: str
    active_count: int
    target: int
    history: list[dict] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.active_count >= self.target

    @property
    def remaining(self) -> int:
        return max(0, self.target - self.active_count)


class LoyaltyService:
    """
    Service for stamp-card operations.

    Uses @classmethod for extensibility (consistent with VoucherService).
    Visit writes lock the customer row first, so concurrent calls for the
    same customer are serialized and the active count read inside the
    transaction is the one the write is validated against.
    """

    @classmethod
    def active_count(cls, phone_number: str) -> int:
        """Number of un-revoked, un-rewarded visits."""
        return Visit.objects.for_phone(normalize_phone(phone_number)).active().count()

    @classmethod
    def record_visit(cls, actor, phone_number: str) -> tuple[Visit, int]:
        """
        Stamp the customer's card.

        Args:
            actor: Staff actor (recorded as processed_by)
            phone_number: Customer phone (normalized here)

        Returns:
            Tuple of (Visit, new active count)

        Raises:
            NotFoundError: If the phone is not a registered customer
            GateError: V5_StampCardCapacity if the card is already full
        """
        actor.require_staff()

        with transaction.atomic():
            customer = cls._get_customer_for_update(phone_number)
            phone = customer.phone_number

            current = Visit.objects.for_phone(phone).active().count()
            Gates.stamp_card_capacity(current)

            visit = Visit.objects.create(customer_phone_number=phone, processed_by=actor.identity)

        count = current + 1
        logger.info("Recorded visit for %s (%d/%d)", phone, count, voucherman_settings.STAMPS_PER_REWARD)
        audit.record(
            "VISIT_RECORDED",
            f"Visit recorded for {phone}. Progress: {count}/{voucherman_settings.STAMPS_PER_REWARD}",
            actor,
        )
        return visit, count

    @classmethod
    def issue_reward(
        cls,
        actor,
        phone_number: str,
        template_id=None,
        expiry_date=None,
        expiry_days: int | None = None,
    ) -> RewardResult:
        """
        Exchange a full stamp card for an active reward voucher.

        The oldest STAMPS_PER_REWARD active visits (by created_at) are marked
        as rewarded and linked to the new voucher. Any surplus visits stay
        active for the next card.

        Raises:
            NotFoundError: Unregistered customer or unknown template
            ValidationError: No template given and the fallback is disabled
            GateError: V6_StampCardComplete if the card is not full
        """
        actor.require_staff()
        target = voucherman_settings.STAMPS_PER_REWARD

        with transaction.atomic():
            customer = cls._get_customer_for_update(phone_number)
            phone = customer.phone_number

            visits = list(
                Visit.objects.for_phone(phone)
                .active()
                .select_for_update()
                .order_by("created_at", "id")
            )
            Gates.stamp_card_complete(len(visits))

            template = template_service.resolve_reward_template(template_id)
            voucher = VoucherService.issue_bound(
                actor,
                template,
                phone,
                expiry_date=expiry_date,
                expiry_days=expiry_days,
            )

            consumed = [v.pk for v in visits[:target]]
            Visit.objects.filter(pk__in=consumed).update(is_reward_generated=True, reward_voucher=voucher)

        remaining = len(visits) - len(consumed)
        logger.info("Issued reward %s to %s (%d visits left)", voucher.code, phone, remaining)
        audit.record("REWARD_ISSUED", f"Issued reward voucher {voucher.code} to {phone}", actor)
        reward_issued.send(sender=Visit, voucher=voucher, phone_number=phone, visit_ids=consumed, actor=actor)
        return RewardResult(voucher=voucher, consumed_visit_ids=consumed, remaining_active=remaining)

    @classmethod
    def revoke_visit(cls, actor, visit_id, reason: str = "") -> Visit:
        """
        Revoke a visit. Admin only.

        Raises:
            NotFoundError: Unknown visit
            GateError: V7_VisitRevocable if already revoked or rewarded
        """
        actor.require_admin()

        with transaction.atomic():
            try:
                visit = Visit.objects.select_for_update().get(pk=visit_id)
            except (Visit.DoesNotExist, ValueError, TypeError):
                raise NotFoundError("VISIT_NOT_FOUND", visit_id=visit_id)

            Gates.visit_revocable(visit)

            visit.revoked_at = timezone.now()
            visit.revoked_by = actor.identity
            visit.revocation_reason = reason or ""
            visit.save(update_fields=["revoked_at", "revoked_by", "revocation_reason"])

        logger.info("Revoked visit %s for %s", visit.pk, visit.customer_phone_number)
        audit.record(
            "VISIT_REVOKED",
            f"Revoked visit {visit.pk} for {visit.customer_phone_number}: {visit.revocation_reason}",
            actor,
        )
        return visit

    @classmethod
    def get_progress(cls, actor, phone_number: str | None = None, limit: int | None = None) -> StampCardProgress:
        """
        Stamp-card progress for one customer.

        Customers see their own card; staff pass ``phone_number``. History
        includes revoked and rewarded visits, newest first, with the reward
        voucher's code where one was issued.

        Raises:
            NotFoundError: If the phone is not a registered, non-deleted customer
        """
        phone = actor.own_phone if actor.is_customer else normalize_phone(phone_number)
        if not phone:
            raise ValidationError("PHONE_REQUIRED")
        actor.require_owner_or_staff(phone)
        customer = Customer.objects.alive().filter(phone_number=phone).first()
        if customer is None:
            raise NotFoundError("CUSTOMER_NOT_FOUND", phone_number=phone)
        limit = limit or voucherman_settings.PROGRESS_HISTORY_LIMIT

        visits = Visit.objects.for_phone(phone).select_related("reward_voucher")[:limit]
        history = [
            {
                "id": v.pk,
                "created_at": v.created_at,
                "processed_by": v.processed_by,
                "revoked_at": v.revoked_at,
                "revoked_by": v.revoked_by,
                "revocation_reason": v.revocation_reason,
                "is_reward_generated": v.is_reward_generated,
                "reward_voucher_code": v.reward_voucher.code if v.reward_voucher else None,
            }
            for v in visits
        ]
        return StampCardProgress(
            phone_number=phone,
            customer_name=customer.name,
            active_count=Visit.objects.for_phone(phone).active().count(),
            target=voucherman_settings.STAMPS_PER_REWARD,
            history=history,
        )

    @classmethod
    def _get_customer_for_update(cls, phone_number: str) -> Customer:
        """
        Get registered customer with row-level lock.

        MUST be called inside transaction.atomic().
        """
        phone = normalize_phone(phone_number)
        if not phone:
            raise ValidationError("PHONE_REQUIRED")
        customer = Customer.objects.select_for_update().alive().filter(phone_number=phone).first()
        if customer is None:
            raise NotFoundError("CUSTOMER_NOT_FOUND", phone_number=phone)
        return customer
