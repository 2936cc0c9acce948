"""
Voucherman Gates - state and capacity rules.

V1: VoucherStateInvariant - Stored fields agree with the voucher status
V2: Bindable - Only available vouchers can be bound
V3: Claimable - A claimed voucher cannot be claimed again
V4: ClaimRequestable - Only active vouchers accept a claim request
V5: StampCardCapacity - A full stamp card accepts no more visits
V6: StampCardComplete - A reward needs a full stamp card
V7: VisitRevocable - Revoked or rewarded visits are final
"""

from dataclasses import dataclass

from voucherman.conf import voucherman_settings
from voucherman.exceptions import GateError, VouchermanError


@dataclass
class GateResult:
    """Result of a gate check."""

    passed: bool
    gate_name: str
    message: str = ""


def _fail(gate_name: str, reason: str, **details):
    raise GateError(
        gate_name,
        VouchermanError._default_messages.get(reason, reason),
        details,
        reason=reason,
    )


# =============================================================================
# Gates
# =============================================================================


class Gates:
    """Voucher and stamp-card validation gates."""

    # =========================================================================
    # V1: Voucher State Invariant
    # =========================================================================

    @classmethod
    def voucher_state_invariant(cls, voucher) -> GateResult:
        """
        V1: Stored fields must agree with the status.

        - available: not bound, no expiry
        - active: bound, has expiry
        - claimed: used_at, approved_by and spent_amount set, no pending request
        - claim_requested_at only while active

        Raises:
            GateError: On the first violated rule
        """
        from voucherman.models import VoucherStatus

        gate = "V1_VoucherStateInvariant"
        status = voucher.status

        if status == VoucherStatus.AVAILABLE:
            if voucher.binded_to_phone_number or voucher.expiry_date is not None:
                raise GateError(gate, "Available voucher cannot be bound or carry an expiry.")
        elif status == VoucherStatus.ACTIVE:
            if not voucher.binded_to_phone_number or voucher.expiry_date is None:
                raise GateError(gate, "Active voucher must be bound and carry an expiry.")
        elif status == VoucherStatus.CLAIMED:
            if voucher.used_at is None or not voucher.approved_by or voucher.spent_amount is None:
                raise GateError(gate, "Claimed voucher must record used_at, approved_by and spent_amount.")
        else:
            raise GateError(gate, f"Unknown voucher status: {status}")

        if voucher.claim_requested_at is not None and status != VoucherStatus.ACTIVE:
            raise GateError(gate, "Claim request is only allowed on active vouchers.")

        return GateResult(True, gate)

    @classmethod
    def check_voucher_state_invariant(cls, voucher) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.voucher_state_invariant(voucher)
            return True
        except GateError:
            return False

    # =========================================================================
    # V2: Bindable
    # =========================================================================

    @classmethod
    def bindable(cls, voucher) -> GateResult:
        """V2: available → active is the only binding transition."""
        from voucherman.models import VoucherStatus

        if voucher.status != VoucherStatus.AVAILABLE:
            _fail("V2_Bindable", "VOUCHER_NOT_AVAILABLE", voucher_code=voucher.code, status=voucher.status)
        return GateResult(True, "V2_Bindable")

    @classmethod
    def check_bindable(cls, voucher) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.bindable(voucher)
            return True
        except GateError:
            return False

    # =========================================================================
    # V3: Claimable
    # =========================================================================

    @classmethod
    def claimable(cls, voucher) -> GateResult:
        """V3: any non-claimed voucher may be claimed by staff."""
        from voucherman.models import VoucherStatus

        if voucher.status == VoucherStatus.CLAIMED:
            _fail("V3_Claimable", "VOUCHER_ALREADY_CLAIMED", voucher_code=voucher.code)
        return GateResult(True, "V3_Claimable")

    @classmethod
    def check_claimable(cls, voucher) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.claimable(voucher)
            return True
        except GateError:
            return False

    # =========================================================================
    # V4: Claim Requestable
    # =========================================================================

    @classmethod
    def claim_requestable(cls, voucher) -> GateResult:
        """V4: customers may only ask to redeem an active voucher."""
        from voucherman.models import VoucherStatus

        if voucher.status != VoucherStatus.ACTIVE:
            _fail("V4_ClaimRequestable", "VOUCHER_NOT_ACTIVE", voucher_code=voucher.code, status=voucher.status)
        return GateResult(True, "V4_ClaimRequestable")

    @classmethod
    def check_claim_requestable(cls, voucher) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.claim_requestable(voucher)
            return True
        except GateError:
            return False

    # =========================================================================
    # V5 / V6: Stamp card
    # =========================================================================

    @classmethod
    def stamp_card_capacity(cls, active_count: int) -> GateResult:
        """V5: a visit can be recorded only while the card is not full."""
        target = voucherman_settings.STAMPS_PER_REWARD
        if active_count >= target:
            _fail("V5_StampCardCapacity", "STAMP_CARD_FULL", active_count=active_count, target=target)
        return GateResult(True, "V5_StampCardCapacity")

    @classmethod
    def check_stamp_card_capacity(cls, active_count: int) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.stamp_card_capacity(active_count)
            return True
        except GateError:
            return False

    @classmethod
    def stamp_card_complete(cls, active_count: int) -> GateResult:
        """V6: a reward can be issued only on a full card."""
        target = voucherman_settings.STAMPS_PER_REWARD
        if active_count < target:
            _fail("V6_StampCardComplete", "STAMP_CARD_INCOMPLETE", active_count=active_count, target=target)
        return GateResult(True, "V6_StampCardComplete")

    @classmethod
    def check_stamp_card_complete(cls, active_count: int) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.stamp_card_complete(active_count)
            return True
        except GateError:
            return False

    # =========================================================================
    # V7: Visit Revocable
    # =========================================================================

    @classmethod
    def visit_revocable(cls, visit) -> GateResult:
        """V7: revoked and rewarded visits are final."""
        if visit.revoked_at is not None:
            _fail("V7_VisitRevocable", "VISIT_ALREADY_REVOKED", visit_id=visit.pk)
        if visit.is_reward_generated:
            _fail("V7_VisitRevocable", "VISIT_ALREADY_REWARDED", visit_id=visit.pk)
        return GateResult(True, "V7_VisitRevocable")

    @classmethod
    def check_visit_revocable(cls, visit) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.visit_revocable(visit)
            return True
        except GateError:
            return False
