"""Tests for the stamp-card loyalty engine."""

from datetime import timedelta

import pytest
from django.utils import timezone

from voucherman.contrib.loyalty import LoyaltyService
from voucherman.contrib.loyalty.models import Visit
from voucherman.exceptions import GateError, NotFoundError, PermissionDeniedError, ValidationError
from voucherman.models import Voucher, VoucherStatus
from voucherman.signals import reward_issued

pytestmark = pytest.mark.django_db


def _visits(phone, n, start_days_ago=30):
    """Insert ``n`` active visits, oldest first, one day apart."""
    now = timezone.now()
    return [
        Visit.objects.create(
            customer_phone_number=phone,
            processed_by="bob",
            created_at=now - timedelta(days=start_days_ago - i),
        )
        for i in range(n)
    ]


class TestRecordVisit:
    def test_returns_new_count(self, cashier, customer):
        visit, count = LoyaltyService.record_visit(cashier, "0812345001")

        assert count == 1
        assert visit.customer_phone_number == "812345001"
        assert visit.processed_by == "bob"
        assert visit.is_active

    def test_eleventh_visit_rejected(self, cashier, customer):
        for expected in range(1, 11):
            _, count = LoyaltyService.record_visit(cashier, customer.phone_number)
            assert count == expected

        with pytest.raises(GateError, match="V5_StampCardCapacity") as exc:
            LoyaltyService.record_visit(cashier, customer.phone_number)
        assert exc.value.reason == "STAMP_CARD_FULL"
        assert LoyaltyService.active_count(customer.phone_number) == 10

    def test_revoked_and_rewarded_do_not_count(self, cashier, customer):
        visits = _visits(customer.phone_number, 10)
        Visit.objects.filter(pk=visits[0].pk).update(revoked_at=timezone.now(), revoked_by="alice")
        Visit.objects.filter(pk=visits[1].pk).update(is_reward_generated=True)

        _, count = LoyaltyService.record_visit(cashier, customer.phone_number)
        assert count == 9

    def test_unregistered_customer(self, cashier):
        with pytest.raises(NotFoundError, match="CUSTOMER_NOT_FOUND"):
            LoyaltyService.record_visit(cashier, "800000000")

    def test_deleted_customer(self, cashier, customer):
        customer.deleted_at = timezone.now()
        customer.save()
        with pytest.raises(NotFoundError):
            LoyaltyService.record_visit(cashier, customer.phone_number)

    def test_customer_cannot_stamp(self, customer_actor, customer):
        with pytest.raises(PermissionDeniedError):
            LoyaltyService.record_visit(customer_actor, customer.phone_number)


class TestIssueReward:
    def test_full_card(self, cashier, customer, template):
        visits = _visits(customer.phone_number, 10)

        result = LoyaltyService.issue_reward(cashier, customer.phone_number, template_id=template.pk)

        voucher = result.voucher
        assert voucher.status == VoucherStatus.ACTIVE
        assert voucher.binded_to_phone_number == customer.phone_number
        assert voucher.template == template
        assert voucher.name == "Free Coffee"
        assert voucher.approved_at is not None
        assert (voucher.expiry_date - voucher.approved_at).days == 30
        assert sorted(result.consumed_visit_ids) == sorted(v.pk for v in visits)
        assert result.remaining_active == 0
        assert LoyaltyService.active_count(customer.phone_number) == 0
        assert Visit.objects.filter(reward_voucher=voucher, is_reward_generated=True).count() == 10

    def test_surplus_visits_stay_active(self, cashier, customer, template):
        visits = _visits(customer.phone_number, 12)

        result = LoyaltyService.issue_reward(cashier, customer.phone_number, template_id=template.pk)

        assert sorted(result.consumed_visit_ids) == sorted(v.pk for v in visits[:10])
        assert result.remaining_active == 2
        remaining = set(Visit.objects.active().values_list("pk", flat=True))
        assert remaining == {visits[10].pk, visits[11].pk}

    def test_incomplete_card(self, cashier, customer, template):
        _visits(customer.phone_number, 9)
        with pytest.raises(GateError, match="V6_StampCardComplete"):
            LoyaltyService.issue_reward(cashier, customer.phone_number, template_id=template.pk)
        assert not Voucher.objects.exists()

    def test_explicit_expiry(self, cashier, customer, template):
        _visits(customer.phone_number, 10)
        result = LoyaltyService.issue_reward(
            cashier,
            customer.phone_number,
            template_id=template.pk,
            expiry_date="2030-12-31",
        )
        assert result.voucher.expiry_date.date().isoformat() == "2030-12-31"

    def test_default_template_fallback(self, cashier, customer, template):
        _visits(customer.phone_number, 10)
        result = LoyaltyService.issue_reward(cashier, customer.phone_number)
        assert result.voucher.template == template

    def test_unknown_template_issues_nothing(self, cashier, customer, template):
        _visits(customer.phone_number, 10)
        with pytest.raises(NotFoundError, match="TEMPLATE_NOT_FOUND"):
            LoyaltyService.issue_reward(cashier, customer.phone_number, template_id=999)
        assert LoyaltyService.active_count(customer.phone_number) == 10
        assert not Voucher.objects.exists()

    def test_emits_signal(self, cashier, customer, template):
        _visits(customer.phone_number, 10)
        received = []

        def listener(**kwargs):
            received.append(kwargs)

        reward_issued.connect(listener, dispatch_uid="test_reward_listener")
        try:
            result = LoyaltyService.issue_reward(cashier, customer.phone_number, template_id=template.pk)
        finally:
            reward_issued.disconnect(dispatch_uid="test_reward_listener")

        assert len(received) == 1
        assert received[0]["voucher"] == result.voucher
        assert received[0]["phone_number"] == customer.phone_number


class TestRevokeVisit:
    def test_admin_revokes(self, admin_actor, customer):
        (visit,) = _visits(customer.phone_number, 1)

        revoked = LoyaltyService.revoke_visit(admin_actor, visit.pk, reason="Duplicate stamp")

        assert revoked.revoked_by == "alice"
        assert revoked.revocation_reason == "Duplicate stamp"
        assert revoked.revoked_at is not None
        assert LoyaltyService.active_count(customer.phone_number) == 0

    def test_cashier_cannot_revoke(self, cashier, customer):
        (visit,) = _visits(customer.phone_number, 1)
        with pytest.raises(PermissionDeniedError):
            LoyaltyService.revoke_visit(cashier, visit.pk)

    def test_revoke_twice(self, admin_actor, customer):
        (visit,) = _visits(customer.phone_number, 1)
        LoyaltyService.revoke_visit(admin_actor, visit.pk)
        with pytest.raises(GateError, match="V7_VisitRevocable"):
            LoyaltyService.revoke_visit(admin_actor, visit.pk)

    def test_rewarded_visit_is_final(self, admin_actor, cashier, customer, template):
        visits = _visits(customer.phone_number, 10)
        result = LoyaltyService.issue_reward(cashier, customer.phone_number, template_id=template.pk)

        with pytest.raises(GateError) as exc:
            LoyaltyService.revoke_visit(admin_actor, visits[0].pk)
        assert exc.value.reason == "VISIT_ALREADY_REWARDED"

        result.voucher.refresh_from_db()
        assert result.voucher.status == VoucherStatus.ACTIVE

    def test_unknown_visit(self, admin_actor):
        with pytest.raises(NotFoundError, match="VISIT_NOT_FOUND"):
            LoyaltyService.revoke_visit(admin_actor, 12345)


class TestProgress:
    def test_history_includes_everything(self, admin_actor, cashier, customer_actor, customer, template):
        visits = _visits(customer.phone_number, 11)
        result = LoyaltyService.issue_reward(cashier, customer.phone_number, template_id=template.pk)
        LoyaltyService.revoke_visit(admin_actor, visits[10].pk, reason="Mistake")
        LoyaltyService.record_visit(cashier, customer.phone_number)

        progress = LoyaltyService.get_progress(customer_actor)

        assert progress.active_count == 1
        assert progress.target == 10
        assert progress.remaining == 9
        assert not progress.is_complete
        assert len(progress.history) == 12
        newest, revoked = progress.history[0], progress.history[1]
        assert newest["reward_voucher_code"] is None
        assert revoked["revocation_reason"] == "Mistake"
        assert {h["reward_voucher_code"] for h in progress.history[2:]} == {result.voucher.code}

    def test_staff_needs_phone(self, cashier):
        with pytest.raises(ValidationError, match="PHONE_REQUIRED"):
            LoyaltyService.get_progress(cashier)

    def test_staff_reads_any_card(self, cashier, customer):
        _visits(customer.phone_number, 3)
        assert LoyaltyService.get_progress(cashier, "0812345001").active_count == 3

    def test_progress_carries_customer_name(self, cashier, customer):
        assert LoyaltyService.get_progress(cashier, customer.phone_number).customer_name == "Rina"

    def test_unregistered_phone(self, cashier):
        with pytest.raises(NotFoundError, match="CUSTOMER_NOT_FOUND"):
            LoyaltyService.get_progress(cashier, "899999999")

    def test_deleted_customer(self, cashier, customer):
        from voucherman.services import customer as customer_service

        _visits(customer.phone_number, 2)
        customer_service.delete(cashier, customer.pk)

        with pytest.raises(NotFoundError, match="CUSTOMER_NOT_FOUND"):
            LoyaltyService.get_progress(cashier, customer.phone_number)


class TestVisitAudit:
    def test_recorded_visit_entry(self, cashier, customer, django_capture_on_commit_callbacks):
        from voucherman.contrib.audit.models import AuditLog

        _visits(customer.phone_number, 3)
        with django_capture_on_commit_callbacks(execute=True):
            LoyaltyService.record_visit(cashier, customer.phone_number)

        entry = AuditLog.objects.get(action="VISIT_RECORDED")
        assert entry.details == "Visit recorded for 812345001. Progress: 4/10"
        assert entry.actor_identity == "bob"
