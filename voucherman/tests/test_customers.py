"""Tests for customer, template and ledger services."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from django.utils import timezone

from voucherman.contrib.loyalty.models import Visit
from voucherman.exceptions import ConflictError, NotFoundError, UniquenessError, ValidationError
from voucherman.models import Customer, Voucher, VoucherStatus, VoucherTemplate
from voucherman.service import VoucherService
from voucherman.services import customer as customer_service
from voucherman.services import ledger
from voucherman.services import template as template_service
from voucherman.signals import customer_phone_changed

pytestmark = pytest.mark.django_db


class TestCustomerService:
    def test_create_normalizes_phone(self, cashier):
        cust = customer_service.create(cashier, "0811000111", name="Sari")
        assert cust.phone_number == "811000111"
        assert customer_service.get_by_phone("0811000111") == cust

    def test_create_duplicate(self, cashier, customer):
        with pytest.raises(UniquenessError, match="CUSTOMER_EXISTS"):
            customer_service.create(cashier, "812345001")

    def test_create_requires_phone(self, cashier):
        with pytest.raises(ValidationError, match="PHONE_REQUIRED"):
            customer_service.create(cashier, "")

    def test_search(self, customer, customer_b):
        assert customer_service.search("Rina") == [customer]
        assert set(customer_service.search("8123450")) == {customer, customer_b}

    def test_require_by_phone(self, customer):
        assert customer_service.require_by_phone("0812345001") == customer
        with pytest.raises(NotFoundError, match="CUSTOMER_NOT_FOUND"):
            customer_service.require_by_phone("800000000")

    def test_update_name(self, cashier, customer):
        cust = customer_service.update(cashier, customer.pk, name="Rina S.", total_spending=999)
        assert cust.name == "Rina S."
        assert cust.total_spending == 0

    def test_soft_delete(self, cashier, customer):
        customer_service.delete(cashier, customer.pk)
        assert customer_service.get(customer.pk) is None
        assert Customer.objects.filter(pk=customer.pk).exists()


class TestRebind:
    def _bind_two(self, customer):
        now = timezone.now()
        return [
            Voucher.objects.create(
                code=code,
                status=VoucherStatus.ACTIVE,
                binded_to_phone_number=customer.phone_number,
                expiry_date=now + timedelta(days=10),
            )
            for code in ("RB22", "RB33")
        ]

    def test_phone_change_moves_vouchers(self, cashier, customer):
        vouchers = self._bind_two(customer)
        deleted = Voucher.objects.create(
            code="RB44",
            status=VoucherStatus.AVAILABLE,
            deleted_at=timezone.now(),
        )
        deleted_bound = Voucher.objects.create(
            code="RB55",
            status=VoucherStatus.ACTIVE,
            binded_to_phone_number=customer.phone_number,
            expiry_date=timezone.now() + timedelta(days=10),
            deleted_at=timezone.now(),
        )

        cust = customer_service.update(cashier, customer.pk, phone_number="0899000111")

        assert cust.phone_number == "899000111"
        for v in vouchers:
            v.refresh_from_db()
            assert v.binded_to_phone_number == "899000111"
            assert v.status == VoucherStatus.ACTIVE
        assert not Voucher.objects.alive().filter(binded_to_phone_number="812345001").exists()
        deleted.refresh_from_db()
        assert deleted.binded_to_phone_number is None
        deleted_bound.refresh_from_db()
        assert deleted_bound.binded_to_phone_number == "812345001"

    def test_phone_change_moves_visits(self, cashier, customer):
        Visit.objects.create(customer_phone_number=customer.phone_number, processed_by="bob")

        customer_service.rebind_phone(cashier, customer.pk, "899000111", old_phone="0812345001")

        assert Visit.objects.filter(customer_phone_number="899000111").count() == 1

    def test_taken_phone_changes_nothing(self, cashier, customer, customer_b):
        vouchers = self._bind_two(customer)

        with pytest.raises(UniquenessError, match="CUSTOMER_EXISTS"):
            customer_service.update(cashier, customer.pk, phone_number=customer_b.phone_number)

        customer.refresh_from_db()
        assert customer.phone_number == "812345001"
        for v in vouchers:
            v.refresh_from_db()
            assert v.binded_to_phone_number == "812345001"

    def test_receiver_failure_rolls_back(self, cashier, customer):
        vouchers = self._bind_two(customer)

        def boom(**kwargs):
            raise RuntimeError("receiver failed")

        customer_phone_changed.connect(boom, dispatch_uid="test_boom")
        try:
            with pytest.raises(RuntimeError):
                customer_service.update(cashier, customer.pk, phone_number="899000111")
        finally:
            customer_phone_changed.disconnect(dispatch_uid="test_boom")

        customer.refresh_from_db()
        assert customer.phone_number == "812345001"
        assert {v.binded_to_phone_number for v in Voucher.objects.filter(pk__in=[v.pk for v in vouchers])} == {
            "812345001"
        }

    def test_stale_old_phone(self, cashier, customer):
        with pytest.raises(ConflictError, match="PHONE_MISMATCH"):
            customer_service.rebind_phone(cashier, customer.pk, "899000111", old_phone="800000000")

    def test_phone_changed_before_lock(self, cashier, customer):
        vouchers = self._bind_two(customer)
        real_get = customer_service._get_for_update

        def changed_then_locked(customer_id):
            Customer.objects.filter(pk=customer_id).update(phone_number="877000000")
            return real_get(customer_id)

        with patch("voucherman.services.customer._get_for_update", side_effect=changed_then_locked):
            with pytest.raises(ConflictError, match="PHONE_MISMATCH"):
                customer_service.rebind_phone(cashier, customer.pk, "899000111", old_phone="812345001")

        assert not Customer.objects.filter(phone_number="899000111").exists()
        for v in vouchers:
            v.refresh_from_db()
            assert v.binded_to_phone_number == "812345001"

    def test_same_phone_is_not_a_rebind(self, cashier, customer):
        received = []

        def listener(**kwargs):
            received.append(kwargs)

        customer_phone_changed.connect(listener, dispatch_uid="test_listener")
        try:
            customer_service.update(cashier, customer.pk, phone_number="0812345001")
        finally:
            customer_phone_changed.disconnect(dispatch_uid="test_listener")
        assert received == []


class TestTemplateService:
    def test_crud(self, cashier):
        first = template_service.create(cashier, "  Free Tea ")
        second = template_service.create(cashier, "Free Cake", image_url="cake.png")

        assert first.name == "Free Tea"
        assert template_service.list_templates(cashier)[0] == second

        template_service.delete(cashier, first.pk)
        assert template_service.get(first.pk) is None

    def test_delete_keeps_voucher_presentation(self, admin_actor, cashier, template):
        voucher = VoucherService.create(admin_actor, template_id=template.pk)
        template_service.delete(cashier, template.pk)

        voucher.refresh_from_db()
        assert voucher.template is None
        assert voucher.name == "Free Coffee"

    def test_reward_template_fallback_picks_oldest(self, template):
        VoucherTemplate.objects.create(name="Newer")
        assert template_service.resolve_reward_template() == template

    def test_reward_template_required_when_fallback_off(self, settings, template):
        settings.VOUCHERMAN = {"REWARD_TEMPLATE_FALLBACK": False}
        with pytest.raises(ValidationError, match="TEMPLATE_REQUIRED"):
            template_service.resolve_reward_template()
        assert template_service.resolve_reward_template(template.pk) == template

    def test_no_templates(self, db):
        with pytest.raises(NotFoundError, match="TEMPLATE_NOT_FOUND"):
            template_service.resolve_reward_template()


class TestLedgerQueries:
    def test_history_and_totals(self, cashier, customer, template):
        now = timezone.now()
        for code, amount in (("LG22", 1000), ("LG33", 2500)):
            Voucher.objects.create(
                code=code,
                status=VoucherStatus.ACTIVE,
                binded_to_phone_number=customer.phone_number,
                expiry_date=now + timedelta(days=1),
            )
            VoucherService.claim(cashier, code, spent_amount=amount)

        history = ledger.history(customer.phone_number)
        assert [r.amount for r in history] == [2500, 1000]
        assert ledger.total_spending(customer.phone_number) == 3500
        assert ledger.ledger_sum(customer.phone_number) == 3500
        assert ledger.total_spending("800000000") == 0
