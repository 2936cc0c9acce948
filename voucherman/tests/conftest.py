"""Pytest fixtures for Voucherman tests."""

from datetime import timedelta

import pytest
from django.utils import timezone

from voucherman.actors import Actor, Role
from voucherman.models import Customer, Voucher, VoucherStatus, VoucherTemplate


@pytest.fixture
def admin_actor():
    return Actor(identity="alice", role=Role.ADMIN, source_address="10.0.0.1")


@pytest.fixture
def cashier():
    return Actor(identity="bob", role=Role.CASHIER)


@pytest.fixture
def customer_actor(customer):
    """The registered customer acting on their own account."""
    return Actor(identity=customer.phone_number, role=Role.CUSTOMER, phone_number=customer.phone_number)


@pytest.fixture
def customer(db):
    """Create a test customer."""
    return Customer.objects.create(phone_number="0812345001", name="Rina")


@pytest.fixture
def customer_b(db):
    return Customer.objects.create(phone_number="812345002", name="Budi")


@pytest.fixture
def template(db):
    """Create a voucher template."""
    return VoucherTemplate.objects.create(
        name="Free Coffee",
        description="One regular coffee",
        image_url="https://cdn.example.com/coffee.png",
    )


@pytest.fixture
def available_voucher(db, template):
    return Voucher.objects.create(
        code="AB23",
        template=template,
        name=template.name,
        status=VoucherStatus.AVAILABLE,
    )


@pytest.fixture
def active_voucher(db, template, customer):
    now = timezone.now()
    return Voucher.objects.create(
        code="CD45",
        template=template,
        name=template.name,
        status=VoucherStatus.ACTIVE,
        binded_to_phone_number=customer.phone_number,
        approved_at=now,
        expiry_date=now + timedelta(days=30),
    )


@pytest.fixture
def welcome_customers(db):
    """Five registered customers for bulk binding."""
    return [
        Customer.objects.create(phone_number=f"81200000{i}", name=f"Guest {i}")
        for i in range(1, 6)
    ]
