"""Customer service - customer records and phone rebinding.

All write operations that touch >1 record use transaction.atomic().
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from voucherman import audit
from voucherman.exceptions import ConflictError, NotFoundError, UniquenessError, ValidationError
from voucherman.models import Customer, Voucher
from voucherman.signals import customer_created, customer_phone_changed, customer_updated
from voucherman.utils import normalize_phone

logger = logging.getLogger(__name__)


def get(customer_id) -> Customer | None:
    """Get non-deleted customer by id."""
    try:
        return Customer.objects.alive().get(pk=customer_id)
    except (Customer.DoesNotExist, ValueError, TypeError):
        return None


def get_by_phone(phone: str) -> Customer | None:
    """Get non-deleted customer by phone (normalized)."""
    if not normalize_phone(phone):
        return None
    return Customer.objects.by_phone(phone).first()


def require_by_phone(phone: str) -> Customer:
    """Get customer by phone or raise NotFoundError."""
    normalized = normalize_phone(phone)
    if not normalized:
        raise ValidationError("PHONE_REQUIRED")
    customer = get_by_phone(normalized)
    if customer is None:
        raise NotFoundError("CUSTOMER_NOT_FOUND", phone_number=normalized)
    return customer


def search(query: str, limit: int = 10) -> list[Customer]:
    """Search customers by phone or name."""
    qs = Customer.objects.alive()
    if query:
        phone_query = normalize_phone(query) or query
        qs = qs.filter(Q(phone_number__icontains=phone_query) | Q(name__icontains=query))
    return list(qs[:limit])


def create(actor, phone_number: str, name: str = "", date_of_birth=None) -> Customer:
    """
    Register a customer.

    Raises:
        ValidationError: If phone is missing
        UniquenessError: If a non-deleted customer already has this phone
    """
    actor.require_staff()
    normalized = normalize_phone(phone_number)
    if not normalized:
        raise ValidationError("PHONE_REQUIRED")

    try:
        with transaction.atomic():
            cust = Customer.objects.create(
                phone_number=normalized,
                name=name or "",
                date_of_birth=date_of_birth,
            )
    except IntegrityError:
        raise UniquenessError("CUSTOMER_EXISTS", phone_number=normalized)

    audit.record("USER_CREATE", f"Created customer user: {normalized}", actor)
    customer_created.send(sender=Customer, customer=cust)
    return cust


UPDATABLE_FIELDS = {
    "name",
    "phone_number",
    "date_of_birth",
}


def update(actor, customer_id, expected_phone: str | None = None, **fields) -> Customer:
    """
    Update customer fields (only whitelisted fields are accepted).

    A changed phone number goes through the rebind path: every non-deleted
    voucher bound to the old number moves to the new one in the same
    transaction as the customer update.

    ``expected_phone``, when given, is compared with the stored phone after
    the row lock is taken.

    Raises:
        NotFoundError: If customer not found
        ConflictError: PHONE_MISMATCH if the stored phone is not expected_phone
        UniquenessError: If the new phone belongs to another customer
    """
    actor.require_staff()
    changes = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}

    if "phone_number" in changes:
        new_phone = normalize_phone(changes["phone_number"])
        if not new_phone:
            raise ValidationError("PHONE_REQUIRED")
        changes["phone_number"] = new_phone

    with transaction.atomic():
        cust = _get_for_update(customer_id)
        old_phone = cust.phone_number
        if expected_phone is not None and old_phone != normalize_phone(expected_phone):
            raise ConflictError(
                "PHONE_MISMATCH",
                message="Customer phone number changed concurrently",
                expected=normalize_phone(expected_phone),
                actual=old_phone,
            )
        new_phone = changes.get("phone_number", old_phone)

        diff = {}
        for key, value in changes.items():
            old_value = getattr(cust, key)
            if old_value != value:
                diff[key] = {"old": old_value, "new": value}
            setattr(cust, key, value)

        if new_phone != old_phone:
            _rebind(cust, old_phone, new_phone)
        else:
            cust.save()

    if "phone_number" in diff:
        audit.record("CUSTOMER_REBIND", f"Customer {cust.pk} phone {old_phone} -> {new_phone}", actor)
    if diff:
        customer_updated.send(sender=Customer, customer=cust, changes=diff)
    return cust


def rebind_phone(actor, customer_id, new_phone: str, old_phone: str | None = None) -> Customer:
    """
    Move a customer and every voucher bound to them to a new phone number.

    Args:
        actor: Acting identity
        customer_id: Customer id
        new_phone: New phone number (normalized here)
        old_phone: Expected current phone; rejected if it no longer matches

    Returns:
        Updated Customer
    """
    return update(actor, customer_id, expected_phone=old_phone, phone_number=new_phone)


def delete(actor, customer_id) -> None:
    """Soft-delete a customer. Bound vouchers and the ledger are left as they are."""
    actor.require_staff()
    cust = get(customer_id)
    if cust is None:
        raise NotFoundError("CUSTOMER_NOT_FOUND", customer_id=customer_id)
    cust.deleted_at = timezone.now()
    cust.save(update_fields=["deleted_at", "updated_at"])
    audit.record("USER_DELETE", f"Deleted user {cust.phone_number}", actor)


def _get_for_update(customer_id) -> Customer:
    """
    Get non-deleted customer with row-level lock.

    MUST be called inside transaction.atomic().
    """
    try:
        return Customer.objects.select_for_update().alive().get(pk=customer_id)
    except (Customer.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("CUSTOMER_NOT_FOUND", customer_id=customer_id)


def _rebind(cust: Customer, old_phone: str, new_phone: str) -> None:
    """
    Re-key the customer and their vouchers. MUST run inside transaction.atomic().

    Voucher ids are collected before the customer row changes; the voucher
    update then targets exactly those ids.
    """
    voucher_ids = list(Voucher.objects.bound_to(old_phone).values_list("id", flat=True))

    try:
        with transaction.atomic():
            cust.save()
    except IntegrityError:
        raise UniquenessError("CUSTOMER_EXISTS", phone_number=new_phone)

    moved = 0
    if voucher_ids:
        moved = Voucher.objects.filter(id__in=voucher_ids).update(binded_to_phone_number=new_phone)

    customer_phone_changed.send(
        sender=Customer,
        customer=cust,
        old_phone=old_phone,
        new_phone=new_phone,
    )
    logger.info("Rebound customer %s from %s to %s (%d vouchers)", cust.pk, old_phone, new_phone, moved)
