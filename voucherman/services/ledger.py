"""Redemption ledger - append-only amounts per claim.

``append()`` must run inside the claim's transaction.atomic() block so the
voucher update, the ledger row and the spending increment commit together.
"""

from django.db.models import F, Sum

from voucherman.models import Customer, Redemption


def append(voucher, amount: int, processed_by: str) -> Redemption:
    """
    Record a claim on a bound voucher and grow the customer's total spend.

    Args:
        voucher: Claimed voucher (must be bound)
        amount: Non-negative amount in the smallest currency unit
        processed_by: Staff identity

    Returns:
        Created Redemption
    """
    phone = voucher.binded_to_phone_number
    redemption = Redemption.objects.create(
        voucher=voucher,
        customer_phone_number=phone,
        amount=amount,
        processed_by=processed_by,
    )
    Customer.objects.alive().filter(phone_number=phone).update(
        total_spending=F("total_spending") + amount
    )
    return redemption


def history(phone_number: str, limit: int = 50) -> list[Redemption]:
    """Redemptions for a phone number, newest first."""
    return list(
        Redemption.objects.filter(customer_phone_number=phone_number)
        .select_related("voucher")[:limit]
    )


def total_spending(phone_number: str) -> int:
    """Aggregate spend stored on the customer (0 if not registered)."""
    customer = Customer.objects.alive().filter(phone_number=phone_number).first()
    return customer.total_spending if customer else 0


def ledger_sum(phone_number: str) -> int:
    """Sum of ledger rows for a phone number."""
    result = Redemption.objects.filter(customer_phone_number=phone_number).aggregate(total=Sum("amount"))
    return result["total"] or 0
