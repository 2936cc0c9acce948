"""Acting identity passed explicitly into every operation."""

from dataclasses import dataclass

from django.db import models
from django.utils.translation import gettext_lazy as _

from voucherman.exceptions import PermissionDeniedError


class Role(models.TextChoices):
    ADMIN = "admin", _("Admin")
    CASHIER = "cashier", _("Cashier")
    CUSTOMER = "customer", _("Customer")


STAFF_ROLES = (Role.ADMIN, Role.CASHIER)


@dataclass(frozen=True)
class Actor:
    """
    Who is performing an operation.

    ``identity`` is the staff username (recorded in approved_by, processed_by,
    revoked_by) or, for customers, their phone number. ``source_address`` is
    forwarded to the audit sink.
    """

    identity: str
    role: str
    phone_number: str | None = None
    source_address: str = ""

    @classmethod
    def system(cls) -> "Actor":
        return cls(identity="system", role=Role.ADMIN)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def is_customer(self) -> bool:
        return self.role == Role.CUSTOMER

    @property
    def own_phone(self) -> str | None:
        """Normalized phone of a customer actor (falls back to identity)."""
        from voucherman.utils import normalize_phone

        return normalize_phone(self.phone_number or self.identity)

    def require(self, *roles: str) -> None:
        """Raise PermissionDeniedError unless the actor has one of ``roles``."""
        if self.role not in roles:
            raise PermissionDeniedError(role=self.role, allowed=[str(r) for r in roles])

    def require_staff(self) -> None:
        self.require(*STAFF_ROLES)

    def require_admin(self) -> None:
        self.require(Role.ADMIN)

    def require_owner_or_staff(self, phone: str | None) -> None:
        """Customers may only act on their own phone number."""
        if self.is_staff:
            return
        if self.is_customer and phone and self.own_phone == phone:
            return
        raise PermissionDeniedError(role=self.role)
