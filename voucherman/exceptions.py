"""Voucherman exceptions."""


class BaseError(Exception):
    """
    Structured exception carrying a machine-readable code.

    Subclasses provide ``_default_messages`` so callers can raise with just
    a code. Any extra keyword arguments are kept in ``data`` and surface in
    ``as_dict()``.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __str__(self):
        return f"[{self.code}] {self.message}"

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}


class VouchermanError(BaseError):
    """
    Root for every error raised by voucher and loyalty operations.

    Usage:
        try:
            VoucherService.claim(actor, "AB3K", spent_amount=12000)
        except VouchermanError as e:
            if e.code == "VOUCHER_ALREADY_CLAIMED":
                handle_duplicate()
    """

    _default_messages = {
        # Validation
        "INVALID_INPUT": "Invalid input",
        "INVALID_AMOUNT": "Spent amount must be a number",
        "INVALID_COUNT": "Invalid count",
        "PHONE_REQUIRED": "Phone number required",
        "NO_PHONE_NUMBERS": "No phone numbers provided",
        "STATUS_NOT_PATCHABLE": "Status changes must go through bind or claim",
        "TEMPLATE_REQUIRED": "A reward template must be specified",
        # Conflict
        "VOUCHER_ALREADY_CLAIMED": "Voucher already claimed",
        "VOUCHER_NOT_AVAILABLE": "Voucher is not available for binding",
        "VOUCHER_NOT_ACTIVE": "Only active vouchers can be claimed by request",
        "INSUFFICIENT_VOUCHERS": "Not enough available vouchers",
        "STAMP_CARD_FULL": "Stamp card is full. Issue the reward before recording more visits.",
        "STAMP_CARD_INCOMPLETE": "Customer needs a full stamp card to issue a reward",
        "VISIT_ALREADY_REVOKED": "Visit already revoked",
        "VISIT_ALREADY_REWARDED": "Cannot revoke a visit that already generated a reward",
        # Not found
        "VOUCHER_NOT_FOUND": "Voucher not found",
        "CUSTOMER_NOT_FOUND": "Customer not registered",
        "TEMPLATE_NOT_FOUND": "Template not found",
        "VISIT_NOT_FOUND": "Visit not found",
        # Uniqueness
        "CUSTOMER_EXISTS": "Customer already exists",
        "CODE_COLLISION": "Could not allocate a unique voucher code",
        "LEDGER_IMMUTABLE": "Redemption rows are append-only",
        # Permission
        "FORBIDDEN": "Forbidden",
    }


class ValidationError(VouchermanError):
    """Missing or malformed input. Raised before any write."""


class ConflictError(VouchermanError):
    """Operation conflicts with the current state. Nothing was changed."""


class NotFoundError(VouchermanError):
    """Id does not resolve, or resolves to a soft-deleted row."""


class UniquenessError(VouchermanError):
    """Unique constraint rejected an insert or update."""


class PermissionDeniedError(VouchermanError):
    """Actor role is not allowed to perform the operation."""

    def __init__(self, code: str = "FORBIDDEN", message: str | None = None, **data):
        super().__init__(code, message, **data)


class GateError(ConflictError):
    """
    A named gate rejected the operation.

    ``code`` is the gate name (e.g. ``V3_Claimable``), so
    ``pytest.raises(GateError, match="V3_Claimable")`` works.
    """

    def __init__(self, gate_name: str, message: str, details: dict | None = None, reason: str = ""):
        self.gate_name = gate_name
        self.details = details or {}
        self.reason = reason
        super().__init__(gate_name, message, reason=reason, details=self.details)
