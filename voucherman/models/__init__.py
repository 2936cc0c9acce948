"""Voucherman models (CORE only).

CORE models are exported here. Contrib models are in their respective modules:
- voucherman.contrib.loyalty: Visit
- voucherman.contrib.audit: AuditLog
"""

from voucherman.models.template import VoucherTemplate
from voucherman.models.customer import Customer
from voucherman.models.voucher import Voucher, VoucherStatus, LIVE_STATUSES
from voucherman.models.redemption import Redemption

__all__ = [
    "VoucherTemplate",
    "Customer",
    "Voucher",
    "VoucherStatus",
    "LIVE_STATUSES",
    # Ledger
    "Redemption",
]
