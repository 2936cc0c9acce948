"""Voucherman services (CORE only).

CORE services are exported here. The public voucher API lives in
voucherman.service.VoucherService. Contrib services are in their modules:
- voucherman.contrib.loyalty: LoyaltyService
- voucherman.contrib.audit: AuditService
"""

from voucherman.services import customer
from voucherman.services import ledger
from voucherman.services import template

__all__ = ["customer", "ledger", "template"]
