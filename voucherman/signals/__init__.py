"""
Voucherman signals - public event API.

Emitted signals:
- voucher_created: Emitted by VoucherService.create() / create_batch()
- voucher_bound: Emitted by VoucherService.bind() / bulk_bind()
- voucher_claimed: Emitted by VoucherService.claim()
- voucher_deleted: Emitted by VoucherService.delete()
- reward_issued: Emitted by LoyaltyService.issue_reward()
- customer_created: Emitted by services.customer.create()
- customer_updated: Emitted by services.customer.update()
- customer_phone_changed: Emitted by services.customer.update() / rebind_phone(),
  INSIDE the rebind transaction. Receivers' writes join the same atomic unit.
"""

from django.dispatch import Signal

# Voucher signals (emitted by VoucherService)
voucher_created = Signal()  # sender=Voucher, vouchers=list, actor=Actor
voucher_bound = Signal()  # sender=Voucher, vouchers=list, actor=Actor
voucher_claimed = Signal()  # sender=Voucher, voucher=Voucher, redemption=Redemption|None, actor=Actor
voucher_deleted = Signal()  # sender=Voucher, voucher=Voucher, actor=Actor

# Loyalty signals
reward_issued = Signal()  # sender=Visit, voucher=Voucher, phone_number=str, visit_ids=list, actor=Actor

# Customer signals (emitted by services)
customer_created = Signal()  # sender=Customer
customer_updated = Signal()  # sender=Customer, changes=dict
customer_phone_changed = Signal()  # sender=Customer, customer=Customer, old_phone=str, new_phone=str
