"""
Django Voucherman - Voucher lifecycle and loyalty stamp card.

Usage:
    from voucherman import Actor, VoucherService
    from voucherman.gates import Gates, GateError, GateResult

    admin = Actor(identity="alice", role="admin")
    vouchers = VoucherService.create_batch(admin, 5, name="Welcome")
    VoucherService.bind(admin, vouchers[0].code, "0812345678")
    VoucherService.claim(admin, vouchers[0].code, spent_amount=15000)

    # Gates validation
    Gates.check_claimable(vouchers[0])
"""


def __getattr__(name):
    if name == "VoucherService":
        from voucherman.service import VoucherService

        return VoucherService
    if name == "Actor":
        from voucherman.actors import Actor

        return Actor
    if name == "Gates":
        from voucherman.gates import Gates

        return Gates
    if name == "GateError":
        from voucherman.exceptions import GateError

        return GateError
    if name == "GateResult":
        from voucherman.gates import GateResult

        return GateResult
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["Actor", "VoucherService", "Gates", "GateError", "GateResult"]
__version__ = "0.1.0"
