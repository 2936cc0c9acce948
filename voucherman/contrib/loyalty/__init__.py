"""
Voucherman Loyalty - 10-visit stamp card.

Every staff-recorded visit stamps the customer's card. A full card is
exchanged for an active reward voucher; the oldest stamps are consumed.

Usage:
    INSTALLED_APPS = [
        ...
        "voucherman",
        "voucherman.contrib.loyalty",
    ]

    from voucherman.contrib.loyalty import LoyaltyService

    LoyaltyService.record_visit(actor, "812345678")
    LoyaltyService.issue_reward(actor, "812345678", template_id=1)
    progress = LoyaltyService.get_progress(actor, "812345678")
"""


def __getattr__(name):
    if name == "LoyaltyService":
        from voucherman.contrib.loyalty.service import LoyaltyService

        return LoyaltyService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["LoyaltyService"]
