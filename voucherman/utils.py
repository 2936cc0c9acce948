"""Small normalization helpers shared by services."""

from datetime import date, datetime, timedelta

from django.utils import timezone
from django.utils.dateparse import parse_datetime, parse_date


def normalize_phone(phone: str | None) -> str | None:
    """
    Strip whitespace and a single leading "0".

    Phone numbers are stored without the trunk prefix, so "0812345" and
    "812345" resolve to the same customer. Empty input returns None.
    """
    if not phone:
        return None
    trimmed = str(phone).strip()
    if not trimmed:
        return None
    return trimmed[1:] if trimmed.startswith("0") else trimmed


def parse_expiry(value) -> datetime | None:
    """Accept a datetime, a date, or an ISO string. Returns an aware datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime(value.year, value.month, value.day)
    else:
        result = parse_datetime(str(value))
        if result is None:
            day = parse_date(str(value))
            if day is None:
                raise ValueError(f"Invalid expiry date: {value!r}")
            result = datetime(day.year, day.month, day.day)
    if timezone.is_naive(result):
        result = timezone.make_aware(result)
    return result


def compute_expiry(expiry_date=None, expiry_days: int | None = None, now: datetime | None = None) -> datetime:
    """Caller-supplied date wins, otherwise ``now + expiry_days``."""
    from voucherman.conf import voucherman_settings

    explicit = parse_expiry(expiry_date)
    if explicit is not None:
        return explicit
    days = expiry_days or voucherman_settings.DEFAULT_EXPIRY_DAYS
    return (now or timezone.now()) + timedelta(days=days)
