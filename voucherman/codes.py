"""
Voucher code generation.

Codes are drawn from a 32-symbol alphabet (no 0/O/1/I) and checked against
the set of codes that are currently live, i.e. held by a non-deleted
voucher in status ``available`` or ``active``. Codes of claimed or deleted
vouchers are NOT in that set and may be handed out again.

The generator never touches the database itself; callers compute the live
set once per request with ``live_codes()`` and pass it in. Two concurrent
requests can still pick the same code; the partial unique constraint on
``Voucher.code`` rejects the loser and the issuing service retries.
"""

import logging
import secrets
import string

from voucherman.conf import voucherman_settings

logger = logging.getLogger(__name__)

FALLBACK_ALPHABET = string.ascii_lowercase + string.digits


def live_codes() -> set[str]:
    """Codes held by non-deleted vouchers in status available or active."""
    from voucherman.models import Voucher

    return set(Voucher.objects.live().values_list("code", flat=True))


def _draw(alphabet: str, length: int) -> str:
    return "".join(secrets.choice(alphabet) for _ in range(length))


def fallback_code(existing: set[str]) -> str:
    """Longer lowercase alphanumeric code, used only once the short pool is exhausted."""
    length = voucherman_settings.FALLBACK_CODE_LENGTH
    code = _draw(FALLBACK_ALPHABET, length)
    while code in existing:
        code = _draw(FALLBACK_ALPHABET, length)
    return code


def generate_code(existing: set[str], max_attempts: int | None = None) -> str:
    """
    Return a code not present in ``existing``.

    Args:
        existing: Live codes to avoid
        max_attempts: Short-code draws before falling back (default CODE_MAX_ATTEMPTS)

    Returns:
        A CODE_LENGTH code from CODE_ALPHABET, or a fallback code
    """
    if max_attempts is None:
        max_attempts = voucherman_settings.CODE_MAX_ATTEMPTS
    alphabet = voucherman_settings.CODE_ALPHABET
    length = voucherman_settings.CODE_LENGTH

    for _ in range(max_attempts):
        code = _draw(alphabet, length)
        if code not in existing:
            return code

    logger.warning(
        "Voucher code pool exhausted after %d attempts (%d live codes), using fallback",
        max_attempts,
        len(existing),
    )
    return fallback_code(existing)


def generate_codes(count: int, existing: set[str], max_attempts: int | None = None) -> list[str]:
    """
    Generate ``count`` distinct codes for a batch.

    ``existing`` is mutated: every chosen code is added so codes within the
    same batch never collide with each other.
    """
    if max_attempts is None:
        max_attempts = voucherman_settings.BATCH_CODE_MAX_ATTEMPTS

    codes = []
    for _ in range(count):
        code = generate_code(existing, max_attempts=max_attempts)
        existing.add(code)
        codes.append(code)
    return codes


def is_valid_code(code: str) -> bool:
    """True if ``code`` has the short-code shape (length and alphabet)."""
    alphabet = voucherman_settings.CODE_ALPHABET
    return len(code) == voucherman_settings.CODE_LENGTH and all(c in alphabet for c in code)
