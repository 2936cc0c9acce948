"""
Voucherman configuration.

Usage in settings.py:
    VOUCHERMAN = {
        "DEFAULT_EXPIRY_DAYS": 30,
        "STAMPS_PER_REWARD": 10,
        "AUDIT_SINK": "voucherman.adapters.audit_log.DatabaseAuditSink",
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class VouchermanSettings:
    """Voucherman configuration settings."""

    # Code generation
    CODE_ALPHABET: str = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
    CODE_LENGTH: int = 4
    CODE_MAX_ATTEMPTS: int = 100
    BATCH_CODE_MAX_ATTEMPTS: int = 50
    FALLBACK_CODE_LENGTH: int = 6
    CODE_INSERT_RETRIES: int = 3

    # Issuance
    DEFAULT_EXPIRY_DAYS: int = 30
    MAX_BATCH_SIZE: int = 1000

    # Stamp card
    STAMPS_PER_REWARD: int = 10
    REWARD_TEMPLATE_FALLBACK: bool = True
    PROGRESS_HISTORY_LIMIT: int = 50

    # Audit sink (dotted path, "" = log only)
    AUDIT_SINK: str = "voucherman.adapters.audit_log.DatabaseAuditSink"
    AUDIT_RETENTION_DAYS: int = 365

    # Listings
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100


def get_voucherman_settings() -> VouchermanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "VOUCHERMAN", {})
    return VouchermanSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_voucherman_settings(), name)


voucherman_settings = _LazySettings()
