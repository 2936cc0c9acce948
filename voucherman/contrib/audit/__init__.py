"""
Voucherman Audit - default database-backed audit sink.

Usage:
    INSTALLED_APPS = [
        ...
        "voucherman",
        "voucherman.contrib.audit",
    ]

    from voucherman.contrib.audit import AuditService

    page = AuditService.list_entries(actor, limit=50, offset=0)
    AuditLog.cleanup_old_entries(days=365)
"""


def __getattr__(name):
    if name == "AuditService":
        from voucherman.contrib.audit.service import AuditService

        return AuditService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["AuditService"]
