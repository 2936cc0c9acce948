"""Database AuditSink adapter (requires voucherman.contrib.audit)."""


class DatabaseAuditSink:
    """
    Adapter that implements AuditSink by writing AuditLog rows.

    Configuration in settings.py:
        VOUCHERMAN = {
            "AUDIT_SINK": "voucherman.adapters.audit_log.DatabaseAuditSink",
        }
    """

    def record(
        self,
        action: str,
        details: str,
        actor_identity: str,
        source_address: str = "",
    ) -> None:
        """Insert one AuditLog row."""
        # Late import so the core works without the contrib app installed
        from voucherman.contrib.audit.models import AuditLog

        AuditLog.objects.create(
            action=action,
            details=details,
            actor_identity=actor_identity,
            source_address=source_address or "unknown",
        )


