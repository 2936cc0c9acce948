"""Logging-only AuditSink adapter."""

import logging

logger = logging.getLogger("voucherman.audit")


class LoggingAuditSink:
    """
    Adapter that writes audit records to the ``voucherman.audit`` logger.

    Configuration in settings.py:
        VOUCHERMAN = {
            "AUDIT_SINK": "voucherman.adapters.logging_sink.LoggingAuditSink",
        }
    """

    def record(
        self,
        action: str,
        details: str,
        actor_identity: str,
        source_address: str = "",
    ) -> None:
        logger.info(
            "%s by %s from %s: %s",
            action,
            actor_identity,
            source_address or "unknown",
            details,
        )
