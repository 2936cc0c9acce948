"""Audit sink protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class AuditSink(Protocol):
    """
    Receives fire-and-forget action records.

    The core never waits on or depends on a sink. Implemented by
    adapters/audit_log.py (database) and adapters/logging_sink.py.

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
        """
        Store one action record.

        Args:
            action: Action name (VOUCHER_CLAIM, VISIT_RECORDED, ...)
            details: Human-readable summary
            actor_identity: Username or phone of the actor ("system" if none)
            source_address: Client address, if known
        """
        ...
