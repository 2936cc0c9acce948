"""
Audit dispatch.

``record()`` hands an action record to the configured AuditSink after the
surrounding transaction commits. A rolled-back operation leaves no audit
record, and a failing sink is logged and swallowed: audit never fails or
delays the primary operation.
"""

import logging
from functools import partial

from django.db import transaction
from django.utils.module_loading import import_string

from voucherman.conf import voucherman_settings
from voucherman.protocols.audit import AuditSink

logger = logging.getLogger(__name__)


def get_audit_sink() -> AuditSink | None:
    """Get configured AuditSink."""
    sink_path = voucherman_settings.AUDIT_SINK
    if sink_path:
        sink_class = import_string(sink_path)
        return sink_class()
    return None


def _deliver(action: str, details: str, actor_identity: str, source_address: str) -> None:
    try:
        sink = get_audit_sink()
        if sink is None:
            logger.info("audit %s by %s: %s", action, actor_identity, details)
            return
        sink.record(action, details, actor_identity, source_address)
    except Exception:
        logger.warning("Audit record %s could not be written", action, exc_info=True)


def record(action: str, details: str, actor=None) -> None:
    """
    Queue an audit record for delivery on commit.

    Args:
        action: Action name
        details: Human-readable summary
        actor: Actor performing the action (None = "system")
    """
    identity = getattr(actor, "identity", None) or "system"
    source_address = getattr(actor, "source_address", "") or ""
    transaction.on_commit(partial(_deliver, action, details, identity, source_address))
