"""Voucherman protocols."""

from voucherman.protocols.audit import AuditSink

__all__ = [
    "AuditSink",
]
