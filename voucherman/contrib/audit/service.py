"""Audit service - read access to the audit log."""

from dataclasses import dataclass

from voucherman.contrib.audit.models import AuditLog


@dataclass
class AuditPage:
    data: list[AuditLog]
    total: int


class AuditService:
    """
    Service for audit log queries.

    Uses @classmethod for extensibility (consistent with other services).
    """

    @classmethod
    def list_entries(cls, actor, limit: int = 50, offset: int = 0) -> AuditPage:
        """
        Newest entries first. Admin only.

        Args:
            actor: Acting identity
            limit: Max entries to return
            offset: Entries to skip

        Raises:
            PermissionDeniedError: If actor is not an admin
        """
        actor.require_admin()
        qs = AuditLog.objects.all()
        return AuditPage(data=list(qs[offset:offset + limit]), total=qs.count())

    @classmethod
    def for_action(cls, action: str, limit: int = 50) -> list[AuditLog]:
        return list(AuditLog.objects.filter(action=action)[:limit])
