"""AuditLog model - action records written by the database audit sink."""

from datetime import timedelta

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class AuditLog(models.Model):
    """
    One recorded staff or customer action.

    Written after the originating transaction commits; never read by the
    voucher or loyalty core.
    """

    action = models.CharField(_("action"), max_length=50, db_index=True)
    details = models.TextField(_("details"), blank=True)
    actor_identity = models.CharField(_("actor"), max_length=150, default="system")
    source_address = models.CharField(_("source address"), max_length=100, blank=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("audit log entry")
        verbose_name_plural = _("audit log")
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.action} by {self.actor_identity}"

    @classmethod
    def cleanup_old_entries(cls, days: int | None = None):
        """Remove entries older than N days."""
        if days is None:
            from voucherman.conf import voucherman_settings

            days = voucherman_settings.AUDIT_RETENTION_DAYS
        cutoff = timezone.now() - timedelta(days=days)
        return cls.objects.filter(created_at__lt=cutoff).delete()
