"""Management command to cleanup old audit log entries."""

from django.core.management.base import BaseCommand

from voucherman.contrib.audit.models import AuditLog


class Command(BaseCommand):
    help = "Remove audit log entries older than AUDIT_RETENTION_DAYS"

    def add_arguments(self, parser):
        parser.add_argument(
            "--days",
            type=int,
            default=None,
            help="Override AUDIT_RETENTION_DAYS setting",
        )

    def handle(self, *args, **options):
        deleted_count, _ = AuditLog.cleanup_old_entries(days=options["days"])
        self.stdout.write(
            self.style.SUCCESS(f"Deleted {deleted_count} old audit log entries.")
        )
