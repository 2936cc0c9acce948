"""
Audit dispatch tests.

Tests for:
- Records written after commit through the configured sink
- Rolled-back operations leave no record
- Failing sinks never fail the operation
- AuditService listing and the cleanup command
"""

from datetime import timedelta
from io import StringIO
from unittest.mock import MagicMock, patch

import pytest
from django.core.management import call_command
from django.db import transaction
from django.utils import timezone

from voucherman import audit
from voucherman.contrib.audit import AuditService
from voucherman.contrib.audit.models import AuditLog
from voucherman.exceptions import GateError, PermissionDeniedError
from voucherman.service import VoucherService

pytestmark = pytest.mark.django_db


class TestDispatch:
    def test_record_written_on_commit(self, admin_actor, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            voucher = VoucherService.create(admin_actor, name="Audit Me")

        entry = AuditLog.objects.get(action="VOUCHER_CREATE")
        assert entry.actor_identity == "alice"
        assert entry.source_address == "10.0.0.1"
        assert voucher.code in entry.details

    def test_missing_source_address(self, cashier, customer, active_voucher, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            VoucherService.claim(cashier, "CD45", spent_amount=700)

        entry = AuditLog.objects.get(action="VOUCHER_CLAIM")
        assert entry.source_address == "unknown"
        assert "Amount: 700" in entry.details

    def test_rejected_operation_records_nothing(self, cashier, active_voucher, django_capture_on_commit_callbacks):
        VoucherService.claim(cashier, "CD45")
        with django_capture_on_commit_callbacks() as callbacks:
            with pytest.raises(GateError):
                VoucherService.claim(cashier, "CD45")
        assert callbacks == []

    def test_rolled_back_transaction_records_nothing(self, admin_actor, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(RuntimeError):
                with transaction.atomic():
                    VoucherService.create(admin_actor, name="Doomed")
                    raise RuntimeError("abort")
        assert callbacks == []
        assert not AuditLog.objects.exists()

    def test_failing_sink_is_swallowed(self, admin_actor, django_capture_on_commit_callbacks, caplog):
        sink = MagicMock()
        sink.record.side_effect = RuntimeError("sink down")

        with patch("voucherman.audit.get_audit_sink", return_value=sink):
            with django_capture_on_commit_callbacks(execute=True):
                voucher = VoucherService.create(admin_actor, name="Still Works")

        assert VoucherService.get(voucher.pk) is not None
        sink.record.assert_called_once()
        assert "could not be written" in caplog.text

    def test_no_sink_logs_only(self, settings, caplog):
        settings.VOUCHERMAN = {"AUDIT_SINK": ""}
        assert audit.get_audit_sink() is None
        with caplog.at_level("INFO", logger="voucherman.audit"):
            audit._deliver("TEST", "details", "system", "")
        assert "TEST" in caplog.text

    def test_logging_sink(self, settings, caplog):
        settings.VOUCHERMAN = {"AUDIT_SINK": "voucherman.adapters.logging_sink.LoggingAuditSink"}
        with caplog.at_level("INFO", logger="voucherman.audit"):
            audit.get_audit_sink().record("VOUCHER_BIND", "Bound", "bob", "10.0.0.2")
        assert "VOUCHER_BIND by bob from 10.0.0.2" in caplog.text


class TestAuditService:
    def test_list_entries(self, admin_actor):
        for i in range(3):
            AuditLog.objects.create(action=f"A{i}", details="", actor_identity="alice")

        page = AuditService.list_entries(admin_actor, limit=2, offset=0)

        assert page.total == 3
        assert [e.action for e in page.data] == ["A2", "A1"]

    def test_admin_only(self, cashier):
        with pytest.raises(PermissionDeniedError):
            AuditService.list_entries(cashier)

    def test_cleanup_command(self):
        old = AuditLog.objects.create(action="OLD")
        AuditLog.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=400))
        AuditLog.objects.create(action="NEW")

        out = StringIO()
        call_command("voucherman_cleanup", stdout=out)

        assert "Deleted 1" in out.getvalue()
        assert list(AuditLog.objects.values_list("action", flat=True)) == ["NEW"]
