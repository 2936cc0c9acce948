"""Tests for voucher code generation."""

import pytest

from voucherman.codes import generate_code, generate_codes, is_valid_code, live_codes
from voucherman.conf import voucherman_settings
from voucherman.models import VoucherStatus


ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


class TestGenerateCode:
    def test_shape(self):
        for _ in range(200):
            code = generate_code(set())
            assert len(code) == 4
            assert all(c in ALPHABET for c in code)
            assert is_valid_code(code)

    def test_alphabet_has_no_ambiguous_symbols(self):
        assert len(voucherman_settings.CODE_ALPHABET) == 32
        for c in "0O1I":
            assert c not in voucherman_settings.CODE_ALPHABET

    def test_avoids_existing(self, settings):
        settings.VOUCHERMAN = {"CODE_ALPHABET": "AB", "CODE_LENGTH": 1}
        assert generate_code({"A"}) == "B"

    def test_exhausted_pool_falls_back(self, settings, caplog):
        settings.VOUCHERMAN = {"CODE_ALPHABET": "AB", "CODE_LENGTH": 1}
        code = generate_code({"A", "B"}, max_attempts=5)
        assert len(code) == 6
        assert code == code.lower()
        assert code.isalnum()
        assert "exhausted" in caplog.text


class TestGenerateCodes:
    def test_batch_codes_are_distinct(self):
        existing = set()
        codes = generate_codes(50, existing)
        assert len(set(codes)) == 50
        assert existing == set(codes)

    def test_batch_avoids_existing(self, settings):
        settings.VOUCHERMAN = {"CODE_ALPHABET": "ABC", "CODE_LENGTH": 1}
        codes = generate_codes(2, {"A"})
        assert sorted(codes) == ["B", "C"]


@pytest.mark.django_db
class TestLiveCodes:
    def test_only_available_and_active(self, available_voucher, active_voucher):
        assert live_codes() == {"AB23", "CD45"}

    def test_claimed_and_deleted_codes_are_reusable(self, available_voucher, active_voucher):
        """Codes leave the live set once claimed or deleted and may be drawn again."""
        from django.utils import timezone

        active_voucher.status = VoucherStatus.CLAIMED
        active_voucher.used_at = timezone.now()
        active_voucher.approved_by = "bob"
        active_voucher.spent_amount = 0
        active_voucher.save()
        available_voucher.deleted_at = timezone.now()
        available_voucher.save()

        assert live_codes() == set()
