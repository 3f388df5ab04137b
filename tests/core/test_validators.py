"""Tests for input validators."""

import pytest

from app.utils.helpers import mask_email, to_uuid
from app.utils.validators import (
    validate_password_strength,
    validate_verification_code,
)


class TestPasswordStrength:

    def test_strong_password_passes(self):
        is_valid, errors = validate_password_strength("Str0ng!pass")
        assert is_valid is True
        assert errors == []

    @pytest.mark.parametrize(
        "password",
        [
            "S0!a",  # too short
            "NoDigits!here",
            "12345678!",  # no letter
            "NoSpecial123",
        ],
    )
    def test_weak_passwords_fail(self, password):
        is_valid, errors = validate_password_strength(password)
        assert is_valid is False
        assert errors

    def test_more_than_72_bytes_fails(self):
        is_valid, _ = validate_password_strength("a1!" + "x" * 70)
        assert is_valid is False


class TestVerificationCodeFormat:

    @pytest.mark.parametrize("code", ["123456", "999999", "100000"])
    def test_six_digits_accepted(self, code):
        assert validate_verification_code(code) is True

    @pytest.mark.parametrize("code", ["", "12345", "1234567", "12a456", " 123456"])
    def test_other_formats_rejected(self, code):
        assert validate_verification_code(code) is False


def test_to_uuid():
    assert to_uuid("not-a-uuid") is None
    assert str(to_uuid("6b3c9a52-8d5e-4a1f-9c1e-3f2a7d4b5e60")) == "6b3c9a52-8d5e-4a1f-9c1e-3f2a7d4b5e60"


def test_mask_email_hides_local_part():
    masked = mask_email("student@example.com")
    assert masked.endswith("@example.com")
    assert "student" not in masked
