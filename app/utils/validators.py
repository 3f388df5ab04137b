"""Validators."""

import re
from typing import List

from app.utils.constants import MAX_PASSWORD_BYTES


def validate_password_strength(password: str) -> tuple[bool, List[str]]:
    """Validate password strength."""
    errors = []

    if len(password) < 8:
        errors.append("Password must be at least 8 characters long")

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        errors.append(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")

    has_number = re.search(r'\d', password)
    has_letter = re.search(r'[a-zA-Z]', password)
    has_special = re.search(r'[!@#$%^&*(),.?":{}|<>]', password)

    if not (has_number and has_letter and has_special):
        errors.append(
            "Password must contain at least one number, one letter, and one special character"
        )

    return len(errors) == 0, errors


def validate_verification_code(code: str) -> bool:
    """Codes are exactly six digits."""
    return bool(re.fullmatch(r'\d{6}', code))
