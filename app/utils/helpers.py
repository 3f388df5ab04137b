"""Helper utilities."""

import uuid
from datetime import datetime, timezone
from typing import Optional, Union

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

_email_adapter = TypeAdapter(EmailStr)


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_uuid(value: Union[str, uuid.UUID]) -> Optional[uuid.UUID]:
    """Parse a user-supplied id. None when it is not a valid UUID."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def mask_email(email: str) -> str:
    """Shorten an email for log output: ``jane.doe@x.com`` -> ``ja***@x.com``."""
    local, _, domain = email.partition("@")
    if not domain:
        return "***"
    return f"{local[:2]}***@{domain}"


def normalize_email(email: str) -> str:
    """Stored form of an address, as request bodies validate it. Unparseable input is returned as-is."""
    try:
        return _email_adapter.validate_python(email)
    except PydanticValidationError:
        return email
