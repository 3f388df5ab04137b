"""Common constants."""

from enum import Enum


class Role(str, Enum):
    """User roles."""

    STUDENT = "student"
    ADMIN = "admin"
    RECRUITER = "recruiter"


class LoginMethod(str, Enum):
    CREDENTIALS = "credentials"
    GOOGLE = "google"


class AccountProvider(str, Enum):
    CREDENTIALS = "credentials"
    GOOGLE = "google"


class VerificationKind(str, Enum):
    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


# Verification codes are 6 digits, drawn uniformly from this range
VERIFICATION_CODE_MIN = 100000
VERIFICATION_CODE_MAX = 999999

# bcrypt only looks at the first 72 bytes of a secret
MAX_PASSWORD_BYTES = 72
