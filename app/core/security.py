"""Security utilities: password hashing and JWT access/refresh tokens."""

import secrets
import uuid
from datetime import datetime, timedelta, timezone
from functools import cached_property
from typing import Optional

import bcrypt
import structlog
from jose import JWTError, jwt
from pydantic import BaseModel

from app.config import settings
from app.core.exceptions import InternalError, InvalidTokenError
from app.utils.constants import MAX_PASSWORD_BYTES, Role, TokenType

logger = structlog.get_logger(__name__)

BEARER_PREFIX = "Bearer "


class PasswordHasher:
    """Adaptive, salted one-way hashing with a fixed bcrypt work factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")
        except (ValueError, TypeError) as exc:
            logger.error("password_hash_failed", error=type(exc).__name__)
            raise InternalError("Password hashing failed") from exc

    def verify(self, plaintext: str, digest: str) -> bool:
        encoded = plaintext.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            # Nothing longer than this was ever hashed, so it cannot match
            return False
        try:
            return bcrypt.checkpw(encoded, digest.encode("utf-8"))
        except (ValueError, TypeError) as exc:
            logger.error("password_verify_failed", error=type(exc).__name__)
            raise InternalError("Password comparison failed") from exc

    @cached_property
    def _dummy_digest(self) -> str:
        return self.hash(secrets.token_hex(16))

    def verify_dummy(self, plaintext: str) -> bool:
        """Spend one verify's worth of work against a digest nothing matches."""
        return self.verify(plaintext, self._dummy_digest)

    def hash_if_changed(self, plaintext: Optional[str], current_digest: Optional[str]) -> Optional[str]:
        """Return the digest to store for ``plaintext``.

        The stored digest is kept as-is when no new secret is given or the new
        secret already matches it, so an existing digest is never re-hashed.
        """
        if not plaintext:
            return current_digest
        if current_digest and self.verify(plaintext, current_digest):
            return current_digest
        return self.hash(plaintext)


class TokenPayload(BaseModel):
    """Identity carried by both access and refresh tokens."""

    user_id: str
    email: str
    role: Role


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str


class TokenService:
    """Issues and validates the signed access/refresh token pair."""

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        issuer: str = "placement-backend",
        audience: str = "placement-frontend",
    ):
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.issuer = issuer
        self.audience = audience

    def _encode(self, payload: TokenPayload, token_type: TokenType, secret: str, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": payload.user_id,
            "email": payload.email,
            "role": payload.role.value,
            "type": token_type.value,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + ttl,
            "iss": self.issuer,
            "aud": self.audience,
        }
        return jwt.encode(claims, secret, algorithm=self.algorithm)

    def _decode(self, token: str, token_type: TokenType, secret: str, error_message: str) -> TokenPayload:
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
            )
        except JWTError as exc:
            raise InvalidTokenError(error_message) from exc

        if claims.get("type") != token_type.value:
            raise InvalidTokenError(error_message)

        try:
            return TokenPayload(
                user_id=claims["sub"],
                email=claims["email"],
                role=claims["role"],
            )
        except (KeyError, ValueError) as exc:
            raise InvalidTokenError(error_message) from exc

    def generate_token_pair(self, payload: TokenPayload) -> TokenPair:
        """Mint an access and a refresh token for one authentication event."""
        return TokenPair(
            access_token=self._encode(payload, TokenType.ACCESS, self.access_secret, self.access_ttl),
            refresh_token=self._encode(payload, TokenType.REFRESH, self.refresh_secret, self.refresh_ttl),
        )

    def verify_access_token(self, token: str) -> TokenPayload:
        return self._decode(token, TokenType.ACCESS, self.access_secret, "Invalid or expired access token")

    def verify_refresh_token(self, token: str) -> TokenPayload:
        return self._decode(token, TokenType.REFRESH, self.refresh_secret, "Invalid or expired refresh token")


def extract_token_from_header(auth_header: Optional[str]) -> Optional[str]:
    """Return the token from ``Authorization: Bearer <token>``, else None."""
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        return None
    token = auth_header[len(BEARER_PREFIX):].strip()
    return token or None


def get_token_expiration(token: str) -> Optional[datetime]:
    """Read ``exp`` without verifying the signature. None on malformed input."""
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return None
    exp = claims.get("exp")
    if not isinstance(exp, (int, float)):
        return None
    return datetime.fromtimestamp(exp, tz=timezone.utc)


password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

token_service = TokenService(
    access_secret=settings.JWT_SECRET,
    refresh_secret=settings.JWT_REFRESH_SECRET,
    algorithm=settings.JWT_ALGORITHM,
    access_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    refresh_ttl=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    issuer=settings.JWT_ISSUER,
    audience=settings.JWT_AUDIENCE,
)
