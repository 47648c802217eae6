"""Password hashing and session token primitives.

Tokens are HS256 JWTs carrying nothing but the subject (user id) and the
standard issued-at / expiry claims. Authorisation is binary, so no role or
profile data is embedded; anything richer must be looked up by subject.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import bcrypt
from jose import JWTError, jwt

from streamverse_api.settings import AppSettings, get_settings

ALGORITHM = "HS256"


class InvalidTokenError(Exception):
    """Raised when a token is malformed, tampered with, or expired."""


def hash_password(password: str, *, rounds: int | None = None) -> str:
    """Return a salted bcrypt hash of ``password``."""

    cost = rounds if rounds is not None else get_settings().bcrypt_rounds
    salt = bcrypt.gensalt(rounds=cost)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Compare ``password`` against a stored hash without raising."""

    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False


def issue_token(
    user_id: str,
    *,
    settings: AppSettings | None = None,
    now: datetime | None = None,
) -> str:
    """Sign a session token whose only custom claim is ``sub``."""

    active = settings or get_settings()
    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": user_id,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=active.token_lifetime_seconds),
    }
    return jwt.encode(payload, active.jwt_secret, algorithm=ALGORITHM)


def decode_token(token: str, *, settings: AppSettings | None = None) -> str:
    """Verify signature and expiry and return the subject."""

    active = settings or get_settings()
    try:
        claims = jwt.decode(token, active.jwt_secret, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc

    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject:
        raise InvalidTokenError("Token has no subject")
    return subject


__all__ = [
    "ALGORITHM",
    "InvalidTokenError",
    "decode_token",
    "hash_password",
    "issue_token",
    "verify_password",
]
