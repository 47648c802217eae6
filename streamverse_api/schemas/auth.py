"""Request and response payloads for the authentication endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .user import CamelModel, UserRead


class RegisterRequest(CamelModel):
    """Registration form.

    Fields default to ``None`` so that missing values reach the credential
    store, which reports them with a single readable message instead of a
    per-field validation dump.
    """

    email: str | None = Field(None, max_length=320)
    username: str | None = Field(None, max_length=64)
    password: str | None = None
    first_name: str | None = Field(None, max_length=128)
    last_name: str | None = Field(None, max_length=128)
    avatar_url: str | None = Field(None, max_length=1024)


class LoginRequest(BaseModel):
    """Login form; ``identifier`` matches either the email or the username.

    ``username`` and ``email`` are accepted as fallbacks for older clients that
    post one of them instead of ``identifier``.
    """

    identifier: str | None = None
    username: str | None = None
    email: str | None = None
    password: str | None = None

    @property
    def lookup_value(self) -> str:
        return self.identifier or self.username or self.email or ""


class AuthResponse(BaseModel):
    """``{token, user}`` payload returned by register and login."""

    token: str = Field(..., description="Signed bearer token for later requests.")
    user: UserRead
