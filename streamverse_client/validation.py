"""Form checks run before any request is sent.

Each validator returns a mapping of field name to message; an empty mapping
means the form may be submitted.
"""

from __future__ import annotations

import re

FormErrors = dict[str, str]

EMAIL_PATTERN = re.compile(r"^[\w\-.]+@([\w-]+\.)+[\w-]{2,}$")
MIN_PASSWORD_LENGTH = 8
MIN_USERNAME_LENGTH = 3

_HAS_DIGIT = re.compile(r"\d")
_HAS_LETTER = re.compile(r"[A-Za-z]")


def _is_blank(value: str | None) -> bool:
    return not value or not value.strip()


def validate_login_form(identifier: str | None, password: str | None) -> FormErrors:
    errors: FormErrors = {}
    if _is_blank(identifier):
        errors["identifier"] = "Username or email is required."
    if _is_blank(password):
        errors["password"] = "Password is required."
    return errors


def validate_register_form(
    *,
    first_name: str | None,
    last_name: str | None,
    email: str | None,
    username: str | None,
    password: str | None,
) -> FormErrors:
    errors: FormErrors = {}

    if _is_blank(first_name):
        errors["first_name"] = "First name is required."
    if _is_blank(last_name):
        errors["last_name"] = "Last name is required."

    normalized_email = (email or "").strip()
    if not normalized_email:
        errors["email"] = "Email is required."
    elif not EMAIL_PATTERN.match(normalized_email):
        errors["email"] = "Enter a valid email address."

    normalized_username = (username or "").strip()
    if not normalized_username:
        errors["username"] = "Username is required."
    elif len(normalized_username) < MIN_USERNAME_LENGTH:
        errors["username"] = "Username must be at least 3 characters."

    password = password or ""
    if len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = "Password must be at least 8 characters."
    elif not _HAS_LETTER.search(password) or not _HAS_DIGIT.search(password):
        errors["password"] = "Use letters and numbers for a stronger password."

    return errors
