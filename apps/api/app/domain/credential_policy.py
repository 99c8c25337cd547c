"""Input and password-strength rules for signup, login and password change."""

import re

from app.errors import validation_error

HANDLE_MIN_LENGTH = 3
HANDLE_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6

_HANDLE_CHARSET = re.compile(r"^[A-Za-z0-9_-]+$")
_EMAIL_SHAPE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")

_FIELD_LABELS = {
    "handle": "Handle",
    "email": "Email",
    "password": "Password",
    "current_password": "Current password",
    "new_password": "New password",
}


def normalize_identity(value: str) -> str:
    return value.strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_SHAPE.match(email))


def _require_present(fields: dict[str, str | None], message: str) -> None:
    missing = {name: f"{_FIELD_LABELS[name]} is required" for name, value in fields.items() if not value}
    if missing:
        raise validation_error(message, missing)


def _field_error(field: str, message: str, *, code: str = "VALIDATION_ERROR"):
    return validation_error(message, {field: message}, code=code)


def ensure_handle(handle: str) -> None:
    if not HANDLE_MIN_LENGTH <= len(handle) <= HANDLE_MAX_LENGTH:
        raise _field_error(
            "handle",
            f"Handle must be between {HANDLE_MIN_LENGTH} and {HANDLE_MAX_LENGTH} characters",
            code="POLICY_VIOLATION",
        )
    if not _HANDLE_CHARSET.match(handle):
        raise _field_error(
            "handle",
            "Handle can only contain letters, numbers, underscores, and hyphens",
            code="POLICY_VIOLATION",
        )


def ensure_email(email: str) -> None:
    if not is_valid_email(email):
        raise _field_error("email", "Please provide a valid email address")


def ensure_password_strength(password: str, *, field: str = "password") -> None:
    """Signup-grade policy: length plus upper, lower and digit classes.

    Stricter than the hasher's own length check; both apply.
    """
    if len(password) < PASSWORD_MIN_LENGTH:
        raise _field_error(
            field,
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters long",
            code="POLICY_VIOLATION",
        )
    if not (_UPPER.search(password) and _LOWER.search(password) and _DIGIT.search(password)):
        raise _field_error(
            field,
            "Password must contain at least one uppercase letter, one lowercase letter, and one number",
            code="POLICY_VIOLATION",
        )


def validate_signup(handle: str | None, email: str | None, password: str | None) -> None:
    _require_present(
        {"handle": handle, "email": email, "password": password},
        "Handle, email, and password are required",
    )
    ensure_handle(handle.strip())
    ensure_email(email.strip())
    ensure_password_strength(password)


def validate_login(email: str | None, password: str | None) -> None:
    _require_present({"email": email, "password": password}, "Email and password are required")
    ensure_email(email.strip())


def validate_password_change(current_password: str | None, new_password: str | None) -> None:
    _require_present(
        {"current_password": current_password, "new_password": new_password},
        "Current password and new password are required",
    )
    ensure_password_strength(new_password, field="new_password")
