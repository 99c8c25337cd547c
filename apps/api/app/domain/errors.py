"""Domain exceptions raised by the credential core.

These carry no HTTP semantics; the orchestration layer and the auth
dependencies translate them into ``ApiError`` responses.
"""

from typing import Literal

ConflictField = Literal["handle", "email"]


class PolicyViolationError(ValueError):
    """A password or handle does not satisfy the credential policy."""

    def __init__(self, message: str, *, field: str = "password") -> None:
        self.field = field
        super().__init__(message)


class ConflictError(Exception):
    """A handle or email is already registered."""

    def __init__(self, field: ConflictField) -> None:
        self.field = field
        super().__init__(f"{field.capitalize()} already exists")


class InvalidCredentialsError(Exception):
    """Login failed. Deliberately silent about which part was wrong."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class PrincipalNotFoundError(Exception):
    def __init__(self, principal_id: str) -> None:
        self.principal_id = principal_id
        super().__init__("User not found")


class StorageError(Exception):
    """Persistence fault unrelated to caller input."""


class UniqueConstraintError(StorageError):
    """Raised by the store when an insert would duplicate a unique column."""

    def __init__(self, field: ConflictField) -> None:
        self.field = field
        super().__init__(f"unique constraint violated on {field}")
