"""Authentication provider interfaces."""

from abc import ABC, abstractmethod

from app.schemas.auth import IssuedToken, TokenClaims


class AuthVerificationError(Exception):
    """Raised when a token cannot be verified or normalized."""


class TokenInvalidError(AuthVerificationError):
    """Signature, encoding or claim shape is wrong."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class TokenExpiredError(AuthVerificationError):
    """Token is authentic but past its expiry."""

    def __init__(self, message: str = "Token expired") -> None:
        super().__init__(message)


class TokenVerifier(ABC):
    """Provider-neutral token verification interface."""

    @abstractmethod
    def verify_token(self, token: str) -> TokenClaims:
        """Verify token and return its claims."""


class TokenIssuer(ABC):
    @abstractmethod
    def issue(self, *, principal_id: str, handle: str, email: str) -> IssuedToken:
        """Sign a new bearer token for the given identity."""


class PasswordHasher(ABC):
    """One-way password transform with constant-time verification."""

    @abstractmethod
    async def hash(self, plaintext: str) -> str:
        """Return a salted hash of ``plaintext``."""

    @abstractmethod
    async def verify(self, plaintext: str, password_hash: str) -> bool:
        """Check ``plaintext`` against a stored hash."""

    @property
    @abstractmethod
    def dummy_hash(self) -> str:
        """A valid hash of no real password, used to equalize login timing."""


__all__ = [
    "AuthVerificationError",
    "PasswordHasher",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenIssuer",
    "TokenVerifier",
]
