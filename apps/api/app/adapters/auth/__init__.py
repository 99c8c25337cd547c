"""Auth adapters: token signing and password hashing."""

from .base import (
    AuthVerificationError,
    PasswordHasher,
    TokenExpiredError,
    TokenInvalidError,
    TokenIssuer,
    TokenVerifier,
)
from .jwt_tokens import JwtTokenService
from .passwords import BcryptPasswordHasher

__all__ = [
    "AuthVerificationError",
    "BcryptPasswordHasher",
    "JwtTokenService",
    "PasswordHasher",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenIssuer",
    "TokenVerifier",
]
