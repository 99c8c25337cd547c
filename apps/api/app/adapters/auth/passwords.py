"""bcrypt password hasher."""

from __future__ import annotations

import asyncio

import bcrypt

from app.adapters.auth.base import PasswordHasher
from app.domain.credential_policy import PASSWORD_MIN_LENGTH
from app.domain.errors import PolicyViolationError

DEFAULT_BCRYPT_ROUNDS = 12
_BCRYPT_MAX_INPUT_BYTES = 72


class BcryptPasswordHasher(PasswordHasher):
    """Hashes with a fresh salt per call at a fixed cost factor.

    bcrypt work runs in a worker thread so the calling task yields instead of
    blocking the event loop.
    """

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self._rounds = rounds
        # Spent on unknown-account logins so they cost the same as a bad password.
        self._dummy_hash = bcrypt.hashpw(b"dummy-password-for-timing", bcrypt.gensalt(rounds=rounds))

    @property
    def rounds(self) -> int:
        return self._rounds

    @property
    def dummy_hash(self) -> str:
        return self._dummy_hash.decode("ascii")

    async def hash(self, plaintext: str) -> str:
        encoded = self._check_policy(plaintext)
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = await asyncio.to_thread(bcrypt.hashpw, encoded, salt)
        return hashed.decode("ascii")

    async def verify(self, plaintext: str, password_hash: str) -> bool:
        try:
            encoded = plaintext.encode("utf-8")
            if len(encoded) > _BCRYPT_MAX_INPUT_BYTES:
                return False
            return await asyncio.to_thread(bcrypt.checkpw, encoded, password_hash.encode("ascii"))
        except (ValueError, TypeError, UnicodeEncodeError):
            return False

    @staticmethod
    def _check_policy(plaintext: str) -> bytes:
        if len(plaintext) < PASSWORD_MIN_LENGTH:
            raise PolicyViolationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
        try:
            encoded = plaintext.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise PolicyViolationError("Password contains characters that cannot be encoded") from exc
        if len(encoded) > _BCRYPT_MAX_INPUT_BYTES:
            raise PolicyViolationError(f"Password must be at most {_BCRYPT_MAX_INPUT_BYTES} bytes long")
        return encoded


__all__ = ["BcryptPasswordHasher", "DEFAULT_BCRYPT_ROUNDS"]
