"""Credential store: identity to password-hash mapping."""

from __future__ import annotations

import logging

from app.adapters.auth.base import PasswordHasher
from app.core.logging_safety import safe_log_identifier
from app.domain.credential_policy import normalize_identity
from app.domain.errors import ConflictError, InvalidCredentialsError, PrincipalNotFoundError, UniqueConstraintError
from app.repositories.memory import InMemoryStore, PrincipalRecord
from app.schemas.auth import AuthPrincipal

logger = logging.getLogger(__name__)


def to_public_principal(record: PrincipalRecord) -> AuthPrincipal:
    return AuthPrincipal(
        id=record.id,
        handle=record.handle,
        email=record.email,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class CredentialStore:
    """Owns password storage.

    Every mutation of a password hash goes through ``_hash_for_write``, so a
    caller can never hand in a pre-hashed or raw value that bypasses hashing.
    """

    def __init__(self, store: InMemoryStore, hasher: PasswordHasher) -> None:
        self._store = store
        self._hasher = hasher

    async def register(self, *, handle: str, email: str, password: str) -> PrincipalRecord:
        handle = normalize_identity(handle)
        email = normalize_identity(email)

        existing = await self._store.find_principal_by_handle_or_email(handle, email)
        if existing is not None:
            raise ConflictError("handle" if existing.handle == handle else "email")

        password_hash = await self._hash_for_write(password)
        try:
            record = await self._store.insert_principal(handle=handle, email=email, password_hash=password_hash)
        except UniqueConstraintError as exc:
            # Lost a race with a concurrent registration after the existence check.
            logger.info(
                "credentials.register_conflict handle=%s field=%s source=unique_constraint",
                safe_log_identifier(handle, prefix="hdl"),
                exc.field,
            )
            raise ConflictError(exc.field) from exc

        logger.info("credentials.registered principal_id=%s", safe_log_identifier(record.id, prefix="pid"))
        return record

    async def authenticate(self, *, email: str, password: str) -> PrincipalRecord:
        """Look up by email only; unknown account and wrong password are indistinguishable."""
        record = await self._store.find_principal_by_email(normalize_identity(email))
        if record is None:
            await self._hasher.verify(password, self._hasher.dummy_hash)
            raise InvalidCredentialsError()

        if not await self._hasher.verify(password, record.password_hash):
            raise InvalidCredentialsError()
        return record

    async def find_by_id(self, principal_id: str) -> AuthPrincipal | None:
        record = await self._store.find_principal_by_id(principal_id)
        if record is None:
            return None
        return to_public_principal(record)

    async def change_password(self, *, principal_id: str, current_password: str, new_password: str) -> AuthPrincipal:
        record = await self._store.find_principal_by_id(principal_id)
        if record is None:
            raise PrincipalNotFoundError(principal_id)
        if not await self._hasher.verify(current_password, record.password_hash):
            raise InvalidCredentialsError()

        password_hash = await self._hash_for_write(new_password)
        updated = await self._store.update_principal_password(principal_id, password_hash)
        if updated is None:
            raise PrincipalNotFoundError(principal_id)

        logger.info("credentials.password_changed principal_id=%s", safe_log_identifier(principal_id, prefix="pid"))
        return to_public_principal(updated)

    async def _hash_for_write(self, plaintext: str) -> str:
        # The hasher enforces the minimum length before doing any work.
        return await self._hasher.hash(plaintext)
