"""Signup, login and password-change orchestration."""

import logging

from app.adapters.auth.base import TokenIssuer
from app.core.logging_safety import safe_log_identifier
from app.domain.credential_policy import validate_login, validate_password_change, validate_signup
from app.domain.errors import ConflictError, InvalidCredentialsError, PolicyViolationError, PrincipalNotFoundError
from app.errors import ApiError, unauthenticated, validation_error
from app.repositories.memory import PrincipalRecord
from app.schemas.auth import AuthPrincipal, AuthSession, ChangePasswordRequest, LoginRequest, SignupRequest
from app.services.credentials import CredentialStore, to_public_principal

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class AccountService:
    """Turns validated input into credential-store writes and issued tokens.

    Malformed input gets field-specific messages; bad credentials get one
    generic message so callers cannot probe which accounts exist.
    """

    def __init__(self, credentials: CredentialStore, tokens: TokenIssuer, *, expires_in: str) -> None:
        self._credentials = credentials
        self._tokens = tokens
        self._expires_in = expires_in

    async def signup(self, payload: SignupRequest) -> AuthSession:
        validate_signup(payload.handle, payload.email, payload.password)

        try:
            record = await self._credentials.register(
                handle=payload.handle,
                email=payload.email,
                password=payload.password,
            )
        except ConflictError as exc:
            raise ApiError(status_code=400, code="CONFLICT", message=str(exc)) from exc
        except PolicyViolationError as exc:
            raise validation_error(str(exc), {exc.field: str(exc)}, code="POLICY_VIOLATION") from exc

        return self._session_for(record)

    async def login(self, payload: LoginRequest) -> AuthSession:
        validate_login(payload.email, payload.password)

        try:
            record = await self._credentials.authenticate(email=payload.email, password=payload.password)
        except InvalidCredentialsError as exc:
            logger.info(
                "auth.login_rejected email=%s",
                safe_log_identifier(payload.email, prefix="eml"),
            )
            raise unauthenticated(INVALID_CREDENTIALS_MESSAGE) from exc

        return self._session_for(record)

    async def change_password(self, *, principal_id: str, payload: ChangePasswordRequest) -> AuthPrincipal:
        validate_password_change(payload.current_password, payload.new_password)

        try:
            return await self._credentials.change_password(
                principal_id=principal_id,
                current_password=payload.current_password,
                new_password=payload.new_password,
            )
        except InvalidCredentialsError as exc:
            message = "Current password is incorrect"
            raise validation_error(message, {"current_password": message}) from exc
        except PolicyViolationError as exc:
            raise validation_error(str(exc), {"new_password": str(exc)}, code="POLICY_VIOLATION") from exc
        except PrincipalNotFoundError as exc:
            raise unauthenticated("Invalid token - user not found") from exc

    def _session_for(self, record: PrincipalRecord) -> AuthSession:
        issued = self._tokens.issue(principal_id=record.id, handle=record.handle, email=record.email)
        logger.info(
            "auth.session_issued principal_id=%s",
            safe_log_identifier(record.id, prefix="pid"),
        )
        return AuthSession(user=to_public_principal(record), token=issued.token, expires_in=self._expires_in)
