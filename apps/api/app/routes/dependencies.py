"""Dependency wiring for routes, including the request authenticator."""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.adapters.auth import (
    AuthVerificationError,
    JwtTokenService,
    PasswordHasher,
    TokenExpiredError,
)
from app.core.config import Settings
from app.core.logging_safety import safe_log_identifier
from app.domain.errors import StorageError
from app.errors import internal_failure, unauthenticated
from app.repositories.memory import InMemoryStore
from app.schemas.auth import Authenticated, AuthPrincipal, RequestIdentity, Unauthenticated
from app.services.accounts import AccountService
from app.services.credentials import CredentialStore
from app.services.links import LinkService
from app.services.profiles import ProfileService

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")
logger = logging.getLogger(__name__)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_token_service(request: Request) -> JwtTokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_credential_store(
    store: Annotated[InMemoryStore, Depends(get_store)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> CredentialStore:
    return CredentialStore(store, hasher)


def get_account_service(
    credentials: Annotated[CredentialStore, Depends(get_credential_store)],
    tokens: Annotated[JwtTokenService, Depends(get_token_service)],
) -> AccountService:
    return AccountService(credentials, tokens, expires_in=tokens.expires_in)


def get_link_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> LinkService:
    return LinkService(store)


def get_profile_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> ProfileService:
    return ProfileService(store)


def _log_rejection(request: Request, reason: str) -> None:
    logger.warning(
        "auth.rejected correlation_id=%s method=%s path=%s reason=%s",
        safe_log_identifier(_request_correlation_id(request), prefix="cid"),
        request.method,
        request.url.path,
        reason,
    )


async def get_authenticated_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    tokens: Annotated[JwtTokenService, Depends(get_token_service)],
    credential_store: Annotated[CredentialStore, Depends(get_credential_store)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthPrincipal:
    """Validate bearer token, resolve the principal and attach it to the request."""
    request.state.identity = Unauthenticated()
    if credentials is None or not credentials.credentials:
        _log_rejection(request, "missing_bearer")
        raise unauthenticated("Access token required")

    try:
        claims = tokens.verify_token(credentials.credentials)
    except TokenExpiredError as exc:
        _log_rejection(request, "token_expired")
        raise unauthenticated(str(exc)) from exc
    except AuthVerificationError as exc:
        _log_rejection(request, "token_invalid")
        raise unauthenticated(str(exc)) from exc

    try:
        principal = await credential_store.find_by_id(claims.principal_id)
    except StorageError as exc:
        logger.exception(
            "auth.lookup_failed correlation_id=%s principal_id=%s",
            safe_log_identifier(_request_correlation_id(request), prefix="cid"),
            safe_log_identifier(claims.principal_id, prefix="pid"),
        )
        detail = str(exc) if settings.expose_error_detail else None
        raise internal_failure("Authentication failed", detail=detail) from exc

    if principal is None:
        _log_rejection(request, "principal_not_found")
        raise unauthenticated("Invalid token - user not found")

    logger.info(
        "auth.accepted correlation_id=%s method=%s path=%s principal_id=%s",
        safe_log_identifier(_request_correlation_id(request), prefix="cid"),
        request.method,
        request.url.path,
        safe_log_identifier(principal.id, prefix="pid"),
    )
    request.state.identity = Authenticated(principal=principal)
    return principal


async def get_request_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    tokens: Annotated[JwtTokenService, Depends(get_token_service)],
    credential_store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> RequestIdentity:
    """Non-blocking variant: any failure falls through to ``Unauthenticated``."""
    identity: RequestIdentity = Unauthenticated()
    if credentials is not None and credentials.credentials:
        try:
            claims = tokens.verify_token(credentials.credentials)
            principal = await credential_store.find_by_id(claims.principal_id)
        except AuthVerificationError:
            logger.info(
                "auth.optional_skipped correlation_id=%s path=%s reason=token_rejected",
                safe_log_identifier(_request_correlation_id(request), prefix="cid"),
                request.url.path,
            )
        except Exception:
            logger.warning(
                "auth.optional_skipped correlation_id=%s path=%s reason=lookup_failed",
                safe_log_identifier(_request_correlation_id(request), prefix="cid"),
                request.url.path,
                exc_info=True,
            )
        else:
            if principal is not None:
                identity = Authenticated(principal=principal)

    request.state.identity = identity
    return identity
