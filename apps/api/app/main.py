"""FastAPI application entrypoint."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.adapters.auth import BcryptPasswordHasher, JwtTokenService
from app.adapters.auth.jwt_tokens import utc_now
from app.core.config import Settings, get_settings
from app.core.logging_safety import safe_log_identifier
from app.errors import ApiError
from app.repositories.memory import InMemoryStore
from app.routes import auth_router, links_router, profiles_router
from app.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def _validation_field_errors(exc: RequestValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for item in exc.errors():
        location = [str(part) for part in item.get("loc", ())[1:]]
        field = ".".join(location) or "body"
        errors.setdefault(field, str(item.get("msg", "Invalid value")))
    return errors


def create_app(
    settings: Settings | None = None,
    *,
    store: InMemoryStore | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title="One-Link API", version="1.0.0")
    app.state.settings = settings
    app.state.store = store or InMemoryStore()
    app.state.password_hasher = BcryptPasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_service = JwtTokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(days=settings.token_ttl_days),
        clock=clock,
    )

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_, exc: RequestValidationError) -> JSONResponse:
        payload = ErrorResponse(message="Validation error", errors=_validation_field_errors(exc))
        return JSONResponse(status_code=400, content=payload.model_dump(exclude_none=True))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "request.failed correlation_id=%s method=%s path=%s",
            safe_log_identifier(getattr(request.state, "correlation_id", None), prefix="cid"),
            request.method,
            request.url.path,
        )
        detail = str(exc) if settings.expose_error_detail else None
        payload = ErrorResponse(message="Internal server error", error=detail)
        return JSONResponse(status_code=500, content=payload.model_dump(exclude_none=True))

    @app.get("/", include_in_schema=False)
    async def service_index() -> dict:
        return {
            "message": "One-Link API is running",
            "version": app.version,
            "endpoints": {
                "auth": f"{API_PREFIX}/auth",
                "links": f"{API_PREFIX}/links",
                "profiles": f"{API_PREFIX}/profiles/{{handle}}",
            },
        }

    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(links_router, prefix=API_PREFIX)
    app.include_router(profiles_router, prefix=API_PREFIX)

    return app


def get_app() -> FastAPI:
    """Factory for ``uvicorn --factory app.main:get_app``; reads settings from the environment."""
    return create_app()
