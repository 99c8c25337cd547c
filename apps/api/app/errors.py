"""Application exception types."""

from app.schemas.error import ErrorResponse


class ApiError(Exception):
    """Structured API error that maps directly to contract error payloads.

    ``code`` classifies the failure for logs and tests; it is not part of the
    response body.
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        errors: dict[str, str] | None = None,
        error: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.code = code
        self.payload = ErrorResponse(message=message, errors=errors, error=error)
        super().__init__(message)


def validation_error(message: str, errors: dict[str, str] | None = None, *, code: str = "VALIDATION_ERROR") -> ApiError:
    return ApiError(status_code=400, code=code, message=message, errors=errors)


def unauthenticated(message: str) -> ApiError:
    return ApiError(status_code=401, code="UNAUTHENTICATED", message=message)


def internal_failure(message: str, *, detail: str | None = None) -> ApiError:
    return ApiError(status_code=500, code="INTERNAL_ERROR", message=message, error=detail)


__all__ = ["ApiError", "internal_failure", "unauthenticated", "validation_error"]
