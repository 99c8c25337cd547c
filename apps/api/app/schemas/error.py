"""API error response schemas."""

from typing import Literal

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Failure envelope shared by every endpoint.

    ``errors`` is a field-keyed map present only for input validation failures.
    ``error`` carries internal detail and is only populated in development.
    """

    success: Literal[False] = False
    message: str
    errors: dict[str, str] | None = None
    error: str | None = None


class ValidationErrorResponse(ErrorResponse):
    errors: dict[str, str]
