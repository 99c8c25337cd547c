"""Signed bearer tokens (HS256 JWT via python-jose)."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from jose import jwt
from jose.exceptions import JOSEError
from jose.utils import base64url_decode, base64url_encode

from app.adapters.auth.base import TokenExpiredError, TokenInvalidError, TokenIssuer, TokenVerifier
from app.schemas.auth import IssuedToken, TokenClaims

DEFAULT_TOKEN_TTL = timedelta(days=7)
_REQUIRED_CLAIMS = ("sub", "handle", "email", "iat", "exp")


def utc_now() -> datetime:
    return datetime.now(UTC)


def describe_ttl(ttl: timedelta) -> str:
    """Human form used in auth responses, e.g. ``"7 days"``."""
    days = ttl.days
    if days and ttl == timedelta(days=days):
        return f"{days} day" if days == 1 else f"{days} days"
    seconds = int(ttl.total_seconds())
    return f"{seconds} seconds"


class JwtTokenService(TokenIssuer, TokenVerifier):
    """Issues and verifies stateless, time-bound tokens.

    Holds only read-only configuration; safe to share across requests.
    There is no revocation list, so logout is a client-side discard.
    """

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock

    @property
    def expires_in(self) -> str:
        return describe_ttl(self._ttl)

    def issue(self, *, principal_id: str, handle: str, email: str) -> IssuedToken:
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._ttl
        payload = {
            "sub": principal_id,
            "handle": handle,
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        claims = TokenClaims(
            principal_id=principal_id,
            handle=handle,
            email=email,
            issued_at=issued_at,
            expires_at=expires_at,
        )
        return IssuedToken(token=token, claims=claims)

    def verify_token(self, token: str) -> TokenClaims:
        """Check integrity first, then staleness.

        A token with a bad signature reports invalid even when it is also
        expired. Expiry is evaluated against the injected clock rather than
        the library's own wall clock.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except (JOSEError, ValueError) as exc:
            raise TokenInvalidError() from exc

        if not _is_canonical(token):
            raise TokenInvalidError()

        claims = self._claims_from_payload(payload)
        if self._clock() >= claims.expires_at:
            raise TokenExpiredError()
        return claims

    @staticmethod
    def _claims_from_payload(payload: dict) -> TokenClaims:
        if any(name not in payload for name in _REQUIRED_CLAIMS):
            raise TokenInvalidError()
        try:
            return TokenClaims(
                principal_id=str(payload["sub"]),
                handle=str(payload["handle"]),
                email=str(payload["email"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
            )
        except (TypeError, ValueError, OverflowError) as exc:
            raise TokenInvalidError() from exc


def _is_canonical(token: str) -> bool:
    """Reject segments whose base64url form is not the canonical encoding.

    Trailing pad bits are ignored by decoders, so without this check a
    changed final character could still verify.
    """
    for segment in token.split("."):
        try:
            raw = segment.encode("ascii")
            if base64url_encode(base64url_decode(raw)) != raw:
                return False
        except ValueError:
            return False
    return True


__all__ = ["DEFAULT_TOKEN_TTL", "JwtTokenService", "describe_ttl", "utc_now"]
