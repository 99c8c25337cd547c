"""Authentication schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AuthPrincipal(BaseModel):
    """Public projection of a user account.

    Has no password field, so no serialization path can expose the hash.
    """

    id: str = Field(min_length=1)
    handle: str
    email: str
    created_at: datetime
    updated_at: datetime


class TokenClaims(BaseModel):
    """Identity facts carried by a verified bearer token."""

    model_config = ConfigDict(frozen=True)

    principal_id: str
    handle: str
    email: str
    issued_at: datetime
    expires_at: datetime


class IssuedToken(BaseModel):
    token: str
    claims: TokenClaims


class Authenticated(BaseModel):
    kind: Literal["authenticated"] = "authenticated"
    principal: AuthPrincipal


class Unauthenticated(BaseModel):
    kind: Literal["unauthenticated"] = "unauthenticated"


RequestIdentity = Authenticated | Unauthenticated


# Request fields are loosely typed so the orchestration layer can report
# missing values with its own field-specific messages.
class SignupRequest(BaseModel):
    handle: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class ChangePasswordRequest(BaseModel):
    current_password: str | None = None
    new_password: str | None = None


class AuthSession(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user: AuthPrincipal
    token: str
    expires_in: str = Field(alias="expiresIn")


class AuthSessionResponse(BaseModel):
    success: Literal[True] = True
    message: str
    data: AuthSession


class ProfileData(BaseModel):
    user: AuthPrincipal


class ProfileResponse(BaseModel):
    success: Literal[True] = True
    data: ProfileData


class MessageResponse(BaseModel):
    success: Literal[True] = True
    message: str
