"""Authentication routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.routes.dependencies import get_account_service, get_authenticated_principal
from app.schemas.auth import (
    AuthPrincipal,
    AuthSessionResponse,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileData,
    ProfileResponse,
    SignupRequest,
)
from app.schemas.error import ErrorResponse, ValidationErrorResponse
from app.services.accounts import AccountService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/signup",
    response_model=AuthSessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ValidationErrorResponse}},
)
async def signup(
    payload: SignupRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AuthSessionResponse:
    session = await service.signup(payload)
    return AuthSessionResponse(message="User registered successfully", data=session)


@router.post(
    "/login",
    response_model=AuthSessionResponse,
    responses={400: {"model": ValidationErrorResponse}, 401: {"model": ErrorResponse}},
)
async def login(
    payload: LoginRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AuthSessionResponse:
    session = await service.login(payload)
    return AuthSessionResponse(message="Login successful", data=session)


@router.post("/logout", response_model=MessageResponse)
async def logout() -> MessageResponse:
    # Tokens are stateless; the client discards its copy.
    return MessageResponse(message="Logout successful. Please remove the token from client storage.")


@router.get("/me", response_model=ProfileResponse, responses={401: {"model": ErrorResponse}})
async def get_me(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
) -> ProfileResponse:
    return ProfileResponse(data=ProfileData(user=principal))


@router.put(
    "/password",
    response_model=MessageResponse,
    responses={400: {"model": ValidationErrorResponse}, 401: {"model": ErrorResponse}},
)
async def change_password(
    payload: ChangePasswordRequest,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponse:
    await service.change_password(principal_id=principal.id, payload=payload)
    return MessageResponse(message="Password updated successfully")
