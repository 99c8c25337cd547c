"""Public profile routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.routes.dependencies import get_profile_service, get_request_identity
from app.schemas.auth import RequestIdentity
from app.schemas.error import ErrorResponse
from app.schemas.link import PublicProfileResponse
from app.services.profiles import ProfileService

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.get("/{handle}", response_model=PublicProfileResponse, responses={404: {"model": ErrorResponse}})
async def get_profile(
    handle: str,
    identity: Annotated[RequestIdentity, Depends(get_request_identity)],
    service: Annotated[ProfileService, Depends(get_profile_service)],
) -> PublicProfileResponse:
    profile = await service.get_profile(handle=handle, identity=identity)
    return PublicProfileResponse(data=profile)
