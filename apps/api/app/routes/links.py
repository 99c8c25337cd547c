"""Link routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from app.routes.dependencies import get_authenticated_principal, get_link_service
from app.schemas.auth import AuthPrincipal, MessageResponse
from app.schemas.error import ErrorResponse, ValidationErrorResponse
from app.schemas.link import CreateLinkRequest, LinkListResponse, LinkResponse, UpdateLinkRequest
from app.services.links import LinkService

router = APIRouter(prefix="/links", tags=["Links"])


@router.get("", response_model=LinkListResponse, responses={401: {"model": ErrorResponse}})
async def list_links(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[LinkService, Depends(get_link_service)],
) -> LinkListResponse:
    links = await service.list_links(owner_id=principal.id)
    return LinkListResponse(message=f"Found {len(links)} links", data=links)


@router.post(
    "",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ValidationErrorResponse}, 401: {"model": ErrorResponse}},
)
async def create_link(
    payload: CreateLinkRequest,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[LinkService, Depends(get_link_service)],
) -> LinkResponse:
    link = await service.create_link(owner_id=principal.id, payload=payload)
    return LinkResponse(message="Link created successfully", data=link)


@router.put(
    "/{linkId}",
    response_model=LinkResponse,
    responses={
        400: {"model": ValidationErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def update_link(
    link_id: Annotated[str, Path(alias="linkId")],
    payload: UpdateLinkRequest,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[LinkService, Depends(get_link_service)],
) -> LinkResponse:
    link = await service.update_link(owner_id=principal.id, link_id=link_id, payload=payload)
    return LinkResponse(message="Link updated successfully", data=link)


@router.delete(
    "/{linkId}",
    response_model=MessageResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_link(
    link_id: Annotated[str, Path(alias="linkId")],
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[LinkService, Depends(get_link_service)],
) -> MessageResponse:
    await service.delete_link(owner_id=principal.id, link_id=link_id)
    return MessageResponse(message="Link deleted successfully")
