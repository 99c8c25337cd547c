"""Link API schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, StrictInt


class CreateLinkRequest(BaseModel):
    title: str | None = None
    url: str | None = None
    order: StrictInt | None = None


class UpdateLinkRequest(BaseModel):
    title: str | None = None
    url: str | None = None
    order: StrictInt | None = None


class Link(BaseModel):
    id: str
    title: str
    url: str
    order: int
    created_at: datetime
    updated_at: datetime


class LinkResponse(BaseModel):
    success: Literal[True] = True
    message: str
    data: Link


class LinkListResponse(BaseModel):
    success: Literal[True] = True
    message: str
    data: list[Link]


class PublicLink(BaseModel):
    id: str
    title: str
    url: str
    order: int


class PublicProfile(BaseModel):
    handle: str
    links: list[PublicLink]
    is_owner: bool = False


class PublicProfileResponse(BaseModel):
    success: Literal[True] = True
    data: PublicProfile
