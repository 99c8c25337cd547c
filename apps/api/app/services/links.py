"""Link service layer.

Every read and write is scoped to the requesting owner's rows.
"""

from urllib.parse import urlsplit

from app.errors import ApiError, validation_error
from app.repositories.memory import InMemoryStore, LinkRecord
from app.schemas.link import CreateLinkRequest, Link, UpdateLinkRequest

TITLE_MAX_LENGTH = 100
URL_MAX_LENGTH = 500


def _link_not_found() -> ApiError:
    return ApiError(status_code=404, code="RESOURCE_NOT_FOUND", message="Link not found or access denied")


def _clean_title(title: str) -> str:
    cleaned = title.strip()
    if not cleaned or len(cleaned) > TITLE_MAX_LENGTH:
        message = f"Title must be between 1 and {TITLE_MAX_LENGTH} characters"
        raise validation_error(message, {"title": message})
    return cleaned


def _clean_url(url: str) -> str:
    cleaned = url.strip()
    if not cleaned or len(cleaned) > URL_MAX_LENGTH:
        message = f"URL must be between 1 and {URL_MAX_LENGTH} characters"
        raise validation_error(message, {"url": message})
    parts = urlsplit(cleaned)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        message = "URL must be a valid http or https address"
        raise validation_error(message, {"url": message})
    return cleaned


def _check_order(order: int) -> int:
    if order < 0:
        message = "Order must be a non-negative number"
        raise validation_error(message, {"order": message})
    return order


def to_link(record: LinkRecord) -> Link:
    return Link(
        id=record.id,
        title=record.title,
        url=record.url,
        order=record.order,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class LinkService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def list_links(self, *, owner_id: str) -> list[Link]:
        return [to_link(record) for record in await self._store.list_links_for_owner(owner_id)]

    async def create_link(self, *, owner_id: str, payload: CreateLinkRequest) -> Link:
        if not payload.title or not payload.url:
            raise validation_error(
                "Title and URL are required fields",
                {
                    name: f"{label} is required"
                    for name, label, value in (("title", "Title", payload.title), ("url", "URL", payload.url))
                    if not value
                },
            )
        title = _clean_title(payload.title)
        url = _clean_url(payload.url)

        if payload.order is None:
            highest = await self._store.max_link_order_for_owner(owner_id)
            order = 0 if highest is None else highest + 1
        else:
            order = _check_order(payload.order)

        record = await self._store.create_link(owner_id=owner_id, title=title, url=url, order=order)
        return to_link(record)

    async def update_link(self, *, owner_id: str, link_id: str, payload: UpdateLinkRequest) -> Link:
        record = await self._store.get_link_for_owner(owner_id=owner_id, link_id=link_id)
        if record is None:
            raise _link_not_found()

        fields = payload.model_fields_set
        title = _clean_title(payload.title or "") if "title" in fields else None
        url = _clean_url(payload.url or "") if "url" in fields else None
        order = None
        if "order" in fields:
            if payload.order is None:
                message = "Order must be a non-negative number"
                raise validation_error(message, {"order": message})
            order = _check_order(payload.order)

        updated = await self._store.update_link(link=record, title=title, url=url, order=order)
        return to_link(updated)

    async def delete_link(self, *, owner_id: str, link_id: str) -> None:
        record = await self._store.get_link_for_owner(owner_id=owner_id, link_id=link_id)
        if record is None:
            raise _link_not_found()
        await self._store.delete_link(link=record)
