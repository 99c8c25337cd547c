"""In-memory repositories used by the API scaffold and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from app.domain.errors import StorageError, UniqueConstraintError


@dataclass(slots=True)
class PrincipalRecord:
    id: str
    handle: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class LinkRecord:
    id: str
    owner_id: str
    title: str
    url: str
    order: int
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class InMemoryStore:
    """Deterministic async persistence layer for scaffolding and tests.

    Methods are coroutines so callers treat every storage call as a
    suspension point. ``insert_principal`` checks and writes without yielding,
    which makes its unique constraints the final guard against concurrent
    duplicate registrations.
    """

    principals: dict[str, PrincipalRecord] = field(default_factory=dict)
    principal_ids_by_handle: dict[str, str] = field(default_factory=dict)
    principal_ids_by_email: dict[str, str] = field(default_factory=dict)
    links: dict[str, LinkRecord] = field(default_factory=dict)
    principal_write_count: int = 0
    link_write_count: int = 0
    storage_failure_message: str | None = None

    def _maybe_fail(self) -> None:
        if self.storage_failure_message is not None:
            raise StorageError(self.storage_failure_message)

    # -- Principals -------------------------------------------------------

    async def find_principal_by_handle_or_email(self, handle: str, email: str) -> PrincipalRecord | None:
        """Return the first row matching either column; a handle match wins."""
        self._maybe_fail()
        principal_id = self.principal_ids_by_handle.get(handle) or self.principal_ids_by_email.get(email)
        if principal_id is None:
            return None
        return self.principals[principal_id]

    async def insert_principal(self, *, handle: str, email: str, password_hash: str) -> PrincipalRecord:
        self._maybe_fail()
        if handle in self.principal_ids_by_handle:
            raise UniqueConstraintError("handle")
        if email in self.principal_ids_by_email:
            raise UniqueConstraintError("email")

        now = datetime.now(UTC)
        record = PrincipalRecord(
            id=str(uuid4()),
            handle=handle,
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        self.principals[record.id] = record
        self.principal_ids_by_handle[handle] = record.id
        self.principal_ids_by_email[email] = record.id
        self.principal_write_count += 1
        return record

    async def find_principal_by_id(self, principal_id: str) -> PrincipalRecord | None:
        self._maybe_fail()
        return self.principals.get(principal_id)

    async def find_principal_by_email(self, email: str) -> PrincipalRecord | None:
        self._maybe_fail()
        principal_id = self.principal_ids_by_email.get(email)
        if principal_id is None:
            return None
        return self.principals[principal_id]

    async def find_principal_by_handle(self, handle: str) -> PrincipalRecord | None:
        self._maybe_fail()
        principal_id = self.principal_ids_by_handle.get(handle)
        if principal_id is None:
            return None
        return self.principals[principal_id]

    async def update_principal_password(self, principal_id: str, password_hash: str) -> PrincipalRecord | None:
        self._maybe_fail()
        record = self.principals.get(principal_id)
        if record is None:
            return None
        record.password_hash = password_hash
        record.updated_at = datetime.now(UTC)
        self.principal_write_count += 1
        return record

    # -- Links ------------------------------------------------------------

    async def create_link(self, *, owner_id: str, title: str, url: str, order: int) -> LinkRecord:
        self._maybe_fail()
        now = datetime.now(UTC)
        link = LinkRecord(
            id=str(uuid4()),
            owner_id=owner_id,
            title=title,
            url=url,
            order=order,
            created_at=now,
            updated_at=now,
        )
        self.links[link.id] = link
        self.link_write_count += 1
        return link

    async def list_links_for_owner(self, owner_id: str) -> list[LinkRecord]:
        self._maybe_fail()
        links = [record for record in self.links.values() if record.owner_id == owner_id]
        links.sort(key=lambda record: (record.order, record.created_at))
        return links

    async def get_link_for_owner(self, owner_id: str, link_id: str) -> LinkRecord | None:
        self._maybe_fail()
        link = self.links.get(link_id)
        if link is None or link.owner_id != owner_id:
            return None
        return link

    async def max_link_order_for_owner(self, owner_id: str) -> int | None:
        self._maybe_fail()
        orders = [record.order for record in self.links.values() if record.owner_id == owner_id]
        return max(orders) if orders else None

    async def update_link(
        self,
        *,
        link: LinkRecord,
        title: str | None = None,
        url: str | None = None,
        order: int | None = None,
    ) -> LinkRecord:
        self._maybe_fail()
        if title is not None:
            link.title = title
        if url is not None:
            link.url = url
        if order is not None:
            link.order = order
        link.updated_at = datetime.now(UTC)
        self.link_write_count += 1
        return link

    async def delete_link(self, *, link: LinkRecord) -> None:
        self._maybe_fail()
        self.links.pop(link.id, None)
        self.link_write_count += 1
