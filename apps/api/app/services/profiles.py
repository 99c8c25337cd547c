"""Public profile service."""

from app.domain.credential_policy import normalize_identity
from app.errors import ApiError
from app.repositories.memory import InMemoryStore
from app.schemas.auth import Authenticated, RequestIdentity
from app.schemas.link import PublicLink, PublicProfile


class ProfileService:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def get_profile(self, *, handle: str, identity: RequestIdentity) -> PublicProfile:
        """Anyone may view a profile; the owner additionally sees ``is_owner``."""
        record = await self._store.find_principal_by_handle(normalize_identity(handle))
        if record is None:
            raise ApiError(status_code=404, code="RESOURCE_NOT_FOUND", message="Profile not found")

        links = await self._store.list_links_for_owner(record.id)
        is_owner = isinstance(identity, Authenticated) and identity.principal.id == record.id
        return PublicProfile(
            handle=record.handle,
            links=[PublicLink(id=link.id, title=link.title, url=link.url, order=link.order) for link in links],
            is_owner=is_owner,
        )
