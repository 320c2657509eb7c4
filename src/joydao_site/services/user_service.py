# ABOUTME: Service for signed-in user records.
# ABOUTME: Upserts a user on sign-in and resolves the owner to the admin role.

from datetime import UTC, datetime

import structlog

from joydao_site.identity import Authenticated, is_owner
from joydao_site.models import Role, UserRecord, UserUpsert
from joydao_site.store.base import DataStore

log = structlog.get_logger()


class UserService:
    """Service for user rows keyed by identity token."""

    def __init__(self, store: DataStore, owner_open_id: str) -> None:
        self.store = store
        self.owner_open_id = owner_open_id

    async def upsert(self, data: UserUpsert) -> UserRecord:
        """Insert or merge a user row.

        An explicit role wins; otherwise the owner always resolves to admin and
        everyone else keeps their stored role.
        """
        if data.role is None and is_owner(Authenticated(open_id=data.open_id), self.owner_open_id):
            data = data.model_copy(update={"role": Role.ADMIN})
        return await self.store.upsert_user(data)

    async def sign_in(self, caller: Authenticated) -> UserRecord:
        """Record a visit from ``caller`` and return the stored user."""
        user = await self.upsert(
            UserUpsert(open_id=caller.open_id, last_signed_in=datetime.now(UTC))
        )
        log.debug("user_signed_in", user_id=user.id)
        return user
