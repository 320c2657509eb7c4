# ABOUTME: Store interface shared by the SQL and in-memory implementations.
# ABOUTME: Every method returns explicit record models, never ORM rows.

from typing import Protocol

from joydao_site.models import (
    BlogPostCreate,
    BlogPostRecord,
    BlogPostUpdate,
    BlogTagCreate,
    BlogTagRecord,
    ContactMessageCreate,
    ContactMessageRecord,
    SubscriptionRecord,
    UserRecord,
    UserUpsert,
)


class DataStore(Protocol):
    """Interface for record access.

    Reads return ``None`` or an empty list when nothing matches. Updates and
    deletes of missing rows are no-ops. Implementations raise ``Conflict`` on
    uniqueness violations and ``StoreUnavailable`` when the backing database
    cannot be reached.
    """

    kind: str

    async def initialize(self) -> None: ...

    async def close(self) -> None: ...

    async def ping(self) -> None: ...

    # Users
    async def upsert_user(self, data: UserUpsert) -> UserRecord: ...

    async def get_user(self, open_id: str) -> UserRecord | None: ...

    # Contact messages
    async def create_contact_message(self, data: ContactMessageCreate) -> ContactMessageRecord: ...

    async def list_contact_messages(self) -> list[ContactMessageRecord]: ...

    # Newsletter
    async def subscribe(self, email: str) -> tuple[SubscriptionRecord, bool]:
        """Insert or reactivate ``email``. Returns the row and whether it was already active."""
        ...

    async def get_subscription(self, email: str) -> SubscriptionRecord | None: ...

    async def list_active_subscriptions(self) -> list[SubscriptionRecord]: ...

    async def unsubscribe(self, email: str) -> bool: ...

    # Blog posts
    async def create_post(self, data: BlogPostCreate) -> BlogPostRecord: ...

    async def get_post(self, post_id: int) -> BlogPostRecord | None: ...

    async def get_post_by_slug(self, slug: str) -> BlogPostRecord | None: ...

    async def list_posts(self) -> list[BlogPostRecord]: ...

    async def list_published_posts(self) -> list[BlogPostRecord]: ...

    async def update_post(self, post_id: int, data: BlogPostUpdate) -> BlogPostRecord | None: ...

    async def delete_post(self, post_id: int) -> bool: ...

    # Tags
    async def create_tag(self, data: BlogTagCreate) -> BlogTagRecord: ...

    async def get_tag(self, tag_id: int) -> BlogTagRecord | None: ...

    async def list_tags(self) -> list[BlogTagRecord]: ...

    async def delete_tag(self, tag_id: int) -> bool: ...

    async def add_tag_to_post(self, post_id: int, tag_id: int) -> None: ...

    async def remove_tag_from_post(self, post_id: int, tag_id: int) -> None: ...

    async def get_tags_for_post(self, post_id: int) -> list[BlogTagRecord]: ...
