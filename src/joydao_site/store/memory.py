# ABOUTME: In-memory store used for tests and when no database is configured.
# ABOUTME: State lives for the process lifetime only and is not shared between processes.

from datetime import UTC, datetime

import structlog

from joydao_site.errors import Conflict
from joydao_site.models import (
    BlogPostCreate,
    BlogPostRecord,
    BlogPostUpdate,
    BlogTagCreate,
    BlogTagRecord,
    ContactMessageCreate,
    ContactMessageRecord,
    Role,
    SubscriptionRecord,
    UserRecord,
    UserUpsert,
)

log = structlog.get_logger()


class InMemoryStore:
    """Simple in-memory store for development and tests.

    Not synchronized: safe only while calls are not interleaved at fine
    granularity, which holds for a single event loop.
    """

    kind = "memory"

    def __init__(self) -> None:
        self.users: dict[str, UserRecord] = {}
        self.contact_messages: list[ContactMessageRecord] = []
        self.subscriptions: dict[str, SubscriptionRecord] = {}
        self.posts: dict[int, BlogPostRecord] = {}
        self.tags: dict[int, BlogTagRecord] = {}
        self.post_tags: set[tuple[int, int]] = set()
        self._ids = {"user": 1, "contact": 1, "newsletter": 1, "post": 1, "tag": 1}

    def _next_id(self, key: str) -> int:
        value = self._ids[key]
        self._ids[key] = value + 1
        return value

    async def initialize(self) -> None:
        log.info("memory_store_ready")

    async def close(self) -> None:
        return None

    async def ping(self) -> None:
        return None

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.users.clear()
        self.contact_messages.clear()
        self.subscriptions.clear()
        self.posts.clear()
        self.tags.clear()
        self.post_tags.clear()
        self._ids = {key: 1 for key in self._ids}

    # Users

    async def upsert_user(self, data: UserUpsert) -> UserRecord:
        now = datetime.now(UTC)
        existing = self.users.get(data.open_id)
        if existing:
            updated = existing.model_copy(
                update={
                    "name": data.name if data.name is not None else existing.name,
                    "email": data.email if data.email is not None else existing.email,
                    "login_method": (
                        data.login_method
                        if data.login_method is not None
                        else existing.login_method
                    ),
                    "role": data.role or existing.role,
                    "last_signed_in": data.last_signed_in or now,
                    "updated_at": now,
                }
            )
            self.users[data.open_id] = updated
            return updated.model_copy()

        record = UserRecord(
            id=self._next_id("user"),
            open_id=data.open_id,
            name=data.name,
            email=data.email,
            login_method=data.login_method,
            role=data.role or Role.USER,
            created_at=now,
            updated_at=now,
            last_signed_in=data.last_signed_in or now,
        )
        self.users[data.open_id] = record
        return record.model_copy()

    async def get_user(self, open_id: str) -> UserRecord | None:
        user = self.users.get(open_id)
        return user.model_copy() if user else None

    # Contact messages

    async def create_contact_message(self, data: ContactMessageCreate) -> ContactMessageRecord:
        record = ContactMessageRecord(
            id=self._next_id("contact"),
            name=data.name,
            email=data.email,
            message=data.message,
            created_at=datetime.now(UTC),
        )
        self.contact_messages.append(record)
        return record.model_copy()

    async def list_contact_messages(self) -> list[ContactMessageRecord]:
        return [m.model_copy() for m in self.contact_messages]

    # Newsletter

    async def subscribe(self, email: str) -> tuple[SubscriptionRecord, bool]:
        existing = self.subscriptions.get(email)
        if existing:
            was_active = existing.is_active
            existing.is_active = True
            return existing.model_copy(), was_active

        record = SubscriptionRecord(
            id=self._next_id("newsletter"),
            email=email,
            is_active=True,
            subscribed_at=datetime.now(UTC),
        )
        self.subscriptions[email] = record
        return record.model_copy(), False

    async def get_subscription(self, email: str) -> SubscriptionRecord | None:
        subscription = self.subscriptions.get(email)
        return subscription.model_copy() if subscription else None

    async def list_active_subscriptions(self) -> list[SubscriptionRecord]:
        return [s.model_copy() for s in self.subscriptions.values() if s.is_active]

    async def unsubscribe(self, email: str) -> bool:
        existing = self.subscriptions.get(email)
        if not existing:
            return False
        existing.is_active = False
        return True

    # Blog posts

    def _check_slug_unique(self, slug: str, post_id: int | None = None) -> None:
        for post in self.posts.values():
            if post.slug == slug and post.id != post_id:
                raise Conflict()

    async def create_post(self, data: BlogPostCreate) -> BlogPostRecord:
        self._check_slug_unique(data.slug)
        now = datetime.now(UTC)
        record = BlogPostRecord(
            id=self._next_id("post"),
            **data.model_dump(),
            created_at=now,
            updated_at=now,
        )
        self.posts[record.id] = record
        return record.model_copy()

    async def get_post(self, post_id: int) -> BlogPostRecord | None:
        post = self.posts.get(post_id)
        return post.model_copy() if post else None

    async def get_post_by_slug(self, slug: str) -> BlogPostRecord | None:
        for post in self.posts.values():
            if post.slug == slug:
                return post.model_copy()
        return None

    async def list_posts(self) -> list[BlogPostRecord]:
        posts = sorted(self.posts.values(), key=lambda p: (p.created_at, p.id))
        return [p.model_copy() for p in posts]

    async def list_published_posts(self) -> list[BlogPostRecord]:
        posts = sorted(
            (p for p in self.posts.values() if p.status == "published"),
            key=lambda p: (p.published_at or p.created_at, p.id),
        )
        return [p.model_copy() for p in posts]

    async def update_post(self, post_id: int, data: BlogPostUpdate) -> BlogPostRecord | None:
        post = self.posts.get(post_id)
        if not post:
            return None
        changes = data.model_dump(exclude_unset=True)
        if changes.get("slug") is not None:
            self._check_slug_unique(changes["slug"], post_id)
        changes["updated_at"] = datetime.now(UTC)
        updated = post.model_copy(update=changes)
        self.posts[post_id] = updated
        return updated.model_copy()

    async def delete_post(self, post_id: int) -> bool:
        self.post_tags = {pair for pair in self.post_tags if pair[0] != post_id}
        return self.posts.pop(post_id, None) is not None

    # Tags

    async def create_tag(self, data: BlogTagCreate) -> BlogTagRecord:
        for tag in self.tags.values():
            if tag.slug == data.slug:
                return tag.model_copy()
        record = BlogTagRecord(id=self._next_id("tag"), name=data.name, slug=data.slug)
        self.tags[record.id] = record
        return record.model_copy()

    async def get_tag(self, tag_id: int) -> BlogTagRecord | None:
        tag = self.tags.get(tag_id)
        return tag.model_copy() if tag else None

    async def list_tags(self) -> list[BlogTagRecord]:
        return [self.tags[tag_id].model_copy() for tag_id in sorted(self.tags)]

    async def delete_tag(self, tag_id: int) -> bool:
        self.post_tags = {pair for pair in self.post_tags if pair[1] != tag_id}
        return self.tags.pop(tag_id, None) is not None

    async def add_tag_to_post(self, post_id: int, tag_id: int) -> None:
        self.post_tags.add((post_id, tag_id))

    async def remove_tag_from_post(self, post_id: int, tag_id: int) -> None:
        self.post_tags.discard((post_id, tag_id))

    async def get_tags_for_post(self, post_id: int) -> list[BlogTagRecord]:
        tag_ids = sorted(tag_id for pid, tag_id in self.post_tags if pid == post_id)
        return [self.tags[tag_id].model_copy() for tag_id in tag_ids if tag_id in self.tags]
