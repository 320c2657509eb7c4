# ABOUTME: SQLAlchemy-backed store over an async engine.
# ABOUTME: Maps duplicate keys to Conflict and connection failures to StoreUnavailable.

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from joydao_site.db.models import (
    BlogPost,
    BlogTag,
    ContactMessage,
    NewsletterSubscription,
    User,
)
from joydao_site.db.repository import (
    BlogPostRepository,
    BlogTagRepository,
    ContactMessageRepository,
    NewsletterRepository,
    UserRepository,
)
from joydao_site.db.session import (
    close_db,
    create_engine,
    create_session_factory,
    get_session,
    init_db,
    ping,
)
from joydao_site.errors import Conflict, NotFound, StoreUnavailable
from joydao_site.models import (
    BlogPostCreate,
    BlogPostRecord,
    BlogPostUpdate,
    BlogTagCreate,
    BlogTagRecord,
    ContactMessageCreate,
    ContactMessageRecord,
    PostStatus,
    Role,
    SubscriptionRecord,
    UserRecord,
    UserUpsert,
)

if TYPE_CHECKING:
    from joydao_site.config import Settings

log = structlog.get_logger()

CONNECTION_ERRORS = (OperationalError, InterfaceError, OSError)


def _utc(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo; treat naive timestamps as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _user_record(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        open_id=row.open_id,
        name=row.name,
        email=row.email,
        login_method=row.login_method,
        role=Role(row.role),
        created_at=_utc(row.created_at),
        updated_at=_utc(row.updated_at),
        last_signed_in=_utc(row.last_signed_in),
    )


def _contact_record(row: ContactMessage) -> ContactMessageRecord:
    return ContactMessageRecord(
        id=row.id,
        name=row.name,
        email=row.email,
        message=row.message,
        created_at=_utc(row.created_at),
    )


def _subscription_record(row: NewsletterSubscription) -> SubscriptionRecord:
    return SubscriptionRecord(
        id=row.id,
        email=row.email,
        is_active=row.is_active,
        subscribed_at=_utc(row.subscribed_at),
    )


def _post_record(row: BlogPost) -> BlogPostRecord:
    return BlogPostRecord(
        id=row.id,
        title=row.title,
        slug=row.slug,
        content=row.content,
        excerpt=row.excerpt,
        status=PostStatus(row.status),
        published_at=_utc(row.published_at),
        created_at=_utc(row.created_at),
        updated_at=_utc(row.updated_at),
    )


def _tag_record(row: BlogTag) -> BlogTagRecord:
    return BlogTagRecord(id=row.id, name=row.name, slug=row.slug)


class SqlStore:
    """Store backed by any async SQLAlchemy URL (PostgreSQL in production, SQLite in tests)."""

    kind = "sql"

    def __init__(self, settings: "Settings"):
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required for SqlStore")
        self.engine = create_engine(settings)
        self.session_factory = create_session_factory(self.engine)

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncGenerator[AsyncSession]:
        """Open a committing session, translating driver errors for ``operation``."""
        try:
            async with get_session(self.session_factory) as session:
                yield session
        except IntegrityError as e:
            log.info("store_conflict", operation=operation)
            raise Conflict() from e
        except CONNECTION_ERRORS as e:
            log.warning("store_unavailable", operation=operation, error=type(e).__name__)
            raise StoreUnavailable() from e

    async def initialize(self) -> None:
        """Verify connectivity and create missing tables."""
        try:
            await init_db(self.engine)
        except CONNECTION_ERRORS as e:
            log.warning("store_unavailable", operation="initialize", error=type(e).__name__)
            raise StoreUnavailable() from e
        log.info("sql_store_ready", dialect=self.engine.dialect.name)

    async def close(self) -> None:
        await close_db(self.engine)

    async def ping(self) -> None:
        try:
            await ping(self.engine)
        except CONNECTION_ERRORS as e:
            log.warning("store_unavailable", operation="ping", error=type(e).__name__)
            raise StoreUnavailable() from e

    # Users

    async def upsert_user(self, data: UserUpsert) -> UserRecord:
        now = datetime.now(UTC)
        async with self._session("upsert_user") as session:
            repo = UserRepository(session)
            user = await repo.get_by_open_id(data.open_id)
            if user is None:
                user = User(
                    open_id=data.open_id,
                    role=(data.role or Role.USER).value,
                    created_at=now,
                    updated_at=now,
                )
            if data.name is not None:
                user.name = data.name
            if data.email is not None:
                user.email = data.email
            if data.login_method is not None:
                user.login_method = data.login_method
            if data.role is not None:
                user.role = data.role.value
            user.last_signed_in = data.last_signed_in or now
            user = await repo.save(user)
            return _user_record(user)

    async def get_user(self, open_id: str) -> UserRecord | None:
        async with self._session("get_user") as session:
            user = await UserRepository(session).get_by_open_id(open_id)
            return _user_record(user) if user else None

    # Contact messages

    async def create_contact_message(self, data: ContactMessageCreate) -> ContactMessageRecord:
        async with self._session("create_contact_message") as session:
            row = await ContactMessageRepository(session).save(
                ContactMessage(
                    name=data.name,
                    email=data.email,
                    message=data.message,
                    created_at=datetime.now(UTC),
                )
            )
            return _contact_record(row)

    async def list_contact_messages(self) -> list[ContactMessageRecord]:
        async with self._session("list_contact_messages") as session:
            rows = await ContactMessageRepository(session).list_all()
            return [_contact_record(row) for row in rows]

    # Newsletter

    async def _subscribe_once(self, email: str) -> tuple[SubscriptionRecord, bool]:
        async with self._session("subscribe") as session:
            repo = NewsletterRepository(session)
            existing = await repo.get_by_email(email)
            if existing:
                was_active = existing.is_active
                existing.is_active = True
                await repo.save(existing)
                return _subscription_record(existing), was_active
            row = await repo.save(
                NewsletterSubscription(
                    email=email, is_active=True, subscribed_at=datetime.now(UTC)
                )
            )
            return _subscription_record(row), False

    async def subscribe(self, email: str) -> tuple[SubscriptionRecord, bool]:
        try:
            return await self._subscribe_once(email)
        except Conflict:
            # A concurrent insert won the race; the retry takes the reactivate path.
            return await self._subscribe_once(email)

    async def get_subscription(self, email: str) -> SubscriptionRecord | None:
        async with self._session("get_subscription") as session:
            row = await NewsletterRepository(session).get_by_email(email)
            return _subscription_record(row) if row else None

    async def list_active_subscriptions(self) -> list[SubscriptionRecord]:
        async with self._session("list_active_subscriptions") as session:
            rows = await NewsletterRepository(session).list_active()
            return [_subscription_record(row) for row in rows]

    async def unsubscribe(self, email: str) -> bool:
        async with self._session("unsubscribe") as session:
            repo = NewsletterRepository(session)
            existing = await repo.get_by_email(email)
            if not existing:
                return False
            existing.is_active = False
            await repo.save(existing)
            return True

    # Blog posts

    async def create_post(self, data: BlogPostCreate) -> BlogPostRecord:
        now = datetime.now(UTC)
        async with self._session("create_post") as session:
            row = await BlogPostRepository(session).save(
                BlogPost(
                    title=data.title,
                    slug=data.slug,
                    content=data.content,
                    excerpt=data.excerpt,
                    status=data.status.value,
                    published_at=data.published_at,
                    created_at=now,
                    updated_at=now,
                )
            )
            return _post_record(row)

    async def get_post(self, post_id: int) -> BlogPostRecord | None:
        async with self._session("get_post") as session:
            row = await BlogPostRepository(session).get_by_id(post_id)
            return _post_record(row) if row else None

    async def get_post_by_slug(self, slug: str) -> BlogPostRecord | None:
        async with self._session("get_post_by_slug") as session:
            row = await BlogPostRepository(session).get_by_slug(slug)
            return _post_record(row) if row else None

    async def list_posts(self) -> list[BlogPostRecord]:
        async with self._session("list_posts") as session:
            rows = await BlogPostRepository(session).list_all()
            return [_post_record(row) for row in rows]

    async def list_published_posts(self) -> list[BlogPostRecord]:
        async with self._session("list_published_posts") as session:
            rows = await BlogPostRepository(session).list_published()
            return [_post_record(row) for row in rows]

    async def update_post(self, post_id: int, data: BlogPostUpdate) -> BlogPostRecord | None:
        async with self._session("update_post") as session:
            repo = BlogPostRepository(session)
            row = await repo.get_by_id(post_id)
            if row is None:
                return None
            for field, value in data.model_dump(exclude_unset=True).items():
                if isinstance(value, PostStatus):
                    value = value.value
                setattr(row, field, value)
            row.updated_at = datetime.now(UTC)
            row = await repo.save(row)
            return _post_record(row)

    async def delete_post(self, post_id: int) -> bool:
        async with self._session("delete_post") as session:
            return await BlogPostRepository(session).delete_by_id(post_id)

    # Tags

    async def _create_tag_once(self, data: BlogTagCreate) -> BlogTagRecord:
        async with self._session("create_tag") as session:
            repo = BlogTagRepository(session)
            existing = await repo.get_by_slug(data.slug)
            if existing:
                return _tag_record(existing)
            row = await repo.save(BlogTag(name=data.name, slug=data.slug))
            return _tag_record(row)

    async def create_tag(self, data: BlogTagCreate) -> BlogTagRecord:
        try:
            return await self._create_tag_once(data)
        except Conflict:
            return await self._create_tag_once(data)

    async def get_tag(self, tag_id: int) -> BlogTagRecord | None:
        async with self._session("get_tag") as session:
            row = await BlogTagRepository(session).get_by_id(tag_id)
            return _tag_record(row) if row else None

    async def list_tags(self) -> list[BlogTagRecord]:
        async with self._session("list_tags") as session:
            rows = await BlogTagRepository(session).list_all()
            return [_tag_record(row) for row in rows]

    async def delete_tag(self, tag_id: int) -> bool:
        async with self._session("delete_tag") as session:
            return await BlogTagRepository(session).delete_by_id(tag_id)

    async def add_tag_to_post(self, post_id: int, tag_id: int) -> None:
        """Attach a tag to a post.

        Raises:
            NotFound: The post or tag disappeared before the insert.
            Conflict: Any other integrity failure.
        """
        try:
            async with self._session("add_tag_to_post") as session:
                await BlogTagRepository(session).add_to_post(post_id, tag_id)
        except Conflict:
            async with self._session("add_tag_to_post") as session:
                tags = BlogTagRepository(session)
                if await tags.get_association(post_id, tag_id):
                    # Pair inserted concurrently.
                    return None
                if await BlogPostRepository(session).get_by_id(post_id) is None:
                    raise NotFound("Blog post not found") from None
                if await tags.get_by_id(tag_id) is None:
                    raise NotFound("Blog tag not found") from None
            raise

    async def remove_tag_from_post(self, post_id: int, tag_id: int) -> None:
        async with self._session("remove_tag_from_post") as session:
            await BlogTagRepository(session).remove_from_post(post_id, tag_id)

    async def get_tags_for_post(self, post_id: int) -> list[BlogTagRecord]:
        async with self._session("get_tags_for_post") as session:
            rows = await BlogTagRepository(session).list_for_post(post_id)
            return [_tag_record(row) for row in rows]
