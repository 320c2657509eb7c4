# ABOUTME: Tests for the in-memory and SQL store implementations.
# ABOUTME: Runs the same behaviour checks against both, using SQLite for the SQL store.

from collections.abc import AsyncIterator
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError

from joydao_site.config import Settings
from joydao_site.db.repository import BlogTagRepository
from joydao_site.errors import Conflict, NotFound, StoreUnavailable
from joydao_site.models import (
    BlogPostCreate,
    BlogPostUpdate,
    BlogTagCreate,
    ContactMessageCreate,
    PostStatus,
    Role,
    UserUpsert,
)
from joydao_site.store import InMemoryStore, SqlStore, create_store, open_store
from joydao_site.store.base import DataStore


def _post(slug: str, status: PostStatus = PostStatus.DRAFT, **overrides) -> BlogPostCreate:
    fields = {
        "title": slug.replace("-", " ").title(),
        "slug": slug,
        "content": f"Body of {slug}",
        "status": status,
    }
    if status == PostStatus.PUBLISHED:
        fields["published_at"] = datetime.now(UTC)
    fields.update(overrides)
    return BlogPostCreate(**fields)


@pytest.fixture(params=["memory", "sql"])
async def store(request: pytest.FixtureRequest, tmp_path: Path) -> AsyncIterator[DataStore]:
    """Yield an initialized store of each kind."""
    if request.param == "memory":
        instance: DataStore = InMemoryStore()
    else:
        instance = SqlStore(
            Settings(
                _env_file=None,
                environment="development",
                database_url=f"sqlite+aiosqlite:///{tmp_path / 'site.db'}",
            )
        )
    await instance.initialize()
    yield instance
    await instance.close()


class TestUsers:
    """Tests for user upsert."""

    async def test_insert_then_merge(self, store: DataStore) -> None:
        """A second upsert keeps fields it does not set."""
        first = await store.upsert_user(
            UserUpsert(open_id="u1", name="Ada", email="ada@example.com")
        )
        second = await store.upsert_user(UserUpsert(open_id="u1", login_method="oauth"))

        assert second.id == first.id
        assert second.name == "Ada"
        assert second.email == "ada@example.com"
        assert second.login_method == "oauth"
        assert second.role == Role.USER

    async def test_role_set_explicitly(self, store: DataStore) -> None:
        user = await store.upsert_user(UserUpsert(open_id="boss", role=Role.ADMIN))
        assert user.role == Role.ADMIN
        assert (await store.get_user("boss")).role == Role.ADMIN

    async def test_get_unknown_user(self, store: DataStore) -> None:
        assert await store.get_user("nobody") is None


class TestContactMessages:
    """Tests for contact message storage."""

    async def test_every_submission_is_stored(self, store: DataStore) -> None:
        data = ContactMessageCreate(name="A", email="a@example.com", message="hi")
        await store.create_contact_message(data)
        await store.create_contact_message(data)

        messages = await store.list_contact_messages()
        assert len(messages) == 2
        assert messages[0].id < messages[1].id
        assert messages[0].created_at.tzinfo is not None


class TestNewsletter:
    """Tests for subscription storage."""

    async def test_subscribe_twice_keeps_one_row(self, store: DataStore) -> None:
        first, first_active = await store.subscribe("fan@example.com")
        second, second_active = await store.subscribe("fan@example.com")

        assert first_active is False
        assert second_active is True
        assert second.id == first.id
        assert len(await store.list_active_subscriptions()) == 1

    async def test_unsubscribe_is_soft(self, store: DataStore) -> None:
        await store.subscribe("fan@example.com")

        assert await store.unsubscribe("fan@example.com") is True

        row = await store.get_subscription("fan@example.com")
        assert row is not None
        assert row.is_active is False
        assert await store.list_active_subscriptions() == []

    async def test_resubscribe_reactivates(self, store: DataStore) -> None:
        original, _ = await store.subscribe("fan@example.com")
        await store.unsubscribe("fan@example.com")

        row, already_active = await store.subscribe("fan@example.com")

        assert already_active is False
        assert row.id == original.id
        assert row.is_active is True

    async def test_unsubscribe_unknown(self, store: DataStore) -> None:
        assert await store.unsubscribe("ghost@example.com") is False


class TestBlogPosts:
    """Tests for post storage."""

    async def test_create_and_fetch_by_slug(self, store: DataStore) -> None:
        created = await store.create_post(_post("hello-world", excerpt="Short"))

        fetched = await store.get_post_by_slug("hello-world")

        assert fetched is not None
        assert fetched.id == created.id
        assert fetched.title == "Hello World"
        assert fetched.excerpt == "Short"
        assert fetched.status == PostStatus.DRAFT
        assert fetched.published_at is None

    async def test_duplicate_slug_conflicts(self, store: DataStore) -> None:
        """The unique slug constraint holds at the store level."""
        await store.create_post(_post("taken"))
        with pytest.raises(Conflict):
            await store.create_post(_post("taken"))
        assert len(await store.list_posts()) == 1

    async def test_update_to_taken_slug_conflicts(self, store: DataStore) -> None:
        await store.create_post(_post("first"))
        second = await store.create_post(_post("second"))

        with pytest.raises(Conflict):
            await store.update_post(second.id, BlogPostUpdate(slug="first"))

        assert (await store.get_post(second.id)).slug == "second"

    async def test_update_keeping_own_slug(self, store: DataStore) -> None:
        post = await store.create_post(_post("mine"))

        updated = await store.update_post(post.id, BlogPostUpdate(slug="mine", title="Renamed"))

        assert updated.slug == "mine"
        assert updated.title == "Renamed"

    async def test_list_posts_includes_drafts(self, store: DataStore) -> None:
        await store.create_post(_post("one"))
        await store.create_post(_post("two", PostStatus.PUBLISHED))

        assert [p.slug for p in await store.list_posts()] == ["one", "two"]
        assert [p.slug for p in await store.list_published_posts()] == ["two"]

    async def test_published_ordered_by_publication_time(self, store: DataStore) -> None:
        await store.create_post(
            _post("later", PostStatus.PUBLISHED, published_at=datetime(2026, 5, 1, tzinfo=UTC))
        )
        await store.create_post(
            _post("earlier", PostStatus.PUBLISHED, published_at=datetime(2026, 1, 1, tzinfo=UTC))
        )

        assert [p.slug for p in await store.list_published_posts()] == ["earlier", "later"]

    async def test_update_applies_only_set_fields(self, store: DataStore) -> None:
        post = await store.create_post(_post("edit-me", excerpt="keep"))

        updated = await store.update_post(post.id, BlogPostUpdate(title="Edited"))

        assert updated is not None
        assert updated.title == "Edited"
        assert updated.excerpt == "keep"
        assert updated.slug == "edit-me"

    async def test_update_missing_returns_none(self, store: DataStore) -> None:
        assert await store.update_post(999, BlogPostUpdate(title="x")) is None

    async def test_delete_removes_post_and_associations(self, store: DataStore) -> None:
        post = await store.create_post(_post("doomed", PostStatus.PUBLISHED))
        tag = await store.create_tag(BlogTagCreate(name="Music", slug="music"))
        await store.add_tag_to_post(post.id, tag.id)

        assert await store.delete_post(post.id) is True

        assert await store.get_post(post.id) is None
        assert await store.list_posts() == []
        assert await store.list_published_posts() == []
        assert await store.get_tags_for_post(post.id) == []
        assert await store.get_tag(tag.id) is not None

    async def test_delete_missing_returns_false(self, store: DataStore) -> None:
        assert await store.delete_post(999) is False


class TestTags:
    """Tests for tags and post/tag associations."""

    async def test_create_tag_is_idempotent_on_slug(self, store: DataStore) -> None:
        first = await store.create_tag(BlogTagCreate(name="Music", slug="music"))
        second = await store.create_tag(BlogTagCreate(name="Other Name", slug="music"))

        assert second.id == first.id
        assert second.name == "Music"
        assert len(await store.list_tags()) == 1

    async def test_association_round_trip(self, store: DataStore) -> None:
        post = await store.create_post(_post("tagged"))
        music = await store.create_tag(BlogTagCreate(name="Music", slug="music"))
        code = await store.create_tag(BlogTagCreate(name="Code", slug="code"))

        await store.add_tag_to_post(post.id, music.id)
        await store.add_tag_to_post(post.id, code.id)
        await store.add_tag_to_post(post.id, music.id)

        assert [t.slug for t in await store.get_tags_for_post(post.id)] == ["music", "code"]

        await store.remove_tag_from_post(post.id, music.id)

        assert [t.slug for t in await store.get_tags_for_post(post.id)] == ["code"]

    async def test_delete_tag_cascades(self, store: DataStore) -> None:
        post = await store.create_post(_post("tagged"))
        tag = await store.create_tag(BlogTagCreate(name="Music", slug="music"))
        await store.add_tag_to_post(post.id, tag.id)

        assert await store.delete_tag(tag.id) is True

        assert await store.get_tags_for_post(post.id) == []
        assert await store.list_tags() == []


class TestSqlStoreTagAttach:
    """Tests for integrity failures while attaching a tag in the SQL store."""

    @pytest.fixture
    async def sql_store(self, tmp_path: Path) -> AsyncIterator[SqlStore]:
        instance = SqlStore(
            Settings(
                _env_file=None,
                environment="development",
                database_url=f"sqlite+aiosqlite:///{tmp_path / 'site.db'}",
            )
        )
        await instance.initialize()
        yield instance
        await instance.close()

    @staticmethod
    def _failing_insert():
        return patch.object(
            BlogTagRepository,
            "add_to_post",
            side_effect=IntegrityError("INSERT INTO blog_post_tags", {}, Exception("violation")),
        )

    async def test_pair_inserted_concurrently_is_accepted(self, sql_store: SqlStore) -> None:
        post = await sql_store.create_post(_post("tagged"))
        tag = await sql_store.create_tag(BlogTagCreate(name="Music", slug="music"))
        await sql_store.add_tag_to_post(post.id, tag.id)

        with self._failing_insert():
            await sql_store.add_tag_to_post(post.id, tag.id)

        assert [t.id for t in await sql_store.get_tags_for_post(post.id)] == [tag.id]

    async def test_post_deleted_before_insert_raises_not_found(self, sql_store: SqlStore) -> None:
        """A foreign-key failure is not reported as success."""
        tag = await sql_store.create_tag(BlogTagCreate(name="Music", slug="music"))

        with self._failing_insert(), pytest.raises(NotFound, match="Blog post not found"):
            await sql_store.add_tag_to_post(404, tag.id)

    async def test_tag_deleted_before_insert_raises_not_found(self, sql_store: SqlStore) -> None:
        post = await sql_store.create_post(_post("tagged"))

        with self._failing_insert(), pytest.raises(NotFound, match="Blog tag not found"):
            await sql_store.add_tag_to_post(post.id, 404)

    async def test_other_integrity_failure_is_conflict(self, sql_store: SqlStore) -> None:
        post = await sql_store.create_post(_post("tagged"))
        tag = await sql_store.create_tag(BlogTagCreate(name="Music", slug="music"))

        with self._failing_insert(), pytest.raises(Conflict):
            await sql_store.add_tag_to_post(post.id, tag.id)

        assert await sql_store.get_tags_for_post(post.id) == []


class TestInMemoryStore:
    """Tests specific to the in-memory store."""

    async def test_reset_clears_everything(self) -> None:
        store = InMemoryStore()
        await store.subscribe("fan@example.com")
        await store.create_post(_post("gone"))

        store.reset()

        assert await store.list_active_subscriptions() == []
        assert await store.list_posts() == []
        post = await store.create_post(_post("fresh"))
        assert post.id == 1

    async def test_returned_records_are_copies(self) -> None:
        """Mutating a returned record does not change stored state."""
        store = InMemoryStore()
        post = await store.create_post(_post("original"))
        post.title = "Mutated"

        assert (await store.get_post(post.id)).title == "Original"


class TestStoreSelection:
    """Tests for create_store and open_store."""

    def test_memory_selected_without_url(self, mock_settings: Settings) -> None:
        assert isinstance(create_store(mock_settings), InMemoryStore)

    def test_sql_selected_with_url(self, tmp_path: Path) -> None:
        settings = Settings(
            _env_file=None,
            environment="production",
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'site.db'}",
        )
        assert isinstance(create_store(settings), SqlStore)

    def test_sql_store_requires_url(self, mock_settings: Settings) -> None:
        with pytest.raises(ValueError):
            SqlStore(mock_settings)

    async def test_unreachable_database_raises_store_unavailable(self, tmp_path: Path) -> None:
        settings = Settings(
            _env_file=None,
            environment="production",
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'site.db'}",
        )
        store = SqlStore(settings)

        with pytest.raises(StoreUnavailable):
            await store.initialize()
        await store.close()

    async def test_open_store_keeps_degraded_sql_store(self, tmp_path: Path) -> None:
        settings = Settings(
            _env_file=None,
            environment="production",
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'site.db'}",
        )

        store = await open_store(SqlStore(settings), settings)

        assert isinstance(store, SqlStore)
        with pytest.raises(StoreUnavailable):
            await store.list_posts()
        await store.close()

    async def test_open_store_falls_back_to_memory(self, tmp_path: Path) -> None:
        settings = Settings(
            _env_file=None,
            environment="production",
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'site.db'}",
            store_fallback_to_memory=True,
        )

        store = await open_store(SqlStore(settings), settings)

        assert isinstance(store, InMemoryStore)
