# ABOUTME: Service for blog posts, tags and post/tag associations.
# ABOUTME: Owns publish-time stamping, slug conflict checks and degraded public reads.

from datetime import UTC, datetime

import structlog

from joydao_site.errors import Conflict, NotFound, StoreUnavailable
from joydao_site.models import (
    BlogPostCreate,
    BlogPostInput,
    BlogPostRecord,
    BlogPostUpdate,
    BlogTagCreate,
    BlogTagRecord,
    PostStatus,
)
from joydao_site.store.base import DataStore

log = structlog.get_logger()


def resolve_published_at(
    status: PostStatus, current: BlogPostRecord | None, now: datetime
) -> datetime | None:
    """Publication time after saving a post with ``status``.

    Drafts never carry a publication time. A post that was already published
    keeps its original time; any other transition to published is stamped now.
    """
    if status != PostStatus.PUBLISHED:
        return None
    if current and current.status == PostStatus.PUBLISHED and current.published_at:
        return current.published_at
    return now


class BlogService:
    """Service for blog content.

    Public reads degrade to empty results when the store is unavailable;
    admin reads and all writes propagate ``StoreUnavailable``.
    """

    def __init__(self, store: DataStore) -> None:
        self.store = store

    # Public reads

    async def list_published(self) -> list[BlogPostRecord]:
        try:
            return await self.store.list_published_posts()
        except StoreUnavailable:
            log.warning("blog_read_degraded", operation="list_published")
            return []

    async def get_published_by_slug(self, slug: str) -> BlogPostRecord | None:
        """Get a published post by slug. Drafts are hidden."""
        try:
            post = await self.store.get_post_by_slug(slug)
        except StoreUnavailable:
            log.warning("blog_read_degraded", operation="get_published_by_slug")
            return None
        if post and post.status == PostStatus.PUBLISHED:
            return post
        return None

    async def list_tags(self) -> list[BlogTagRecord]:
        try:
            return await self.store.list_tags()
        except StoreUnavailable:
            log.warning("blog_read_degraded", operation="list_tags")
            return []

    async def get_tags_for_post(self, post_id: int) -> list[BlogTagRecord]:
        try:
            return await self.store.get_tags_for_post(post_id)
        except StoreUnavailable:
            log.warning("blog_read_degraded", operation="get_tags_for_post")
            return []

    # Admin reads

    async def list_all(self) -> list[BlogPostRecord]:
        return await self.store.list_posts()

    async def get_by_slug(self, slug: str) -> BlogPostRecord | None:
        return await self.store.get_post_by_slug(slug)

    # Post mutations

    async def _check_slug_free(self, slug: str, post_id: int | None = None) -> None:
        existing = await self.store.get_post_by_slug(slug)
        if existing and existing.id != post_id:
            raise Conflict(f'Slug "{slug}" is already used by post "{existing.title}"')

    async def create_post(self, data: BlogPostInput) -> BlogPostRecord:
        """Create a post, stamping the publication time when published.

        Raises:
            Conflict: Another post already uses the slug.
        """
        await self._check_slug_free(data.slug)
        post = await self.store.create_post(
            BlogPostCreate(
                title=data.title,
                slug=data.slug,
                content=data.content,
                excerpt=data.excerpt,
                status=data.status,
                published_at=resolve_published_at(data.status, None, datetime.now(UTC)),
            )
        )
        log.info("blog_post_created", post_id=post.id, status=post.status.value)
        return post

    async def update_post(self, post_id: int, data: BlogPostInput) -> BlogPostRecord | None:
        """Replace a post's editable fields.

        Returns:
            The updated post, or None if ``post_id`` does not exist (no-op).

        Raises:
            Conflict: Another post already uses the new slug.
        """
        current = await self.store.get_post(post_id)
        if current is None:
            log.info("blog_post_update_missing", post_id=post_id)
            return None
        await self._check_slug_free(data.slug, post_id)
        post = await self.store.update_post(
            post_id,
            BlogPostUpdate(
                title=data.title,
                slug=data.slug,
                content=data.content,
                excerpt=data.excerpt,
                status=data.status,
                published_at=resolve_published_at(data.status, current, datetime.now(UTC)),
            ),
        )
        log.info("blog_post_updated", post_id=post_id)
        return post

    async def delete_post(self, post_id: int) -> None:
        """Delete a post and its tag associations.

        Raises:
            NotFound: No post has ``post_id``.
        """
        if await self.store.get_post(post_id) is None:
            raise NotFound("Blog post not found")
        await self.store.delete_post(post_id)
        log.info("blog_post_deleted", post_id=post_id)

    # Tags

    async def create_tag(self, data: BlogTagCreate) -> BlogTagRecord:
        """Create a tag; an existing slug returns the existing tag."""
        tag = await self.store.create_tag(data)
        log.info("blog_tag_saved", tag_id=tag.id)
        return tag

    async def delete_tag(self, tag_id: int) -> None:
        if await self.store.get_tag(tag_id) is None:
            raise NotFound("Blog tag not found")
        await self.store.delete_tag(tag_id)
        log.info("blog_tag_deleted", tag_id=tag_id)

    async def add_tag_to_post(self, post_id: int, tag_id: int) -> None:
        """Attach a tag to a post. Repeating the call is a no-op.

        Raises:
            NotFound: Either the post or the tag does not exist.
        """
        if await self.store.get_post(post_id) is None:
            raise NotFound("Blog post not found")
        if await self.store.get_tag(tag_id) is None:
            raise NotFound("Blog tag not found")
        await self.store.add_tag_to_post(post_id, tag_id)
        log.info("blog_tag_attached", post_id=post_id, tag_id=tag_id)

    async def remove_tag_from_post(self, post_id: int, tag_id: int) -> None:
        await self.store.remove_tag_from_post(post_id, tag_id)
        log.info("blog_tag_detached", post_id=post_id, tag_id=tag_id)
