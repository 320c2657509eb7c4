# ABOUTME: Repository classes for database access patterns.
# ABOUTME: Provides User, ContactMessage, Newsletter, BlogPost and BlogTag repositories.

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from joydao_site.db.models import (
    BlogPost,
    BlogPostTag,
    BlogTag,
    ContactMessage,
    NewsletterSubscription,
    User,
)


class UserRepository:
    """Repository for User CRUD operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, user: User) -> User:
        """Save a user (insert or update)."""
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_open_id(self, open_id: str) -> User | None:
        """Get user by identity key."""
        result = await self.session.execute(select(User).where(User.open_id == open_id))
        return result.scalar_one_or_none()


class ContactMessageRepository:
    """Repository for ContactMessage operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, message: ContactMessage) -> ContactMessage:
        self.session.add(message)
        await self.session.flush()
        return message

    async def list_all(self) -> Sequence[ContactMessage]:
        """List messages in arrival order."""
        result = await self.session.execute(
            select(ContactMessage).order_by(ContactMessage.created_at, ContactMessage.id)
        )
        return result.scalars().all()


class NewsletterRepository:
    """Repository for NewsletterSubscription CRUD operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, subscription: NewsletterSubscription) -> NewsletterSubscription:
        """Save a subscription (insert or update)."""
        self.session.add(subscription)
        await self.session.flush()
        return subscription

    async def get_by_email(self, email: str) -> NewsletterSubscription | None:
        """Get subscription by email address."""
        result = await self.session.execute(
            select(NewsletterSubscription).where(NewsletterSubscription.email == email)
        )
        return result.scalar_one_or_none()

    async def list_active(self) -> Sequence[NewsletterSubscription]:
        """List active subscriptions ordered by signup time."""
        result = await self.session.execute(
            select(NewsletterSubscription)
            .where(NewsletterSubscription.is_active == True)  # noqa: E712
            .order_by(NewsletterSubscription.subscribed_at, NewsletterSubscription.id)
        )
        return result.scalars().all()


class BlogPostRepository:
    """Repository for BlogPost CRUD operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, post: BlogPost) -> BlogPost:
        """Save a post (insert or update)."""
        self.session.add(post)
        await self.session.flush()
        return post

    async def get_by_id(self, post_id: int) -> BlogPost | None:
        return await self.session.get(BlogPost, post_id)

    async def get_by_slug(self, slug: str) -> BlogPost | None:
        result = await self.session.execute(select(BlogPost).where(BlogPost.slug == slug))
        return result.scalar_one_or_none()

    async def list_all(self) -> Sequence[BlogPost]:
        """List every post, drafts included, by creation time."""
        result = await self.session.execute(
            select(BlogPost).order_by(BlogPost.created_at, BlogPost.id)
        )
        return result.scalars().all()

    async def list_published(self) -> Sequence[BlogPost]:
        """List published posts by publication time."""
        result = await self.session.execute(
            select(BlogPost)
            .where(BlogPost.status == "published")
            .order_by(BlogPost.published_at, BlogPost.id)
        )
        return result.scalars().all()

    async def delete_by_id(self, post_id: int) -> bool:
        """Delete a post and its tag associations. Returns True if deleted."""
        await self.session.execute(delete(BlogPostTag).where(BlogPostTag.post_id == post_id))
        result = await self.session.execute(delete(BlogPost).where(BlogPost.id == post_id))
        return result.rowcount > 0


class BlogTagRepository:
    """Repository for BlogTag and post/tag association operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, tag: BlogTag) -> BlogTag:
        self.session.add(tag)
        await self.session.flush()
        return tag

    async def get_by_id(self, tag_id: int) -> BlogTag | None:
        return await self.session.get(BlogTag, tag_id)

    async def get_by_slug(self, slug: str) -> BlogTag | None:
        result = await self.session.execute(select(BlogTag).where(BlogTag.slug == slug))
        return result.scalar_one_or_none()

    async def list_all(self) -> Sequence[BlogTag]:
        result = await self.session.execute(select(BlogTag).order_by(BlogTag.id))
        return result.scalars().all()

    async def delete_by_id(self, tag_id: int) -> bool:
        """Delete a tag and its post associations. Returns True if deleted."""
        await self.session.execute(delete(BlogPostTag).where(BlogPostTag.tag_id == tag_id))
        result = await self.session.execute(delete(BlogTag).where(BlogTag.id == tag_id))
        return result.rowcount > 0

    async def get_association(self, post_id: int, tag_id: int) -> BlogPostTag | None:
        return await self.session.get(BlogPostTag, (post_id, tag_id))

    async def add_to_post(self, post_id: int, tag_id: int) -> bool:
        """Attach a tag to a post. Returns False if the pair already existed."""
        existing = await self.get_association(post_id, tag_id)
        if existing:
            return False
        self.session.add(BlogPostTag(post_id=post_id, tag_id=tag_id))
        await self.session.flush()
        return True

    async def remove_from_post(self, post_id: int, tag_id: int) -> bool:
        """Detach a tag from a post. Returns True if a pair was removed."""
        result = await self.session.execute(
            delete(BlogPostTag)
            .where(BlogPostTag.post_id == post_id)
            .where(BlogPostTag.tag_id == tag_id)
        )
        return result.rowcount > 0

    async def list_for_post(self, post_id: int) -> Sequence[BlogTag]:
        result = await self.session.execute(
            select(BlogTag)
            .join(BlogPostTag, BlogPostTag.tag_id == BlogTag.id)
            .where(BlogPostTag.post_id == post_id)
            .order_by(BlogTag.id)
        )
        return result.scalars().all()
