# ABOUTME: Pydantic models for store records and procedure payloads.
# ABOUTME: Defines users, contact messages, subscriptions, blog posts and tags.

from datetime import datetime
from enum import Enum

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Matches the users.open_id column width.
OPEN_ID_MAX_LENGTH = 64


class Role(str, Enum):
    """Caller role stored on the user row."""

    USER = "user"
    ADMIN = "admin"


class PostStatus(str, Enum):
    """Blog post publication status."""

    DRAFT = "draft"
    PUBLISHED = "published"


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, accepting either case on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _required(value: str, message: str) -> str:
    if not value or not value.strip():
        raise ValueError(message)
    return value


def _email(value: str) -> str:
    value = value.strip()
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError("Invalid email") from e
    return value


# =============================================================================
# Records returned by the store
# =============================================================================


class UserRecord(CamelModel):
    id: int
    open_id: str
    name: str | None = None
    email: str | None = None
    login_method: str | None = None
    role: Role = Role.USER
    created_at: datetime
    updated_at: datetime
    last_signed_in: datetime


class ContactMessageRecord(CamelModel):
    id: int
    name: str
    email: str
    message: str
    created_at: datetime


class SubscriptionRecord(CamelModel):
    id: int
    email: str
    is_active: bool
    subscribed_at: datetime


class BlogPostRecord(CamelModel):
    id: int
    title: str
    slug: str
    content: str
    excerpt: str | None = None
    status: PostStatus
    published_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class BlogTagRecord(CamelModel):
    id: int
    name: str
    slug: str


# =============================================================================
# Store write payloads
# =============================================================================


class UserUpsert(CamelModel):
    """Fields merged into a user row; ``None`` means "keep what is stored"."""

    open_id: str
    name: str | None = None
    email: str | None = None
    login_method: str | None = None
    role: Role | None = None
    last_signed_in: datetime | None = None


class BlogPostCreate(CamelModel):
    title: str
    slug: str
    content: str
    excerpt: str | None = None
    status: PostStatus
    published_at: datetime | None = None


class BlogPostUpdate(CamelModel):
    """Partial update; only explicitly set fields are applied."""

    title: str | None = None
    slug: str | None = None
    content: str | None = None
    excerpt: str | None = None
    status: PostStatus | None = None
    published_at: datetime | None = None


# =============================================================================
# Procedure inputs
# =============================================================================


class ContactMessageCreate(CamelModel):
    """Public contact form submission."""

    name: str = Field(default="", validate_default=True)
    email: str = Field(default="", validate_default=True)
    message: str = Field(default="", validate_default=True)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _required(value, "Name is required")

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        return _email(value)

    @field_validator("message")
    @classmethod
    def _check_message(cls, value: str) -> str:
        return _required(value, "Message is required")


class EmailInput(CamelModel):
    email: str = Field(default="", validate_default=True)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        return _email(value)


class BlogPostInput(CamelModel):
    """Admin create payload for a blog post."""

    title: str = Field(default="", validate_default=True)
    slug: str = Field(default="", validate_default=True)
    content: str = Field(default="", validate_default=True)
    excerpt: str | None = None
    status: PostStatus

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: str) -> str:
        return _required(value, "Title is required")

    @field_validator("slug")
    @classmethod
    def _check_slug(cls, value: str) -> str:
        return _required(value, "Slug is required").strip()

    @field_validator("content")
    @classmethod
    def _check_content(cls, value: str) -> str:
        return _required(value, "Content is required")


class BlogPostUpdateInput(BlogPostInput):
    id: int


class IdInput(CamelModel):
    id: int


class BlogTagCreate(CamelModel):
    name: str = Field(default="", validate_default=True)
    slug: str = Field(default="", validate_default=True)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _required(value, "Name is required").strip()

    @field_validator("slug")
    @classmethod
    def _check_slug(cls, value: str) -> str:
        return _required(value, "Slug is required").strip()


class PostTagInput(CamelModel):
    post_id: int
    tag_id: int


# =============================================================================
# Procedure results
# =============================================================================


class ActionResult(CamelModel):
    success: bool = True
    message: str | None = None


class BlogPostResult(ActionResult):
    post: BlogPostRecord | None = None


class HealthResult(CamelModel):
    ok: bool = True
