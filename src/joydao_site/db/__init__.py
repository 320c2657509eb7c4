# ABOUTME: Database module initialization.
# ABOUTME: Exports ORM models and session helpers for the SQL store.

from joydao_site.db.models import (
    Base,
    BlogPost,
    BlogPostTag,
    BlogTag,
    ContactMessage,
    NewsletterSubscription,
    User,
)
from joydao_site.db.session import create_engine, create_session_factory, get_session, init_db

__all__ = [
    "Base",
    "BlogPost",
    "BlogPostTag",
    "BlogTag",
    "ContactMessage",
    "NewsletterSubscription",
    "User",
    "create_engine",
    "create_session_factory",
    "get_session",
    "init_db",
]
