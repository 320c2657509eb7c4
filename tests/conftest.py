# ABOUTME: Pytest fixtures and configuration for the site backend tests.
# ABOUTME: Provides test settings, a fresh in-memory store, services and an API client.

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from joydao_site.config import Settings
from joydao_site.models import BlogPostInput, PostStatus
from joydao_site.services import BlogService, NewsletterService
from joydao_site.store.memory import InMemoryStore

OWNER_OPEN_ID = "owner-test-openid"


@pytest.fixture
def mock_settings() -> Settings:
    """Create settings for testing; never reads the process environment's .env."""
    return Settings(
        _env_file=None,
        environment="test",
        owner_open_id=OWNER_OPEN_ID,
        database_url="",
        log_level="DEBUG",
    )


@pytest.fixture
def memory_store() -> InMemoryStore:
    """Create an empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def blog_service(memory_store: InMemoryStore) -> BlogService:
    return BlogService(memory_store)


@pytest.fixture
def newsletter_service(memory_store: InMemoryStore) -> NewsletterService:
    return NewsletterService(memory_store)


@pytest.fixture
def client(mock_settings: Settings, memory_store: InMemoryStore) -> Iterator[TestClient]:
    """Create a test client bound to the shared in-memory store."""
    from joydao_site.web.app import create_app

    app = create_app(settings=mock_settings, store=memory_store)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def owner_headers() -> dict[str, str]:
    return {"x-openid": OWNER_OPEN_ID}


@pytest.fixture
def user_headers() -> dict[str, str]:
    return {"x-openid": "visitor-openid"}


@pytest.fixture
def draft_input() -> BlogPostInput:
    """Create a draft post payload."""
    return BlogPostInput(
        title="Draft Notes",
        slug="draft-notes",
        content="Work in progress.",
        status=PostStatus.DRAFT,
    )


@pytest.fixture
def published_input() -> BlogPostInput:
    """Create a published post payload."""
    return BlogPostInput(
        title="Launch Day",
        slug="launch-day",
        content="# Hello\n\nThe site is live.",
        excerpt="The site is live.",
        status=PostStatus.PUBLISHED,
    )
