# ABOUTME: FastAPI dependency injection for settings, store, caller identity and services.
# ABOUTME: Provides reusable Annotated dependencies for route handlers.

from typing import Annotated

from fastapi import Depends, Request

from joydao_site.config import Settings
from joydao_site.identity import Authenticated, Caller, require_admin, resolve_caller
from joydao_site.services import BlogService, ContactService, NewsletterService, UserService
from joydao_site.store.base import DataStore


def get_app_settings(request: Request) -> Settings:
    """Get settings from app state."""
    return request.app.state.settings


AppSettings = Annotated[Settings, Depends(get_app_settings)]


def get_store(request: Request) -> DataStore:
    """Get the store selected at startup."""
    return request.app.state.store


Store = Annotated[DataStore, Depends(get_store)]


def get_caller(request: Request, settings: AppSettings) -> Caller:
    """Resolve the caller from the identity header."""
    return resolve_caller(request.headers, settings.identity_headers)


CurrentCaller = Annotated[Caller, Depends(get_caller)]


def get_admin_caller(caller: CurrentCaller, settings: AppSettings) -> Authenticated:
    """Require the owner identity; evaluated on every admin request."""
    return require_admin(caller, settings.owner_open_id)


AdminCaller = Annotated[Authenticated, Depends(get_admin_caller)]


def get_contact_service(store: Store) -> ContactService:
    return ContactService(store)


ContactSvc = Annotated[ContactService, Depends(get_contact_service)]


def get_newsletter_service(store: Store) -> NewsletterService:
    return NewsletterService(store)


NewsletterSvc = Annotated[NewsletterService, Depends(get_newsletter_service)]


def get_blog_service(store: Store) -> BlogService:
    return BlogService(store)


BlogSvc = Annotated[BlogService, Depends(get_blog_service)]


def get_user_service(store: Store, settings: AppSettings) -> UserService:
    return UserService(store, settings.owner_open_id)


UserSvc = Annotated[UserService, Depends(get_user_service)]
