# ABOUTME: FastAPI application factory with store lifespan and procedure routers.
# ABOUTME: Main entry point for the JOYDAO.Z site API.

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from joydao_site.config import Settings, get_settings
from joydao_site.store import DataStore, create_store, open_store
from joydao_site.web.errors import register_error_handlers
from joydao_site.web.routes import admin, auth, blog, contact, newsletter, system

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan context for store setup/teardown."""
    logger.info("app_startup", environment=app.state.settings.environment)
    app.state.store = await open_store(app.state.store, app.state.settings)
    yield
    logger.info("app_shutdown")
    await app.state.store.close()


def create_app(settings: Settings | None = None, store: DataStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The store is chosen once here; pass ``store`` to inject a specific one.
    """
    settings = settings or get_settings()
    app = FastAPI(
        title="JOYDAO.Z",
        description="Portfolio site API: blog, contact form and newsletter",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store or create_store(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # Include routers
    app.include_router(system.router)
    app.include_router(auth.router)
    app.include_router(contact.router)
    app.include_router(newsletter.router)
    app.include_router(blog.router)
    app.include_router(admin.router)

    return app
