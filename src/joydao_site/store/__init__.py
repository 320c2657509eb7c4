# ABOUTME: Store selection for the SQL and in-memory implementations.
# ABOUTME: Picks one implementation at startup from configuration.

import structlog

from joydao_site.config import Settings
from joydao_site.errors import StoreUnavailable
from joydao_site.store.base import DataStore
from joydao_site.store.memory import InMemoryStore
from joydao_site.store.sql import SqlStore

log = structlog.get_logger()


def create_store(settings: Settings) -> DataStore:
    """Build the store for ``settings`` without touching the network."""
    if settings.use_memory_store:
        log.info("store_selected", kind="memory", environment=settings.environment)
        return InMemoryStore()
    log.info("store_selected", kind="sql")
    return SqlStore(settings)


async def open_store(store: DataStore, settings: Settings) -> DataStore:
    """Initialize ``store``, degrading when the live database is unreachable.

    A failed connection is logged, not raised. With ``store_fallback_to_memory``
    an in-memory store is substituted; otherwise the SQL store is kept and each
    call fails with ``StoreUnavailable`` until the database comes back.
    """
    try:
        await store.initialize()
    except StoreUnavailable:
        if settings.store_fallback_to_memory:
            log.warning("store_fallback", kind="memory")
            await store.close()
            fallback = InMemoryStore()
            await fallback.initialize()
            return fallback
        log.warning("store_degraded", kind=store.kind)
    return store


__all__ = ["DataStore", "InMemoryStore", "SqlStore", "create_store", "open_store"]
