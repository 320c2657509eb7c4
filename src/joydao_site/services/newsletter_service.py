# ABOUTME: Service for managing newsletter subscriptions.
# ABOUTME: Handles idempotent subscribe, soft unsubscribe and active listing.

import structlog

from joydao_site.models import SubscriptionRecord
from joydao_site.store.base import DataStore

log = structlog.get_logger()


class NewsletterService:
    """Service for managing newsletter subscriptions."""

    def __init__(self, store: DataStore) -> None:
        self.store = store

    @staticmethod
    def normalize(email: str) -> str:
        return email.strip().lower()

    async def subscribe(self, email: str) -> tuple[SubscriptionRecord, bool]:
        """Subscribe an email, reactivating it if it was unsubscribed.

        Args:
            email: Email address to subscribe.

        Returns:
            The subscription row and whether it was already active.
        """
        email = self.normalize(email)
        record, already_active = await self.store.subscribe(email)
        if already_active:
            log.info("already_subscribed", subscription_id=record.id)
        else:
            log.info("subscriber_created", subscription_id=record.id)
        return record, already_active

    async def unsubscribe(self, email: str) -> bool:
        """Deactivate a subscription. Unknown emails are a no-op.

        Returns:
            True if a subscription row was found.
        """
        found = await self.store.unsubscribe(self.normalize(email))
        if found:
            log.info("subscriber_unsubscribed")
        else:
            log.info("unsubscribe_unknown_email")
        return found

    async def get_active_subscribers(self) -> list[SubscriptionRecord]:
        return await self.store.list_active_subscriptions()
