# ABOUTME: Service for contact form submissions.
# ABOUTME: Persists validated messages and lists them for the site owner.

import structlog

from joydao_site.models import ContactMessageCreate, ContactMessageRecord
from joydao_site.store.base import DataStore

log = structlog.get_logger()


class ContactService:
    """Service for contact messages."""

    def __init__(self, store: DataStore) -> None:
        self.store = store

    async def submit(self, data: ContactMessageCreate) -> ContactMessageRecord:
        """Store a contact message. Not idempotent: every call adds a row."""
        record = await self.store.create_contact_message(data)
        log.info("contact_message_created", id=record.id)
        return record

    async def list_messages(self) -> list[ContactMessageRecord]:
        return await self.store.list_contact_messages()
