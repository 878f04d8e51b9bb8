"""Publishing committed invitations to the hosted backend."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol

from invitation_store.adapters.media_client import MediaClient
from invitation_store.domain.invitations import InvitationRecord, generate_slug
from invitation_store.services.codec import decode_data_uri
from invitation_store.services.records import DurableRecordStore

_logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
}


class InvitationRepository(Protocol):
    """Persistence interface for published invitations."""

    def upsert(self, user_id: str, record: InvitationRecord) -> InvitationRecord:
        """Create or replace a published invitation and return it."""

    def get(self, invitation_id: str) -> InvitationRecord | None:
        """Return a published invitation by id, if present."""

    def list_for_user(self, user_id: str) -> list[InvitationRecord]:
        """Return the user's published invitations, newest first."""

    def delete(self, invitation_id: str) -> None:
        """Delete a published invitation."""


@dataclass
class PublishService:
    """Uploads embedded images and pushes durable invitations to the backend."""

    durable: DurableRecordStore
    repository: InvitationRepository
    media_client: MediaClient

    async def publish(self, user_id: str, record_id: str) -> InvitationRecord | None:
        """Publish a durable invitation; return None when it is not stored.

        Embedded images are replaced by their uploaded URLs, and the durable
        copy is updated to match so the local blob shrinks as well. The
        durable write happens first: when it fails, nothing is published.
        """
        record = self.durable.get(record_id)
        if record is None:
            return None

        published = await self._upload_images(record)
        if not published.custom_slug:
            published = replace(
                published,
                custom_slug=generate_slug(
                    published.bride_names or "", published.groom_names or ""
                ),
            )
        if published != record:
            self.durable.upsert(published)
        stored = self.repository.upsert(user_id, published)
        _logger.info("Published invitation %s for user %s", record_id, user_id)
        return stored

    def list_published(self, user_id: str) -> list[InvitationRecord]:
        """Return invitations the user has published."""
        return self.repository.list_for_user(user_id)

    def unpublish(self, invitation_id: str) -> bool:
        """Remove a published invitation; the durable copy is left alone."""
        if self.repository.get(invitation_id) is None:
            return False
        self.repository.delete(invitation_id)
        return True

    async def _upload_images(self, record: InvitationRecord) -> InvitationRecord:
        return replace(
            record,
            cover_photo=await self._upload(record.id, "cover", record.cover_photo),
            bride_photo=await self._upload(record.id, "bride", record.bride_photo),
            groom_photo=await self._upload(record.id, "groom", record.groom_photo),
            gallery=[
                await self._upload(record.id, "gallery", item, index)
                for index, item in enumerate(record.gallery)
            ],
        )

    async def _upload(
        self, record_id: str, category: str, payload: str | None, index: int = 0
    ) -> str | None:
        if not payload or not payload.startswith("data:"):
            return payload
        content_type, content = decode_data_uri(payload)
        extension = _EXTENSIONS.get(content_type, "")
        filename = f"{record_id}-{category}-{index}{extension}"
        return await self.media_client.upload(content, filename, content_type, category)
