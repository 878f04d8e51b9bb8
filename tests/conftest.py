"""Shared test fixtures."""

import math
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta

import pytest

from invitation_store.config import Settings
from invitation_store.containers import AppContainer, RecordStores, build_record_stores
from invitation_store.domain.invitations import InvitationRecord
from invitation_store.errors import TierQuotaExceededError
from invitation_store.services.publishing import InvitationRepository, PublishService
from invitation_store.services.retention import RetentionSweeper
from invitation_store.services.tiers import InMemoryTier, blob_size

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)

# base64 for b"hello" and b"tune"
IMAGE_B64 = "aGVsbG8="
AUDIO_B64 = "dHVuZQ=="


def days_ago(days: float) -> str:
    return (NOW - timedelta(days=days)).isoformat()


def make_record(record_id: str, days_old: float = 1.0, **overrides) -> InvitationRecord:
    values: dict[str, object] = {
        "bride_names": "Ayu",
        "groom_names": "Budi",
        "updated_at": days_ago(days_old),
    }
    values.update(overrides)
    return InvitationRecord(id=record_id, **values)


def make_critical(stores: RecordStores, used_bytes: int) -> None:
    """Shrink the assumed quota so ``used_bytes`` sits at roughly 95%."""
    stores.monitor.quota_bytes = math.ceil(used_bytes / 0.95)


@dataclass
class FaultyTier(InMemoryTier):
    """In-memory tier that can refuse or truncate writes."""

    fail_writes: bool = False
    truncate_writes: bool = False
    writes: int = 0

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        if self.fail_writes:
            raise TierQuotaExceededError(key, blob_size(value), 0)
        if self.truncate_writes:
            value = value[: len(value) // 2]
        super().set(key, value)


@dataclass
class FakeMediaClient:
    """Media client that records uploads and returns predictable URLs."""

    uploads: list[tuple[str, bytes, str, str]] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)

    async def upload(
        self, content: bytes, filename: str, content_type: str, category: str
    ) -> str:
        self.uploads.append((filename, content, content_type, category))
        return f"https://media.example.test/uploads/{filename}"

    async def delete(self, file_path: str) -> bool:
        self.deleted.append(file_path)
        return True


@dataclass
class InMemoryInvitationRepository(InvitationRepository):
    """In-memory published invitation repository for tests."""

    rows: dict[str, tuple[str, InvitationRecord]] = field(default_factory=dict)

    def upsert(self, user_id: str, record: InvitationRecord) -> InvitationRecord:
        stored = replace(record, updated_at=NOW.isoformat())
        self.rows[record.id] = (user_id, stored)
        return stored

    def get(self, invitation_id: str) -> InvitationRecord | None:
        row = self.rows.get(invitation_id)
        return row[1] if row else None

    def list_for_user(self, user_id: str) -> list[InvitationRecord]:
        return [record for owner, record in self.rows.values() if owner == user_id]

    def delete(self, invitation_id: str) -> None:
        self.rows.pop(invitation_id, None)


@pytest.fixture
def settings() -> Settings:
    return Settings(admin_token="admin-token", storage_backend="memory")


@pytest.fixture
def sweeper() -> RetentionSweeper:
    return RetentionSweeper(clock=lambda: NOW)


@pytest.fixture
def durable_tier() -> FaultyTier:
    return FaultyTier()


@pytest.fixture
def transient_tier() -> FaultyTier:
    return FaultyTier()


@pytest.fixture
def stores(
    durable_tier: FaultyTier, transient_tier: FaultyTier, sweeper: RetentionSweeper
) -> RecordStores:
    return build_record_stores(durable_tier, transient_tier, sweeper=sweeper)


@pytest.fixture
def media_client() -> FakeMediaClient:
    return FakeMediaClient()


@pytest.fixture
def invitation_repository() -> InMemoryInvitationRepository:
    return InMemoryInvitationRepository()


@pytest.fixture
def publish_service(
    stores: RecordStores,
    invitation_repository: InMemoryInvitationRepository,
    media_client: FakeMediaClient,
) -> PublishService:
    return PublishService(
        durable=stores.durable,
        repository=invitation_repository,
        media_client=media_client,
    )


@pytest.fixture
def container(
    settings: Settings,
    stores: RecordStores,
    media_client: FakeMediaClient,
    publish_service: PublishService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        stores=stores,
        media_client=media_client,
        publish_service=publish_service,
        close_resources=close_resources,
    )
