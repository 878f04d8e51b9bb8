"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import Client, create_client

from invitation_store.adapters.file_tier import FileTier
from invitation_store.adapters.media_client import HttpxMediaClient, MediaClient
from invitation_store.adapters.supabase_blob_tier import SupabaseBlobTier
from invitation_store.adapters.supabase_invitation_repository import (
    SupabaseInvitationRepository,
)
from invitation_store.config import Settings, parse_storage_backend
from invitation_store.domain.storage import StorageTier
from invitation_store.services.capacity import (
    DEFAULT_CRITICAL_PERCENTAGE,
    DEFAULT_QUOTA_BYTES,
    CapacityMonitor,
)
from invitation_store.services.publishing import PublishService
from invitation_store.services.records import DurableRecordStore, TransientRecordStore
from invitation_store.services.retention import RetentionSweeper
from invitation_store.services.tiers import InMemoryTier, KeyValueTier, TierHandle


@dataclass
class RecordStores:
    """The two record stores plus the monitor and sweeper they share."""

    monitor: CapacityMonitor
    sweeper: RetentionSweeper
    durable: DurableRecordStore
    transient: TransientRecordStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    stores: RecordStores
    media_client: MediaClient
    publish_service: PublishService | None
    close_resources: Callable[[], Awaitable[None]]


def build_record_stores(  # noqa: PLR0913
    durable_backend: KeyValueTier,
    transient_backend: KeyValueTier,
    *,
    durable_key: str = "invitations",
    transient_key: str = "temp_invitations",
    quota_bytes: int = DEFAULT_QUOTA_BYTES,
    critical_percentage: float = DEFAULT_CRITICAL_PERCENTAGE,
    sweeper: RetentionSweeper | None = None,
) -> RecordStores:
    """Wire both tiers into a monitor, a sweeper and the two stores."""
    durable_handle = TierHandle(StorageTier.DURABLE, durable_backend, durable_key)
    transient_handle = TierHandle(
        StorageTier.TRANSIENT, transient_backend, transient_key
    )
    monitor = CapacityMonitor(
        handles={
            StorageTier.DURABLE: durable_handle,
            StorageTier.TRANSIENT: transient_handle,
        },
        quota_bytes=quota_bytes,
        critical_percentage=critical_percentage,
    )
    resolved_sweeper = sweeper or RetentionSweeper()
    durable = DurableRecordStore(
        handle=durable_handle, monitor=monitor, sweeper=resolved_sweeper
    )
    transient = TransientRecordStore(
        handle=transient_handle, monitor=monitor, durable=durable
    )
    return RecordStores(
        monitor=monitor,
        sweeper=resolved_sweeper,
        durable=durable,
        transient=transient,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    backend = parse_storage_backend(resolved_settings.storage_backend)
    supabase_client = _create_supabase_client(resolved_settings)
    if backend == "supabase" and supabase_client is None:
        raise ValueError("The supabase storage backend needs SUPABASE_URL and key")

    quota = resolved_settings.quota_bytes
    durable_backend: KeyValueTier
    if backend == "supabase":
        durable_backend = SupabaseBlobTier(
            client=supabase_client, namespace=resolved_settings.storage_namespace
        )
    elif backend == "file":
        durable_backend = FileTier(
            directory=Path(resolved_settings.data_dir)
            / resolved_settings.storage_namespace,
            quota_bytes=quota,
        )
    else:
        durable_backend = InMemoryTier(quota_bytes=quota)

    stores = build_record_stores(
        durable_backend,
        InMemoryTier(quota_bytes=quota),
        durable_key=resolved_settings.durable_key,
        transient_key=resolved_settings.transient_key,
        quota_bytes=quota,
        critical_percentage=resolved_settings.critical_percentage,
        sweeper=RetentionSweeper(
            forced_threshold_days=resolved_settings.forced_retention_days
        ),
    )
    media_client = HttpxMediaClient.create(resolved_settings.upload_api_url)
    publish_service = None
    if supabase_client is not None:
        publish_service = PublishService(
            durable=stores.durable,
            repository=SupabaseInvitationRepository(supabase_client),
            media_client=media_client,
        )

    async def close_resources() -> None:
        await media_client.close()

    return AppContainer(
        settings=resolved_settings,
        stores=stores,
        media_client=media_client,
        publish_service=publish_service,
        close_resources=close_resources,
    )


def _create_supabase_client(settings: Settings) -> Client | None:
    if not settings.supabase_url or not settings.supabase_service_key:
        return None
    return create_client(settings.supabase_url, settings.supabase_service_key)
