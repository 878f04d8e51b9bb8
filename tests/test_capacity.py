"""Tests for the capacity monitor."""

from invitation_store.domain.storage import StorageTier
from invitation_store.services.capacity import DEFAULT_QUOTA_BYTES, CapacityMonitor
from invitation_store.services.tiers import InMemoryTier, TierHandle


def _monitor(durable: InMemoryTier, transient: InMemoryTier, quota: int) -> CapacityMonitor:
    return CapacityMonitor(
        handles={
            StorageTier.DURABLE: TierHandle(StorageTier.DURABLE, durable, "invitations"),
            StorageTier.TRANSIENT: TierHandle(
                StorageTier.TRANSIENT, transient, "temp_invitations"
            ),
        },
        quota_bytes=quota,
    )


def test_empty_tier_reports_zero_usage() -> None:
    monitor = _monitor(InMemoryTier(), InMemoryTier(), DEFAULT_QUOTA_BYTES)

    usage = monitor.usage(StorageTier.DURABLE)

    assert usage.used_bytes == 0
    assert usage.total_bytes == 5 * 1024 * 1024
    assert usage.percentage == 0
    assert monitor.is_critical() is False


def test_usage_counts_utf8_bytes() -> None:
    durable = InMemoryTier()
    durable.set("invitations", "é" * 10)
    monitor = _monitor(durable, InMemoryTier(), 100)

    usage = monitor.usage()

    assert usage.used_bytes == 20
    assert usage.percentage == 20.0


def test_critical_only_above_threshold() -> None:
    durable = InMemoryTier()
    transient = InMemoryTier()
    monitor = _monitor(durable, transient, 100)

    durable.set("invitations", "x" * 90)
    transient.set("temp_invitations", "x" * 91)

    assert monitor.is_critical(StorageTier.DURABLE) is False
    assert monitor.is_critical(StorageTier.TRANSIENT) is True


def test_usage_reads_only_the_tier_key() -> None:
    durable = InMemoryTier()
    durable.set("invitations", "[]")
    durable.set("unrelated", "x" * 500)
    monitor = _monitor(durable, InMemoryTier(), 100)

    assert monitor.usage().used_bytes == 2
    assert durable.get("invitations") == "[]"
