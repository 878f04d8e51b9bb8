"""Capacity estimates for the storage tiers.

The ceiling is a configured guess at the platform quota, not a value
reported by the backend. Treat the numbers as a conservative heuristic.
"""

from dataclasses import dataclass

from invitation_store.domain.storage import StorageTier, StorageUsage
from invitation_store.services.tiers import TierHandle, blob_size

DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024
DEFAULT_CRITICAL_PERCENTAGE = 90.0


@dataclass
class CapacityMonitor:
    """Read-only usage reporting for the durable and transient tiers."""

    handles: dict[StorageTier, TierHandle]
    quota_bytes: int = DEFAULT_QUOTA_BYTES
    critical_percentage: float = DEFAULT_CRITICAL_PERCENTAGE

    def usage(self, tier: StorageTier = StorageTier.DURABLE) -> StorageUsage:
        """Return bytes used by a tier's blob against the quota ceiling."""
        used = blob_size(self.handles[tier].read() or "")
        return StorageUsage(
            used_bytes=used,
            total_bytes=self.quota_bytes,
            percentage=used / self.quota_bytes * 100,
        )

    def is_critical(self, tier: StorageTier = StorageTier.DURABLE) -> bool:
        """Return True when a tier is past the critical percentage."""
        return self.usage(tier).percentage > self.critical_percentage
