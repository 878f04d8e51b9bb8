"""Domain models for storage tiers and store results."""

from dataclasses import dataclass
from enum import Enum


class StorageTier(Enum):
    """Storage scopes an invitation can live in."""

    DURABLE = "durable"
    TRANSIENT = "transient"


@dataclass(frozen=True)
class StorageUsage:
    """Bytes held by a tier against its assumed ceiling."""

    used_bytes: int
    total_bytes: int
    percentage: float


@dataclass(frozen=True)
class SweepResult:
    """Outcome of a retention sweep over the durable tier."""

    cleaned_count: int
    remaining_count: int
    usage: StorageUsage
    evicted_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class SaveOutcome:
    """Where a single-record save actually landed."""

    record_id: str
    tier: StorageTier
    fallback_reason: str | None = None

    @property
    def fell_back(self) -> bool:
        """Return True when the record bypassed the transient tier."""
        return self.fallback_reason is not None


@dataclass(frozen=True)
class CommitResult:
    """Outcome of promoting staged drafts into the durable tier."""

    committed_count: int
    changed: bool
