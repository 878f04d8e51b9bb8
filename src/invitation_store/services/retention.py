"""Age-based eviction for the durable tier.

Sweeping deletes invitations outright. Evicted records are not moved to
another tier and cannot be recovered. Eligibility depends on age alone,
never on whether an invitation is published or otherwise important.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from invitation_store.domain.invitations import InvitationRecord, age_in_days, recency
from invitation_store.domain.storage import StorageUsage, SweepResult

_logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 30.0
FORCED_RETENTION_DAYS = 7.0
_UNKNOWN_RECENCY = datetime.min.replace(tzinfo=UTC)


class SweepableStore(Protocol):
    """Store operations the sweeper needs."""

    def load_all(self) -> list[InvitationRecord]:
        """Return every stored record."""

    def write_all(self, records: list[InvitationRecord]) -> None:
        """Replace the stored records without capacity checks."""

    def usage(self) -> StorageUsage:
        """Return current usage of the store's tier."""

    def is_critical(self) -> bool:
        """Return True when the store's tier is critically full."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class RetentionSweeper:
    """Evicts the oldest durable records once they pass an age threshold."""

    forced_threshold_days: float = FORCED_RETENTION_DAYS
    clock: Callable[[], datetime] = _utcnow

    def effective_threshold(
        self, age_threshold_days: float, forced: bool, critical: bool
    ) -> float:
        """Return the age threshold in force for a sweep."""
        if forced or critical:
            return min(age_threshold_days, self.forced_threshold_days)
        return age_threshold_days

    def sweep(
        self,
        store: SweepableStore,
        age_threshold_days: float = DEFAULT_RETENTION_DAYS,
        forced: bool = False,
    ) -> SweepResult:
        """Delete records older than the effective threshold, oldest first.

        Records with no parseable recency are never evicted. The surviving
        records are written back in ascending recency order, and only when
        something was removed.
        """
        records = store.load_all()
        threshold = self.effective_threshold(
            age_threshold_days, forced=forced, critical=store.is_critical()
        )
        now = self.clock()
        kept: list[InvitationRecord] = []
        evicted: list[str] = []
        for record in sorted(records, key=_recency_key):
            age = age_in_days(record, now)
            if age is not None and age > threshold:
                _logger.info(
                    "Evicting invitation %s: %.1f days old, threshold %s days",
                    record.id,
                    age,
                    threshold,
                )
                evicted.append(record.id)
                continue
            kept.append(record)

        if evicted:
            store.write_all(kept)

        return SweepResult(
            cleaned_count=len(evicted),
            remaining_count=len(kept),
            usage=store.usage(),
            evicted_ids=tuple(evicted),
        )

    def clear_old(
        self, store: SweepableStore, days: float = DEFAULT_RETENTION_DAYS
    ) -> SweepResult:
        """Run a normal (non-forced) sweep."""
        return self.sweep(store, age_threshold_days=days, forced=False)


def _recency_key(record: InvitationRecord) -> datetime:
    return recency(record) or _UNKNOWN_RECENCY
