"""Durable and transient invitation record stores.

Each tier holds a single JSON blob under one key. Every write is a
load-all, mutate, save-all cycle that rewrites the whole blob, so nothing
coordinates concurrent writers: when two callers interleave on the same
tier, the later save silently replaces the earlier one.
"""

import json
import logging
from dataclasses import dataclass

from invitation_store.domain.invitations import (
    InvitationRecord,
    record_from_wire,
    record_to_wire,
)
from invitation_store.domain.storage import (
    CommitResult,
    SaveOutcome,
    StorageTier,
    StorageUsage,
    SweepResult,
)
from invitation_store.errors import (
    CapacityError,
    FallbackPathError,
    IntegrityError,
    ParseError,
    StoreError,
    TierQuotaExceededError,
)
from invitation_store.services.capacity import CapacityMonitor
from invitation_store.services.codec import compress_record, decompress_record
from invitation_store.services.retention import DEFAULT_RETENTION_DAYS, RetentionSweeper
from invitation_store.services.tiers import TierHandle

_logger = logging.getLogger(__name__)


def serialize_records(records: list[InvitationRecord]) -> str:
    """Compress records and encode them as the stored JSON blob."""
    payload = [record_to_wire(compress_record(record)) for record in records]
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def deserialize_records(blob: str) -> list[InvitationRecord]:
    """Decode a stored JSON blob and decompress every record."""
    try:
        payload = json.loads(blob)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Stored blob is not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise ParseError("Stored blob is not a list of invitations")
    records = []
    for entry in payload:
        if not isinstance(entry, dict) or not entry.get("id"):
            _logger.warning("Skipping stored invitation without an id")
            continue
        try:
            record = record_from_wire(entry)
        except ValueError as exc:
            _logger.warning("Skipping stored invitation %s: %s", entry["id"], exc)
            continue
        records.append(decompress_record(record))
    return records


@dataclass
class DurableRecordStore:
    """Invitation records in the tier that survives restarts."""

    handle: TierHandle
    monitor: CapacityMonitor
    sweeper: RetentionSweeper

    def load_all(self) -> list[InvitationRecord]:
        """Return all durable records in stored order."""
        return _load(self.handle)

    def get(self, record_id: str) -> InvitationRecord | None:
        """Return a durable record by id, if present."""
        return _find(self.load_all(), record_id)

    def usage(self) -> StorageUsage:
        """Return usage of the durable tier."""
        return self.monitor.usage(StorageTier.DURABLE)

    def is_critical(self) -> bool:
        """Return True when the durable tier is critically full."""
        return self.monitor.is_critical(StorageTier.DURABLE)

    def save_all(self, records: list[InvitationRecord]) -> None:
        """Replace every durable record, reclaiming space first if needed.

        Raises CapacityError when a forced sweep cannot bring usage back
        under the critical threshold, and IntegrityError when the written
        blob does not read back unchanged.
        """
        cleaned_count = 0
        if self.is_critical():
            before = {record.id: record for record in self.load_all()}
            result = self.sweep(self.sweeper.forced_threshold_days, forced=True)
            cleaned_count = result.cleaned_count
            if self.is_critical():
                raise CapacityError(result.usage.percentage, cleaned_count)
            evicted = set(result.evicted_ids)
            # Drop untouched copies of what was just evicted so the caller's
            # stale list does not write them straight back.
            records = [
                record
                for record in records
                if record.id not in evicted or before.get(record.id) != record
            ]
        try:
            self.write_all(records)
        except TierQuotaExceededError as exc:
            raise CapacityError(self.usage().percentage, cleaned_count) from exc

    def write_all(self, records: list[InvitationRecord]) -> None:
        """Write and verify the durable blob without any capacity checks."""
        _write_verified(self.handle, _dedupe(records))

    def upsert(self, record: InvitationRecord) -> None:
        """Insert a record or replace the one with the same id."""
        self.save_all(_upsert(self.load_all(), record))

    def remove(self, record_id: str) -> bool:
        """Delete a record by id; return False when it was not stored."""
        records = self.load_all()
        kept = [record for record in records if record.id != record_id]
        if len(kept) == len(records):
            return False
        # Removal only shrinks the blob, so it skips the capacity gate.
        self.write_all(kept)
        return True

    def sweep(
        self, age_threshold_days: float = DEFAULT_RETENTION_DAYS, forced: bool = False
    ) -> SweepResult:
        """Evict old durable records; see RetentionSweeper.sweep."""
        return self.sweeper.sweep(self, age_threshold_days, forced=forced)


@dataclass
class TransientRecordStore:
    """Session-scoped staging area for drafts, committed into the durable tier."""

    handle: TierHandle
    monitor: CapacityMonitor
    durable: DurableRecordStore

    def load_all(self) -> list[InvitationRecord]:
        """Return all staged records in stored order."""
        return _load(self.handle)

    def get(self, record_id: str) -> InvitationRecord | None:
        """Return a staged record by id, if present."""
        return _find(self.load_all(), record_id)

    def usage(self) -> StorageUsage:
        """Return usage of the transient tier."""
        return self.monitor.usage(StorageTier.TRANSIENT)

    def save(self, record: InvitationRecord) -> SaveOutcome:
        """Stage a record, falling back to the durable tier when staging fails.

        The returned outcome names the tier that now holds the record.
        FallbackPathError is raised only when the durable fallback fails too.
        """
        reason = self._stage(record)
        if reason is None:
            return SaveOutcome(record_id=record.id, tier=StorageTier.TRANSIENT)

        _logger.warning(
            "Could not stage invitation %s (%s); saving to durable tier",
            record.id,
            reason,
        )
        try:
            self.durable.upsert(record)
        except StoreError as exc:
            raise FallbackPathError(record.id, reason) from exc
        self._discard_stale(record.id)
        return SaveOutcome(
            record_id=record.id, tier=StorageTier.DURABLE, fallback_reason=reason
        )

    def remove(self, record_id: str) -> bool:
        """Drop a staged record; return False when it was not staged."""
        records = self.load_all()
        kept = [record for record in records if record.id != record_id]
        if len(kept) == len(records):
            return False
        _write_verified(self.handle, kept)
        return True

    def commit(self) -> CommitResult:
        """Merge staged records into the durable tier, then clear staging.

        Staged records are kept when the durable save fails; the error is
        re-raised for the caller.
        """
        staged = self.load_all()
        if not staged:
            return CommitResult(committed_count=0, changed=False)

        merged = self.durable.load_all()
        changed = False
        for record in staged:
            existing = _find(merged, record.id)
            if existing == record:
                continue
            merged = _upsert(merged, record)
            changed = True

        if changed:
            try:
                self.durable.save_all(merged)
            except StoreError:
                _logger.warning(
                    "Commit of %s staged invitations failed; keeping drafts",
                    len(staged),
                )
                raise

        self.clear()
        _logger.info("Committed %s staged invitations", len(staged))
        return CommitResult(committed_count=len(staged), changed=changed)

    def clear(self) -> None:
        """Remove every staged record."""
        self.handle.clear()

    def _stage(self, record: InvitationRecord) -> str | None:
        if self.monitor.is_critical(StorageTier.TRANSIENT):
            return "transient tier is critically full"
        records = _upsert(self.load_all(), record)
        try:
            _write_verified(self.handle, records)
        except (TierQuotaExceededError, IntegrityError) as exc:
            return str(exc)
        return None

    def _discard_stale(self, record_id: str) -> None:
        # A staged copy older than the durable one would win on the next commit.
        try:
            self.remove(record_id)
        except (TierQuotaExceededError, IntegrityError):
            _logger.warning(
                "Could not drop stale staged copy of invitation %s", record_id
            )


def _load(handle: TierHandle) -> list[InvitationRecord]:
    blob = handle.read()
    if not blob:
        return []
    try:
        return deserialize_records(blob)
    except ParseError:
        _logger.warning(
            "Error loading %s invitations; treating tier as empty",
            handle.tier.value,
            exc_info=True,
        )
        return []


def _write_verified(handle: TierHandle, records: list[InvitationRecord]) -> None:
    blob = serialize_records(records)
    handle.write(blob)
    if handle.read() != blob:
        raise IntegrityError(handle.tier)


def _find(records: list[InvitationRecord], record_id: str) -> InvitationRecord | None:
    for record in records:
        if record.id == record_id:
            return record
    return None


def _upsert(
    records: list[InvitationRecord], record: InvitationRecord
) -> list[InvitationRecord]:
    updated = list(records)
    for index, existing in enumerate(updated):
        if existing.id == record.id:
            updated[index] = record
            return updated
    updated.append(record)
    return updated


def _dedupe(records: list[InvitationRecord]) -> list[InvitationRecord]:
    # Later entries win but keep the position of the first occurrence.
    by_id: dict[str, InvitationRecord] = {}
    for record in records:
        by_id[record.id] = record
    return list(by_id.values())
