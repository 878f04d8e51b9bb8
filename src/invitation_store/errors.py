"""Errors raised by the invitation stores and their collaborators."""

from invitation_store.domain.storage import StorageTier


class StoreError(RuntimeError):
    """Base class for record store failures."""


class CapacityError(StoreError):
    """Durable write refused because the tier stayed critical after cleanup."""

    def __init__(self, percentage: float, cleaned_count: int) -> None:
        self.percentage = percentage
        self.cleaned_count = cleaned_count
        super().__init__(
            f"Storage is critically full ({percentage:.1f}%). "
            f"Cleaned {cleaned_count} old invitations but still need more space. "
            "Please manually delete some invitations."
        )


class IntegrityError(StoreError):
    """A written blob did not read back byte-for-byte."""

    def __init__(self, tier: StorageTier) -> None:
        self.tier = tier
        super().__init__(
            f"Verification failed: saved {tier.value} data does not match "
            "the data that was written"
        )


class ParseError(StoreError):
    """A stored blob could not be decoded into invitation records."""


class FallbackPathError(StoreError):
    """Neither the transient tier nor the durable fallback accepted a save."""

    def __init__(self, record_id: str, reason: str) -> None:
        self.record_id = record_id
        self.reason = reason
        super().__init__(
            f"Could not save invitation {record_id}: transient tier unavailable "
            f"({reason}) and the durable fallback failed"
        )


class TierQuotaExceededError(StoreError):
    """A storage backend refused a write for lack of space."""

    def __init__(self, key: str, size_bytes: int, quota_bytes: int) -> None:
        self.key = key
        self.size_bytes = size_bytes
        self.quota_bytes = quota_bytes
        super().__init__(
            f"Writing {size_bytes} bytes to '{key}' exceeds the "
            f"{quota_bytes}-byte quota"
        )


class MediaValidationError(ValueError):
    """An upload was rejected because of its type or size."""
