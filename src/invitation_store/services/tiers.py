"""Key-value storage tier abstractions."""

from dataclasses import dataclass, field
from typing import Protocol

from invitation_store.domain.storage import StorageTier
from invitation_store.errors import TierQuotaExceededError


class KeyValueTier(Protocol):
    """Minimal string key-value backend for one storage scope."""

    def get(self, key: str) -> str | None:
        """Return the stored value, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value, raising TierQuotaExceededError when it cannot fit."""

    def remove(self, key: str) -> None:
        """Delete a value if present."""


def blob_size(value: str) -> int:
    """Return the UTF-8 byte length of a stored value."""
    return len(value.encode("utf-8"))


@dataclass
class InMemoryTier(KeyValueTier):
    """Process-lifetime tier backed by a dict."""

    quota_bytes: int | None = None
    _values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        """Return the stored value, if present."""
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value if it fits within the quota."""
        size = blob_size(value)
        if self.quota_bytes is not None and size > self.quota_bytes:
            raise TierQuotaExceededError(key, size, self.quota_bytes)
        self._values[key] = value

    def remove(self, key: str) -> None:
        """Delete a value if present."""
        self._values.pop(key, None)


@dataclass(frozen=True)
class TierHandle:
    """Binds a storage scope to its backend and the single key it uses."""

    tier: StorageTier
    backend: KeyValueTier
    key: str

    def read(self) -> str | None:
        """Return the tier's serialized blob, if any."""
        return self.backend.get(self.key)

    def write(self, blob: str) -> None:
        """Replace the tier's serialized blob."""
        self.backend.set(self.key, blob)

    def clear(self) -> None:
        """Remove the tier's serialized blob."""
        self.backend.remove(self.key)
