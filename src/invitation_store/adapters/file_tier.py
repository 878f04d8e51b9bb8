"""File-backed storage tier."""

import errno
import os
import re
from dataclasses import dataclass
from pathlib import Path

from invitation_store.errors import TierQuotaExceededError
from invitation_store.services.tiers import KeyValueTier, blob_size

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


@dataclass
class FileTier(KeyValueTier):
    """Stores each key as a UTF-8 file under a directory."""

    directory: Path
    quota_bytes: int | None = None

    def get(self, key: str) -> str | None:
        """Return the file contents for a key, if present."""
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        """Write a key atomically via a temporary file."""
        size = blob_size(value)
        if self.quota_bytes is not None and size > self.quota_bytes:
            raise TierQuotaExceededError(key, size, self.quota_bytes)
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_name(f"{path.name}.tmp")
        try:
            temp_path.write_text(value, encoding="utf-8")
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            if exc.errno == errno.ENOSPC:
                raise TierQuotaExceededError(key, size, 0) from exc
            raise
        os.replace(temp_path, path)

    def remove(self, key: str) -> None:
        """Delete the file for a key if present."""
        self._path(key).unlink(missing_ok=True)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key) or key in {".", ".."}:
            raise ValueError(f"Invalid storage key: {key!r}")
        return Path(self.directory) / f"{key}.json"
