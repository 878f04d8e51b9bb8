"""Supabase-backed storage tier."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from invitation_store.services.tiers import KeyValueTier


@dataclass
class SupabaseBlobTier(KeyValueTier):
    """Stores blobs as rows in a Supabase table, one row per namespace/key."""

    client: Client
    namespace: str
    table: str = "storage_blobs"

    def get(self, key: str) -> str | None:
        """Return the stored blob for a key, if present."""
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("namespace", self.namespace)
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0]["value"]

    def set(self, key: str, value: str) -> None:
        """Insert or replace the blob for a key."""
        response = (
            self.client.table(self.table)
            .upsert(
                {
                    "namespace": self.namespace,
                    "key": key,
                    "value": value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="namespace,key",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to write storage blob")

    def remove(self, key: str) -> None:
        """Delete the blob for a key."""
        self.client.table(self.table).delete().eq("namespace", self.namespace).eq(
            "key", key
        ).execute()
