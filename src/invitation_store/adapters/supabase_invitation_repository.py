"""Supabase-backed repository for published invitations."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from invitation_store.domain.invitations import InvitationRecord
from invitation_store.services.publishing import InvitationRepository

_TABLE = "invitations"

# Record attribute -> table column.
_COLUMNS = (
    ("bride_names", "bride_names"),
    ("groom_names", "groom_names"),
    ("bride_parents", "bride_parents"),
    ("groom_parents", "groom_parents"),
    ("date", "date"),
    ("time", "time"),
    ("venue", "venue"),
    ("show_akad", "show_akad"),
    ("akad_date", "akad_date"),
    ("akad_time", "akad_time"),
    ("akad_venue", "akad_venue"),
    ("show_resepsi", "show_resepsi"),
    ("resepsi_date", "resepsi_date"),
    ("resepsi_time", "resepsi_time"),
    ("resepsi_venue", "resepsi_venue"),
    ("opening_text", "opening_text"),
    ("invitation_text", "invitation_text"),
    ("template", "template_id"),
)

# Record attribute -> key inside the ``custom_data`` JSON column.
_CUSTOM_DATA = (
    ("cover_photo", "coverPhoto"),
    ("bride_photo", "bridePhoto"),
    ("groom_photo", "groomPhoto"),
    ("gallery", "gallery"),
    ("background_music", "backgroundMusic"),
    ("social_links", "socialLinks"),
    ("bank_accounts", "bankAccounts"),
    ("message", "message"),
    ("custom_slug", "customSlug"),
    ("timezone", "timezone"),
    ("akad_maps_url", "akadMapsUrl"),
    ("resepsi_maps_url", "resepsiMapsUrl"),
)


@dataclass
class SupabaseInvitationRepository(InvitationRepository):
    """Supabase implementation for published invitations."""

    client: Client

    def upsert(self, user_id: str, record: InvitationRecord) -> InvitationRecord:
        """Create or replace the invitation row and return it."""
        response = (
            self.client.table(_TABLE)
            .upsert(_row_from_record(user_id, record), on_conflict="id")
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to publish invitation")
        return _record_from_row(response.data[0])

    def get(self, invitation_id: str) -> InvitationRecord | None:
        """Return an invitation by id, if present."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("id", invitation_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _record_from_row(response.data[0])

    def list_for_user(self, user_id: str) -> list[InvitationRecord]:
        """Return a user's invitations, most recently updated first."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("updated_at", desc=True)
            .execute()
        )
        return [_record_from_row(row) for row in response.data or []]

    def delete(self, invitation_id: str) -> None:
        """Delete an invitation row."""
        self.client.table(_TABLE).delete().eq("id", invitation_id).execute()


def _row_from_record(user_id: str, record: InvitationRecord) -> dict[str, object]:
    row: dict[str, object] = {
        "id": record.id,
        "user_id": user_id,
        "is_published": True,
        "updated_at": datetime.now(tz=UTC).isoformat(),
    }
    for attribute, column in _COLUMNS:
        row[column] = getattr(record, attribute)
    row["show_akad"] = True if record.show_akad is None else record.show_akad
    row["show_resepsi"] = True if record.show_resepsi is None else record.show_resepsi
    custom_data = dict(record.extra)
    for attribute, key in _CUSTOM_DATA:
        value = getattr(record, attribute)
        if value is not None:
            custom_data[key] = value
    row["custom_data"] = custom_data
    return row


def _record_from_row(row: dict[str, object]) -> InvitationRecord:
    custom_data = dict(row.get("custom_data") or {})
    values: dict[str, object] = {
        attribute: row.get(column) for attribute, column in _COLUMNS
    }
    for attribute, key in _CUSTOM_DATA:
        if key in custom_data:
            values[attribute] = custom_data.pop(key)
    values["gallery"] = list(values.get("gallery") or [])
    return InvitationRecord(
        id=str(row["id"]),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        extra=custom_data,
        **values,
    )
