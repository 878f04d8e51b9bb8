"""Domain model for invitation drafts."""

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

_SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class InvitationRecord:
    """A single invitation as held by the record stores.

    Media fields carry full data URIs in memory. The stores strip the
    framing before writing and restore it after reading.
    """

    id: str
    bride_names: str | None = None
    groom_names: str | None = None
    bride_parents: str | None = None
    groom_parents: str | None = None
    date: str | None = None
    time: str | None = None
    venue: str | None = None
    show_akad: bool | None = None
    akad_date: str | None = None
    akad_time: str | None = None
    akad_venue: str | None = None
    akad_maps_url: str | None = None
    show_resepsi: bool | None = None
    resepsi_date: str | None = None
    resepsi_time: str | None = None
    resepsi_venue: str | None = None
    resepsi_maps_url: str | None = None
    opening_text: str | None = None
    invitation_text: str | None = None
    message: str | None = None
    cover_photo: str | None = None
    bride_photo: str | None = None
    groom_photo: str | None = None
    gallery: list[str] = field(default_factory=list)
    background_music: str | None = None
    social_links: list[dict[str, object]] | None = None
    bank_accounts: list[dict[str, object]] | None = None
    template: str | None = None
    custom_slug: str | None = None
    timezone: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    extra: dict[str, object] = field(default_factory=dict)


# Attribute name -> key used in the stored JSON blob.
_WIRE_FIELDS = (
    ("bride_names", "brideNames"),
    ("groom_names", "groomNames"),
    ("bride_parents", "brideParents"),
    ("groom_parents", "groomParents"),
    ("date", "date"),
    ("time", "time"),
    ("venue", "venue"),
    ("show_akad", "showAkad"),
    ("akad_date", "akadDate"),
    ("akad_time", "akadTime"),
    ("akad_venue", "akadVenue"),
    ("akad_maps_url", "akadMapsUrl"),
    ("show_resepsi", "showResepsi"),
    ("resepsi_date", "resepsiDate"),
    ("resepsi_time", "resepsiTime"),
    ("resepsi_venue", "resepsiVenue"),
    ("resepsi_maps_url", "resepsiMapsUrl"),
    ("opening_text", "openingText"),
    ("invitation_text", "invitationText"),
    ("message", "message"),
    ("cover_photo", "coverPhoto"),
    ("bride_photo", "bridePhoto"),
    ("groom_photo", "groomPhoto"),
    ("background_music", "backgroundMusic"),
    ("social_links", "socialLinks"),
    ("bank_accounts", "bankAccounts"),
    ("template", "template"),
    ("custom_slug", "customSlug"),
    ("timezone", "timezone"),
    ("created_at", "createdAt"),
    ("updated_at", "updatedAt"),
)
_ATTRIBUTE_BY_WIRE_KEY = {wire: attribute for attribute, wire in _WIRE_FIELDS}
_FLAG_ATTRIBUTES = frozenset({"show_akad", "show_resepsi"})
_ENTRY_LIST_ATTRIBUTES = frozenset({"social_links", "bank_accounts"})


def new_invitation_id() -> str:
    """Return a fresh invitation id."""
    return str(uuid4())


def generate_slug(bride_names: str, groom_names: str) -> str:
    """Return a URL slug such as ``wedding-ayu-budi`` for the couple."""
    combined = f"wedding-{bride_names}-{groom_names}".lower()
    return re.sub(r"[^a-z0-9]+", "-", combined).strip("-")


def record_from_wire(payload: dict[str, object]) -> InvitationRecord:
    """Build a record from its stored JSON object.

    Keys the model does not know are kept in ``extra`` so they survive a
    load/save cycle. Raises ValueError when the id is missing or a known
    field holds a value of the wrong JSON type.
    """
    record_id = payload.get("id")
    if record_id is None or record_id == "":
        raise ValueError("Invitation payload has no id")
    values: dict[str, object] = {}
    extra: dict[str, object] = {}
    for key, value in payload.items():
        if key == "id":
            continue
        if key == "gallery":
            values["gallery"] = _gallery_from_wire(value)
            continue
        attribute = _ATTRIBUTE_BY_WIRE_KEY.get(key)
        if attribute is None:
            extra[key] = value
        else:
            _check_field_type(key, attribute, value)
            values[attribute] = value
    return InvitationRecord(id=str(record_id), extra=extra, **values)


def _gallery_from_wire(value: object) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError("Invitation field 'gallery' must be a list of strings")
    return list(value)


def _check_field_type(key: str, attribute: str, value: object) -> None:
    if value is None:
        return
    if attribute in _FLAG_ATTRIBUTES:
        valid = isinstance(value, bool)
    elif attribute in _ENTRY_LIST_ATTRIBUTES:
        valid = isinstance(value, list) and all(isinstance(item, dict) for item in value)
    else:
        valid = isinstance(value, str)
    if not valid:
        raise ValueError(
            f"Invitation field {key!r} has unexpected type {type(value).__name__}"
        )


def record_to_wire(record: InvitationRecord) -> dict[str, object]:
    """Return the JSON object stored for a record, omitting absent fields."""
    payload: dict[str, object] = {"id": record.id}
    for attribute, wire in _WIRE_FIELDS:
        value = getattr(record, attribute)
        if value is not None:
            payload[wire] = value
    payload["gallery"] = list(record.gallery)
    for key, value in record.extra.items():
        payload.setdefault(key, value)
    return payload


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp, treating naive values as UTC."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def recency(record: InvitationRecord) -> datetime | None:
    """Return the record's last-touched time (``updated_at``, else ``date``)."""
    return parse_timestamp(record.updated_at or record.date)


def age_in_days(record: InvitationRecord, now: datetime) -> float | None:
    """Return the record's age in fractional days, or None when unknown."""
    touched = recency(record)
    if touched is None:
        return None
    return (now - touched).total_seconds() / _SECONDS_PER_DAY
