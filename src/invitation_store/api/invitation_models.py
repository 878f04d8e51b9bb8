"""Pydantic models for invitation request payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from invitation_store.domain.invitations import InvitationRecord, record_from_wire


class InvitationPayload(BaseModel):
    """Invitation draft body, keyed by the camelCase names of the stored JSON.

    Keys the model does not declare are accepted and kept on the record.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

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
    gallery: list[str] = []
    background_music: str | None = None
    social_links: list[dict[str, object]] | None = None
    bank_accounts: list[dict[str, object]] | None = None
    template: str | None = None
    custom_slug: str | None = None
    timezone: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_record(self, invitation_id: str) -> InvitationRecord:
        """Build the record stored under ``invitation_id``."""
        wire = self.model_dump(by_alias=True, exclude_none=True)
        return record_from_wire({**wire, "id": invitation_id})
