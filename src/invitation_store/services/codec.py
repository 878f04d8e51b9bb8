"""Data-URI framing for embedded media payloads.

Stored records carry bare base64 so the blob holds no repeated
``data:<mime>;base64,`` headers. Compression treats payloads as opaque:
only ``decode_data_uri`` looks inside the base64.
"""

import base64
import binascii
from collections.abc import Callable
from dataclasses import replace

from invitation_store.domain.invitations import InvitationRecord
from invitation_store.errors import MediaValidationError

IMAGE_MIME = "image/jpeg"
AUDIO_MIME = "audio/mpeg"
_DATA_PREFIX = "data:"


def compress(payload: str) -> str:
    """Strip any data-URI framing and return the bare base64 payload."""
    if not payload or not payload.startswith(_DATA_PREFIX):
        return payload
    _, separator, body = payload.partition(",")
    return body if separator else payload


def decompress(payload: str, mime_hint: str = IMAGE_MIME) -> str:
    """Re-attach data-URI framing to a bare base64 payload."""
    if not payload or payload.startswith(_DATA_PREFIX) or _is_remote(payload):
        return payload
    return f"{_DATA_PREFIX}{mime_hint};base64,{payload}"


def decode_data_uri(payload: str) -> tuple[str, bytes]:
    """Split a base64 data URI into its MIME type and decoded bytes."""
    header, separator, body = payload.partition(",")
    if not header.startswith(_DATA_PREFIX) or not separator:
        raise MediaValidationError("Payload is not a data URI")
    mime_type, _, encoding = header.removeprefix(_DATA_PREFIX).partition(";")
    if encoding != "base64":
        raise MediaValidationError("Only base64 data URIs are supported")
    try:
        content = base64.b64decode(body, validate=True)
    except binascii.Error as exc:
        raise MediaValidationError("Payload is not valid base64") from exc
    return mime_type or "application/octet-stream", content


def compress_record(record: InvitationRecord) -> InvitationRecord:
    """Return a copy of the record with every media field compressed."""
    return _map_media(record, image=compress, audio=compress)


def decompress_record(record: InvitationRecord) -> InvitationRecord:
    """Return a copy of the record with every media field decompressed."""
    return _map_media(
        record,
        image=decompress,
        audio=lambda payload: decompress(payload, AUDIO_MIME),
    )


def _map_media(
    record: InvitationRecord,
    image: Callable[[str], str],
    audio: Callable[[str], str],
) -> InvitationRecord:
    return replace(
        record,
        cover_photo=_apply(image, record.cover_photo),
        bride_photo=_apply(image, record.bride_photo),
        groom_photo=_apply(image, record.groom_photo),
        gallery=[image(item) for item in record.gallery],
        background_music=_apply(audio, record.background_music),
    )


def _apply(transform: Callable[[str], str], value: str | None) -> str | None:
    if not value:
        return None
    return transform(value)


def _is_remote(payload: str) -> bool:
    # base64 never contains ':' so a scheme marks an uploaded media URL.
    return "://" in payload
