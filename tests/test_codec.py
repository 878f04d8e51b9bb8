"""Tests for the media codec."""

import pytest

from invitation_store.domain.invitations import InvitationRecord
from invitation_store.errors import MediaValidationError
from invitation_store.services.codec import (
    compress,
    compress_record,
    decode_data_uri,
    decompress,
    decompress_record,
)
from tests.conftest import AUDIO_B64, IMAGE_B64


def test_compress_strips_data_uri_prefix() -> None:
    assert compress(f"data:image/png;base64,{IMAGE_B64}") == IMAGE_B64


def test_compress_is_idempotent() -> None:
    once = compress(f"data:image/png;base64,{IMAGE_B64}")

    assert compress(once) == once
    assert compress(IMAGE_B64) == IMAGE_B64


def test_decompress_adds_prefix_with_hint() -> None:
    assert decompress(IMAGE_B64) == f"data:image/jpeg;base64,{IMAGE_B64}"
    assert decompress(AUDIO_B64, "audio/mpeg") == f"data:audio/mpeg;base64,{AUDIO_B64}"


def test_decompress_is_idempotent() -> None:
    once = decompress(IMAGE_B64, "image/png")

    assert decompress(once, "image/png") == once
    assert decompress(f"data:image/gif;base64,{IMAGE_B64}") == (
        f"data:image/gif;base64,{IMAGE_B64}"
    )


def test_compress_and_decompress_are_inverses_up_to_prefix() -> None:
    data_uri = f"data:image/jpeg;base64,{IMAGE_B64}"

    assert decompress(compress(data_uri)) == data_uri
    assert compress(decompress(IMAGE_B64)) == IMAGE_B64
    # A non-default MIME type is normalized to the hint.
    assert decompress(compress(f"data:image/png;base64,{IMAGE_B64}")) == data_uri


def test_decompress_leaves_uploaded_urls_alone() -> None:
    url = "https://media.example.test/uploads/cover.jpg"

    assert decompress(url) == url
    assert compress(url) == url


def test_empty_payloads_pass_through() -> None:
    assert compress("") == ""
    assert decompress("") == ""


def test_compress_record_handles_each_media_field() -> None:
    record = InvitationRecord(
        id="inv-1",
        cover_photo=f"data:image/jpeg;base64,{IMAGE_B64}",
        bride_photo=f"data:image/png;base64,{IMAGE_B64}",
        gallery=[
            f"data:image/jpeg;base64,{IMAGE_B64}",
            f"data:image/jpeg;base64,{AUDIO_B64}",
        ],
        background_music=f"data:audio/mpeg;base64,{AUDIO_B64}",
    )

    compressed = compress_record(record)

    assert compressed.cover_photo == IMAGE_B64
    assert compressed.bride_photo == IMAGE_B64
    assert compressed.groom_photo is None
    assert compressed.gallery == [IMAGE_B64, AUDIO_B64]
    assert compressed.background_music == AUDIO_B64


def test_decompress_record_uses_audio_mime_for_music() -> None:
    record = InvitationRecord(
        id="inv-1",
        cover_photo=IMAGE_B64,
        gallery=[IMAGE_B64],
        background_music=AUDIO_B64,
    )

    decompressed = decompress_record(record)

    assert decompressed.cover_photo == f"data:image/jpeg;base64,{IMAGE_B64}"
    assert decompressed.gallery == [f"data:image/jpeg;base64,{IMAGE_B64}"]
    assert decompressed.background_music == f"data:audio/mpeg;base64,{AUDIO_B64}"
    assert decompressed.bride_photo is None


def test_record_codec_normalizes_empty_media_to_absent() -> None:
    record = InvitationRecord(id="inv-1", cover_photo="", background_music="")

    assert compress_record(record).cover_photo is None
    assert decompress_record(record).background_music is None


def test_decode_data_uri_returns_mime_and_bytes() -> None:
    assert decode_data_uri(f"data:image/png;base64,{IMAGE_B64}") == (
        "image/png",
        b"hello",
    )


@pytest.mark.parametrize(
    "payload",
    [
        IMAGE_B64,
        "data:image/png,plain-text",
        "data:image/png;base64,not base64!",
    ],
)
def test_decode_data_uri_rejects_invalid_payloads(payload: str) -> None:
    with pytest.raises(MediaValidationError):
        decode_data_uri(payload)
