"""Tests for configuration helpers."""

import pytest

from invitation_store.config import Settings, parse_storage_backend


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, "file"),
        ("", "file"),
        ("  Memory ", "memory"),
        ("SUPABASE", "supabase"),
    ],
)
def test_parse_storage_backend(raw: str | None, expected: str) -> None:
    assert parse_storage_backend(raw) == expected


def test_parse_storage_backend_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="expected one of"):
        parse_storage_backend("s3")


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ADMIN_TOKEN", "from-env")
    monkeypatch.setenv("QUOTA_BYTES", "2048")
    monkeypatch.setenv("RETENTION_DAYS", "14")

    settings = Settings()

    assert settings.admin_token == "from-env"
    assert settings.quota_bytes == 2048
    assert settings.retention_days == 14
    assert settings.critical_percentage == 90
