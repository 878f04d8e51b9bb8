"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from invitation_store.services.capacity import (
    DEFAULT_CRITICAL_PERCENTAGE,
    DEFAULT_QUOTA_BYTES,
)
from invitation_store.services.retention import (
    DEFAULT_RETENTION_DAYS,
    FORCED_RETENTION_DAYS,
)

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

STORAGE_BACKENDS = frozenset({"file", "memory", "supabase"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    admin_token: str
    storage_backend: str = "file"
    data_dir: str = ".invitation_store"
    storage_namespace: str = "default"
    durable_key: str = "invitations"
    transient_key: str = "temp_invitations"
    quota_bytes: int = Field(default=DEFAULT_QUOTA_BYTES, gt=0)
    critical_percentage: float = Field(default=DEFAULT_CRITICAL_PERCENTAGE, gt=0)
    retention_days: float = Field(default=DEFAULT_RETENTION_DAYS, ge=0)
    forced_retention_days: float = Field(default=FORCED_RETENTION_DAYS, ge=0)
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    upload_api_url: str = "http://localhost:3001"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_storage_backend(raw: str | None) -> str:
    """Normalize the storage backend name, defaulting to ``file``."""
    if raw is None:
        return "file"
    cleaned = raw.strip().lower()
    if not cleaned:
        return "file"
    if cleaned not in STORAGE_BACKENDS:
        raise ValueError(
            f"Unknown storage backend {raw!r}; "
            f"expected one of {', '.join(sorted(STORAGE_BACKENDS))}"
        )
    return cleaned
