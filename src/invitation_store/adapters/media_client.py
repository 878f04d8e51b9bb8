"""Client for the media upload endpoint."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from invitation_store.errors import MediaValidationError

_logger = logging.getLogger(__name__)

IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif"})
MAX_IMAGE_BYTES = 5 * 1024 * 1024
MAX_AUDIO_BYTES = 10 * 1024 * 1024


def validate_media(content_type: str, size_bytes: int, kind: str = "image") -> None:
    """Reject media the upload endpoint would not accept."""
    if kind == "image":
        if content_type not in IMAGE_TYPES:
            raise MediaValidationError(
                "Unsupported image type; use JPG, PNG, or GIF."
            )
        limit = MAX_IMAGE_BYTES
    elif kind == "audio":
        if not content_type.startswith("audio/"):
            raise MediaValidationError("File must be an audio file.")
        limit = MAX_AUDIO_BYTES
    else:
        raise ValueError(f"Unknown media kind: {kind}")
    if size_bytes > limit:
        raise MediaValidationError(
            f"File is too large; the maximum is {limit // (1024 * 1024)}MB."
        )


class MediaClient(Protocol):
    """Interface for uploading and deleting invitation media."""

    async def upload(
        self, content: bytes, filename: str, content_type: str, category: str
    ) -> str:
        """Upload an image and return its public URL."""

    async def delete(self, file_path: str) -> bool:
        """Delete an uploaded file; return True on success."""


@dataclass
class HttpxMediaClient(MediaClient):
    """HTTPX-backed client for ``/api/upload/image``."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxMediaClient":
        """Create a media client with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def upload(
        self, content: bytes, filename: str, content_type: str, category: str
    ) -> str:
        """Upload an image under a category and return its public URL."""
        validate_media(content_type, len(content), kind="image")
        response = await self.http_client.post(
            f"{self.base_url}/api/upload/image",
            files={"image": (filename, content, content_type)},
            data={"type": category},
            timeout=30,
        )
        if response.status_code == httpx.codes.BAD_REQUEST:
            raise MediaValidationError(_error_message(response))
        response.raise_for_status()
        payload = response.json()
        file_path = payload.get("filePath")
        if not payload.get("success") or not file_path:
            raise MediaValidationError(payload.get("error") or "Upload rejected")
        return self.public_url(file_path)

    async def delete(self, file_path: str) -> bool:
        """Delete an uploaded file by public URL or server-relative path."""
        relative_path = file_path.removeprefix(f"{self.base_url}/")
        try:
            response = await self.http_client.request(
                "DELETE",
                f"{self.base_url}/api/upload/image",
                json={"filePath": relative_path},
                timeout=15,
            )
            response.raise_for_status()
        except httpx.HTTPError:
            _logger.warning("Failed to delete media %s", relative_path, exc_info=True)
            return False
        return bool(response.json().get("success"))

    def public_url(self, file_path: str) -> str:
        """Return the public URL for a server-relative file path."""
        return f"{self.base_url}/{file_path.lstrip('/')}"

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return "Upload rejected"
    return payload.get("error") or "Upload rejected"
