"""Media upload proxy: local disk for development, Cloudinary when hosted."""

import asyncio
import logging
import secrets
import time
from pathlib import Path
from typing import Protocol

from ..config import Settings
from .cloudinary import CloudinaryClient, CloudinaryError

logger = logging.getLogger(__name__)


class UploadError(RuntimeError):
    """The upload could not be stored."""


class MediaUploader(Protocol):
    async def upload(self, content: bytes, filename: str, content_type: str) -> str:
        """Store the file and return the URL it is served from."""
        ...


def unique_filename(original: str, field: str = "media") -> str:
    suffix = Path(original).suffix.lower()
    return f"{field}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{suffix}"


class LocalUploader:
    """Writes uploads to ``upload_dir``, served under ``/uploads``."""

    def __init__(self, upload_dir: str, url_prefix: str = "/uploads"):
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self.url_prefix = url_prefix.rstrip("/")

    async def upload(self, content: bytes, filename: str, content_type: str) -> str:
        name = unique_filename(filename)
        try:
            await asyncio.to_thread((self.upload_dir / name).write_bytes, content)
        except OSError as e:
            raise UploadError(f"Could not store upload: {e}") from e
        logger.info(f"Stored upload {name} ({len(content)} bytes, {content_type})")
        return f"{self.url_prefix}/{name}"


class CloudinaryUploader:
    """Forwards uploads to Cloudinary and returns the secure URL."""

    def __init__(self, client: CloudinaryClient, folder: str):
        self._client = client
        self._folder = folder

    async def upload(self, content: bytes, filename: str, content_type: str) -> str:
        try:
            result = await self._client.upload(content, filename, content_type, self._folder)
        except CloudinaryError as e:
            raise UploadError(str(e)) from e
        return result["secure_url"]


def create_uploader(settings: Settings) -> MediaUploader:
    """Pick the configured upload backend."""
    if settings.upload_backend == "cloudinary":
        return CloudinaryUploader(CloudinaryClient(settings), settings.cloudinary_media_folder)
    return LocalUploader(settings.upload_dir)
