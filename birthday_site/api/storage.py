"""Persistence of configuration documents, keyed by a generated id."""

import asyncio
import json
import logging
import re
import secrets
from pathlib import Path
from typing import Any, Protocol

from ..config import Settings
from .cloudinary import CloudinaryClient, CloudinaryError

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class ConfigNotFound(KeyError):
    """No configuration stored under that id."""


class StorageError(RuntimeError):
    """The backing store failed or returned something unreadable."""


class ConfigRepository(Protocol):
    async def save(self, document: dict[str, Any]) -> str: ...

    async def load(self, site_id: str) -> dict[str, Any]: ...


def new_site_id() -> str:
    """16 hex characters."""
    return secrets.token_hex(8)


def is_safe_id(site_id: str) -> bool:
    """Ids are used in paths and URLs; reject anything that could traverse."""
    return bool(_SAFE_ID.match(site_id))


class LocalConfigRepository:
    """One pretty-printed JSON file per site in ``data_dir``."""

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, site_id: str) -> Path:
        return self.data_dir / f"{site_id}.json"

    async def save(self, document: dict[str, Any]) -> str:
        site_id = new_site_id()
        payload = json.dumps(document, indent=2, ensure_ascii=False)
        try:
            await asyncio.to_thread(self._path(site_id).write_text, payload, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not write {site_id}: {e}") from e
        logger.info(f"Saved site {site_id}")
        return site_id

    async def load(self, site_id: str) -> dict[str, Any]:
        if not is_safe_id(site_id):
            raise ConfigNotFound(site_id)
        path = self._path(site_id)
        if not path.exists():
            raise ConfigNotFound(site_id)
        try:
            raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
            return json.loads(raw)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read or parse data for id {site_id}: {e}")
            raise StorageError(f"Unreadable data for {site_id}") from e


class CloudinaryConfigRepository:
    """Raw JSON resources in a Cloudinary folder."""

    def __init__(self, client: CloudinaryClient, folder: str):
        self._client = client
        self._folder = folder

    async def save(self, document: dict[str, Any]) -> str:
        site_id = new_site_id()
        payload = json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")
        try:
            await self._client.upload(
                payload, f"{site_id}.json", "application/json", self._folder,
                resource_type="raw", public_id=site_id,
            )
        except CloudinaryError as e:
            raise StorageError(f"Failed to save birthday data: {e}") from e
        logger.info(f"Saved site {site_id} to Cloudinary")
        return site_id

    async def load(self, site_id: str) -> dict[str, Any]:
        if not is_safe_id(site_id):
            raise ConfigNotFound(site_id)
        try:
            raw = await self._client.fetch_raw(f"{self._folder}/{site_id}")
        except CloudinaryError as e:
            if e.status_code == 404:
                raise ConfigNotFound(site_id) from e
            raise StorageError(str(e)) from e
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Unreadable data for {site_id}") from e


def create_repository(settings: Settings) -> ConfigRepository:
    """Pick the configured storage backend."""
    if settings.storage_backend == "cloudinary":
        return CloudinaryConfigRepository(CloudinaryClient(settings), settings.cloudinary_data_folder)
    return LocalConfigRepository(settings.data_dir)
