"""Minimal signed-upload client for Cloudinary."""

import hashlib
import logging
import time
from typing import Any, Optional

import httpx

from ..config import Settings

logger = logging.getLogger(__name__)

API_BASE = "https://api.cloudinary.com/v1_1"
DELIVERY_BASE = "https://res.cloudinary.com"


class CloudinaryError(RuntimeError):
    """Cloudinary rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """SHA-1 signature over the sorted, non-empty upload parameters."""
    payload = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] not in (None, ""))
    return hashlib.sha1(f"{payload}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryClient:
    """Uploads and fetches resources with account credentials from settings."""

    def __init__(self, settings: Settings, http: Optional[httpx.AsyncClient] = None):
        if not (settings.cloudinary_cloud_name and settings.cloudinary_api_key and settings.cloudinary_api_secret):
            raise CloudinaryError("Cloudinary credentials are not configured")
        self._cloud = settings.cloudinary_cloud_name
        self._api_key = settings.cloudinary_api_key
        self._api_secret = settings.cloudinary_api_secret
        self._http = http

    async def upload(
        self,
        content: bytes,
        filename: str,
        content_type: str,
        folder: str,
        resource_type: str = "auto",
        public_id: Optional[str] = None,
    ) -> dict[str, Any]:
        """Upload a file and return Cloudinary's JSON response."""
        params = {"folder": folder, "public_id": public_id, "timestamp": int(time.time())}
        params = {k: v for k, v in params.items() if v is not None}
        data = {**params, "api_key": self._api_key, "signature": sign_params(params, self._api_secret)}
        url = f"{API_BASE}/{self._cloud}/{resource_type}/upload"
        files = {"file": (filename, content, content_type)}

        try:
            response = await self._request("POST", url, data=data, files=files, timeout=60)
        except httpx.HTTPError as e:
            raise CloudinaryError(f"Upload failed: {e}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error(f"Cloudinary upload rejected ({response.status_code}): {message}")
            raise CloudinaryError(message, response.status_code)
        return response.json()

    async def fetch_raw(self, public_id: str) -> bytes:
        """Download a raw resource by public id."""
        url = f"{DELIVERY_BASE}/{self._cloud}/raw/upload/{public_id}"
        try:
            response = await self._request("GET", url, timeout=15)
        except httpx.HTTPError as e:
            raise CloudinaryError(f"Fetch failed: {e}") from e
        if response.status_code >= 400:
            raise CloudinaryError(f"Fetch of {public_id} failed", response.status_code)
        return response.content

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        if self._http is not None:
            return await self._http.request(method, url, **kwargs)
        async with httpx.AsyncClient() as client:
            return await client.request(method, url, **kwargs)


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"HTTP {response.status_code}"
