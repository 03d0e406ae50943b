"""API module - persistence, uploads, password gate and AI drafting."""

from .routes import router
from .storage import (
    CloudinaryConfigRepository,
    ConfigNotFound,
    ConfigRepository,
    LocalConfigRepository,
    StorageError,
    create_repository,
)
from .uploads import CloudinaryUploader, LocalUploader, MediaUploader, UploadError, create_uploader

__all__ = [
    "router",
    # Storage
    "CloudinaryConfigRepository",
    "ConfigNotFound",
    "ConfigRepository",
    "LocalConfigRepository",
    "StorageError",
    "create_repository",
    # Uploads
    "CloudinaryUploader",
    "LocalUploader",
    "MediaUploader",
    "UploadError",
    "create_uploader",
]
