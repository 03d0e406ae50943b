"""Configuration document: the data contract every birthday site is built from."""

from .schema import (
    BentoItem,
    BirthdayConfig,
    DraftedContent,
    DraftRequest,
    PasswordCheck,
    Photo,
    PlaylistItem,
    ProcessedVideo,
    SaveResponse,
    Video,
    VideoKind,
)
from .media_links import embed_url, google_drive_id, process_video_link, youtube_id
from .presets import DEFAULT_CONFIG, default_config

__all__ = [
    # Schema
    "BentoItem",
    "BirthdayConfig",
    "DraftedContent",
    "DraftRequest",
    "PasswordCheck",
    "Photo",
    "PlaylistItem",
    "ProcessedVideo",
    "SaveResponse",
    "Video",
    "VideoKind",
    # Links
    "embed_url",
    "google_drive_id",
    "process_video_link",
    "youtube_id",
    # Presets
    "DEFAULT_CONFIG",
    "default_config",
]
