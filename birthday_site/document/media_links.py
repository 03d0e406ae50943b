"""Recognize pasted video links and turn them into processed references."""

import logging
import re
from typing import Optional

from .schema import ProcessedVideo, VideoKind

logger = logging.getLogger(__name__)

_YOUTUBE_RE = re.compile(r"^.*(youtu\.be/|v/|u/\w/|embed/|shorts/|watch\?v=|&v=)([^#&?]*).*")
_DRIVE_RE = re.compile(r"drive\.google\.com/(?:file/d/|open\?id=|uc\?(?:export=\w+&)?id=)([\w-]+)")
_DIRECT_EXTENSIONS = (".mp4", ".webm", ".ogg", ".mov", ".m4v")


def youtube_id(url: str) -> Optional[str]:
    """Extract the 11-character YouTube video id, if any."""
    match = _YOUTUBE_RE.match(url.strip())
    if match and len(match.group(2)) == 11:
        return match.group(2)
    return None


def google_drive_id(url: str) -> Optional[str]:
    """Extract a Google Drive file id, if any."""
    match = _DRIVE_RE.search(url)
    return match.group(1) if match else None


def process_video_link(url: str) -> Optional[ProcessedVideo]:
    """Classify a pasted link.

    Returns None for links nothing can play (the form shows an error).
    """
    url = url.strip()
    if not url:
        return None

    video_id = youtube_id(url)
    if video_id:
        return ProcessedVideo(type=VideoKind.YOUTUBE, id=video_id)

    drive_id = google_drive_id(url)
    if drive_id:
        return ProcessedVideo(type=VideoKind.GOOGLE_DRIVE, id=drive_id)

    path = url.split("?", 1)[0].lower()
    if url.startswith("data:video/") or path.endswith(_DIRECT_EXTENSIONS):
        return ProcessedVideo(type=VideoKind.DATA, url=url)

    logger.debug(f"Unrecognized video link: {url[:80]}")
    return None


def embed_url(video: ProcessedVideo) -> str:
    """URL the client should load for a processed video."""
    if video.type == VideoKind.YOUTUBE:
        return f"https://www.youtube.com/embed/{video.id}"
    if video.type == VideoKind.GOOGLE_DRIVE:
        return f"https://drive.google.com/file/d/{video.id}/preview"
    return video.url or ""
