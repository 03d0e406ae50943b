"""HTTP endpoints: saving and loading sites, uploads, the password gate, drafting."""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status

from ..config import Settings
from ..document.media_links import process_video_link
from ..document.presets import default_config
from ..document.schema import BirthdayConfig, DraftRequest, PasswordCheck, SaveResponse
from .drafting import DraftingError, draft_birthday_content
from .storage import ConfigNotFound, ConfigRepository, StorageError
from .uploads import MediaUploader, UploadError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def _repository(request: Request) -> ConfigRepository:
    return request.app.state.repository


def _uploader(request: Request) -> MediaUploader:
    return request.app.state.uploader


@router.post("/birthday", status_code=status.HTTP_201_CREATED, response_model=SaveResponse)
async def save_birthday(config: BirthdayConfig, request: Request):
    """Persist a configuration document and return its new id."""
    try:
        site_id = await _repository(request).save(config.to_json_dict())
    except StorageError as e:
        logger.error(f"Failed to save birthday data: {e}")
        raise HTTPException(status_code=500, detail="Failed to save birthday data.")
    return SaveResponse(id=site_id)


@router.get("/birthday/{site_id}")
async def get_birthday(site_id: str, request: Request):
    """Fetch a stored configuration document."""
    try:
        return await _repository(request).load(site_id)
    except ConfigNotFound:
        raise HTTPException(status_code=404, detail="Birthday site not found.")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to load birthday data.")


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_media(request: Request, media: Optional[UploadFile] = File(None)):
    """Store one photo or video and return the URL it is served from."""
    if media is None or not media.filename:
        raise HTTPException(status_code=400, detail="No file uploaded.")

    content = await media.read()
    limit = _settings(request).max_upload_mb * 1024 * 1024
    if len(content) > limit:
        raise HTTPException(status_code=413, detail="File is too large.")

    try:
        url = await _uploader(request).upload(
            content, media.filename, media.content_type or "application/octet-stream"
        )
    except UploadError as e:
        logger.error(f"Upload failed: {e}")
        raise HTTPException(status_code=500, detail="Upload failed.")
    return {"url": url}


@router.post("/check-password")
async def check_password(body: PasswordCheck, request: Request):
    """Gate for the setup form. An unset site password rejects everything."""
    expected = _settings(request).site_password
    if expected and secrets.compare_digest(body.password.encode(), expected.encode()):
        return {"success": True}
    raise HTTPException(status_code=401, detail="Incorrect password.")


@router.post("/draft")
async def draft_content(body: DraftRequest, request: Request):
    """Draft the site's text fields with Gemini."""
    if not (body.name.strip() and body.relationship.strip() and body.memories.strip()):
        raise HTTPException(status_code=400, detail="Please fill in Name, Relationship, and Memories to use the AI generator.")

    settings = _settings(request)
    if not settings.gemini_api_key:
        raise HTTPException(status_code=503, detail="AI drafting is not configured.")

    try:
        drafted = await draft_birthday_content(
            body.name, body.relationship, body.memories,
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
        )
    except DraftingError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return drafted.model_dump(mode="json", by_alias=True)


@router.get("/media-link")
async def media_link(url: str):
    """Recognize a YouTube or Google Drive link and return its processed form."""
    processed = process_video_link(url)
    if processed is None:
        raise HTTPException(status_code=400, detail="Unrecognized video link.")
    return processed.model_dump(mode="json", by_alias=True, exclude_none=True)


@router.get("/defaults")
async def form_defaults():
    """Starter values for the setup form."""
    return default_config().to_json_dict()
