"""Configuration settings for the birthday site server."""

import json
from typing import Annotated, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode


class Settings(BaseSettings):
    """Birthday site configuration settings.

    Defaults run everything locally: configurations and uploads on disk,
    wishes in a SQLite file next to them. Switch the storage/upload backends
    to "cloudinary" for a hosted deployment.
    """

    # Server settings
    host: str = "0.0.0.0"
    port: int = 3000
    # Comma-separated or a JSON list in BIRTHDAY_CORS_ORIGINS
    cors_origins: Annotated[list[str], NoDecode] = ["http://localhost:5173", "http://localhost:3000"]

    # Logging settings
    # Root log level (DEBUG, INFO, WARNING, ERROR)
    log_level: str = "INFO"
    # Module-specific overrides
    log_level_scene: str = "WARNING"  # Very verbose at DEBUG (per frame)
    log_level_presentation: str = "INFO"  # Step transitions, effects
    log_level_server: str = "INFO"  # WebSocket handling
    log_level_api: str = "INFO"  # Persistence, uploads, drafting

    # Storage settings
    data_dir: str = "./data"
    upload_dir: str = "./uploads"
    wishes_db: str = "./data/wishes.sqlite"
    storage_backend: Literal["local", "cloudinary"] = "local"
    upload_backend: Literal["local", "cloudinary"] = "local"
    max_upload_mb: int = 50

    # Cloudinary (only used by the cloudinary backends)
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cloudinary_data_folder: str = "birthday-app-data"
    cloudinary_media_folder: str = "birthday-app-media"

    # Access gate. Empty = every password is rejected.
    site_password: str = ""

    # AI drafting
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"

    # Presentation engine
    render_fps: int = Field(default=60, ge=1, le=240)
    scene_stream_fps: int = Field(default=30, ge=1, le=120)  # scene frames pushed to the client
    shape_count: int = Field(default=25, ge=0)
    star_count: int = Field(default=1500, ge=0)
    default_volume: int = Field(default=30, ge=0, le=100)
    clipboard_timeout_seconds: float = 5.0

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v):
        if not isinstance(v, str):
            return v
        if v.lstrip().startswith("["):
            return json.loads(v)
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    class Config:
        env_prefix = "BIRTHDAY_"
        env_file = ".env"


settings = Settings()
