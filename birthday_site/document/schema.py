"""Configuration document models for a birthday site."""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class _DocumentModel(BaseModel):
    """Shared config: camelCase on the wire, snake_case in Python, immutable."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class VideoKind(str, Enum):
    """Where a video is hosted."""

    YOUTUBE = "youtube"          # Streaming embed, by id
    GOOGLE_DRIVE = "googledrive"  # Streaming embed, by id
    DATA = "data"                # Direct file, by url


class BentoItem(_DocumentModel):
    """One "thing I adore about you" tile."""

    icon: str = ""
    title: str = ""
    text: str = ""


class Photo(_DocumentModel):
    """A still image in the gallery."""

    url: str
    caption: str = ""


class ProcessedVideo(_DocumentModel):
    """A video reference resolved from whatever link the author pasted."""

    type: VideoKind
    id: Optional[str] = None
    url: Optional[str] = None

    @model_validator(mode="after")
    def check_reference(self) -> "ProcessedVideo":
        if self.type == VideoKind.DATA:
            if not self.url or self.id:
                raise ValueError("direct-file videos need a url and no id")
        elif not self.id or self.url:
            raise ValueError(f"{self.type.value} videos need an id and no url")
        return self


class Video(_DocumentModel):
    """A captioned video."""

    caption: str = ""
    processed: ProcessedVideo


class PlaylistItem(_DocumentModel):
    """A background music track."""

    title: str = ""
    type: Literal["youtube"] = "youtube"
    id: str


class BirthdayConfig(_DocumentModel):
    """Complete birthday site definition.

    Every collection may be absent (or null) in stored documents; those
    normalize to empty lists so rendering never has to check.
    """

    recipient_name: str = ""
    welcome_message: str = ""
    birthday_message: str = ""
    bento_items: list[BentoItem] = Field(default_factory=list)
    gallery_title: str = ""
    photos: list[Photo] = Field(default_factory=list)
    videos: list[Video] = Field(default_factory=list)
    gallery_closing: str = ""
    wish_message: str = ""
    wish_description: str = ""
    final_message: str = ""
    playlist: list[PlaylistItem] = Field(default_factory=list)
    letter: str = ""

    # Authoring metadata, only used to re-seed the setup form
    relationship: Optional[str] = None
    memories: Optional[str] = None

    @field_validator("bento_items", "photos", "videos", "playlist", mode="before")
    @classmethod
    def default_empty(cls, v):
        return [] if v is None else v

    @property
    def initial_track(self) -> Optional[PlaylistItem]:
        """Track loaded when the viewer mounts."""
        return self.playlist[0] if self.playlist else None

    def to_json_dict(self) -> dict:
        """Serialize with the camelCase keys the client expects."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DraftRequest(BaseModel):
    """Inputs for AI text drafting."""

    name: str = ""
    relationship: str = ""
    memories: str = ""


class DraftedContent(_DocumentModel):
    """Fields the AI drafts for the setup form."""

    welcome_message: str
    birthday_message: str
    bento_items: list[BentoItem]
    wish_message: str
    letter: str
    final_message: str


class SaveResponse(BaseModel):
    """Returned after a configuration is persisted."""

    id: str
    message: str = "Birthday site created successfully."


class PasswordCheck(BaseModel):
    """Password gate request."""

    password: str = ""
