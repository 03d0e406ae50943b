"""WebSocket protocol message schemas for the viewer session."""

from pydantic import BaseModel, Field
from typing import Any, Literal, Optional

from ..document.schema import BirthdayConfig


# Incoming (client -> server)

class MountMessage(BaseModel):
    """Open a viewer for a saved site or an in-memory document."""

    type: Literal["mount"] = "mount"
    site_id: Optional[str] = Field(default=None, description="Saved configuration id")
    config: Optional[BirthdayConfig] = Field(default=None, description="Document handed over directly")
    width: int = Field(default=1280, ge=1)
    height: int = Field(default=720, ge=1)


class GoToStepMessage(BaseModel):
    type: Literal["go_to_step"] = "go_to_step"
    step: int


class PlayTrackMessage(BaseModel):
    type: Literal["play_track"] = "play_track"
    index: int = Field(ge=0)


class AddWishMessage(BaseModel):
    type: Literal["add_wish"] = "add_wish"
    text: str = ""


class RemoveWishMessage(BaseModel):
    type: Literal["remove_wish"] = "remove_wish"
    index: int


class ClipboardResultMessage(BaseModel):
    """Client's answer to a ``clipboard_write`` request."""

    type: Literal["clipboard_result"] = "clipboard_result"
    request_id: int
    ok: bool
    error: Optional[str] = None


class ResizeMessage(BaseModel):
    type: Literal["resize"] = "resize"
    width: int = Field(ge=1)
    height: int = Field(ge=1)


class PointerMessage(BaseModel):
    """Pointer activity over the gallery container."""

    type: Literal["pointer"] = "pointer"
    event: Literal["mousemove", "mouseleave"]
    x: float = 0.0
    y: float = 0.0


class WheelMessage(BaseModel):
    type: Literal["wheel"] = "wheel"
    delta_x: float = 0.0
    delta_y: float = 0.0


class LayoutRect(BaseModel):
    left: float = 0.0
    top: float = 0.0
    width: float = Field(default=0.0, ge=0)
    height: float = Field(default=0.0, ge=0)


class GalleryLayoutMessage(BaseModel):
    """Gallery geometry, reported by the client whenever it changes."""

    type: Literal["gallery_layout"] = "gallery_layout"
    rect: LayoutRect
    scroll_width: float = Field(default=0.0, ge=0)
    client_width: float = Field(default=0.0, ge=0)


class PlayerEventMessage(BaseModel):
    """Events from the client-side embed player."""

    type: Literal["player_event"] = "player_event"
    event: Literal["ready", "state_change"]
    player_id: int
    state: Optional[int] = None


# Outgoing (server -> client)

class DocumentMessage(BaseModel):
    """The document and its rendered panels, sent once after mount."""

    type: Literal["document"] = "document"
    config: dict[str, Any]
    panels: list[dict[str, Any]]
    total_steps: int


class ViewStateMessage(BaseModel):
    type: Literal["view_state"] = "view_state"
    state: dict[str, Any]


class SceneFrameMessage(BaseModel):
    type: Literal["scene_frame"] = "scene_frame"
    frame: dict[str, Any]


class StarFieldMessage(BaseModel):
    """Background star positions, sent once; only the rotation changes later."""

    type: Literal["star_field"] = "star_field"
    points: list[list[float]]


class ConfettiMessage(BaseModel):
    type: Literal["confetti"] = "confetti"
    bursts: list[dict[str, Any]]


class PlayerCommandMessage(BaseModel):
    """Instruction for the client-side embed player."""

    type: Literal["player_command"] = "player_command"
    player_id: int
    command: Literal["create", "playVideo", "pauseVideo", "loadVideoById", "setVolume", "destroy"]
    args: dict[str, Any] = Field(default_factory=dict)


class ClipboardWriteMessage(BaseModel):
    type: Literal["clipboard_write"] = "clipboard_write"
    request_id: int
    text: str


class StartOverMessage(BaseModel):
    """The viewer asked to go back to the setup form."""

    type: Literal["start_over"] = "start_over"


class StatusMessage(BaseModel):
    """Status message from server."""

    type: Literal["status"] = "status"
    status: Literal["connected", "mounted", "unmounted", "error"]
    message: Optional[str] = None


class ErrorMessage(BaseModel):
    """Error message from server."""

    type: Literal["error"] = "error"
    error: str
    code: Optional[str] = None


# Actions that carry no payload
SIMPLE_ACTIONS = (
    "begin",
    "next",
    "go_home",
    "celebrate",
    "launch_wish",
    "toggle_music",
    "copy_wishes",
    "start_over",
)

# Type union for outgoing messages
OutgoingMessage = (
    DocumentMessage | ViewStateMessage | SceneFrameMessage | StarFieldMessage | ConfettiMessage |
    PlayerCommandMessage | ClipboardWriteMessage | StartOverMessage | StatusMessage | ErrorMessage
)
