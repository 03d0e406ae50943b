"""Server module - WebSocket and protocol handling."""

from .protocol import (
    DocumentMessage,
    ErrorMessage,
    MountMessage,
    StatusMessage,
    ViewStateMessage,
)
from .remote import RemoteClipboard, RemotePlayerFactory
from .websocket_handler import ViewerSession, websocket_endpoint

__all__ = [
    "DocumentMessage",
    "ErrorMessage",
    "MountMessage",
    "StatusMessage",
    "ViewStateMessage",
    "RemoteClipboard",
    "RemotePlayerFactory",
    "ViewerSession",
    "websocket_endpoint",
]
