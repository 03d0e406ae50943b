"""Media module - background music over a streaming embed."""

from .controller import (
    EmbedPlayer,
    EmbedState,
    MediaController,
    PlayerEvents,
    PlayerFactory,
    PlayerState,
    ReadinessNotifier,
)

__all__ = [
    "EmbedPlayer",
    "EmbedState",
    "MediaController",
    "PlayerEvents",
    "PlayerFactory",
    "PlayerState",
    "ReadinessNotifier",
]
