"""Effects module - one-shot celebration and wish launch."""

from .celebration import CONFETTI_COLORS, ConfettiBurst, ConfettiCannon, ConfettiRun
from .launch import WishLaunch, add_launch_elements

__all__ = [
    "CONFETTI_COLORS",
    "ConfettiBurst",
    "ConfettiCannon",
    "ConfettiRun",
    "WishLaunch",
    "add_launch_elements",
]
