"""Animation module - easing curves and the tween engine."""

from .curves import Direction, get_ease, map_range
from .tween import Timeline, Tween, TweenEngine

__all__ = [
    "Direction",
    "get_ease",
    "map_range",
    "Timeline",
    "Tween",
    "TweenEngine",
]
