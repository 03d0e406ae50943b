"""Pointer tilt and wheel-to-horizontal-scroll for the photo gallery."""

import logging
from dataclasses import dataclass
from typing import Sequence

from ..animation.curves import map_range
from ..animation.tween import TweenEngine
from ..presentation.panels import polaroid_rotation
from ..presentation.stage import EventTarget, Rect

logger = logging.getLogger(__name__)

MAX_TILT = 10.0  # degrees
TILT_DURATION = 0.5


@dataclass
class PointerEvent:
    client_x: float
    client_y: float


@dataclass
class WheelEvent:
    delta_x: float
    delta_y: float
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass
class PhotoCard:
    """A polaroid in the gallery strip."""

    index: int
    base_rotation: float  # resting in-plane tilt, degrees
    rotate_x: float = 0.0
    rotate_y: float = 0.0

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "base_rotation": self.base_rotation,
            "rotate_x": round(self.rotate_x, 3),
            "rotate_y": round(self.rotate_y, 3),
        }


def cards_for(photo_count: int) -> list[PhotoCard]:
    return [PhotoCard(index=i, base_rotation=polaroid_rotation(i)) for i in range(photo_count)]


@dataclass
class GalleryStrip:
    """Horizontal scroll state of the gallery strip."""

    scroll_left: float = 0.0
    scroll_width: float = 0.0
    client_width: float = 0.0

    @property
    def max_scroll(self) -> float:
        return max(0.0, self.scroll_width - self.client_width)

    def scroll_by(self, delta: float) -> None:
        self.scroll_left = min(self.max_scroll, max(0.0, self.scroll_left + delta))


class GalleryOverlay:
    """Interaction layer active only while the gallery step is on screen."""

    def __init__(
        self,
        engine: TweenEngine,
        container: EventTarget,
        strip_target: EventTarget,
        cards: Sequence[PhotoCard],
    ):
        self._engine = engine
        self._container = container
        self._strip_target = strip_target
        self.cards = list(cards)
        self.bounds = Rect()
        self.strip = GalleryStrip()
        self._attached = False

    @property
    def is_attached(self) -> bool:
        return self._attached

    def set_layout(self, bounds: Rect, scroll_width: float, client_width: float) -> None:
        """Client-reported geometry of the container and strip."""
        self.bounds = bounds
        self.strip.scroll_width = scroll_width
        self.strip.client_width = client_width
        self.strip.scroll_by(0.0)

    def attach(self) -> None:
        if self._attached:
            return
        self._container.add_listener("mousemove", self._on_move)
        self._container.add_listener("mouseleave", self._on_leave)
        self._strip_target.add_listener("wheel", self._on_wheel)
        self._attached = True
        logger.debug("Gallery overlay attached")

    def detach(self) -> None:
        if not self._attached:
            return
        self._container.remove_listener("mousemove", self._on_move)
        self._container.remove_listener("mouseleave", self._on_leave)
        self._strip_target.remove_listener("wheel", self._on_wheel)
        self._engine.kill_tweens_of(*self.cards)
        self._attached = False
        logger.debug("Gallery overlay detached")

    def _on_move(self, event: PointerEvent) -> None:
        rect = self.bounds
        if rect.width <= 0 or rect.height <= 0:
            return
        x = event.client_x - rect.left
        y = event.client_y - rect.top
        self._tilt_all(
            rotate_x=map_range(y, 0, rect.height, MAX_TILT, -MAX_TILT),
            rotate_y=map_range(x, 0, rect.width, -MAX_TILT, MAX_TILT),
        )

    def _on_leave(self, _event=None) -> None:
        self._tilt_all(rotate_x=0.0, rotate_y=0.0)

    def _on_wheel(self, event: WheelEvent) -> None:
        # Mostly-horizontal gestures keep their native behaviour
        if abs(event.delta_x) > abs(event.delta_y):
            return
        event.prevent_default()
        self.strip.scroll_by(event.delta_y)

    def _tilt_all(self, rotate_x: float, rotate_y: float) -> None:
        for card in self.cards:
            self._engine.to(
                card,
                {"rotate_x": rotate_x, "rotate_y": rotate_y},
                TILT_DURATION,
                ease="power1.out",
                overwrite=True,
            )

    def to_dict(self) -> dict:
        return {
            "attached": self._attached,
            "scroll_left": round(self.strip.scroll_left, 2),
            "cards": [card.to_dict() for card in self.cards],
        }
