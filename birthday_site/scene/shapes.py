"""Decorative 3D shapes floating behind the presentation."""

import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import ClassVar, Optional

import numpy as np

from ..animation.tween import Tween, TweenEngine


class ShapeKind(str, Enum):
    """Decorative shape variants."""

    HEART = "heart"
    GIFT = "gift"
    STAR = "star"


class DecorativeShape(ABC):
    """A non-interactive animated object.

    Phase and speed are fixed at creation so every shape bobs on its own
    schedule. ``rest_position`` is where recall brings it back to.
    """

    kind: ClassVar[ShapeKind]
    # Max rotation change per frame, radians
    wobble: ClassVar[float] = 0.01

    def __init__(
        self,
        position,
        rotation,
        scale: float,
        phase: float,
        speed: float,
    ):
        self.position = np.asarray(position, dtype=np.float64).copy()
        self.rest_position = self.position.copy()
        self.rotation = np.asarray(rotation, dtype=np.float64).copy()
        self.scale = float(scale)
        self.phase = float(phase)
        self.speed = float(speed)
        self.opacity = 1.0

    # Scalar views of the position so the tween engine can animate them
    @property
    def x(self) -> float:
        return float(self.position[0])

    @x.setter
    def x(self, value: float) -> None:
        self.position[0] = value

    @property
    def y(self) -> float:
        return float(self.position[1])

    @y.setter
    def y(self, value: float) -> None:
        self.position[1] = value

    @property
    def z(self) -> float:
        return float(self.position[2])

    @z.setter
    def z(self, value: float) -> None:
        self.position[2] = value

    def oscillation(self, t: float) -> float:
        """Bounded per-frame rotation delta at time ``t``."""
        return math.sin(t * self.speed + self.phase) * self.wobble

    @abstractmethod
    def update(self, t: float) -> None:
        """Advance the idle animation to time ``t`` (seconds)."""

    def move_to(
        self,
        engine: TweenEngine,
        target,
        duration: float,
        opacity: Optional[float] = None,
        ease: str = "power2.out",
    ) -> Tween:
        """Tween to ``target``, killing whatever this shape was doing."""
        props = {"x": float(target[0]), "y": float(target[1]), "z": float(target[2])}
        if opacity is not None:
            props["opacity"] = float(opacity)
        return engine.to(self, props, duration, ease=ease, overwrite=True)

    def reset(self) -> None:
        """Snap back to rest, fully visible."""
        self.position[:] = self.rest_position
        self.opacity = 1.0

    def at_rest(self) -> bool:
        return bool(np.allclose(self.position, self.rest_position)) and self.opacity == 1.0

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "position": [round(v, 4) for v in self.position.tolist()],
            "rotation": [round(v, 4) for v in self.rotation.tolist()],
            "scale": round(self.scale, 4),
            "opacity": round(self.opacity, 4),
        }


class HeartShape(DecorativeShape):
    """Extruded heart mesh; turns around its vertical axis."""

    kind = ShapeKind.HEART

    def update(self, t: float) -> None:
        self.rotation[1] += self.oscillation(t)


class GiftShape(DecorativeShape):
    """Box with ribbon; tumbles slowly on two axes."""

    kind = ShapeKind.GIFT
    wobble = 0.008

    # Box and ribbon parts, relative to the group origin
    PARTS: ClassVar[tuple[tuple[str, tuple[float, float, float]], ...]] = (
        ("box", (0.0, 0.0, 0.0)),
        ("ribbon_x", (0.0, 0.0, 0.0)),
        ("ribbon_z", (0.0, 0.0, 0.0)),
        ("bow", (0.0, 0.55, 0.0)),
    )

    def update(self, t: float) -> None:
        delta = self.oscillation(t)
        self.rotation[0] += delta * 0.5
        self.rotation[1] += delta

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["parts"] = [{"name": name, "offset": list(offset)} for name, offset in self.PARTS]
        return data


class StarShape(DecorativeShape):
    """Five-pointed star drawn as a small point cloud; spins in its plane."""

    kind = ShapeKind.STAR
    wobble = 0.015

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.points = star_outline()

    def update(self, t: float) -> None:
        self.rotation[2] += self.oscillation(t)


def star_outline(points: int = 5, inner: float = 0.4, samples_per_edge: int = 4) -> np.ndarray:
    """Points along a star outline in the XY plane, unit outer radius."""
    angles = np.arange(points * 2) * math.pi / points + math.pi / 2
    radii = np.where(np.arange(points * 2) % 2 == 0, 1.0, inner)
    corners = np.stack([radii * np.cos(angles), radii * np.sin(angles), np.zeros_like(angles)], axis=1)
    nxt = np.roll(corners, -1, axis=0)
    steps = np.linspace(0.0, 1.0, samples_per_edge, endpoint=False)[:, None, None]
    edges = corners[None, :, :] + (nxt - corners)[None, :, :] * steps
    return edges.reshape(-1, 3)


class StarField:
    """Sparse background point cloud. Not a decorative shape: never dispersed."""

    def __init__(self, count: int, spread: float = 100.0, rng: Optional[np.random.Generator] = None):
        rng = rng or np.random.default_rng()
        self.points = (rng.random((count, 3)) - 0.5) * spread
        self.rotation = np.zeros(3)

    @property
    def count(self) -> int:
        return len(self.points)

    def update(self, t: float) -> None:
        self.rotation[1] = t * 0.02
        self.rotation[0] = t * 0.01


SHAPE_TYPES: tuple[type[DecorativeShape], ...] = (HeartShape, GiftShape, StarShape)
