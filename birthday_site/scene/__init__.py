"""Scene module - decorative 3D particle field."""

from .shapes import DecorativeShape, GiftShape, HeartShape, ShapeKind, StarField, StarShape
from .renderer import Camera, SceneFrame, SceneRenderer

__all__ = [
    "DecorativeShape",
    "GiftShape",
    "HeartShape",
    "ShapeKind",
    "StarField",
    "StarShape",
    "Camera",
    "SceneFrame",
    "SceneRenderer",
]
