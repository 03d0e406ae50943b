"""Overlay module - per-step pointer and wheel interaction layers."""

from .gallery import GalleryOverlay, GalleryStrip, PhotoCard, PointerEvent, WheelEvent, cards_for

__all__ = [
    "GalleryOverlay",
    "GalleryStrip",
    "PhotoCard",
    "PointerEvent",
    "WheelEvent",
    "cards_for",
]
