"""Scripted "send your wish to the stars" sequence."""

import logging
from typing import Optional

from ..animation.tween import Timeline, TweenEngine
from ..presentation.stage import Element, Stage
from ..scene.renderer import SceneRenderer

logger = logging.getLogger(__name__)

WISH_ENTRY_ID = "wish-entry"
LAUNCHED_WISH_ID = "launched-wish"
CONFIRMATION_ID = "launch-confirmation"

SCATTER_SECONDS = 3.0
RISE_DISTANCE = -300.0


def add_launch_elements(stage: Stage) -> None:
    """Register the elements the launch animates."""
    stage.add_element(WISH_ENTRY_ID)
    stage.add_element(LAUNCHED_WISH_ID, visible=False, opacity=0.0, scale=0.0)
    stage.add_element(CONFIRMATION_ID, visible=False, opacity=0.0)


class WishLaunch:
    """Plays the launch choreography once. Cannot be interrupted once started."""

    def __init__(self, engine: TweenEngine, stage: Stage, renderer: SceneRenderer):
        self._engine = engine
        self._stage = stage
        self._renderer = renderer
        self._timeline: Optional[Timeline] = None
        self.wish_text: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self._timeline is not None and self._timeline.is_active

    @property
    def is_complete(self) -> bool:
        return self._timeline is not None and self._timeline.finished

    def start(self, wish: str) -> bool:
        if self._timeline is not None:
            return False

        entry = self._element(WISH_ENTRY_ID)
        text = self._element(LAUNCHED_WISH_ID)
        confirmation = self._element(CONFIRMATION_ID)
        self.wish_text = wish

        self._renderer.disperse(SCATTER_SECONDS)
        self._timeline = (
            self._engine.timeline(on_complete=lambda: logger.info("Wish launch finished"))
            .to(entry, {"opacity": 0.0}, 0.5, ease="power2.in")
            .set(entry, {"visible": False})
            .set(text, {"visible": True, "opacity": 1.0, "scale": 0.0, "y": 0.0})
            .to(text, {"scale": 1.0}, 0.8, ease="back.out")
            .to(text, {"y": RISE_DISTANCE, "opacity": 0.0}, 2.0, ease="power2.in")
            .set(text, {"visible": False})
            .set(confirmation, {"visible": True, "opacity": 0.0})
            .to(confirmation, {"opacity": 1.0}, 1.0, ease="power1.out")
        )
        logger.info(f"Launching wish: {wish[:40]!r}")
        return True

    def _element(self, element_id: str) -> Element:
        element = self._stage.element(element_id)
        if element is None:
            add_launch_elements(self._stage)
            element = self._stage.element(element_id)
        return element
