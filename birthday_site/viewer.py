"""The birthday presentation viewer: wires every engine component to one document."""

import logging
import time
from typing import Callable, Optional

import numpy as np

from .animation.tween import TweenEngine
from .document.schema import BirthdayConfig
from .effects.celebration import CELEBRATION_SECONDS, ConfettiCannon, BurstSink
from .effects.launch import WishLaunch, add_launch_elements
from .media.controller import MediaController, PlayerFactory, ReadinessNotifier
from .overlay.gallery import GalleryOverlay, PointerEvent, WheelEvent, cards_for
from .presentation.panels import render_all
from .presentation.sequencer import StepSequencer
from .presentation.stage import Rect, Stage
from .presentation.steps import Step, panel_id
from .scene.renderer import FrameSink, SceneRenderer
from .wishes.ledger import Clipboard, WishLedger
from .wishes.store import LocalStore

logger = logging.getLogger(__name__)

RECALL_SECONDS = 1.0


class BirthdayViewer:
    """One viewer session for one configuration document.

    The document is read once at construction and never modified. Every
    user action is a method here; the sequencer is the spine and the other
    components react to step changes or to the action itself.
    """

    def __init__(
        self,
        config: BirthdayConfig,
        *,
        store: LocalStore,
        clipboard: Clipboard,
        player_factory: PlayerFactory,
        notifier: Optional[ReadinessNotifier] = None,
        on_start_over: Optional[Callable[[], None]] = None,
        engine: Optional[TweenEngine] = None,
        shape_count: int = 25,
        star_count: int = 1500,
        fps: int = 60,
        default_volume: int = 30,
        rng: Optional[np.random.Generator] = None,
        wall_clock: Callable[[], float] = time.time,
        frame_sink: Optional[FrameSink] = None,
        burst_sink: Optional[BurstSink] = None,
    ):
        self.config = config
        self.engine = engine or TweenEngine()
        self._on_start_over = on_start_over
        self._mounted = False

        self.stage = Stage()
        for step in Step:
            self.stage.add_panel(panel_id(step))
        add_launch_elements(self.stage)

        self.sequencer = StepSequencer(self.engine, self.stage)
        self.sequencer.on_step_change(self._on_step_change)

        self.renderer = SceneRenderer(
            self.engine,
            shape_count=shape_count,
            star_count=star_count,
            fps=fps,
            rng=rng,
            wall_clock=wall_clock,
            frame_sink=frame_sink,
        )
        self.confetti = ConfettiCannon(burst_sink)
        self.renderer.add_frame_callback(self._advance_animations)

        self.notifier = notifier or ReadinessNotifier()
        self.media = MediaController(
            player_factory,
            self.notifier,
            playlist=config.playlist,
            default_volume=default_volume,
        )
        self.ledger = WishLedger(config.recipient_name, store, clipboard, self.engine)
        self.gallery = GalleryOverlay(
            self.engine,
            self.stage.gallery_container,
            self.stage.gallery_strip,
            cards_for(len(config.photos)),
        )
        self.launcher = WishLaunch(self.engine, self.stage, self.renderer)

    @property
    def current_step(self) -> Step:
        return self.sequencer.current_step

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    def panels(self) -> list[dict]:
        return render_all(self.config)

    def mount(self, width: int = 1280, height: int = 720, start_loops: bool = True) -> None:
        """Build the scene, restore wishes, show the first step.

        With ``start_loops`` the frame loop and music initialization start on
        the running event loop; tests drive ``engine.tick`` by hand instead.
        """
        if self._mounted:
            return
        self.ledger.load()
        self.renderer.activate(width, height)
        self.sequencer.mount()
        if start_loops:
            self.renderer.start()
            self.media.start()
        self._mounted = True
        logger.info(
            f"Viewer mounted for {self.config.recipient_name!r}: "
            f"{len(self.config.photos)} photos, {len(self.config.playlist)} tracks, "
            f"{len(self.ledger)} saved wishes"
        )

    def unmount(self) -> None:
        """Tear everything down. The frame loop and the player must not outlive this."""
        if not self._mounted:
            return
        self.gallery.detach()
        self.renderer.dispose()
        self.media.teardown()
        self.confetti.clear()
        self.engine.kill_all()
        self._mounted = False
        logger.info("Viewer unmounted")

    # Navigation

    def begin(self) -> bool:
        """Start the music (if the player is ready) and move to the birthday step."""
        self.media.play()
        return self.sequencer.go_to_step(Step.BIRTHDAY)

    def advance(self) -> bool:
        return self.sequencer.advance()

    def go_to_step(self, step) -> bool:
        return self.sequencer.go_to_step(step)

    def go_home(self) -> bool:
        self.renderer.recall(RECALL_SECONDS)
        return self.sequencer.go_to_step(Step.WELCOME)

    def start_over(self) -> None:
        """Hand control back to whoever hosts the viewer (edit or recreate)."""
        if self._on_start_over:
            self._on_start_over()

    # Effects

    def celebrate(self) -> None:
        self.renderer.reset_shapes()
        self.confetti.fire(self.engine.now(), CELEBRATION_SECONDS)
        self.renderer.disperse(CELEBRATION_SECONDS)

    def launch_wish(self) -> bool:
        wish = self.ledger.launch()
        if wish is None:
            return False
        return self.launcher.start(wish)

    # Music

    def toggle_music(self) -> None:
        self.media.toggle_music()

    def play_track(self, index: int) -> None:
        self.media.play_track(index)

    # Wishes

    def add_wish(self, text: str) -> bool:
        return self.ledger.add(text)

    def remove_wish(self, index: int) -> bool:
        return self.ledger.remove(index)

    async def copy_wishes(self) -> str:
        return await self.ledger.export_as_text()

    # Input and layout

    def resize(self, width: int, height: int) -> None:
        self.renderer.resize(width, height)

    def set_gallery_layout(self, bounds: Rect, scroll_width: float, client_width: float) -> None:
        self.gallery.set_layout(bounds, scroll_width, client_width)

    def pointer_move(self, x: float, y: float) -> int:
        return self.stage.gallery_container.dispatch("mousemove", PointerEvent(x, y))

    def pointer_leave(self) -> int:
        return self.stage.gallery_container.dispatch("mouseleave", None)

    def wheel(self, delta_x: float, delta_y: float) -> WheelEvent:
        event = WheelEvent(delta_x, delta_y)
        self.stage.gallery_strip.dispatch("wheel", event)
        return event

    def snapshot(self) -> dict:
        """Serializable view state for the client."""
        return {
            "step": int(self.sequencer.current_step),
            "target_step": int(self.sequencer.target_step),
            "progress": self.sequencer.progress,
            "transitioning": self.sequencer.is_transitioning,
            "stage": self.stage.to_dict(),
            "gallery": self.gallery.to_dict(),
            "music": {
                "state": self.media.state.value,
                "is_playing": self.media.is_playing,
                "current_track": self.media.current_track,
            },
            "wishes": {
                "entries": self.ledger.entries,
                "status": self.ledger.status,
                "is_launched": self.ledger.is_launched,
                "launched_wish": self.ledger.launched_wish,
            },
            "scene": {
                "shape_count": self.renderer.shape_count,
                "disposed": self.renderer.is_disposed,
            },
        }

    def _advance_animations(self, _now: float) -> None:
        now = self.engine.now()
        self.engine.tick(now)
        self.confetti.tick(now)

    def _on_step_change(self, old: Step, new: Step) -> None:
        if new == Step.GALLERY:
            self.gallery.attach()
        elif old == Step.GALLERY:
            self.gallery.detach()
