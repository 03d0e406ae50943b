"""Decorative scene renderer: the particle field behind every step."""

import asyncio
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np

from ..animation.tween import TweenEngine
from .shapes import SHAPE_TYPES, DecorativeShape, StarField

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]
FrameSink = Callable[["SceneFrame"], None]

# Population bounds (world units): x, y, z extents centred on the origin
BOUNDS = (20.0, 20.0, 10.0)
DISPERSE_OFFSET = 15.0
DISPERSE_Z = 10.0


class Camera:
    """Perspective camera looking down -z from ``z``."""

    def __init__(self, fov: float = 75.0, near: float = 0.1, far: float = 1000.0, z: float = 5.0):
        self.fov = fov
        self.near = near
        self.far = far
        self.z = z
        self.aspect = 1.0
        self.projection = self._projection_matrix()

    def resize(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            logger.debug(f"Ignoring degenerate viewport {width}x{height}")
            return
        self.aspect = width / height
        self.projection = self._projection_matrix()

    def _projection_matrix(self) -> np.ndarray:
        f = 1.0 / math.tan(math.radians(self.fov) / 2)
        near, far = self.near, self.far
        return np.array(
            [
                [f / self.aspect, 0.0, 0.0, 0.0],
                [0.0, f, 0.0, 0.0],
                [0.0, 0.0, (far + near) / (near - far), 2 * far * near / (near - far)],
                [0.0, 0.0, -1.0, 0.0],
            ]
        )


@dataclass
class SceneFrame:
    """Snapshot of the scene published once per frame."""

    frame: int
    time: float
    shapes: list[dict] = field(default_factory=list)
    star_rotation: list[float] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "frame": self.frame,
            "time": round(self.time, 4),
            "shapes": self.shapes,
            "star_rotation": self.star_rotation,
        }


class SceneRenderer:
    """Owns the decorative population and the per-frame loop.

    The loop runs for the lifetime of the viewer, not per step, and also
    drives every registered frame callback (tween engine, confetti).
    ``dispose()`` must be called on teardown.
    """

    def __init__(
        self,
        engine: TweenEngine,
        shape_count: int = 25,
        star_count: int = 1500,
        fps: int = 60,
        rng: Optional[np.random.Generator] = None,
        wall_clock: Callable[[], float] = time.time,
        frame_sink: Optional[FrameSink] = None,
    ):
        self._engine = engine
        self._shape_count = shape_count
        self._star_count = star_count
        self._fps = fps
        self._rng = rng or np.random.default_rng()
        self._wall_clock = wall_clock
        self._frame_sink = frame_sink
        self._frame_callbacks: list[FrameCallback] = []

        self.camera = Camera()
        self.shapes: list[DecorativeShape] = []
        self.star_field: Optional[StarField] = None
        self.last_frame: Optional[SceneFrame] = None
        self._frame_count = 0
        self._task: Optional[asyncio.Task] = None
        self._active = False
        self._disposed = False

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def shape_count(self) -> int:
        return len(self.shapes)

    def add_frame_callback(self, callback: FrameCallback) -> None:
        self._frame_callbacks.append(callback)

    def activate(self, width: int, height: int) -> None:
        """Build the population. Safe to call once per mount."""
        if self._disposed:
            raise RuntimeError("Scene renderer was disposed")
        if self._active:
            return

        self.camera.resize(width, height)
        rng = self._rng
        bounds = np.array(BOUNDS)
        self.shapes = []
        for i in range(self._shape_count):
            shape_cls = SHAPE_TYPES[i % len(SHAPE_TYPES)]
            self.shapes.append(
                shape_cls(
                    position=(rng.random(3) - 0.5) * bounds,
                    rotation=rng.random(3) * math.pi,
                    scale=rng.random() * 0.5 + 0.3,
                    phase=rng.random() * math.pi * 2,
                    speed=rng.random() * 0.3 + 0.1,
                )
            )
        self.star_field = StarField(self._star_count, rng=rng)
        self._active = True
        logger.info(
            f"Scene activated: {len(self.shapes)} shapes, {self.star_field.count} stars, "
            f"viewport {width}x{height}"
        )

    def resize(self, width: int, height: int) -> None:
        self.camera.resize(width, height)

    def render_frame(self, now: Optional[float] = None) -> Optional[SceneFrame]:
        """Run one frame: callbacks, idle animation, publish."""
        if not self._active:
            return None
        now = self._wall_clock() if now is None else now

        for callback in list(self._frame_callbacks):
            callback(now)

        t = now * 0.5
        for shape in self.shapes:
            shape.update(t)
        if self.star_field is not None:
            self.star_field.update(t)

        self._frame_count += 1
        frame = SceneFrame(
            frame=self._frame_count,
            time=now,
            shapes=[shape.to_dict() for shape in self.shapes],
            star_rotation=self.star_field.rotation.tolist() if self.star_field is not None else [],
        )
        self.last_frame = frame
        if self._frame_sink:
            self._frame_sink(frame)
        return frame

    def start(self) -> asyncio.Task:
        """Launch the frame loop on the running event loop."""
        if not self._active:
            raise RuntimeError("Scene renderer must be activated before start()")
        if not self.is_running:
            self._task = asyncio.create_task(self._run())
        return self._task

    async def _run(self) -> None:
        interval = 1.0 / self._fps
        logger.debug(f"Frame loop started at {self._fps} fps")
        try:
            while self._active:
                started = time.monotonic()
                try:
                    self.render_frame()
                except Exception:
                    logger.exception("Frame failed")
                elapsed = time.monotonic() - started
                await asyncio.sleep(max(0.0, interval - elapsed))
        except asyncio.CancelledError:
            logger.debug("Frame loop cancelled")
            raise

    def disperse(self, duration: float = 5.0) -> None:
        """Fade every shape out while pushing it off-screen."""
        rng = self._rng
        for shape in self.shapes:
            dx = DISPERSE_OFFSET if rng.random() > 0.5 else -DISPERSE_OFFSET
            dy = DISPERSE_OFFSET if rng.random() > 0.5 else -DISPERSE_OFFSET
            target = (shape.x + dx, shape.y + dy, DISPERSE_Z)
            shape.move_to(self._engine, target, duration, opacity=0.0, ease="power2.out")
        logger.debug(f"Dispersing {len(self.shapes)} shapes over {duration}s")

    def recall(self, duration: float = 1.0) -> None:
        """Bring every shape back to rest, fully visible."""
        for shape in self.shapes:
            shape.move_to(self._engine, shape.rest_position, duration, opacity=1.0, ease="power2.out")
        logger.debug(f"Recalling {len(self.shapes)} shapes over {duration}s")

    def reset_shapes(self) -> None:
        """Kill shape tweens and snap everything to rest immediately."""
        self._engine.kill_tweens_of(*self.shapes)
        for shape in self.shapes:
            shape.reset()

    def dispose(self) -> None:
        """Stop the loop and release the population. Idempotent."""
        if self._disposed:
            return
        self._active = False
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        if self.shapes:
            self._engine.kill_tweens_of(*self.shapes)
        self.shapes = []
        self.star_field = None
        self._frame_callbacks.clear()
        self._frame_sink = None
        self._disposed = True
        logger.info("Scene disposed")
