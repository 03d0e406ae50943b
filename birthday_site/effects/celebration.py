"""Confetti bursts fired from both edges of the viewport."""

import logging
from dataclasses import asdict, dataclass, field
from typing import Callable, Optional

logger = logging.getLogger(__name__)

CONFETTI_COLORS = ("#ec4899", "#f87171", "#a78bfa", "#ffffff")
CELEBRATION_SECONDS = 5.0


@dataclass(frozen=True)
class ConfettiBurst:
    """One emission, rendered by the client's confetti canvas."""

    particle_count: int
    angle: float
    spread: float
    origin_x: float
    colors: tuple[str, ...] = field(default=CONFETTI_COLORS)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["colors"] = list(self.colors)
        return data


# Left edge shoots up-right, right edge up-left
EDGE_BURSTS = (
    ConfettiBurst(particle_count=2, angle=60, spread=55, origin_x=0.0),
    ConfettiBurst(particle_count=2, angle=120, spread=55, origin_x=1.0),
)

BurstSink = Callable[[list[ConfettiBurst]], None]


class ConfettiRun:
    """One celebration: emits both edge bursts every frame until it ends."""

    def __init__(self, started_at: float, duration: float = CELEBRATION_SECONDS):
        self.started_at = started_at
        self.ends_at = started_at + duration
        self.frames_emitted = 0
        self.done = False

    def tick(self, now: float) -> list[ConfettiBurst]:
        if self.done:
            return []
        self.frames_emitted += 1
        if now >= self.ends_at:
            self.done = True
        return list(EDGE_BURSTS)


class ConfettiCannon:
    """Runs any number of independent confetti runs off the frame clock."""

    def __init__(self, sink: Optional[BurstSink] = None):
        self._sink = sink
        self._runs: list[ConfettiRun] = []

    @property
    def active_runs(self) -> int:
        return len(self._runs)

    def fire(self, now: float, duration: float = CELEBRATION_SECONDS) -> ConfettiRun:
        run = ConfettiRun(now, duration)
        self._runs.append(run)
        logger.info(f"Confetti for {duration}s ({len(self._runs)} active)")
        return run

    def tick(self, now: float) -> list[ConfettiBurst]:
        bursts: list[ConfettiBurst] = []
        for run in self._runs:
            bursts.extend(run.tick(now))
        self._runs = [run for run in self._runs if not run.done]
        if bursts and self._sink:
            self._sink(bursts)
        return bursts

    def clear(self) -> None:
        self._runs.clear()
