"""Time-driven tweens, sequential timelines and delayed calls.

Everything here is advanced explicitly by ``TweenEngine.tick(now)`` from the
render loop; nothing runs on its own. That keeps animation deterministic
under a manual clock in tests.

Cancellation is per target: ``kill_tweens_of(target)`` (or ``overwrite=True``
on ``to``) kills every in-flight tween on that object before a new one
starts, so conflicting animations never blend.
"""

import logging
import time
from typing import Any, Callable, Optional, Union

from .curves import get_ease

logger = logging.getLogger(__name__)


class Tween:
    """Interpolates numeric attributes of a target from their current values."""

    def __init__(
        self,
        target: Any,
        props: dict[str, float],
        duration: float,
        ease: str = "power1.out",
        delay: float = 0.0,
        on_complete: Optional[Callable[[], None]] = None,
    ):
        self.target = target
        self.props = dict(props)
        self.duration = max(0.0, duration)
        self.delay = max(0.0, delay)
        self.on_complete = on_complete
        self._ease = get_ease(ease)
        self._start_time: Optional[float] = None
        self._from: dict[str, float] = {}
        self._began = False
        self.killed = False
        self.finished = False

    @property
    def end_time(self) -> Optional[float]:
        if self._start_time is None:
            return None
        return self._start_time + self.duration

    def start(self, now: float) -> None:
        """Schedule the tween to begin ``delay`` seconds after ``now``."""
        self._start_time = now + self.delay

    def kill(self) -> None:
        """Stop where it is. ``on_complete`` never fires."""
        self.killed = True

    def update(self, now: float) -> bool:
        """Advance to ``now``. Returns True once finished or killed."""
        if self.killed or self.finished:
            return True
        if self._start_time is None:
            self.start(now)
        if now < self._start_time:
            return False

        if not self._began:
            # Capture start values when the tween actually begins, not when created
            self._from = {k: float(getattr(self.target, k)) for k in self.props}
            self._began = True

        if self.duration == 0:
            progress = 1.0
        else:
            progress = min(1.0, (now - self._start_time) / self.duration)

        if progress >= 1.0:
            self._apply_end()
            return True

        eased = self._ease(progress)
        for key, end in self.props.items():
            start = self._from[key]
            setattr(self.target, key, start + (end - start) * eased)
        return False

    def complete(self) -> None:
        """Jump straight to the end state and fire ``on_complete``."""
        if self.killed or self.finished:
            return
        self._apply_end()

    def _apply_end(self) -> None:
        for key, end in self.props.items():
            setattr(self.target, key, end)
        self.finished = True
        if self.on_complete:
            self.on_complete()


class Timeline:
    """Sequential animation: each entry starts when the previous one ends."""

    def __init__(self, start_time: float, on_complete: Optional[Callable[[], None]] = None):
        self.on_complete = on_complete
        self._entries: list[Union[Tween, Callable[[], None]]] = []
        self._index = 0
        self._cursor = start_time  # when the next entry starts
        self.killed = False
        self.finished = False

    def to(
        self,
        target: Any,
        props: dict[str, float],
        duration: float,
        ease: str = "power1.out",
        delay: float = 0.0,
    ) -> "Timeline":
        self._entries.append(Tween(target, props, duration, ease=ease, delay=delay))
        return self

    def set(self, target: Any, props: dict[str, Any]) -> "Timeline":
        def apply() -> None:
            for key, value in props.items():
                setattr(target, key, value)

        self._entries.append(apply)
        return self

    def call(self, fn: Callable[[], None]) -> "Timeline":
        self._entries.append(fn)
        return self

    @property
    def is_active(self) -> bool:
        return not (self.killed or self.finished)

    def kill(self) -> None:
        self.killed = True

    def update(self, now: float) -> bool:
        """Advance to ``now``. Returns True once finished or killed."""
        if self.killed or self.finished:
            return True

        while self._index < len(self._entries):
            entry = self._entries[self._index]
            if isinstance(entry, Tween):
                if entry.end_time is None:
                    entry.start(self._cursor)
                if not entry.update(now):
                    return False
                self._cursor = entry.end_time
            else:
                entry()
                if self.killed:
                    return True
            self._index += 1

        self._finish()
        return True

    def complete(self) -> None:
        """Run every remaining entry to its end state immediately."""
        if self.killed or self.finished:
            return
        while self._index < len(self._entries):
            entry = self._entries[self._index]
            self._index += 1
            if isinstance(entry, Tween):
                entry.complete()
            else:
                entry()
        self._finish()

    def _finish(self) -> None:
        self.finished = True
        if self.on_complete:
            self.on_complete()


Animation = Union[Tween, Timeline]


class TweenEngine:
    """Owns every running animation and advances them on ``tick``."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._animations: list[Animation] = []

    def now(self) -> float:
        return self._clock()

    @property
    def active_count(self) -> int:
        return len(self._animations)

    def to(
        self,
        target: Any,
        props: dict[str, float],
        duration: float,
        ease: str = "power1.out",
        delay: float = 0.0,
        on_complete: Optional[Callable[[], None]] = None,
        overwrite: bool = False,
    ) -> Tween:
        """Start a tween on ``target``.

        With ``overwrite`` every other tween on the same target is killed
        first (last writer wins).
        """
        if overwrite:
            self.kill_tweens_of(target)
        tween = Tween(target, props, duration, ease=ease, delay=delay, on_complete=on_complete)
        tween.start(self.now())
        self._animations.append(tween)
        return tween

    def timeline(self, on_complete: Optional[Callable[[], None]] = None) -> Timeline:
        timeline = Timeline(self.now(), on_complete=on_complete)
        self._animations.append(timeline)
        return timeline

    def delayed_call(self, delay: float, fn: Callable[[], None]) -> Tween:
        """Call ``fn`` after ``delay`` seconds of engine time."""
        tween = Tween(None, {}, 0.0, delay=delay, on_complete=fn)
        tween.start(self.now())
        self._animations.append(tween)
        return tween

    def tweens_of(self, target: Any) -> list[Tween]:
        return [
            a for a in self._animations
            if isinstance(a, Tween) and a.target is target and not a.killed and not a.finished
        ]

    def kill_tweens_of(self, *targets: Any) -> int:
        """Kill in-flight tweens on the given targets. Returns how many died."""
        killed = 0
        for anim in self._animations:
            if isinstance(anim, Tween) and not anim.killed and any(anim.target is t for t in targets):
                anim.kill()
                killed += 1
        if killed:
            self._animations = [a for a in self._animations if not a.killed]
        return killed

    def kill_all(self) -> None:
        for anim in self._animations:
            anim.kill()
        self._animations.clear()

    def tick(self, now: Optional[float] = None) -> None:
        """Advance every animation to ``now`` (engine clock by default)."""
        if now is None:
            now = self.now()
        # Callbacks may start or kill animations while we iterate
        for anim in list(self._animations):
            if anim.killed:
                continue
            try:
                done = anim.update(now)
            except Exception:
                logger.exception("Animation callback failed; dropping animation")
                anim.kill()
                done = True
            if done and anim in self._animations:
                self._animations.remove(anim)
        self._animations = [a for a in self._animations if not a.killed]
