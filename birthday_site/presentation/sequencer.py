"""Step sequencer state machine for the birthday presentation."""

import logging
from typing import Callable, Optional

from ..animation.tween import Timeline, TweenEngine
from .stage import Stage
from .steps import NEXT_STEP, Step, coerce_step, panel_id, progress

logger = logging.getLogger(__name__)

StepChangeCallback = Callable[[Step, Step], None]

# Transition timings (seconds)
EXIT_DURATION = 0.4
ENTRY_DURATION = 0.6
INTRO_DURATION = 1.0
INTRO_DELAY = 0.5


class StepSequencer:
    """State machine for moving between presentation steps.

    Owns the current step and the panel transitions. The exit animation of
    the current panel always finishes before the next panel is revealed, so
    two panels are never interactive at once.
    """

    def __init__(self, engine: TweenEngine, stage: Stage):
        self._engine = engine
        self._stage = stage
        self._current_step: Step = Step.WELCOME
        self._pending_step: Optional[Step] = None
        self._transition: Optional[Timeline] = None
        self._intro_played: bool = False
        self._listeners: list[StepChangeCallback] = []

    @property
    def current_step(self) -> Step:
        return self._current_step

    @property
    def target_step(self) -> Step:
        """Step we are on, or heading to if a transition is in flight."""
        return self._pending_step or self._current_step

    @property
    def is_transitioning(self) -> bool:
        return self._transition is not None and self._transition.is_active

    @property
    def progress(self) -> float:
        return progress(self._current_step)

    def on_step_change(self, callback: StepChangeCallback) -> None:
        """Register a callback fired as ``callback(old, new)`` on each commit."""
        self._listeners.append(callback)

    def mount(self) -> None:
        """Show the first panel, with its one-time entrance."""
        for step in Step:
            panel = self._stage.panel(panel_id(step))
            if panel:
                panel.visible = step == Step.WELCOME

        first = self._stage.panel(panel_id(Step.WELCOME))
        if first is None or self._intro_played:
            return
        self._intro_played = True
        first.opacity = 0.0
        first.scale = 1.1
        self._engine.to(
            first,
            {"opacity": 1.0, "scale": 1.0},
            INTRO_DURATION,
            ease="power3.out",
            delay=INTRO_DELAY,
        )

    def go_to_step(self, step) -> bool:
        """Transition to ``step``. Returns False when nothing happens."""
        target = coerce_step(step)
        if target is None:
            logger.debug(f"Ignoring unknown step {step!r}")
            return False
        if target == self.target_step:
            return False

        # Snap any in-flight transition to its end before starting the next one
        if self.is_transitioning:
            self._transition.complete()

        current_panel = self._stage.panel(panel_id(self._current_step))
        next_panel = self._stage.panel(panel_id(target))
        if current_panel is None or next_panel is None:
            logger.debug(f"Missing panel for step {self._current_step} -> {target}, ignoring")
            return False

        # Drop leftover tweens (e.g. the intro) so they don't fight the exit
        self._engine.kill_tweens_of(current_panel, next_panel)

        self._pending_step = target
        self._transition = (
            self._engine.timeline(on_complete=self._clear_transition)
            .to(current_panel, {"opacity": 0.0, "scale": 0.9}, EXIT_DURATION, ease="power3.in")
            .set(current_panel, {"visible": False})
            .set(next_panel, {"opacity": 0.0, "scale": 1.1, "visible": True})
            .call(lambda: self._commit(target))
            .to(next_panel, {"opacity": 1.0, "scale": 1.0}, ENTRY_DURATION, ease="power3.out")
        )
        logger.info(f"Transitioning step {int(self._current_step)} -> {int(target)}")
        return True

    def advance(self) -> bool:
        """Go to the step after the current one."""
        next_step = NEXT_STEP.get(self.target_step)
        if next_step is None:
            return False
        return self.go_to_step(next_step)

    def _commit(self, target: Step) -> None:
        old = self._current_step
        self._current_step = target
        self._pending_step = None
        for callback in list(self._listeners):
            callback(old, target)

    def _clear_transition(self) -> None:
        self._transition = None
