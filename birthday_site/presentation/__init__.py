"""Presentation module - steps, panels and the step sequencer."""

from .stage import Element, EventTarget, Rect, Stage
from .steps import CONTINUE_LABELS, NEXT_STEP, TOTAL_STEPS, Step, coerce_step, panel_id, progress
from .sequencer import StepSequencer
from .panels import polaroid_rotation, render_all, render_panel

__all__ = [
    # Stage
    "Element",
    "EventTarget",
    "Rect",
    "Stage",
    # Steps
    "CONTINUE_LABELS",
    "NEXT_STEP",
    "TOTAL_STEPS",
    "Step",
    "coerce_step",
    "panel_id",
    "progress",
    # Sequencer
    "StepSequencer",
    # Panels
    "polaroid_rotation",
    "render_all",
    "render_panel",
]
