"""The fixed narrative sequence a birthday site walks through."""

from enum import IntEnum
from typing import Optional


class Step(IntEnum):
    """One full-screen panel in the presentation."""

    WELCOME = 1
    BIRTHDAY = 2
    REASONS = 3   # Bento grid of things I adore
    GALLERY = 4
    VIDEOS = 5
    PLAYLIST = 6
    LETTER = 7
    WISH = 8


TOTAL_STEPS = len(Step)

# Where the "continue" button on each step leads
NEXT_STEP: dict[Step, Optional[Step]] = {
    Step.WELCOME: Step.BIRTHDAY,
    Step.BIRTHDAY: Step.REASONS,
    Step.REASONS: Step.GALLERY,
    Step.GALLERY: Step.VIDEOS,
    Step.VIDEOS: Step.PLAYLIST,
    Step.PLAYLIST: Step.LETTER,
    Step.LETTER: Step.WISH,
    Step.WISH: None,
}

# Button labels, shown by the client
CONTINUE_LABELS: dict[Step, str] = {
    Step.WELCOME: "Let's Begin",
    Step.BIRTHDAY: "There's more...",
    Step.REASONS: "Remember this?",
    Step.GALLERY: "Watch our moments",
    Step.VIDEOS: "Our soundtrack",
    Step.PLAYLIST: "Read my letter to you",
    Step.LETTER: "One last thing...",
}


def coerce_step(value) -> Optional[Step]:
    """Turn a raw step number into a Step, or None if there is no such step."""
    if isinstance(value, Step):
        return value
    try:
        return Step(int(value))
    except (TypeError, ValueError):
        return None


def panel_id(step: Step) -> str:
    return f"step-{int(step)}"


def progress(step: Step) -> float:
    """Progress bar fill, 0 on the first step and 1 on the last."""
    return (int(step) - 1) / (TOTAL_STEPS - 1)
