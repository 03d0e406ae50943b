"""Easing curves and range mapping for tweens.

Ease names follow the "family.direction" convention used by browser animation
libraries: ``power2.out``, ``power3.inOut``, ``back.out``. ``none`` and
``linear`` are the identity.
"""

import math
from enum import Enum
from functools import lru_cache
from typing import Callable

Ease = Callable[[float], float]

BACK_OVERSHOOT = 1.70158


class Direction(str, Enum):
    """Which end of the animation the acceleration sits at."""

    IN = "in"
    OUT = "out"
    IN_OUT = "inOut"


def linear(t: float) -> float:
    return t


def _power_in(degree: float) -> Ease:
    return lambda t: math.pow(t, degree)


def _power_out(degree: float) -> Ease:
    return lambda t: 1 - math.pow(1 - t, degree)


def _power_in_out(degree: float) -> Ease:
    def ease(t: float) -> float:
        if t < 0.5:
            return math.pow(2 * t, degree) / 2
        return 1 - math.pow(2 - 2 * t, degree) / 2

    return ease


def back_out(t: float, overshoot: float = BACK_OVERSHOOT) -> float:
    """Run slightly past 1 before settling."""
    u = t - 1
    return u * u * ((overshoot + 1) * u + overshoot) + 1


_POWER_BUILDERS: dict[Direction, Callable[[float], Ease]] = {
    Direction.IN: _power_in,
    Direction.OUT: _power_out,
    Direction.IN_OUT: _power_in_out,
}


@lru_cache(maxsize=None)
def get_ease(name: str) -> Ease:
    """Resolve an ease name like "power3.out" or "back.out".

    powerN is a polynomial of degree N+1 ("power1" is quadratic). A missing
    direction means "out". Unknown names fall back to linear.
    """
    family, _, raw_direction = name.partition(".")
    if family in ("none", "linear"):
        return linear
    if family == "back":
        return back_out

    try:
        direction = Direction(raw_direction or Direction.OUT.value)
    except ValueError:
        direction = Direction.OUT

    digits = family.removeprefix("power")
    if family.startswith("power") and digits.isdigit():
        return _POWER_BUILDERS[direction](int(digits) + 1)
    return linear


def map_range(
    value: float,
    in_min: float = 0.0,
    in_max: float = 1.0,
    out_min: float = 0.0,
    out_max: float = 1.0,
    ease: str = "none",
) -> float:
    """Map ``value`` from one range onto another, clamped to the output range.

    An inverted output range (``out_min > out_max``) is fine; the gallery tilt
    relies on it.
    """
    if in_max == in_min:
        return out_min
    t = min(1.0, max(0.0, (value - in_min) / (in_max - in_min)))
    return out_min + get_ease(ease)(t) * (out_max - out_min)
