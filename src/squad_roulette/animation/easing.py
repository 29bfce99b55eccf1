"""Easing functions for the roulette reveal.

All functions take a normalized time t (0.0 to 1.0) and return a normalized value.
The reveal uses a 7th-power ease-out ("braking" curve): very fast initial
motion followed by a long decelerating tail.
"""

from enum import Enum, auto
from typing import Callable

BRAKING_POWER = 7


class Easing(Enum):
    """Available easing function types."""

    LINEAR = auto()
    EASE_OUT_QUAD = auto()
    BRAKE = auto()


# Type alias for easing functions
EasingFunc = Callable[[float], float]


def linear(t: float) -> float:
    """Linear interpolation (no easing)."""
    return t


def ease_out_quad(t: float) -> float:
    """Decelerate to zero velocity."""
    return 1 - (1 - t) * (1 - t)


def ease_out_power(t: float, power: int) -> float:
    """Decelerate to zero velocity with an arbitrary integer exponent."""
    if t >= 1.0:
        return 1.0
    return 1 - pow(1 - t, power)


def ease_out_brake(t: float) -> float:
    """Slot-machine braking curve, 1 - (1 - t)^7."""
    return ease_out_power(t, BRAKING_POWER)


_EASING_FUNCTIONS: dict[Easing, EasingFunc] = {
    Easing.LINEAR: linear,
    Easing.EASE_OUT_QUAD: ease_out_quad,
    Easing.BRAKE: ease_out_brake,
}

_EASING_BY_NAME: dict[str, Easing] = {e.name.lower(): e for e in Easing}


def get_easing(easing: Easing | str) -> EasingFunc:
    """Get an easing function by enum or name.

    Args:
        easing: Easing enum value or string name (e.g., "brake")

    Returns:
        The easing function

    Raises:
        ValueError: If easing name is not recognized
    """
    if isinstance(easing, str):
        easing_enum = _EASING_BY_NAME.get(easing.lower())
        if easing_enum is None:
            raise ValueError(f"Unknown easing function: {easing}")
        easing = easing_enum

    return _EASING_FUNCTIONS[easing]


def interpolate(start: float, end: float, t: float, easing: Easing | str = Easing.LINEAR) -> float:
    """Interpolate between two values using an easing function.

    Args:
        start: Starting value
        end: Ending value
        t: Progress (0.0 to 1.0)
        easing: Easing function to use

    Returns:
        Interpolated value
    """
    easing_func = get_easing(easing)
    eased_t = easing_func(max(0.0, min(1.0, t)))
    return start + (end - start) * eased_t


def interpolate_color(
    start: tuple[int, int, int],
    end: tuple[int, int, int],
    t: float,
    easing: Easing | str = Easing.LINEAR
) -> tuple[int, int, int]:
    """Interpolate between two RGB colors."""
    return (
        int(interpolate(start[0], end[0], t, easing)),
        int(interpolate(start[1], end[1], t, easing)),
        int(interpolate(start[2], end[2], t, easing)),
    )
