"""Animation module for Squad EU Roulette."""

from squad_roulette.animation.easing import (
    BRAKING_POWER,
    Easing,
    ease_out_brake,
    get_easing,
    interpolate,
    interpolate_color,
)

__all__ = [
    "BRAKING_POWER",
    "Easing",
    "ease_out_brake",
    "get_easing",
    "interpolate",
    "interpolate_color",
]
