"""Spin planning and reveal animation."""

from .selection import ROW_HEIGHT, SpinPlan, loop_count, select_winner
from .animator import CONVERGENCE_EPSILON, NO_ROW, AnimationState, SpinAnimator

__all__ = [
    "ROW_HEIGHT",
    "SpinPlan",
    "loop_count",
    "select_winner",
    "CONVERGENCE_EPSILON",
    "NO_ROW",
    "AnimationState",
    "SpinAnimator",
]
