"""Per-frame reveal animation.

Advances the scroll offset along the braking curve and reports every
virtual row that passes under the marker. Row detection compares against
the last reported row instead of testing for equality, so each row is
reported exactly once however coarse or uneven the frame times are.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

from squad_roulette.animation.easing import ease_out_brake
from squad_roulette.core.state import Phase
from squad_roulette.spin.selection import ROW_HEIGHT, SpinPlan

logger = logging.getLogger(__name__)

# Below this distance to the target the curve's tail is snapped
CONVERGENCE_EPSILON = 0.5

NO_ROW = -1


@dataclass
class AnimationState:
    """Mutable state of the current reveal."""
    phase: Phase = Phase.IDLE
    elapsed: float = 0.0
    current_offset: float = 0.0
    last_crossed_row: int = NO_ROW


RowCallback = Callable[[int], None]


class SpinAnimator:
    """
    Drives one spin at a time.

    Lifecycle:
        1. start(plan, now) - reset state, enter SPINNING
        2. tick(now) - once per rendered frame until it returns False
        3. further tick() calls are no-ops until the next start()
    """

    def __init__(self, on_row: Optional[RowCallback] = None, row_height: float = ROW_HEIGHT):
        self._on_row = on_row
        self._row_height = row_height
        self._plan: Optional[SpinPlan] = None
        self._start_time = 0.0
        self.state = AnimationState()

    @property
    def plan(self) -> Optional[SpinPlan]:
        return self._plan

    @property
    def is_spinning(self) -> bool:
        return self.state.phase == Phase.SPINNING

    def start(self, plan: SpinPlan, now: float) -> None:
        """Begin animating a new plan, discarding any previous one."""
        self._plan = plan
        self._start_time = now
        self.state = AnimationState(
            phase=Phase.SPINNING,
            elapsed=0.0,
            current_offset=plan.start_offset,
            last_crossed_row=NO_ROW,
        )

    def tick(self, now: float) -> bool:
        """Advance the animation to wall time ``now``.

        Returns:
            True while the reveal is still running
        """
        plan = self._plan
        if plan is None or self.state.phase != Phase.SPINNING:
            return False

        elapsed = max(0.0, now - self._start_time)
        self.state.elapsed = elapsed

        t = elapsed / plan.duration
        if t >= 1.0:
            self._settle(plan)
            return False

        offset = plan.start_offset + (plan.target_offset - plan.start_offset) * ease_out_brake(t)

        if abs(plan.target_offset - offset) < CONVERGENCE_EPSILON:
            self._settle(plan)
            return False

        self.state.current_offset = offset
        self._report_rows(offset)
        return True

    def row_at(self, offset: float) -> int:
        """Virtual row whose centre band contains ``offset``."""
        return math.floor((offset + self._row_height / 2) / self._row_height)

    def _report_rows(self, offset: float) -> None:
        row = self.row_at(offset)
        while self.state.last_crossed_row < row:
            self.state.last_crossed_row += 1
            if self._on_row is not None:
                self._on_row(self.state.last_crossed_row)

    def _settle(self, plan: SpinPlan) -> None:
        self.state.current_offset = plan.target_offset
        # Rows skipped by the final snap still count
        self._report_rows(plan.target_offset)
        self.state.phase = Phase.SETTLED
        logger.info(f"Spin settled on {plan.winner.name!r} after {self.state.elapsed:.2f}s")
