"""Winner selection and spin planning.

The list is repeated end to end into a virtually infinite strip of rows.
A spin scrolls that strip from offset 0 to the winner's row several loops
down, so the reveal always passes a long run of rows before stopping.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import Optional

from squad_roulette.listing.models import Listing, ServerRecord

logger = logging.getLogger(__name__)

ROW_HEIGHT = 80.0

ANIMATION_MIN_TIME = 10.0  # seconds
ANIMATION_MAX_TIME = 15.0
TARGET_SCROLL_ROWS = 100
MIN_LOOPS = 3
JITTER = 30.0  # distance units either side of the row centre


@dataclass(frozen=True)
class SpinPlan:
    """Everything needed to animate one spin."""

    winner: ServerRecord
    winner_index: int
    loops: int
    target_row: int  # virtual row the reveal stops on
    duration: float
    start_offset: float
    target_offset: float


def loop_count(length: int) -> int:
    """Full passes through the list before the winner's row."""
    return max(MIN_LOOPS, math.ceil(TARGET_SCROLL_ROWS / length))


def _uniform(rng: random.Random, low: float, high: float) -> float:
    """Draw from the half-open range [low, high)."""
    return low + (high - low) * rng.random()


def select_winner(
    listing: Listing,
    rng: Optional[random.Random] = None,
    row_height: float = ROW_HEIGHT,
) -> Optional[SpinPlan]:
    """Pick a winner uniformly and plan the scroll to it.

    Args:
        listing: Current listing
        rng: Random source; a freshly seeded generator if omitted
        row_height: Height of one row in distance units

    Returns:
        SpinPlan, or None if the listing is empty
    """
    if listing.is_empty:
        return None

    rng = rng or random.Random()
    length = len(listing)

    winner_index = rng.randrange(length)
    duration = _uniform(rng, ANIMATION_MIN_TIME, ANIMATION_MAX_TIME)
    jitter = _uniform(rng, -JITTER, JITTER)

    loops = loop_count(length)
    virtual_row = loops * length + winner_index
    target_offset = virtual_row * row_height + jitter

    plan = SpinPlan(
        winner=listing[winner_index],
        winner_index=winner_index,
        loops=loops,
        target_row=virtual_row,
        duration=duration,
        start_offset=0.0,
        target_offset=target_offset,
    )
    logger.info(
        f"Spin planned: {plan.winner.name!r} (index {winner_index}/{length}), "
        f"row {virtual_row}, {duration:.1f}s"
    )
    return plan
