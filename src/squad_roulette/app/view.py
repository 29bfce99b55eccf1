"""Presentation adapter.

Turns controller state into plain data the window can draw: which rows of
the repeated strip are inside the viewport, where they sit, which one is
under the marker, and the labels around them. Nothing here touches pygame.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional

from squad_roulette.core.state import Phase
from squad_roulette.listing.models import Listing, ServerRecord
from squad_roulette.spin.selection import ROW_HEIGHT, TARGET_SCROLL_ROWS, loop_count

VIEWPORT_HEIGHT = 320.0
EXTRA_ROWS = 10

TITLE = "SQUAD EU ROULETTE"
STALE_TEXT = "Data is stale!"
EMPTY_TEXT = "The list is empty. Refresh the servers!"

SPIN_LABELS = {
    Phase.IDLE: "SPIN!",
    Phase.LOADING: "Loading...",
    Phase.SPINNING: "Spinning...",
    Phase.SETTLED: "SPIN AGAIN!",
}


@dataclass(frozen=True)
class RowView:
    """One visible row of the strip."""
    virtual_index: int
    server: ServerRecord
    y: float  # top edge, relative to the viewport top
    under_marker: bool = False


@dataclass(frozen=True)
class RouletteView:
    """Snapshot of everything the window draws in one frame."""
    phase: Phase
    min_players: int
    max_players: int
    stale: bool
    server_count: int
    status_text: str
    spin_label: str
    can_spin: bool
    can_refresh: bool
    loading: bool
    scroll_offset: float
    rows: List[RowView] = field(default_factory=list)
    empty_text: Optional[str] = None
    winner: Optional[ServerRecord] = None


def repetitions(length: int) -> int:
    """How many times the list is repeated to form the strip.

    Enough to cover the deepest possible target row plus a viewport's
    worth of rows below it.
    """
    if length <= 0:
        return 0
    needed = math.ceil((TARGET_SCROLL_ROWS + EXTRA_ROWS) / length) + 2
    return max(needed, loop_count(length) + 2)


def marker_top(viewport_height: float = VIEWPORT_HEIGHT, row_height: float = ROW_HEIGHT) -> float:
    """Viewport y of the top of the row centred under the marker."""
    return viewport_height / 2 - row_height / 2


def visible_rows(
    listing: Listing,
    scroll_offset: float,
    viewport_height: float = VIEWPORT_HEIGHT,
    row_height: float = ROW_HEIGHT,
) -> List[RowView]:
    """Rows of the repeated strip that intersect the viewport.

    Row k is centred under the marker when ``scroll_offset == k * row_height``.
    """
    length = len(listing)
    if length == 0:
        return []

    total_rows = repetitions(length) * length
    top = scroll_offset - marker_top(viewport_height, row_height)

    first = max(0, math.floor(top / row_height))
    last = min(total_rows - 1, math.floor((top + viewport_height) / row_height))
    marker_row = math.floor((scroll_offset + row_height / 2) / row_height)

    return [
        RowView(
            virtual_index=index,
            server=listing[index % length],
            y=index * row_height - top,
            under_marker=index == marker_row,
        )
        for index in range(first, last + 1)
    ]


def status_text(stale: bool, server_count: int) -> str:
    return STALE_TEXT if stale else f"Servers: {server_count}"
