"""Roulette controller.

Owns the listing, the filter range and the phase, and turns user intents
into fetches and spins:

    refresh -> worker fetches off-thread -> update() picks the result up
    spin    -> select_winner() -> SpinAnimator ticks every update()

update() is called once per frame from the UI thread and never blocks.
"""

import logging
import random
import time
from typing import Callable, Optional

from squad_roulette.app.view import (
    EMPTY_TEXT,
    SPIN_LABELS,
    VIEWPORT_HEIGHT,
    RouletteView,
    status_text,
    visible_rows,
)
from squad_roulette.core.events import Event, EventBus, EventType
from squad_roulette.core.state import Phase, StateMachine
from squad_roulette.listing.models import Listing, ServerRecord
from squad_roulette.listing.worker import FetchWorker
from squad_roulette.spin.animator import SpinAnimator
from squad_roulette.spin.selection import select_winner

logger = logging.getLogger(__name__)

SLIDER_MIN = 0
SLIDER_MAX = 100


class RouletteController:
    """Application logic behind the roulette window."""

    def __init__(
        self,
        worker: FetchWorker,
        event_bus: Optional[EventBus] = None,
        state_machine: Optional[StateMachine] = None,
        rng: Optional[random.Random] = None,
        min_players: int = 60,
        max_players: int = 100,
        clock: Callable[[], float] = time.monotonic,
        clipboard: Optional[Callable[[str], None]] = None,
    ):
        self._worker = worker
        self.event_bus = event_bus or EventBus()
        self.state_machine = state_machine or StateMachine()
        self._rng = rng or random.Random()
        self._clock = clock
        self._clipboard = clipboard

        self._min_players = _clamp(min_players)
        self._max_players = _clamp(max_players)

        self._listing = Listing()
        # Nothing fetched yet counts as stale
        self._stale = True
        self._winner: Optional[ServerRecord] = None

        self._animator = SpinAnimator(on_row=self._on_row)

    # Read side

    @property
    def phase(self) -> Phase:
        return self.state_machine.phase

    @property
    def listing(self) -> Listing:
        return self._listing

    @property
    def stale(self) -> bool:
        return self._stale

    @property
    def min_players(self) -> int:
        return self._min_players

    @property
    def max_players(self) -> int:
        return self._max_players

    @property
    def scroll_offset(self) -> float:
        return self._animator.state.current_offset

    @property
    def animator(self) -> SpinAnimator:
        return self._animator

    @property
    def winner(self) -> Optional[ServerRecord]:
        """The winning server, only once the reveal has settled."""
        if self.phase != Phase.SETTLED:
            return None
        return self._winner

    @property
    def can_spin(self) -> bool:
        return (
            not self._stale
            and not self._listing.is_empty
            and not self._worker.in_flight
            and self.phase in (Phase.IDLE, Phase.SETTLED)
        )

    @property
    def can_refresh(self) -> bool:
        return not self._worker.in_flight and self.state_machine.can_transition(Phase.LOADING)

    # Intents

    def set_min_players(self, value: int) -> None:
        self._set_range(min_players=_clamp(value))

    def set_max_players(self, value: int) -> None:
        self._set_range(max_players=_clamp(value))

    def request_refresh(self) -> bool:
        """Start a listing fetch for the current range.

        Returns:
            False if a fetch or spin is already running
        """
        if not self.can_refresh:
            logger.debug(f"Refresh rejected in phase {self.phase.name}")
            return False

        if not self._worker.start(self._min_players, self._max_players):
            return False

        self.state_machine.transition(Phase.LOADING)
        self._stale = False
        self._winner = None
        self.event_bus.emit(Event(
            EventType.FETCH_STARTED,
            data={"min_players": self._min_players, "max_players": self._max_players},
            source="controller",
        ))
        return True

    def request_spin(self) -> bool:
        """Pick a winner and start the reveal.

        Returns:
            False (and nothing changes) if spinning is not allowed right now
        """
        if not self.can_spin:
            logger.debug("Spin rejected")
            return False

        plan = select_winner(self._listing, self._rng)
        if plan is None:
            return False

        self._winner = None
        self.state_machine.transition(Phase.SPINNING)
        self._animator.start(plan, self._clock())
        self.event_bus.emit(Event(
            EventType.SPIN_STARTED,
            data={"duration": plan.duration, "target_row": plan.target_row},
            source="controller",
        ))
        return True

    def copy_winner_name(self) -> Optional[str]:
        """Put the winner's name on the clipboard.

        Returns:
            The copied name, or None if there is no winner yet
        """
        winner = self.winner
        if winner is None:
            return None

        if self._clipboard is not None:
            self._clipboard(winner.name)
        self.event_bus.emit(Event(
            EventType.WINNER_COPIED,
            data={"name": winner.name},
            source="controller",
        ))
        return winner.name

    # Frame

    def update(self) -> None:
        """Per-frame step: collect a finished fetch, advance the spin."""
        listing = self._worker.poll()
        if listing is not None:
            self._apply_listing(listing)

        if self._animator.is_spinning:
            if not self._animator.tick(self._clock()):
                self._finish_spin()

    def view(self, viewport_height: float = VIEWPORT_HEIGHT) -> RouletteView:
        """Build the renderable snapshot for this frame."""
        phase = self.phase
        rows = visible_rows(self._listing, self.scroll_offset, viewport_height)
        return RouletteView(
            phase=phase,
            min_players=self._min_players,
            max_players=self._max_players,
            stale=self._stale,
            server_count=len(self._listing),
            status_text=status_text(self._stale, len(self._listing)),
            spin_label=SPIN_LABELS[phase],
            can_spin=self.can_spin,
            can_refresh=self.can_refresh,
            loading=phase == Phase.LOADING,
            scroll_offset=self.scroll_offset,
            rows=rows,
            empty_text=EMPTY_TEXT if self._listing.is_empty else None,
            winner=self.winner,
        )

    # Internals

    def _set_range(self, min_players: Optional[int] = None, max_players: Optional[int] = None) -> None:
        new_min = self._min_players if min_players is None else min_players
        new_max = self._max_players if max_players is None else max_players
        if (new_min, new_max) == (self._min_players, self._max_players):
            return

        self._min_players, self._max_players = new_min, new_max
        self._stale = True
        self.event_bus.emit(Event(
            EventType.FILTER_CHANGED,
            data={"min_players": new_min, "max_players": new_max},
            source="controller",
        ))

    def _apply_listing(self, listing: Listing) -> None:
        self._listing = listing
        self._animator = SpinAnimator(on_row=self._on_row)

        if self.phase == Phase.LOADING:
            self.state_machine.transition(Phase.SETTLED if listing.is_empty else Phase.IDLE)

        logger.info(f"Listing updated: {len(listing)} servers")
        self.event_bus.emit(Event(
            EventType.LISTING_LOADED,
            data={"count": len(listing)},
            source="controller",
        ))

    def _finish_spin(self) -> None:
        plan = self._animator.plan
        self._winner = plan.winner if plan is not None else None
        self.state_machine.transition(Phase.SETTLED)
        self.event_bus.emit(Event(
            EventType.SPIN_SETTLED,
            data={"name": self._winner.name if self._winner else None},
            source="controller",
        ))

    def _on_row(self, row: int) -> None:
        self.event_bus.emit(Event(EventType.ROW_CLICK, data={"row": row}, source="animator"))


def _clamp(value: int) -> int:
    return max(SLIDER_MIN, min(SLIDER_MAX, int(value)))
