"""
State machine for the roulette flow.

States:
    IDLE: A listing is loaded (or nothing fetched yet), waiting for a spin
    LOADING: A listing fetch is in flight on the worker thread
    SPINNING: The reveal animation is running
    SETTLED: The reveal has stopped on a winner, or a fetch came back empty
"""

from enum import Enum, auto
from typing import Callable
import logging

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Roulette phases."""
    IDLE = auto()
    LOADING = auto()
    SPINNING = auto()
    SETTLED = auto()


class StateMachine:
    """
    Manages the roulette phase and its transitions.

    Only the transitions listed in VALID_TRANSITIONS are accepted;
    anything else is rejected and logged. Listeners are notified
    after every accepted transition.
    """

    VALID_TRANSITIONS: list[tuple[Phase, Phase]] = [
        # Refresh
        (Phase.IDLE, Phase.LOADING),
        (Phase.SETTLED, Phase.LOADING),

        # Fetch delivered: non-empty goes back to IDLE, empty is a finished state
        (Phase.LOADING, Phase.IDLE),
        (Phase.LOADING, Phase.SETTLED),

        # Spin
        (Phase.IDLE, Phase.SPINNING),
        (Phase.SETTLED, Phase.SPINNING),
        (Phase.SPINNING, Phase.SETTLED),
    ]

    def __init__(self, initial_phase: Phase = Phase.IDLE) -> None:
        self._phase = initial_phase
        self._listeners: list[Callable[[Phase, Phase], None]] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.info(f"StateMachine initialized with phase: {initial_phase.name}")

    @property
    def phase(self) -> Phase:
        """Get current phase."""
        return self._phase

    def can_transition(self, to_phase: Phase) -> bool:
        """Check if transition to given phase is valid."""
        return (self._phase, to_phase) in self._valid_transitions

    def transition(self, to_phase: Phase) -> bool:
        """
        Attempt to transition to a new phase.

        Args:
            to_phase: Target phase

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_phase):
            logger.warning(
                f"Invalid transition: {self._phase.name} -> {to_phase.name}"
            )
            return False

        old_phase = self._phase
        self._phase = to_phase

        logger.info(f"Phase transition: {old_phase.name} -> {to_phase.name}")

        for listener in self._listeners:
            try:
                listener(old_phase, to_phase)
            except Exception as e:
                logger.error(f"Error in phase listener: {e}")

        return True

    def add_listener(self, callback: Callable[[Phase, Phase], None]) -> None:
        """Add a phase change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[Phase, Phase], None]) -> None:
        """Remove a phase change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)
