"""Core framework components for Squad EU Roulette."""

from .state import Phase, StateMachine
from .events import EventBus, Event, EventType

__all__ = ["Phase", "StateMachine", "EventBus", "Event", "EventType"]
