"""Services d'application pour orchestrer le moteur ASUDE."""

from .event_bus import EventBus
from .events import (
    EliminationOccurredEvent,
    GameWonEvent,
    MoveRejectedEvent,
    SafetyLineTriggeredEvent,
    StateChangedEvent,
)
from .game_service import GameService
from .scheduler import ManualScheduler, Scheduler, ThreadingScheduler

__all__ = [
    "EventBus",
    "GameService",
    "StateChangedEvent",
    "MoveRejectedEvent",
    "EliminationOccurredEvent",
    "SafetyLineTriggeredEvent",
    "GameWonEvent",
    "Scheduler",
    "ManualScheduler",
    "ThreadingScheduler",
]
