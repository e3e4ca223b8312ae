"""Round engine and state management."""

from charlie.game.events import GameEvent, EventType, EventEmitter
from charlie.game.state import GamePhase
from charlie.game.snapshot import CardView, GameSnapshot
from charlie.game.engine import BlackjackGame
from charlie.game.autoplay import AutoPlayDriver

__all__ = [
    "GameEvent",
    "EventType",
    "EventEmitter",
    "GamePhase",
    "CardView",
    "GameSnapshot",
    "BlackjackGame",
    "AutoPlayDriver",
]
