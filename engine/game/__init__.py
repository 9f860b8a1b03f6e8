"""Game session and round phases."""

from engine.game.events import EventEmitter, EventType, GameEvent
from engine.game.outcome import ActionResult, Reason
from engine.game.state import (
    Betting,
    GamePhase,
    InsuranceOffer,
    Phase,
    PlayerTurn,
    RoundOver,
)
from engine.game.session import GameSession, ProbabilitySnapshot

__all__ = [
    "EventEmitter",
    "EventType",
    "GameEvent",
    "ActionResult",
    "Reason",
    "Betting",
    "GamePhase",
    "InsuranceOffer",
    "Phase",
    "PlayerTurn",
    "RoundOver",
    "GameSession",
    "ProbabilitySnapshot",
]
