"""Notifications a game session publishes as a round progresses."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from itertools import count
from typing import Any, Callable


class EventType(Enum):
    ROUND_STARTED = auto()
    ROUND_ENDED = auto()
    BET_PLACED = auto()
    RULES_CHANGED = auto()

    CARD_DEALT = auto()
    SHOE_SHUFFLED = auto()

    PLAYER_HIT = auto()
    PLAYER_STAND = auto()
    PLAYER_DOUBLE = auto()
    PLAYER_SPLIT = auto()
    PLAYER_SURRENDER = auto()

    INSURANCE_OFFERED = auto()
    INSURANCE_TAKEN = auto()
    INSURANCE_DECLINED = auto()
    EVEN_MONEY_TAKEN = auto()

    DEALER_REVEALS = auto()
    DEALER_HITS = auto()
    DEALER_STANDS = auto()
    DEALER_BLACKJACK = auto()

    HAND_SETTLED = auto()
    ACTION_REJECTED = auto()


@dataclass(frozen=True)
class GameEvent:
    """One thing that happened at the table, numbered in publish order."""

    event_type: EventType
    sequence: int
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"#{self.sequence} {self.event_type.name} {self.data}"


EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Fan-out of session events to subscribed handlers.

    A handler registered with ``event_type=None`` hears everything. The
    most recent ``max_history`` events are retained for inspection.
    """

    def __init__(self, max_history: int = 500) -> None:
        self._listeners: dict[EventType | None, list[EventHandler]] = {}
        self._recent: deque[GameEvent] = deque(maxlen=max_history)
        self._sequence = count(1)

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        self._listeners.setdefault(event_type, []).append(handler)

    def emit(self, event_type: EventType, **data: Any) -> GameEvent:
        """Record an event and deliver it to its listeners, specific ones first."""
        event = GameEvent(event_type=event_type, sequence=next(self._sequence), data=data)
        self._recent.append(event)
        for handler in [*self._listeners.get(event_type, []), *self._listeners.get(None, [])]:
            handler(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        return list(self._recent)
