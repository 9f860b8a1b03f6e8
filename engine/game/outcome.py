"""Command outcomes reported back to the caller."""

from dataclasses import dataclass
from enum import Enum


class Reason(Enum):
    """Why a command was rejected. The value is the display message."""

    ROUND_IN_PROGRESS = "Finish the current round first"
    NO_ACTIVE_HAND = "There is no hand to play"
    BET_OUT_OF_RANGE = "Bet is outside the table limits"
    INSUFFICIENT_CHIPS = "Not enough chips"
    CANNOT_DOUBLE = "You can only double down on your first two cards"
    NO_DOUBLE_AFTER_SPLIT = "Doubling after a split is not allowed"
    SPLIT_ACES_ONE_CARD = "Split aces receive only one card"
    NOT_A_PAIR = "You can only split a pair"
    MAX_SPLITS_REACHED = "Maximum number of splits reached"
    NO_RESPLIT_ACES = "Aces cannot be resplit"
    SURRENDER_NOT_ALLOWED = "Surrender is not allowed at this table"
    CANNOT_SURRENDER = "You can only surrender your first two cards"
    INSURANCE_NOT_OFFERED = "Insurance is not available"
    EVEN_MONEY_NOT_OFFERED = "Even money is only offered on a blackjack against an ace"
    UNKNOWN_ACTION = "Unknown action"
    SHOE_EXHAUSTED = "The shoe is out of cards"

    @property
    def message(self) -> str:
        return self.value


@dataclass(frozen=True)
class ActionResult:
    """Result of a player command. Rejected commands leave the game unchanged."""

    ok: bool
    reason: Reason | None = None

    @property
    def message(self) -> str:
        return self.reason.message if self.reason else ""

    @classmethod
    def success(cls) -> "ActionResult":
        return cls(ok=True)

    @classmethod
    def reject(cls, reason: Reason) -> "ActionResult":
        return cls(ok=False, reason=reason)

    def __bool__(self) -> bool:
        return self.ok
