"""Round phases.

A round is always in exactly one phase, and each phase carries only the
data that is valid while it lasts. Transitions build a new phase value
instead of mutating the current one.

Flow: Betting -> [InsuranceOffer] -> PlayerTurn -> RoundOver -> (next bet)
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum, auto
from typing import ClassVar, Union

from engine.hand import Hand
from engine.resolver import RoundResult


class GamePhase(Enum):
    """Tag identifying which phase a round is in."""

    BETTING = auto()
    INSURANCE_OFFER = auto()
    PLAYER_TURN = auto()
    ROUND_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


@dataclass(frozen=True)
class Betting:
    """Waiting for the first bet of the session."""

    tag: ClassVar[GamePhase] = GamePhase.BETTING


@dataclass(frozen=True)
class InsuranceOffer:
    """
    Dealer shows an ace; the player must take or decline insurance.

    When the player holds a natural the offer also covers even money: a
    sure 1:1 payout in place of a 3:2 win that a dealer blackjack would push.
    """

    tag: ClassVar[GamePhase] = GamePhase.INSURANCE_OFFER

    player_hand: Hand
    dealer_hand: Hand

    @property
    def insurance_cost(self) -> Decimal:
        """Insurance is half the original bet."""
        return Decimal(self.player_hand.bet) / 2

    @property
    def even_money(self) -> bool:
        return self.player_hand.is_blackjack


@dataclass(frozen=True)
class PlayerTurn:
    """The player is acting on ``hands[active_index]``."""

    tag: ClassVar[GamePhase] = GamePhase.PLAYER_TURN

    hands: tuple[Hand, ...]
    dealer_hand: Hand
    active_index: int = 0
    insurance_bet: Decimal = Decimal("0")

    @property
    def active_hand(self) -> Hand:
        return self.hands[self.active_index]

    @property
    def is_finished(self) -> bool:
        """True once every hand has been played."""
        return self.active_index >= len(self.hands)

    def next_hand(self) -> "PlayerTurn":
        return replace(self, active_index=self.active_index + 1)

    def with_split(self, new_hand: Hand) -> "PlayerTurn":
        """Insert a hand split off the active one right after it."""
        i = self.active_index + 1
        return replace(self, hands=self.hands[:i] + (new_hand,) + self.hands[i:])


@dataclass(frozen=True)
class RoundOver:
    """Every hand is settled. Holds the results until the next bet."""

    tag: ClassVar[GamePhase] = GamePhase.ROUND_OVER

    hands: tuple[Hand, ...]
    dealer_hand: Hand
    results: tuple[RoundResult, ...]
    payouts: tuple[Decimal, ...]
    insurance_bet: Decimal = Decimal("0")
    insurance_payout: Decimal = Decimal("0")

    @property
    def net_result(self) -> Decimal:
        """Chips won (positive) or lost (negative) over the whole round."""
        return sum(self.payouts, Decimal("0")) + self.insurance_payout


Phase = Union[Betting, InsuranceOffer, PlayerTurn, RoundOver]


def accepts_bets(phase: Phase) -> bool:
    """A new round can start only when none is in progress."""
    return isinstance(phase, (Betting, RoundOver))


def start_player_turn(
    player_hand: Hand,
    dealer_hand: Hand,
    insurance_bet: Decimal = Decimal("0"),
) -> PlayerTurn:
    return PlayerTurn(hands=(player_hand,), dealer_hand=dealer_hand, insurance_bet=insurance_bet)
