"""Round settlement: comparing finished hands and paying them."""

from decimal import Decimal
from enum import Enum

from engine.hand import Hand
from engine.strategy.rules import GameRules


class RoundResult(Enum):
    """Outcome of one settled player hand. Unsettled hands have no result (None)."""

    WIN = "win"
    LOSS = "loss"
    PUSH = "push"
    BLACKJACK = "blackjack"
    BUST = "bust"
    SURRENDER = "surrender"

    def __str__(self) -> str:
        return self.value


def determine_round_result(player_hand: Hand, dealer_hand: Hand) -> RoundResult:
    """
    Compare a finished player hand with the dealer's finished hand.

    Precedence: surrender, player bust, blackjacks, dealer bust, then totals.
    A busted player loses even if the dealer also busts. A player natural
    beats any dealer 21 that is not a natural; a dealer natural has no
    special rank, so a player 21 of three or more cards pushes against it.
    """
    if player_hand.is_surrendered:
        return RoundResult.SURRENDER

    player_value = player_hand.value
    dealer_value = dealer_hand.value

    if player_value > 21:
        return RoundResult.BUST

    player_bj = player_hand.is_blackjack
    dealer_bj = dealer_hand.is_blackjack

    if player_bj and not dealer_bj:
        return RoundResult.BLACKJACK
    if player_bj and dealer_bj:
        return RoundResult.PUSH

    if dealer_value > 21:
        return RoundResult.WIN

    if player_value > dealer_value:
        return RoundResult.WIN
    if player_value < dealer_value:
        return RoundResult.LOSS
    return RoundResult.PUSH


def calculate_payout(result: RoundResult | None, bet: int | Decimal, rules: GameRules) -> Decimal:
    """
    Net chips won or lost on a hand.

    Returns:
        Positive for a win, negative for a loss, 0 for a push or an
        unsettled hand
    """
    stake = Decimal(str(bet))
    if result == RoundResult.BLACKJACK:
        return stake * Decimal(str(rules.blackjack_payout))
    if result == RoundResult.WIN:
        return stake
    if result in (RoundResult.LOSS, RoundResult.BUST):
        return -stake
    if result == RoundResult.SURRENDER:
        return -stake / 2
    return Decimal("0")


def settle_insurance(insurance_bet: int | Decimal, dealer_hand: Hand) -> Decimal:
    """Insurance pays 2:1 when the dealer has blackjack, otherwise the stake is lost."""
    stake = Decimal(str(insurance_bet))
    if dealer_hand.is_blackjack:
        return stake * 2
    return -stake
