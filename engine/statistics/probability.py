"""Composition-dependent probability and expected value calculations.

All figures are computed exactly from the cards still in the shoe rather
than from infinite-deck tables. The dealer's hand is played out without
replacement; the player's lookahead draws from the current composition.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from engine.cards import Card, Rank, Suit
from engine.hand import Hand, best_value, hand_values
from engine.statistics.composition import CARD_VALUES, DeckComposition, ShoeTracker
from engine.statistics.house_edge import HouseEdgeCalculator, HouseEdgeInfo
from engine.strategy.basic import Action
from engine.strategy.rules import GameRules

logger = logging.getLogger(__name__)

DEALER_FINAL_TOTALS = (17, 18, 19, 20, 21)

SURRENDER_EV = -0.5

_BUST = "bust"
_NATURAL = "blackjack"
_TEN_INDEX = CARD_VALUES.index(10)

# Final dealer totals, plus the bust and natural outcomes, mapped to probabilities
DealerDistribution = dict[int | str, float]


def _add_value(total: int, soft: bool, value: int) -> tuple[int, bool]:
    """Add one card value to a (total, soft) pair, demoting a soft ace on overflow."""
    if value == 11:
        if total + 11 <= 21:
            return total + 11, True
        value = 1
    total += value
    if total > 21 and soft:
        return total - 10, False
    return total, soft


@dataclass(frozen=True)
class DrawProbability:
    """Chance of drawing one rank next and what it does to the hand."""

    rank: Rank
    probability: float
    remaining: int
    resulting_values: tuple[int, ...]
    would_bust: bool


@dataclass(frozen=True)
class DealerOutcomeProbabilities:
    """
    Distribution of the dealer's final hand for one upcard.

    ``final_total_probabilities`` covers 17-21 (naturals included in 21) and
    together with ``bust_probability`` sums to 1. ``expected_value`` is the
    mean final total with busts counted as 0.
    """

    upcard: int | None
    bust_probability: float
    blackjack_probability: float
    expected_value: float
    final_total_probabilities: Mapping[int, float]

    @classmethod
    def empty(cls) -> "DealerOutcomeProbabilities":
        return cls(
            upcard=None,
            bust_probability=0.0,
            blackjack_probability=0.0,
            expected_value=0.0,
            final_total_probabilities=dict.fromkeys(DEALER_FINAL_TOTALS, 0.0),
        )


@dataclass(frozen=True)
class BustProbabilities:
    after_hit: float
    after_double_down: float


@dataclass(frozen=True)
class PlayerDecisionProbabilities:
    """Expected value of each decision, in units of the original bet."""

    stand_ev: float
    hit_ev: float
    double_down_ev: float
    split_ev: float | None
    insurance_ev: float | None
    surrender_ev: float
    optimal_decision: Action | None
    bust_probabilities: BustProbabilities

    @classmethod
    def empty(cls) -> "PlayerDecisionProbabilities":
        """Record returned for queries that have nothing to evaluate."""
        return cls(
            stand_ev=0.0,
            hit_ev=0.0,
            double_down_ev=0.0,
            split_ev=None,
            insurance_ev=None,
            surrender_ev=SURRENDER_EV,
            optimal_decision=None,
            bust_probabilities=BustProbabilities(after_hit=0.0, after_double_down=0.0),
        )


class ProbabilityEngine:
    """
    Probability calculator bound to one shoe.

    Feed it every card as it becomes visible. Results depend only on the
    current composition and are cached until the next update or reset.
    """

    def __init__(self, rules: GameRules | None = None) -> None:
        """
        Initialize the probability engine.

        Args:
            rules: Rule set to use. Defaults to standard rules.
        """
        self._rules = rules or GameRules()
        self._tracker = ShoeTracker(self._rules.num_decks)
        self._cache: dict[tuple, object] = {}

    @property
    def rules(self) -> GameRules:
        return self._rules

    @property
    def composition(self) -> DeckComposition:
        """Current snapshot of the undealt cards."""
        return self._tracker.composition()

    @property
    def tracker(self) -> ShoeTracker:
        return self._tracker

    def update_dealt_cards(self, cards: Iterable[Card]) -> None:
        """Remove newly seen cards from the shoe and update the count."""
        self._tracker.record(cards)
        self._cache.clear()

    def reset_shoe(self) -> None:
        """Start over with a full shoe and a zero count."""
        self._tracker.reset()
        self._cache.clear()
        logger.debug("Probability state reset for a fresh %d-deck shoe", self._rules.num_decks)

    def update_rules(self, rules: GameRules) -> None:
        """Switch rule sets. A different deck count starts a new shoe."""
        if rules.num_decks != self._rules.num_decks:
            self._tracker = ShoeTracker(rules.num_decks)
        self._rules = rules
        self._cache.clear()

    def calculate_draw_probabilities(self, player_cards: Sequence[Card]) -> list[DrawProbability]:
        """
        Probability of each rank being the next card, and its effect on the hand.

        Ranks with no cards left are omitted.
        """
        total = self._tracker.total_cards
        if total == 0:
            return []

        results = []
        for rank in Rank:
            remaining = self._tracker.remaining(rank)
            if remaining == 0:
                continue
            values = hand_values([*player_cards, Card(rank, Suit.SPADES)])
            results.append(
                DrawProbability(
                    rank=rank,
                    probability=remaining / total,
                    remaining=remaining,
                    resulting_values=tuple(values),
                    would_bust=all(v > 21 for v in values),
                )
            )
        return results

    def calculate_dealer_probabilities(self, up_card: Card | None) -> DealerOutcomeProbabilities:
        """
        Distribution of the dealer's final total given the upcard.

        Args:
            up_card: The dealer's visible card

        Returns:
            Outcome probabilities, or an empty record without an upcard or
            with an empty shoe
        """
        if up_card is None or self._tracker.total_cards == 0:
            return DealerOutcomeProbabilities.empty()

        outcomes = self._dealer_outcomes(up_card.value)
        natural = outcomes.get(_NATURAL, 0.0)
        finals = {total: outcomes.get(total, 0.0) for total in DEALER_FINAL_TOTALS}
        finals[21] += natural
        expected = sum(
            (21 if outcome == _NATURAL else outcome) * p
            for outcome, p in outcomes.items()
            if outcome != _BUST
        )
        return DealerOutcomeProbabilities(
            upcard=up_card.value,
            bust_probability=outcomes.get(_BUST, 0.0),
            blackjack_probability=natural,
            expected_value=expected,
            final_total_probabilities=finals,
        )

    def calculate_player_decision_probabilities(
        self,
        player_cards: Sequence[Card],
        dealer_up_card: Card | None,
    ) -> PlayerDecisionProbabilities:
        """
        Expected value of every decision for the player's hand.

        Args:
            player_cards: Cards in the player's hand
            dealer_up_card: Dealer's visible card

        Returns:
            Decision EVs; an empty record when either side is missing, the
            hand is already busted or the shoe is empty
        """
        if not player_cards or dealer_up_card is None or self._tracker.total_cards == 0:
            return PlayerDecisionProbabilities.empty()

        key = ("player", tuple(card.rank for card in player_cards), dealer_up_card.value)
        cached = self._cache.get(key)
        if cached is None:
            cached = self._player_decisions(player_cards, dealer_up_card)
            self._cache[key] = cached
        return cached

    def calculate_house_edge(self) -> HouseEdgeInfo:
        """House edge for the rules, adjusted by the current true count."""
        return HouseEdgeCalculator(self._rules).house_edge_info(self._tracker.true_count)

    def _player_decisions(
        self,
        player_cards: Sequence[Card],
        dealer_up_card: Card,
    ) -> PlayerDecisionProbabilities:
        hand = Hand(list(player_cards))
        if hand.is_busted:
            return PlayerDecisionProbabilities.empty()

        values = hand_values(player_cards)
        total = best_value(values)
        soft = len(values) > 1
        dealer = self._dealer_outcomes(dealer_up_card.value)
        draw = self._draw_weights()
        memo: dict[tuple[int, bool], float] = {}

        if hand.is_blackjack:
            stand_ev = self._rules.blackjack_payout * (1.0 - dealer.get(_NATURAL, 0.0))
        else:
            stand_ev = self._stand_ev(total, dealer)
        hit_ev = self._hit_ev(total, soft, draw, dealer, memo)
        double_ev = self._double_ev(total, soft, draw, dealer)
        bust_after_hit = sum(p for value, p in draw if _add_value(total, soft, value)[0] > 21)

        split_ev = None
        if hand.is_pair:
            split_ev = self._split_ev(player_cards[0].value, draw, dealer, memo)

        insurance_ev = None
        if dealer_up_card.is_ace:
            p_ten = self._tracker.value_counts()[_TEN_INDEX] / self._tracker.total_cards
            insurance_ev = p_ten - (1.0 - p_ten) * 0.5

        choices = {Action.STAND: stand_ev, Action.HIT: hit_ev}
        if len(player_cards) == 2:
            choices[Action.DOUBLE] = double_ev
            if self._rules.surrender_allowed:
                choices[Action.SURRENDER] = SURRENDER_EV
        if split_ev is not None:
            choices[Action.SPLIT] = split_ev
        optimal = max(choices, key=choices.__getitem__)

        return PlayerDecisionProbabilities(
            stand_ev=stand_ev,
            hit_ev=hit_ev,
            double_down_ev=double_ev,
            split_ev=split_ev,
            insurance_ev=insurance_ev,
            surrender_ev=SURRENDER_EV,
            optimal_decision=optimal,
            bust_probabilities=BustProbabilities(
                after_hit=bust_after_hit,
                after_double_down=bust_after_hit,
            ),
        )

    def _draw_weights(self) -> list[tuple[int, float]]:
        total = self._tracker.total_cards
        return [
            (value, count / total)
            for value, count in zip(CARD_VALUES, self._tracker.value_counts())
            if count
        ]

    def _dealer_stands(self, total: int, soft: bool) -> bool:
        if total == 17 and soft:
            return not self._rules.dealer_hits_soft_17
        return total >= 17

    def _dealer_outcomes(self, upcard_value: int) -> DealerDistribution:
        key = ("dealer", upcard_value)
        cached = self._cache.get(key)
        if cached is None:
            start_total, start_soft = _add_value(0, False, upcard_value)
            cached = self._dealer_draw(
                start_total, start_soft, True, self._tracker.value_counts(), {}
            )
            self._cache[key] = cached
        return cached

    def _dealer_draw(
        self,
        total: int,
        soft: bool,
        hole_card: bool,
        counts: tuple[int, ...],
        memo: dict,
    ) -> DealerDistribution:
        key = (total, soft, hole_card, counts)
        if key in memo:
            return memo[key]

        remaining = sum(counts)
        if remaining == 0:
            # Shoe ran dry mid-hand; the dealer keeps what it has
            memo[key] = {total: 1.0}
            return memo[key]

        outcomes: DealerDistribution = {}
        for index, count in enumerate(counts):
            if not count:
                continue
            p = count / remaining
            new_total, new_soft = _add_value(total, soft, CARD_VALUES[index])
            if hole_card and new_total == 21:
                branch = {_NATURAL: 1.0}
            elif new_total > 21:
                branch = {_BUST: 1.0}
            elif self._dealer_stands(new_total, new_soft):
                branch = {new_total: 1.0}
            else:
                drawn = counts[:index] + (count - 1,) + counts[index + 1 :]
                branch = self._dealer_draw(new_total, new_soft, False, drawn, memo)
            for outcome, q in branch.items():
                outcomes[outcome] = outcomes.get(outcome, 0.0) + p * q

        memo[key] = outcomes
        return outcomes

    @staticmethod
    def _stand_ev(total: int, dealer: DealerDistribution) -> float:
        if total > 21:
            return -1.0
        ev = 0.0
        for outcome, p in dealer.items():
            if outcome == _BUST:
                ev += p
            elif outcome == _NATURAL:
                # A drawn 21 pushes a dealer natural
                if total < 21:
                    ev -= p
            elif total > outcome:
                ev += p
            elif total < outcome:
                ev -= p
        return ev

    def _hit_ev(
        self,
        total: int,
        soft: bool,
        draw: list[tuple[int, float]],
        dealer: DealerDistribution,
        memo: dict[tuple[int, bool], float],
    ) -> float:
        key = (total, soft)
        if key in memo:
            return memo[key]
        ev = 0.0
        for value, p in draw:
            new_total, new_soft = _add_value(total, soft, value)
            if new_total > 21:
                ev -= p
            else:
                ev += p * max(
                    self._stand_ev(new_total, dealer),
                    self._hit_ev(new_total, new_soft, draw, dealer, memo),
                )
        memo[key] = ev
        return ev

    def _double_ev(
        self,
        total: int,
        soft: bool,
        draw: list[tuple[int, float]],
        dealer: DealerDistribution,
    ) -> float:
        ev = 0.0
        for value, p in draw:
            new_total, _ = _add_value(total, soft, value)
            ev += p * 2 * self._stand_ev(new_total, dealer)
        return ev

    def _split_ev(
        self,
        card_value: int,
        draw: list[tuple[int, float]],
        dealer: DealerDistribution,
        memo: dict[tuple[int, bool], float],
    ) -> float:
        """EV of splitting, as two hands each starting from one card of the pair."""
        rules = self._rules
        one_card_only = card_value == 11 and not rules.hit_split_aces
        start_total, start_soft = _add_value(0, False, card_value)

        per_hand = 0.0
        for value, p in draw:
            total, soft = _add_value(start_total, start_soft, value)
            best = self._stand_ev(total, dealer)
            if not one_card_only:
                best = max(best, self._hit_ev(total, soft, draw, dealer, memo))
                if rules.double_after_split:
                    best = max(best, self._double_ev(total, soft, draw, dealer))
            per_hand += p * best
        return 2 * per_hand

