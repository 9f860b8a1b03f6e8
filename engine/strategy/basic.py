"""Basic strategy tables for blackjack."""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Literal, Mapping, Sequence

from engine.cards import Card
from engine.hand import best_value, hand_values
from engine.strategy.rules import GameRules

logger = logging.getLogger(__name__)


class Action(Enum):
    """Possible player actions."""

    HIT = auto()
    STAND = auto()
    DOUBLE = auto()
    SPLIT = auto()
    SURRENDER = auto()
    INSURANCE = auto()

    # Conditional chart entries (fallback if primary not allowed)
    DOUBLE_OR_HIT = auto()  # Double if allowed, else hit
    DOUBLE_OR_STAND = auto()  # Double if allowed, else stand
    SURRENDER_OR_HIT = auto()  # Surrender if allowed, else hit
    SURRENDER_OR_STAND = auto()  # Surrender if allowed, else stand

    def __str__(self) -> str:
        return self.name.replace("_", "/")

    @property
    def label(self) -> str:
        """Lower-case name used by callers ("hit", "double", ...)."""
        return self.name.lower()


HandType = Literal["hard", "soft", "pair"]
ChartKey = tuple[int, int]  # (player total or pair card value, dealer upcard 2-11)

DEALER_UPCARDS = range(2, 12)  # 11 = Ace


@dataclass(frozen=True)
class StrategyChart:
    """Read-only strategy lookup tables built for one rule set."""

    rules: GameRules
    hard: Mapping[ChartKey, Action]
    soft: Mapping[ChartKey, Action]
    pairs: Mapping[ChartKey, Action]


@dataclass(frozen=True)
class Recommendation:
    """A recommended action with a short explanation for display."""

    action: Action | None
    hand_type: HandType
    player_total: int
    dealer_upcard: int
    explanation: str
    deviation: str | None = None


def _fill(table: dict[ChartKey, Action], total: int, action: Action, dealers=DEALER_UPCARDS) -> None:
    for dealer in dealers:
        table[(total, dealer)] = action


def build_hard_table(rules: GameRules) -> Mapping[ChartKey, Action]:
    """Build hard totals strategy table."""
    H = Action.HIT
    S = Action.STAND
    D = Action.DOUBLE_OR_HIT
    Rh = Action.SURRENDER_OR_HIT if rules.surrender_allowed else H
    Rs = Action.SURRENDER_OR_STAND if rules.surrender_allowed else S

    table: dict[ChartKey, Action] = {}

    # Hard 5-8: Always hit
    for total in range(5, 9):
        _fill(table, total, H)

    # Hard 9
    _fill(table, 9, H)
    _fill(table, 9, D, range(3, 7))

    # Hard 10
    _fill(table, 10, H)
    _fill(table, 10, D, range(2, 10))

    # Hard 11: double vs Ace only when the dealer hits soft 17
    _fill(table, 11, D, range(2, 11))
    table[(11, 11)] = D if rules.dealer_hits_soft_17 else H

    # Hard 12
    _fill(table, 12, H)
    _fill(table, 12, S, range(4, 7))

    # Hard 13-16
    for total in range(13, 17):
        _fill(table, total, H)
        _fill(table, total, S, range(2, 7))

    # Surrender cells fall back to hit at 15 and stand at 16+
    table[(15, 10)] = Rh
    for dealer in (9, 10, 11):
        table[(16, dealer)] = Rs

    # Hard 17+: Always stand
    for total in range(17, 22):
        _fill(table, total, S)
    if rules.dealer_hits_soft_17:
        table[(17, 11)] = Rs

    return MappingProxyType(table)


def build_soft_table(rules: GameRules) -> Mapping[ChartKey, Action]:
    """Build soft totals strategy table."""
    H = Action.HIT
    S = Action.STAND
    D = Action.DOUBLE_OR_HIT
    Ds = Action.DOUBLE_OR_STAND
    h17 = rules.dealer_hits_soft_17

    table: dict[ChartKey, Action] = {}

    # Soft 13-14 (A,2 / A,3)
    for total in (13, 14):
        _fill(table, total, H)
        _fill(table, total, D, (5, 6))

    # Soft 15-16 (A,4 / A,5)
    for total in (15, 16):
        _fill(table, total, H)
        _fill(table, total, D, (4, 5, 6))

    # Soft 17 (A,6)
    _fill(table, 17, H)
    _fill(table, 17, D, range(2, 7) if h17 else range(3, 7))

    # Soft 18 (A,7)
    _fill(table, 18, S)
    _fill(table, 18, Ds, range(2, 7) if h17 else range(3, 7))
    _fill(table, 18, H, (9, 10, 11))

    # Soft 19 (A,8)
    _fill(table, 19, S)
    if h17:
        table[(19, 6)] = Ds

    # Soft 20-21
    _fill(table, 20, S)
    _fill(table, 21, S)

    return MappingProxyType(table)


def build_pair_table(rules: GameRules) -> Mapping[ChartKey, Action]:
    """Build pair splitting strategy table, keyed by the pair's card value."""
    H = Action.HIT
    S = Action.STAND
    P = Action.SPLIT
    D = Action.DOUBLE_OR_HIT
    das = rules.double_after_split

    table: dict[ChartKey, Action] = {}

    # Pairs of 2s and 3s
    for pair in (2, 3):
        _fill(table, pair, H)
        _fill(table, pair, P, range(2, 8) if das else range(2, 7))

    # Pair of 4s
    _fill(table, 4, H)
    _fill(table, 4, P, (4, 5, 6) if das else (5, 6))

    # Pair of 5s: Never split, play as hard 10
    _fill(table, 5, H)
    _fill(table, 5, D, range(2, 10))

    # Pair of 6s
    _fill(table, 6, H)
    _fill(table, 6, P, range(2, 8) if das else range(2, 7))

    # Pair of 7s
    _fill(table, 7, H)
    _fill(table, 7, P, range(2, 8))

    # Pair of 8s: Always split
    _fill(table, 8, P)

    # Pair of 9s
    _fill(table, 9, S)
    _fill(table, 9, P, (2, 3, 4, 5, 6, 8, 9))

    # Pair of 10s: Never split
    _fill(table, 10, S)

    # Pair of Aces: Always split
    _fill(table, 11, P)

    return MappingProxyType(table)


def build_strategy_chart(rules: GameRules) -> StrategyChart:
    """Build all three lookup tables for a rule set."""
    chart = StrategyChart(
        rules=rules,
        hard=build_hard_table(rules),
        soft=build_soft_table(rules),
        pairs=build_pair_table(rules),
    )
    logger.debug(
        "Built strategy chart (decks=%d, h17=%s, das=%s, surrender=%s)",
        rules.num_decks,
        rules.dealer_hits_soft_17,
        rules.double_after_split,
        rules.surrender_allowed,
    )
    return chart


def hand_type(cards: Sequence[Card]) -> HandType:
    """Classify a hand as a pair, a soft total or a hard total."""
    if len(cards) == 2 and cards[0].rank == cards[1].rank:
        return "pair"
    if len(hand_values(cards)) > 1:
        return "soft"
    return "hard"


class BasicStrategy:
    """
    Basic strategy lookup tables.

    Pre-computed dictionaries for O(1) lookup, rebuilt as a whole whenever
    the rules change.
    """

    def __init__(self, rules: GameRules | None = None) -> None:
        """
        Initialize basic strategy for given rules.

        Args:
            rules: Rule set to generate strategy for. Uses default if None.
        """
        self._chart = build_strategy_chart(rules or GameRules())

    @property
    def rules(self) -> GameRules:
        """Return the rule set the current chart was built for."""
        return self._chart.rules

    @property
    def chart(self) -> StrategyChart:
        """Return the current strategy chart."""
        return self._chart

    def update_rules(self, rules: GameRules) -> None:
        """Replace the chart with one built for new rules."""
        self._chart = build_strategy_chart(rules)

    def get_action(
        self,
        player_total: int,
        dealer_upcard: int,
        is_soft: bool = False,
        is_pair: bool = False,
        pair_rank: int | None = None,
        can_double: bool = True,
        can_surrender: bool = True,
        can_split: bool = True,
    ) -> Action:
        """
        Get the basic strategy action from totals.

        Args:
            player_total: Player's hand total
            dealer_upcard: Dealer's upcard value (2-11, Ace=11)
            is_soft: Whether the hand is soft
            is_pair: Whether the hand is a pair
            pair_rank: The card value of the pair (2-11)
            can_double: Whether doubling is allowed
            can_surrender: Whether surrender is allowed
            can_split: Whether splitting is allowed

        Returns:
            The recommended action
        """
        chart = self._chart

        if is_pair and can_split and pair_rank is not None:
            action = chart.pairs.get((pair_rank, dealer_upcard))
            if action:
                return self._resolve_action(action, can_double, can_surrender)

        if is_soft:
            action = chart.soft.get((player_total, dealer_upcard))
        else:
            action = chart.hard.get((player_total, dealer_upcard))
        if action:
            return self._resolve_action(action, can_double, can_surrender)

        # Totals outside the charts (hard 4, soft 12)
        if player_total >= 17:
            return Action.STAND
        return Action.HIT

    def _resolve_action(
        self,
        action: Action,
        can_double: bool,
        can_surrender: bool,
    ) -> Action:
        """Resolve conditional actions based on what's allowed."""
        if action == Action.DOUBLE_OR_HIT:
            return Action.DOUBLE if can_double else Action.HIT
        if action == Action.DOUBLE_OR_STAND:
            return Action.DOUBLE if can_double else Action.STAND
        if action == Action.SURRENDER_OR_HIT:
            return Action.SURRENDER if can_surrender else Action.HIT
        if action == Action.SURRENDER_OR_STAND:
            return Action.SURRENDER if can_surrender else Action.STAND
        return action

    def get_recommended_action(
        self,
        player_cards: Sequence[Card],
        dealer_up_card: Card | None,
        can_surrender: bool | None = None,
        can_double: bool = True,
        can_split: bool = True,
    ) -> Action | None:
        """
        Recommend an action for a hand against the dealer's upcard.

        Pairs are checked first, then soft totals, then hard totals.
        Doubling and surrender are only offered on the first two cards.

        Returns:
            The action, ``None`` for a busted hand, or ``STAND`` when
            either hand is missing.
        """
        if not player_cards or dealer_up_card is None:
            return Action.STAND

        values = hand_values(player_cards)
        total = best_value(values)
        if total > 21:
            return None

        if can_surrender is None:
            can_surrender = self.rules.surrender_allowed
        first_two = len(player_cards) == 2

        kind = hand_type(player_cards)
        action = self.get_action(
            player_total=total,
            dealer_upcard=dealer_up_card.value,
            is_soft=len(values) > 1,
            is_pair=kind == "pair",
            pair_rank=player_cards[0].value,
            can_double=can_double and first_two,
            can_surrender=can_surrender and first_two,
            can_split=can_split,
        )
        logger.debug(
            "Recommend %s for %s vs %s",
            action.label,
            " ".join(str(c) for c in player_cards),
            dealer_up_card,
        )
        return action

    def advise(
        self,
        player_cards: Sequence[Card],
        dealer_up_card: Card | None,
        can_surrender: bool | None = None,
        can_double: bool = True,
        can_split: bool = True,
    ) -> Recommendation:
        """Recommend an action and explain it in one sentence."""
        action = self.get_recommended_action(
            player_cards, dealer_up_card, can_surrender, can_double, can_split
        )
        if not player_cards or dealer_up_card is None:
            return Recommendation(action, "hard", 0, 0, "Waiting for cards.")

        total = best_value(hand_values(player_cards))
        upcard = dealer_up_card.value
        kind = hand_type(player_cards)
        if kind == "pair" and not can_split:
            kind = "soft" if len(hand_values(player_cards)) > 1 else "hard"
        return Recommendation(
            action=action,
            hand_type=kind,
            player_total=total,
            dealer_upcard=upcard,
            explanation=_explain(action, kind, total, player_cards, upcard),
        )


_VERBS = {
    Action.HIT: "Hit",
    Action.STAND: "Stand",
    Action.DOUBLE: "Double down",
    Action.SPLIT: "Split",
    Action.SURRENDER: "Surrender",
}


def _explain(
    action: Action | None,
    kind: HandType,
    total: int,
    cards: Sequence[Card],
    upcard: int,
) -> str:
    dealer = "A" if upcard == 11 else str(upcard)
    if action is None:
        return f"Hand is busted at {total}; no action is available."

    if kind == "pair":
        pair = cards[0].rank
        subject = f"a pair of {pair}s"
        if action == Action.SPLIT and cards[0].value in (8, 11):
            return f"Split {pair}s against a dealer {dealer}: always split aces and eights."
        if cards[0].value == 10 and action == Action.STAND:
            return f"Stand on {subject}: 20 is too strong to break up."
    else:
        subject = f"{kind} {total}"

    sentence = f"{_VERBS[action]} with {subject} against a dealer {dealer}"
    if action == Action.SURRENDER:
        return f"{sentence}: giving up half the bet loses less than playing on."
    if action == Action.DOUBLE:
        return f"{sentence}: the dealer is weak enough to press the advantage."
    if action == Action.STAND and upcard <= 6 and total < 17:
        return f"{sentence}: let the dealer risk busting."
    return f"{sentence}."
