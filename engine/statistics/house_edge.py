"""House edge calculations."""

from dataclasses import dataclass
from decimal import Decimal

from engine.strategy.rules import GameRules


@dataclass(frozen=True)
class EdgeFactors:
    """Contribution of each rule group to the house edge, in percentage points."""

    blackjack_payout_contribution: Decimal
    dealer_hits_soft_17_contribution: Decimal
    deck_count_contribution: Decimal
    other_rules_contribution: Decimal

    @property
    def total(self) -> Decimal:
        return (
            self.blackjack_payout_contribution
            + self.dealer_hits_soft_17_contribution
            + self.deck_count_contribution
            + self.other_rules_contribution
        )


@dataclass(frozen=True)
class HouseEdgeInfo:
    """House edge for the rules, and after adjusting for the current count."""

    current_house_edge: Decimal
    base_house_edge: Decimal
    deck_favors_player: bool
    edge_factors: EdgeFactors


class HouseEdgeCalculator:
    """
    Calculate house edge based on rule variations.

    Uses the standard baseline of approximately 0.5% for typical rules,
    with adjustments for each rule variation.
    """

    # Rule effects on house edge (in percentage points)
    # Positive = increases house edge (bad for player)
    # Negative = decreases house edge (good for player)
    _RULE_EFFECTS = {
        # Dealer rules
        "h17": Decimal("+0.22"),  # Hit soft 17 vs stand
        "dealer_no_peek": Decimal("+0.11"),  # ENHC rules
        # Blackjack payout
        "bj_6_5": Decimal("+1.39"),  # 6:5 vs 3:2
        "bj_1_1": Decimal("+2.27"),  # Even money vs 3:2
        # Double / split rules
        "no_das": Decimal("+0.14"),  # No double after split
        "no_resplit": Decimal("+0.03"),
        "resplit_aces": Decimal("-0.08"),
        "hit_split_aces": Decimal("-0.19"),
        # Surrender
        "late_surrender": Decimal("-0.08"),
    }

    # Number of decks (baseline is 6)
    _DECK_EFFECTS = {
        1: Decimal("-0.48"),
        2: Decimal("-0.19"),
        3: Decimal("-0.10"),
        4: Decimal("-0.06"),
        5: Decimal("-0.02"),
        6: Decimal("0.00"),
        7: Decimal("+0.01"),
        8: Decimal("+0.02"),
    }

    # Baseline house edge with standard Vegas rules
    _BASELINE = Decimal("0.50")  # 0.50% with 6 decks, S17, 3:2 BJ, DAS, no surrender

    # Each +1 true count is worth about half a percent to the player
    _TRUE_COUNT_VALUE = Decimal("0.5")

    def __init__(self, rules: GameRules) -> None:
        """
        Initialize calculator with rule set.

        Args:
            rules: The rule set to calculate edge for
        """
        self.rules = rules

    def edge_factors(self) -> EdgeFactors:
        """Break the rule adjustments down by rule group."""
        rules = self.rules
        effects = self._RULE_EFFECTS

        if rules.blackjack_payout == 1.0:
            payout = effects["bj_1_1"]
        elif rules.blackjack_payout == 1.2:
            payout = effects["bj_6_5"]
        else:
            payout = Decimal("0")

        h17 = effects["h17"] if rules.dealer_hits_soft_17 else Decimal("0")
        decks = self._DECK_EFFECTS.get(rules.num_decks, Decimal("0"))

        other = Decimal("0")
        if not rules.double_after_split:
            other += effects["no_das"]
        if rules.max_splits <= 2:
            other += effects["no_resplit"]
        if rules.resplit_aces:
            other += effects["resplit_aces"]
        if rules.hit_split_aces:
            other += effects["hit_split_aces"]
        if rules.surrender_allowed:
            other += effects["late_surrender"]
        if not rules.dealer_peeks:
            other += effects["dealer_no_peek"]

        return EdgeFactors(
            blackjack_payout_contribution=payout,
            dealer_hits_soft_17_contribution=h17,
            deck_count_contribution=decks,
            other_rules_contribution=other,
        )

    def calculate(self) -> Decimal:
        """
        Calculate the house edge for the configured rules.

        Returns:
            House edge as a percentage (e.g., 0.50 for 0.50%)
        """
        return self._BASELINE + self.edge_factors().total

    def count_adjustment(self, true_count: float) -> Decimal:
        """Change in house edge caused by the true count (negative favors the player)."""
        return -Decimal(str(true_count)) * self._TRUE_COUNT_VALUE

    def house_edge_info(self, true_count: float) -> HouseEdgeInfo:
        """Base edge for the rules plus the count-adjusted current edge."""
        factors = self.edge_factors()
        base = self._BASELINE + factors.total
        current = base + self.count_adjustment(true_count)
        return HouseEdgeInfo(
            current_house_edge=current,
            base_house_edge=base,
            deck_favors_player=current < base,
            edge_factors=factors,
        )
