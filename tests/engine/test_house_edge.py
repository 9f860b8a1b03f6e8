"""Tests for house edge estimation."""

from decimal import Decimal

import pytest

from engine.statistics import HouseEdgeCalculator, ProbabilityEngine
from engine.strategy import GameRules


class TestHouseEdgeCalculator:
    """Tests for rule-based edge estimates."""

    def test_default_rules(self, rules):
        calc = HouseEdgeCalculator(rules)
        # 6 decks, H17, 3:2, DAS, no surrender
        assert calc.calculate() == Decimal("0.72")

    def test_baseline_rules(self):
        rules = GameRules(dealer_hits_soft_17=False)
        assert HouseEdgeCalculator(rules).calculate() == Decimal("0.50")

    def test_six_to_five_raises_edge(self, rules):
        three_to_two = HouseEdgeCalculator(rules).calculate()
        six_to_five = HouseEdgeCalculator(GameRules(blackjack_payout=1.2)).calculate()
        assert six_to_five - three_to_two == Decimal("1.39")

    def test_factor_breakdown(self):
        rules = GameRules(
            num_decks=2,
            blackjack_payout=1.2,
            double_after_split=False,
            surrender_allowed=True,
        )
        factors = HouseEdgeCalculator(rules).edge_factors()
        assert factors.blackjack_payout_contribution == Decimal("1.39")
        assert factors.dealer_hits_soft_17_contribution == Decimal("0.22")
        assert factors.deck_count_contribution == Decimal("-0.19")
        assert factors.other_rules_contribution == Decimal("0.06")
        assert factors.total == Decimal("1.48")

    @pytest.mark.parametrize("num_decks, delta", [(1, "-0.48"), (4, "-0.06"), (8, "0.02")])
    def test_deck_count(self, num_decks, delta):
        factors = HouseEdgeCalculator(GameRules(num_decks=num_decks)).edge_factors()
        assert factors.deck_count_contribution == Decimal(delta)

    def test_no_peek_costs_player(self, rules):
        peek = HouseEdgeCalculator(rules).calculate()
        no_peek = HouseEdgeCalculator(GameRules(dealer_peeks=False)).calculate()
        assert no_peek > peek

    def test_count_adjustment(self, rules):
        calc = HouseEdgeCalculator(rules)
        assert calc.count_adjustment(2.0) == Decimal("-1.0")
        assert calc.count_adjustment(-1.0) == Decimal("0.5")

    def test_info_at_positive_count(self, rules):
        info = HouseEdgeCalculator(rules).house_edge_info(2.0)
        assert info.current_house_edge == info.base_house_edge - Decimal("1.0")
        assert info.deck_favors_player


class TestHouseEdgeInfo:
    """Tests for the count-adjusted edge report."""

    def test_fresh_shoe_matches_base(self, probability_engine):
        info = probability_engine.calculate_house_edge()
        assert info.current_house_edge == info.base_house_edge
        assert not info.deck_favors_player
        assert info.base_house_edge == Decimal("0.50") + info.edge_factors.total

    def test_negative_count_favors_house(self):
        engine = ProbabilityEngine(GameRules())
        info = HouseEdgeCalculator(engine.rules).house_edge_info(-2.0)
        assert info.current_house_edge == info.base_house_edge + Decimal("1.0")
        assert not info.deck_favors_player
