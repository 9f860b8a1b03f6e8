"""Tests for rules and basic strategy tables."""

import pytest

from engine.cards import Card
from engine.strategy import Action, BasicStrategy, GameRules, build_strategy_chart, hand_type


def cards(*notations):
    return [Card.from_string(n) for n in notations]


class TestGameRules:
    """Tests for the rule set."""

    def test_defaults(self, rules):
        assert rules.num_decks == 6
        assert rules.blackjack_payout == 1.5

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"num_decks": 0},
            {"num_decks": 9},
            {"blackjack_payout": 2.0},
            {"max_splits": 0},
            {"min_bet": 100, "max_bet": 10},
        ],
    )
    def test_invalid_rules(self, kwargs):
        with pytest.raises(ValueError):
            GameRules(**kwargs)

    def test_presets(self):
        assert GameRules.classic().num_decks == 1
        assert not GameRules.european().dealer_peeks
        assert GameRules.atlantic_city().surrender_allowed
        assert GameRules.vegas_strip().dealer_hits_soft_17
        assert GameRules.preset("european") == GameRules.european()

    def test_unknown_preset(self):
        with pytest.raises(ValueError):
            GameRules.preset("moon_base")

    def test_rules_are_frozen(self, rules):
        with pytest.raises(AttributeError):
            rules.num_decks = 2  # type: ignore[misc]


class TestStrategyChart:
    """Tests for chart construction."""

    def test_chart_is_read_only(self, rules):
        chart = build_strategy_chart(rules)
        with pytest.raises(TypeError):
            chart.hard[(16, 10)] = Action.HIT  # type: ignore[index]

    def test_covers_every_upcard(self, rules):
        chart = build_strategy_chart(rules)
        for dealer in range(2, 12):
            for total in range(5, 22):
                assert (total, dealer) in chart.hard
            for total in range(13, 22):
                assert (total, dealer) in chart.soft
            for pair in range(2, 12):
                assert (pair, dealer) in chart.pairs

    def test_surrender_cells_hold_fallback_when_disallowed(self, s17_rules):
        chart = build_strategy_chart(s17_rules)
        assert chart.hard[(16, 10)] == Action.STAND
        assert chart.hard[(15, 10)] == Action.HIT

    def test_surrender_cells_with_surrender(self):
        chart = build_strategy_chart(GameRules(surrender_allowed=True))
        assert chart.hard[(16, 10)] == Action.SURRENDER_OR_STAND
        assert chart.hard[(15, 10)] == Action.SURRENDER_OR_HIT
        assert chart.hard[(17, 11)] == Action.SURRENDER_OR_STAND

    def test_das_widens_split_windows(self):
        das = build_strategy_chart(GameRules(double_after_split=True))
        no_das = build_strategy_chart(GameRules(double_after_split=False))
        assert das.pairs[(6, 7)] == Action.SPLIT
        assert no_das.pairs[(6, 7)] == Action.HIT
        assert das.pairs[(4, 4)] == Action.SPLIT
        assert no_das.pairs[(4, 4)] == Action.HIT


class TestBasicStrategy:
    """Tests for BasicStrategy lookups."""

    def test_hard_17_always_stand(self, basic_strategy):
        for total in range(17, 22):
            for dealer_up in range(2, 11):
                assert basic_strategy.get_action(total, dealer_up) == Action.STAND

    def test_hard_8_always_hit(self, basic_strategy):
        for total in range(5, 9):
            for dealer_up in range(2, 12):
                assert basic_strategy.get_action(total, dealer_up) == Action.HIT

    def test_hard_11_vs_ace_depends_on_h17(self):
        h17 = BasicStrategy(GameRules(dealer_hits_soft_17=True))
        s17 = BasicStrategy(GameRules(dealer_hits_soft_17=False))
        assert h17.get_action(11, 11) == Action.DOUBLE
        assert s17.get_action(11, 11) == Action.HIT

    def test_soft_20_always_stand(self, basic_strategy):
        for dealer_up in range(2, 12):
            assert basic_strategy.get_action(20, dealer_up, is_soft=True) == Action.STAND

    def test_soft_18(self):
        s17 = BasicStrategy(GameRules(dealer_hits_soft_17=False))
        assert s17.get_action(18, 2, is_soft=True) == Action.STAND
        assert s17.get_action(18, 4, is_soft=True) == Action.DOUBLE
        assert s17.get_action(18, 4, is_soft=True, can_double=False) == Action.STAND
        assert s17.get_action(18, 7, is_soft=True) == Action.STAND
        assert s17.get_action(18, 10, is_soft=True) == Action.HIT

    def test_soft_19_vs_6_h17(self):
        h17 = BasicStrategy(GameRules(dealer_hits_soft_17=True))
        s17 = BasicStrategy(GameRules(dealer_hits_soft_17=False))
        assert h17.get_action(19, 6, is_soft=True) == Action.DOUBLE
        assert s17.get_action(19, 6, is_soft=True) == Action.STAND

    def test_double_not_allowed_becomes_hit(self, basic_strategy):
        assert basic_strategy.get_action(10, 5, can_double=False) == Action.HIT

    def test_hard_16_vs_10_no_surrender_stands(self, s17_rules):
        strategy = BasicStrategy(s17_rules)
        action = strategy.get_recommended_action(cards("10S", "6H"), Card.from_string("10D"))
        assert action == Action.STAND

    def test_hard_16_vs_10_with_surrender(self):
        strategy = BasicStrategy(GameRules(surrender_allowed=True))
        action = strategy.get_recommended_action(cards("10S", "6H"), Card.from_string("KD"))
        assert action == Action.SURRENDER

    def test_surrender_refused_falls_back(self):
        strategy = BasicStrategy(GameRules(surrender_allowed=True))
        dealer = Card.from_string("10D")
        assert (
            strategy.get_recommended_action(cards("10S", "6H"), dealer, can_surrender=False)
            == Action.STAND
        )
        assert (
            strategy.get_recommended_action(cards("10S", "5H"), dealer, can_surrender=False)
            == Action.HIT
        )

    @pytest.mark.parametrize("upcard", ["2S", "5H", "7C", "9D", "10S", "KH", "AS"])
    def test_eights_always_split(self, basic_strategy, upcard):
        action = basic_strategy.get_recommended_action(cards("8S", "8H"), Card.from_string(upcard))
        assert action == Action.SPLIT

    @pytest.mark.parametrize("upcard", ["2S", "6H", "10C", "AS"])
    def test_aces_always_split(self, basic_strategy, upcard):
        action = basic_strategy.get_recommended_action(cards("AS", "AH"), Card.from_string(upcard))
        assert action == Action.SPLIT

    def test_tens_never_split(self, basic_strategy):
        action = basic_strategy.get_recommended_action(cards("10S", "10H"), Card.from_string("6D"))
        assert action == Action.STAND

    def test_fives_play_as_ten(self, basic_strategy):
        action = basic_strategy.get_recommended_action(cards("5S", "5H"), Card.from_string("6D"))
        assert action == Action.DOUBLE

    def test_split_not_allowed_uses_totals(self, basic_strategy):
        action = basic_strategy.get_recommended_action(
            cards("8S", "8H"), Card.from_string("10D"), can_split=False
        )
        assert action == Action.STAND

    def test_no_double_after_two_cards(self, basic_strategy):
        action = basic_strategy.get_recommended_action(
            cards("2S", "3H", "6C"), Card.from_string("6D")
        )
        assert action == Action.HIT

    def test_busted_hand_returns_none(self, basic_strategy):
        assert basic_strategy.get_recommended_action(cards("10S", "6H", "KC"), Card.from_string("6D")) is None

    def test_missing_input_returns_stand(self, basic_strategy):
        assert basic_strategy.get_recommended_action([], Card.from_string("6D")) == Action.STAND
        assert basic_strategy.get_recommended_action(cards("10S", "6H"), None) == Action.STAND

    def test_update_rules_swaps_chart(self, basic_strategy):
        old_chart = basic_strategy.chart
        new_rules = GameRules(surrender_allowed=True)
        basic_strategy.update_rules(new_rules)
        assert basic_strategy.chart is not old_chart
        assert basic_strategy.rules == new_rules
        assert basic_strategy.chart.hard[(16, 10)] == Action.SURRENDER_OR_STAND

    def test_advise_explains(self, basic_strategy):
        advice = basic_strategy.advise(cards("8S", "8H"), Card.from_string("10D"))
        assert advice.action == Action.SPLIT
        assert advice.hand_type == "pair"
        assert advice.dealer_upcard == 10
        assert "Split" in advice.explanation

    def test_advise_without_cards(self, basic_strategy):
        advice = basic_strategy.advise([], None)
        assert advice.action == Action.STAND
        assert advice.explanation


def test_hand_type():
    assert hand_type(cards("8S", "8H")) == "pair"
    assert hand_type(cards("AS", "6H")) == "soft"
    assert hand_type(cards("10S", "6H")) == "hard"
    assert hand_type(cards("AS", "6H", "10C")) == "hard"
