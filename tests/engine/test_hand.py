"""Tests for Hand evaluation."""

from itertools import permutations

import pytest
from hypothesis import given, strategies as st

from engine.cards import Card, Rank, Suit
from engine.hand import Hand, best_value, hand_values

cards = st.builds(Card, st.sampled_from(list(Rank)), st.sampled_from(list(Suit)))


class TestHandValues:
    """Tests for the total calculation functions."""

    def test_empty(self):
        assert hand_values([]) == [0]
        assert best_value([0]) == 0

    def test_two_aces(self):
        """A pair of aces reports both totals."""
        values = hand_values([Card(Rank.ACE, Suit.SPADES), Card(Rank.ACE, Suit.HEARTS)])
        assert values == [2, 12]

    def test_bust_keeps_low_total(self):
        values = hand_values(
            [Card(Rank.TEN, Suit.CLUBS), Card(Rank.TEN, Suit.DIAMONDS), Card(Rank.FIVE, Suit.HEARTS)]
        )
        assert values == [25]

    def test_best_value_prefers_highest_playable(self):
        assert best_value([7, 17]) == 17
        assert best_value([12, 22]) == 12

    def test_best_value_all_bust_returns_lowest(self):
        assert best_value([23, 33]) == 23

    @given(st.lists(cards, min_size=1, max_size=8))
    def test_values_never_empty_and_bust_consistent(self, hand_cards):
        hand = Hand(cards=list(hand_cards))
        assert hand.values
        assert hand.is_busted == all(v > 21 for v in hand.values)

    @given(st.lists(cards, min_size=1, max_size=5))
    def test_order_independent(self, hand_cards):
        expected = hand_values(hand_cards)
        for ordering in permutations(hand_cards):
            assert hand_values(ordering) == expected

    @given(
        st.sampled_from(list(Suit)),
        st.sampled_from([Rank.TEN, Rank.JACK, Rank.QUEEN, Rank.KING]),
        st.sampled_from(list(Suit)),
        st.booleans(),
    )
    def test_ace_and_ten_is_blackjack(self, ace_suit, ten_rank, ten_suit, ace_first):
        ace = Card(Rank.ACE, ace_suit)
        ten = Card(ten_rank, ten_suit)
        hand = Hand(cards=[ace, ten] if ace_first else [ten, ace])
        assert hand.is_blackjack
        assert hand.value == 21


class TestHand:
    """Tests for the Hand class."""

    def test_empty_hand(self, empty_hand):
        """Test empty hand properties."""
        assert len(empty_hand) == 0
        assert empty_hand.value == 0
        assert empty_hand.values == [0]
        assert not empty_hand.is_soft
        assert not empty_hand.is_blackjack
        assert not empty_hand.is_busted

    def test_add_card_is_chainable(self, empty_hand):
        result = empty_hand.add_card(Card(Rank.TEN, Suit.SPADES)).add_card(Card(Rank.TWO, Suit.SPADES))
        assert result is empty_hand
        assert empty_hand.value == 12

    def test_hard_hand_value(self, hard_16_hand):
        assert hard_16_hand.value == 16
        assert hard_16_hand.is_hard

    def test_soft_hand_value(self, soft_17_hand):
        assert soft_17_hand.value == 17
        assert soft_17_hand.values == [7, 17]
        assert soft_17_hand.is_soft

    def test_blackjack(self, blackjack_hand):
        assert blackjack_hand.is_blackjack
        assert blackjack_hand.best_value == 21
        assert blackjack_hand.values == [11, 21]

    def test_pair_of_aces_not_blackjack(self, hand_of):
        hand = hand_of("AS", "AH")
        assert hand.values == [2, 12]
        assert hand.is_soft
        assert hand.is_pair
        assert not hand.is_blackjack

    def test_split_hand_21_not_blackjack(self, hand_of):
        hand = hand_of("AS", "KH", is_split_hand=True)
        assert hand.value == 21
        assert not hand.is_blackjack

    def test_not_blackjack_three_cards(self, hand_of):
        """Test that 21 with 3+ cards is not blackjack."""
        hand = hand_of("7S", "7H", "7C")
        assert hand.value == 21
        assert not hand.is_blackjack

    def test_bust(self, bust_hand):
        assert bust_hand.is_busted
        assert bust_hand.value == 26

    def test_soft_to_hard_transition(self, hand_of):
        """Test ace switching from 11 to 1."""
        hand = hand_of("AS")
        assert hand.value == 11
        assert hand.is_soft

        hand.add_card(Card(Rank.FIVE, Suit.HEARTS))
        assert hand.value == 16
        assert hand.is_soft

        hand.add_card(Card(Rank.EIGHT, Suit.CLUBS))
        assert hand.value == 14
        assert hand.is_hard

    def test_multiple_aces(self, hand_of):
        hand = hand_of("AS", "AH", "AC")
        assert hand.value == 13
        assert hand.is_soft

        hand.add_card(Card(Rank.NINE, Suit.DIAMONDS))
        assert hand.value == 12
        assert hand.is_hard

    def test_pair_detection(self, pair_8s_hand):
        assert pair_8s_hand.is_pair
        assert pair_8s_hand.can_split

    def test_ten_and_king_not_pair(self, hand_of):
        """Splitting needs equal rank, not just equal value."""
        assert not hand_of("10S", "KH").is_pair

    def test_not_pair_three_cards(self, hand_of):
        assert not hand_of("8S", "8H", "2C").is_pair

    def test_can_double(self, hand_of):
        hand = hand_of("5S", "6H")
        assert hand.can_double
        hand.add_card(Card(Rank.TWO, Suit.CLUBS))
        assert not hand.can_double

    def test_clear_hand(self, blackjack_hand):
        blackjack_hand.is_doubled = True
        blackjack_hand.clear()
        assert len(blackjack_hand) == 0
        assert blackjack_hand.value == 0
        assert not blackjack_hand.is_doubled

    def test_face_down_card_still_counts(self):
        hand = Hand(cards=[Card(Rank.TEN, Suit.SPADES), Card(Rank.ACE, Suit.HEARTS, face_up=False)])
        assert hand.is_blackjack

    @pytest.mark.parametrize(
        "hand_cards, expected",
        [
            (("AS", "KH"), "(BLACKJACK)"),
            (("10S", "6H", "KC"), "(BUST)"),
            (("AS", "6H"), "(soft 17)"),
            (("10S", "6H"), "(16)"),
        ],
    )
    def test_str(self, hand_of, hand_cards, expected):
        assert str(hand_of(*hand_cards)).endswith(expected)
