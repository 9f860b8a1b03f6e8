"""Tests for cards and the shoe."""

from random import Random

import pytest

from engine.cards import Card, Rank, Shoe, Suit
from engine.errors import EngineError, InvalidCardError, ShoeExhaustedError


class TestCard:
    """Tests for the Card class."""

    def test_card_values(self):
        """Pips count face value, faces count 10, ace counts 11."""
        assert Card(Rank.TWO, Suit.HEARTS).value == 2
        assert Card(Rank.TEN, Suit.HEARTS).value == 10
        assert Card(Rank.JACK, Suit.HEARTS).value == 10
        assert Card(Rank.KING, Suit.HEARTS).value == 10
        assert Card(Rank.ACE, Suit.HEARTS).value == 11

    def test_is_ten_value(self):
        assert Card(Rank.QUEEN, Suit.CLUBS).is_ten_value
        assert not Card(Rank.NINE, Suit.CLUBS).is_ten_value
        assert not Card(Rank.ACE, Suit.CLUBS).is_ten_value

    def test_face_up_ignored_by_equality(self):
        """Face-up state is display only."""
        up = Card(Rank.ACE, Suit.SPADES)
        down = Card(Rank.ACE, Suit.SPADES, face_up=False)
        assert up == down
        assert hash(up) == hash(down)

    def test_flipped_returns_copy(self):
        down = Card(Rank.FIVE, Suit.DIAMONDS, face_up=False)
        up = down.flipped()
        assert up.face_up
        assert not down.face_up
        assert up == down

    def test_card_is_immutable(self):
        card = Card(Rank.FIVE, Suit.DIAMONDS)
        with pytest.raises(AttributeError):
            card.rank = Rank.SIX  # type: ignore[misc]

    @pytest.mark.parametrize(
        "notation, rank, suit",
        [
            ("AS", Rank.ACE, Suit.SPADES),
            ("10h", Rank.TEN, Suit.HEARTS),
            ("K♦", Rank.KING, Suit.DIAMONDS),
            ("2♣", Rank.TWO, Suit.CLUBS),
            ("tc", Rank.TEN, Suit.CLUBS),
        ],
    )
    def test_from_string(self, notation, rank, suit):
        card = Card.from_string(notation)
        assert card.rank == rank
        assert card.suit == suit

    @pytest.mark.parametrize("notation", ["", "Z", "1S", "AX", "11H"])
    def test_from_string_invalid(self, notation):
        with pytest.raises(InvalidCardError):
            Card.from_string(notation)

    def test_invalid_card_error_is_value_error(self):
        with pytest.raises(ValueError):
            Card.from_string("??")


class TestShoe:
    """Tests for the Shoe class."""

    def test_shoe_size(self, shoe):
        assert len(shoe) == 312
        assert shoe.total_cards == 312
        assert shoe.cards_dealt == 0

    def test_shoe_contains_every_card_per_deck(self):
        shoe = Shoe(num_decks=2, rng=Random(1))
        shoe.shuffle()
        cards = list(shoe)
        for rank in Rank:
            for suit in Suit:
                assert cards.count(Card(rank, suit)) == 2

    def test_same_seed_same_order(self):
        first = Shoe(num_decks=1, rng=Random(7))
        second = Shoe(num_decks=1, rng=Random(7))
        first.shuffle()
        second.shuffle()
        assert list(first) == list(second)

    def test_draw_reduces_shoe(self, shoe):
        shoe.draw()
        assert shoe.cards_remaining == 311
        assert shoe.cards_dealt == 1

    def test_draw_face_down(self, shoe):
        card = shoe.draw(face_up=False)
        assert not card.face_up

    def test_needs_shuffle_after_penetration(self):
        shoe = Shoe(num_decks=1, penetration=0.5, rng=Random(3))
        shoe.shuffle()
        for _ in range(25):
            shoe.draw()
        assert not shoe.needs_shuffle
        shoe.draw()
        assert shoe.needs_shuffle

    def test_shuffle_restores_full_shoe(self, shoe):
        for _ in range(50):
            shoe.draw()
        shoe.shuffle()
        assert shoe.cards_remaining == 312
        assert not shoe.needs_shuffle

    def test_empty_shoe_raises(self):
        shoe = Shoe(num_decks=1, rng=Random(0))
        shoe.shuffle()
        for _ in range(52):
            shoe.draw()
        with pytest.raises(ShoeExhaustedError) as exc_info:
            shoe.draw()
        assert isinstance(exc_info.value, EngineError)
        assert "reshuffle" in str(exc_info.value)

    def test_decks_remaining(self, shoe):
        for _ in range(52):
            shoe.draw()
        assert shoe.decks_remaining == pytest.approx(5.0)

    @pytest.mark.parametrize("penetration", [0.0, 1.5])
    def test_invalid_penetration(self, penetration):
        with pytest.raises(ValueError):
            Shoe(penetration=penetration)
