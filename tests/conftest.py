"""Pytest fixtures for blackjack engine tests."""

import pytest
from decimal import Decimal
from random import Random

from engine.cards import Card, Shoe, Rank, Suit
from engine.hand import Hand
from engine.counting import HiLoSystem
from engine.game import GameSession
from engine.statistics import ProbabilityEngine
from engine.strategy import BasicStrategy, GameRules


def make_hand(*notations: str, **flags) -> Hand:
    """Build a hand from short card notation, e.g. make_hand("AS", "KH")."""
    return Hand(cards=[Card.from_string(n) for n in notations], **flags)


class StackedRandom(Random):
    """
    Random whose shuffle leaves the shoe ready to deal a fixed sequence.

    ``Shoe.shuffle`` swaps ``cards[i]`` with ``cards[randint(0, i)]``, so
    returning ``i`` every time leaves the unshuffled order in place. The
    stacked cards are then moved to the end of the shoe, where ``draw``
    pops from.
    """

    def randint(self, a: int, b: int) -> int:
        return b


def stack_shoe(game: GameSession, *notations: str) -> None:
    """Arrange for the game's shoe to deal ``notations`` next, in order."""
    cards = game.shoe._cards
    for notation in reversed(notations):
        wanted = Card.from_string(notation)
        cards.remove(wanted)
        cards.append(wanted)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shoe(rng):
    """A shuffled 6-deck shoe."""
    s = Shoe(num_decks=6, penetration=0.75, rng=rng)
    s.shuffle()
    return s


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return make_hand("AS", "KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return make_hand("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return make_hand("10S", "6H")


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return make_hand("8S", "8H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return make_hand("10S", "6H", "KC")


@pytest.fixture
def hilo():
    """Hi-Lo counting system."""
    return HiLoSystem()


@pytest.fixture
def rules():
    """Default rules."""
    return GameRules()


@pytest.fixture
def s17_rules():
    """Stand on soft 17, no surrender."""
    return GameRules(dealer_hits_soft_17=False, surrender_allowed=False)


@pytest.fixture
def basic_strategy(rules):
    """Basic strategy for default rules."""
    return BasicStrategy(rules)


@pytest.fixture
def probability_engine(rules):
    """Probability engine over a fresh shoe."""
    return ProbabilityEngine(rules)


@pytest.fixture
def game(rng):
    """A new game session."""
    return GameSession(initial_bankroll=Decimal("1000"), rng=rng)


@pytest.fixture
def stacked_game():
    """A game session whose shoe can be stacked with ``stack_shoe``."""
    rules = GameRules(surrender_allowed=True, min_bet=5, max_bet=500)
    return GameSession(rules=rules, initial_bankroll=Decimal("1000"), rng=StackedRandom())


@pytest.fixture
def hand_of():
    """Factory building hands from card notation."""
    return make_hand


@pytest.fixture
def stack():
    """Function that stacks a game's shoe with upcoming cards."""
    return stack_shoe
