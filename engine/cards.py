"""Cards and the multi-deck shoe they are dealt from."""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from random import Random
from typing import Iterator

from engine.errors import InvalidCardError, ShoeExhaustedError

logger = logging.getLogger(__name__)

CARDS_PER_DECK = 52


class Suit(Enum):
    """Suits, valued by their symbol."""

    CLUBS = "♣"
    DIAMONDS = "♦"
    HEARTS = "♥"
    SPADES = "♠"

    def __str__(self) -> str:
        return self.value


class Rank(Enum):
    """Ranks, valued by their short notation."""

    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"

    def __str__(self) -> str:
        return self.value

    @property
    def blackjack_value(self) -> int:
        """Points the rank is worth, counting an ace high."""
        if self is Rank.ACE:
            return 11
        if self.value.isdigit():
            return int(self.value)
        return 10

    @property
    def is_ace(self) -> bool:
        return self is Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        return self.blackjack_value == 10


_SUIT_LOOKUP = {key: suit for suit in Suit for key in (suit.name[0], suit.value)}


def _parse_rank(text: str) -> Rank:
    try:
        return Rank("10" if text == "T" else text)
    except ValueError:
        raise InvalidCardError(f"Invalid rank: {text}") from None


@dataclass(frozen=True, slots=True)
class Card:
    """
    A single playing card.

    ``face_up`` only matters for display. It is left out of equality and
    hashing, so a card dealt face down is still the same card.
    """

    rank: Rank
    suit: Suit
    face_up: bool = field(default=True, compare=False)

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        return self.rank.is_ten_value

    def flipped(self, face_up: bool = True) -> "Card":
        return replace(self, face_up=face_up)

    @classmethod
    def from_string(cls, notation: str) -> "Card":
        """
        Parse short notation such as ``"AS"``, ``"10h"``, ``"Td"`` or ``"K♦"``.

        The last character is the suit (letter or symbol), everything before
        it the rank.
        """
        text = notation.strip().upper()
        if len(text) < 2:
            raise InvalidCardError(f"Invalid card string: {notation!r}")

        suit = _SUIT_LOOKUP.get(text[-1])
        if suit is None:
            raise InvalidCardError(f"Invalid suit: {text[-1]}")
        return cls(_parse_rank(text[:-1]), suit)


class Shoe:
    """
    ``num_decks`` decks dealt from the top, with a cut card placed at
    ``penetration`` of the way through.

    A new shoe is in deck order; call ``shuffle()`` before dealing. Pass a
    seeded ``rng`` for reproducible deals.
    """

    def __init__(
        self,
        num_decks: int = 6,
        penetration: float = 0.75,
        rng: Random | None = None,
    ) -> None:
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")
        if not 0.0 < penetration <= 1.0:
            raise ValueError("Penetration must be between 0 and 1")

        self.num_decks = num_decks
        self.penetration = penetration
        self._rng = rng or Random()
        self._cards: list[Card] = []
        self._cut_card = int(self.total_cards * penetration)
        self.reset()

    def reset(self) -> None:
        """Put every card back, unshuffled."""
        deck = [Card(rank, suit) for suit in Suit for rank in Rank]
        self._cards = deck * self.num_decks

    def shuffle(self) -> None:
        """Put every card back and Fisher-Yates shuffle the lot."""
        self.reset()
        cards = self._cards
        for i in range(len(cards) - 1, 0, -1):
            j = self._rng.randint(0, i)
            cards[i], cards[j] = cards[j], cards[i]
        logger.debug("Shuffled %d-deck shoe", self.num_decks)

    def draw(self, face_up: bool = True) -> Card:
        """Deal the top card. Raises ``ShoeExhaustedError`` when none are left."""
        if not self._cards:
            raise ShoeExhaustedError(self.total_cards)
        card = self._cards.pop()
        return card if face_up else card.flipped(False)

    @property
    def needs_shuffle(self) -> bool:
        """True once the cut card has come out."""
        return self.cards_dealt >= self._cut_card

    @property
    def total_cards(self) -> int:
        return self.num_decks * CARDS_PER_DECK

    @property
    def cards_remaining(self) -> int:
        return len(self._cards)

    @property
    def cards_dealt(self) -> int:
        return self.total_cards - len(self._cards)

    @property
    def decks_remaining(self) -> float:
        return len(self._cards) / CARDS_PER_DECK

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)
