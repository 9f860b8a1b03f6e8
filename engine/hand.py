"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from engine.cards import Card


def hand_values(cards: Iterable[Card]) -> list[int]:
    """
    Return every distinct total a set of cards can make, ascending.

    The all-aces-low total is always present, even when it busts. Totals
    that count an ace as 11 are included only while they do not bust.
    An empty hand yields ``[0]``.
    """
    low_total = 0
    has_ace = False
    for card in cards:
        if card.is_ace:
            has_ace = True
            low_total += 1
        else:
            low_total += card.value

    values = [low_total]
    # Only one ace can ever count as 11 without busting
    if has_ace and low_total + 10 <= 21:
        values.append(low_total + 10)
    return values


def best_value(values: Iterable[int]) -> int:
    """
    Pick the playable total from a list of hand values.

    Returns the highest total that doesn't bust, or the lowest bust total.
    """
    values = list(values)
    if not values:
        return 0
    playable = [v for v in values if v <= 21]
    if playable:
        return max(playable)
    return min(values)


@dataclass
class Hand:
    """
    Cards held by the player or dealer, in deal order.

    The flags record what the game session has done with the hand; the
    evaluation properties depend only on the cards.
    """

    cards: list[Card] = field(default_factory=list)
    bet: int = 0
    is_doubled: bool = False
    is_split_hand: bool = False
    is_surrendered: bool = False
    restricted_to_one_card: bool = False

    def add_card(self, card: Card) -> "Hand":
        """Append a card to the hand and return the hand."""
        self.cards.append(card)
        return self

    def clear(self) -> None:
        """Empty the hand and drop its action flags."""
        self.cards.clear()
        self.is_doubled = False
        self.is_split_hand = False
        self.is_surrendered = False
        self.restricted_to_one_card = False

    @property
    def values(self) -> list[int]:
        """All legal totals of the hand, ascending."""
        return hand_values(self.cards)

    @property
    def value(self) -> int:
        return best_value(self.values)

    @property
    def best_value(self) -> int:
        """Alias of ``value``."""
        return self.value

    @property
    def is_soft(self) -> bool:
        """An ace is counting as 11."""
        return len(self.values) > 1

    @property
    def is_hard(self) -> bool:
        return not self.is_soft

    @property
    def is_blackjack(self) -> bool:
        """Two-card 21 with one ace, not dealt to a split hand."""
        return (
            len(self.cards) == 2
            and self.value == 21
            and sum(1 for card in self.cards if card.is_ace) == 1
            and not self.is_split_hand
        )

    @property
    def is_busted(self) -> bool:
        return all(v > 21 for v in self.values)

    @property
    def is_pair(self) -> bool:
        """Two cards of the same rank."""
        return (
            len(self.cards) == 2
            and self.cards[0].rank == self.cards[1].rank
        )

    @property
    def can_split(self) -> bool:
        """Alias of ``is_pair``; rule limits are checked by the game session."""
        return self.is_pair

    @property
    def can_double(self) -> bool:
        return len(self.cards) == 2 and not self.is_doubled

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        if self.is_busted:
            label = "BUST"
        elif self.is_blackjack:
            label = "BLACKJACK"
        else:
            label = f"soft {self.value}" if self.is_soft else str(self.value)
        return " ".join([*map(str, self.cards), f"({label})"])

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, values={self.values})"
