"""Tracking what is left in the shoe as cards are dealt."""

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

from engine.cards import Card, Rank
from engine.counting.base import CountingSystem
from engine.counting.hilo import HiLoSystem

logger = logging.getLogger(__name__)

CARDS_PER_DECK = 52
CARDS_PER_RANK_PER_DECK = 4

# Keeps the true count finite as the shoe runs out
MIN_DECKS_REMAINING = 0.25

# Point values a drawn card can have; 11 stands for the ace
CARD_VALUES = (2, 3, 4, 5, 6, 7, 8, 9, 10, 11)


@dataclass(frozen=True)
class DeckComposition:
    """Snapshot of the undealt part of the shoe."""

    total_cards: int
    remaining_cards: Mapping[Rank, int]
    card_percentages: Mapping[Rank, float]
    running_count: float
    true_count: float
    decks_remaining: float


class ShoeTracker:
    """
    Remaining-card bookkeeping for a multi-deck shoe.

    Counts every dealt card against the full shoe and keeps a running
    count with the configured counting system (Hi-Lo by default).
    """

    def __init__(self, num_decks: int, counting_system: CountingSystem | None = None) -> None:
        self._num_decks = num_decks
        self._counter = counting_system or HiLoSystem()
        self._remaining: dict[Rank, int] = {}
        self._total = 0
        self.reset()

    def reset(self) -> None:
        """Restore a full shoe and zero the count."""
        self._remaining = {
            rank: self._num_decks * CARDS_PER_RANK_PER_DECK for rank in Rank
        }
        self._total = self._num_decks * CARDS_PER_DECK
        self._counter.reset()

    def record(self, cards: Iterable[Card]) -> None:
        """Remove dealt cards from the shoe and count them."""
        for card in cards:
            if self._remaining[card.rank] == 0:
                logger.warning(
                    "Ignoring %s: all %d cards of that rank are already dealt",
                    card,
                    self._num_decks * CARDS_PER_RANK_PER_DECK,
                )
                continue
            self._remaining[card.rank] -= 1
            self._total -= 1
            self._counter.count_card(card)

    @property
    def num_decks(self) -> int:
        return self._num_decks

    @property
    def counting_system(self) -> CountingSystem:
        return self._counter

    @property
    def total_cards(self) -> int:
        """Cards still in the shoe."""
        return self._total

    @property
    def cards_dealt(self) -> int:
        return self._num_decks * CARDS_PER_DECK - self._total

    @property
    def decks_remaining(self) -> float:
        """Decks left, floored at MIN_DECKS_REMAINING until the shoe is empty."""
        if self._total == 0:
            return 0.0
        return max(self._total / CARDS_PER_DECK, MIN_DECKS_REMAINING)

    @property
    def running_count(self) -> float:
        return self._counter.running_count

    @property
    def true_count(self) -> float:
        return self._counter.true_count(self.decks_remaining)

    def remaining(self, rank: Rank) -> int:
        """Cards of one rank still in the shoe."""
        return self._remaining[rank]

    def value_counts(self) -> tuple[int, ...]:
        """Remaining cards per point value, ordered as CARD_VALUES."""
        counts = dict.fromkeys(CARD_VALUES, 0)
        for rank, count in self._remaining.items():
            counts[rank.blackjack_value] += count
        return tuple(counts[value] for value in CARD_VALUES)

    def composition(self) -> DeckComposition:
        """Take a snapshot of the current shoe."""
        remaining = dict(self._remaining)
        if self._total:
            percentages = {rank: count / self._total for rank, count in remaining.items()}
        else:
            percentages = dict.fromkeys(remaining, 0.0)
        return DeckComposition(
            total_cards=self._total,
            remaining_cards=remaining,
            card_percentages=percentages,
            running_count=self.running_count,
            true_count=self.true_count,
            decks_remaining=self.decks_remaining,
        )
