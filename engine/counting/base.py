"""Running-count bookkeeping shared by every counting system."""

from typing import ClassVar, Mapping

from engine.cards import Card


class CountingSystem:
    """
    A running count kept with one tag per card point value.

    Subclasses set ``name`` and ``tags``. ``tags`` maps each point value
    (2-10, with 11 for the ace) to what that card adds to the count, so
    tens and faces always share a tag.
    """

    name: ClassVar[str]
    tags: ClassVar[Mapping[int, float]]

    def __init__(self) -> None:
        self._running_count = 0.0
        self._cards_seen = 0

    def count_card(self, card: Card) -> float:
        """Add one card to the running count and return its tag."""
        tag = self.tags[card.value]
        self._running_count += tag
        self._cards_seen += 1
        return tag

    @property
    def running_count(self) -> float:
        return self._running_count

    @property
    def cards_seen(self) -> int:
        return self._cards_seen

    def true_count(self, decks_remaining: float) -> float:
        """
        Running count per remaining deck.

        Args:
            decks_remaining: Decks left in the shoe

        Returns:
            The true count, or 0 once the shoe is empty
        """
        if decks_remaining <= 0:
            return 0.0
        return self._running_count / decks_remaining

    def reset(self) -> None:
        """Start a new count for a fresh shoe."""
        self._running_count = 0.0
        self._cards_seen = 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(running_count={self._running_count})"
