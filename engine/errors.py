"""Exceptions raised by the blackjack engine."""


class EngineError(Exception):
    """Base class for engine errors."""


class InvalidCardError(EngineError, ValueError):
    """A card could not be built from the given rank/suit notation."""


class ShoeExhaustedError(EngineError, IndexError):
    """
    A card was requested from an empty shoe.

    Recoverable: the caller must reshuffle before drawing again.
    """

    def __init__(self, total_cards: int) -> None:
        super().__init__(f"Shoe of {total_cards} cards is exhausted; reshuffle required")
        self.total_cards = total_cards
