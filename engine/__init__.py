"""Blackjack rules, strategy and probability engine - UI-agnostic."""

from engine.cards import Card, Shoe, Rank, Suit
from engine.errors import EngineError, InvalidCardError, ShoeExhaustedError
from engine.hand import Hand, best_value, hand_values
from engine.resolver import RoundResult, calculate_payout, determine_round_result

__all__ = [
    "Card",
    "Shoe",
    "Rank",
    "Suit",
    "EngineError",
    "InvalidCardError",
    "ShoeExhaustedError",
    "Hand",
    "best_value",
    "hand_values",
    "RoundResult",
    "calculate_payout",
    "determine_round_result",
]
