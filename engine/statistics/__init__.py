"""Shoe composition, probability and house edge calculations."""

from engine.statistics.composition import (
    MIN_DECKS_REMAINING,
    DeckComposition,
    ShoeTracker,
)
from engine.statistics.house_edge import EdgeFactors, HouseEdgeCalculator, HouseEdgeInfo
from engine.statistics.probability import (
    DEALER_FINAL_TOTALS,
    SURRENDER_EV,
    BustProbabilities,
    DealerOutcomeProbabilities,
    DrawProbability,
    PlayerDecisionProbabilities,
    ProbabilityEngine,
)

__all__ = [
    "MIN_DECKS_REMAINING",
    "DeckComposition",
    "ShoeTracker",
    "EdgeFactors",
    "HouseEdgeCalculator",
    "HouseEdgeInfo",
    "DEALER_FINAL_TOTALS",
    "SURRENDER_EV",
    "BustProbabilities",
    "DealerOutcomeProbabilities",
    "DrawProbability",
    "PlayerDecisionProbabilities",
    "ProbabilityEngine",
]
