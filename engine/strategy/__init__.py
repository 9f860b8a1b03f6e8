"""Rule sets and basic strategy tables."""

from engine.strategy.rules import GameRules
from engine.strategy.basic import (
    Action,
    BasicStrategy,
    Recommendation,
    StrategyChart,
    build_strategy_chart,
    hand_type,
)
from engine.strategy.deviations import (
    COUNT_INDEX_PLAYS,
    IndexPlay,
    apply_index_play,
    find_index_play,
)

__all__ = [
    "GameRules",
    "Action",
    "BasicStrategy",
    "Recommendation",
    "StrategyChart",
    "build_strategy_chart",
    "hand_type",
    "COUNT_INDEX_PLAYS",
    "IndexPlay",
    "apply_index_play",
    "find_index_play",
]
