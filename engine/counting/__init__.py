"""Card counting systems."""

from engine.counting.advice import (
    betting_recommendation,
    describe_true_count,
    insurance_worthwhile,
)
from engine.counting.base import CountingSystem
from engine.counting.hilo import HiLoSystem

__all__ = [
    "CountingSystem",
    "HiLoSystem",
    "betting_recommendation",
    "describe_true_count",
    "insurance_worthwhile",
]
