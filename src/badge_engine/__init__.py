"""
badge-engine: achievement evaluation for workout histories.

Computes a stats bundle from session history and evaluates a declarative
badge catalog against it.
"""

from .core.engine import evaluate_all_badges, get_newly_unlocked_badges
from .core.stats import BadgeStats, compute_stats
from .core.summary import summarize_badges

__version__ = "0.1.0"

__all__ = [
    "BadgeStats",
    "compute_stats",
    "evaluate_all_badges",
    "get_newly_unlocked_badges",
    "summarize_badges",
]
