"""
Reference catalogs for badge-engine.

The badge catalog and the exercise catalog are static, read-only data
loaded from bundled YAML files.
"""

from .registry import BADGE_CATALOG, EXERCISE_CATALOG, get_badge, get_exercise

__all__ = [
    "BADGE_CATALOG",
    "EXERCISE_CATALOG",
    "get_badge",
    "get_exercise",
]
