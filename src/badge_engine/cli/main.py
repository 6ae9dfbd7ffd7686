"""
CLI entry point using Typer.

Provides commands for badge tracking:
- init: Initialize history and badge files
- add-session: Add sessions from a JSON file
- show-history: Display workout history
- progress: Show progress toward every badge
- check: Detect and record newly unlocked badges
- summary: Show level and points
- stats: Show the training stats bundle
- volume: Weekly sets per muscle with landmark zones
- deload: Muscles above MRV for consecutive weeks
"""

from .app import app
from .commands import analysis, badges, sessions  # noqa: F401  (registers commands)

__all__ = ["app"]


if __name__ == "__main__":
    app()
