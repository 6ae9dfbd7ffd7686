"""Badge commands: progress, check, summary."""

import json
from typing import Annotated, Optional

import typer

from ...core.catalog import get_badge
from ...core.engine import evaluate_all_badges
from ...core.summary import summarize_badges
from ...io.serializers import ValidationError, progress_to_dict
from .. import views
from ..app import HistoryPathOption, JsonOption, app, require_store


@app.command()
def progress(
    history_path: HistoryPathOption = None,
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help="Only show badges of this category"),
    ] = None,
    unlocked_only: Annotated[
        bool,
        typer.Option("--unlocked-only", "-u", help="Only show unlocked badges"),
    ] = False,
    json_out: JsonOption = False,
) -> None:
    """
    Show progress toward every badge.
    """
    store = require_store(history_path)

    try:
        history = store.load_history()
        unlocked = store.load_unlocked()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    records = evaluate_all_badges(history, unlocked)
    if category is not None:
        records = [p for p in records if p.badge.category == category]
    if unlocked_only:
        records = [p for p in records if p.is_unlocked]

    if json_out:
        print(json.dumps([progress_to_dict(p) for p in records], indent=2))
        return

    views.console.print()
    views.print_progress(records)
    views.console.print()


@app.command()
def check(
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Detect newly unlocked badges and record them.

    Unlock timestamps already on record are never changed.
    """
    store = require_store(history_path)

    try:
        new_ids = store.check_badges()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps({"new_badges": new_ids}, indent=2))
        return

    if not new_ids:
        views.print_info("No new badges.")
        return

    views.print_new_badges([get_badge(b) for b in new_ids])


@app.command()
def summary(
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show level, points and unlocked badge counts.
    """
    store = require_store(history_path)

    try:
        records = evaluate_all_badges(store.load_history(), store.load_unlocked())
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    result = summarize_badges(records)

    if json_out:
        print(json.dumps({
            "level": result.level.level_id,
            "next_level": result.next_level.level_id if result.next_level else None,
            "points": result.total_points,
            "points_to_next_level": result.points_to_next_level,
            "badges_unlocked": result.total_badges,
            "badges_available": result.available_badges,
            "by_tier": result.badges_by_tier,
            "by_category": result.badges_by_category,
            "recent_unlocks": [p.badge.badge_id for p in result.recent_unlocks],
            "next_badge": result.next_badge.badge.badge_id if result.next_badge else None,
        }, indent=2))
        return

    views.console.print()
    views.console.print(views.format_summary_display(result))
    views.console.print()
