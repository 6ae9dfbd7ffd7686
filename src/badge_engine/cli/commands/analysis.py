"""Analysis commands: stats, volume, deload."""

import json
from typing import Annotated

import typer

from ...core.catalog import EXERCISE_CATALOG
from ...core.config import OVERREACH_CHECK_WEEKS, ROLLING_LOOKBACK_WEEKS
from ...core.stats import compute_stats
from ...core.temporal import deload_severity, overreaching_muscles, rolling_muscle_history
from ...io.serializers import (
    ValidationError,
    overreaching_to_dict,
    stats_to_dict,
    week_volume_to_dict,
)
from .. import views
from ..app import HistoryPathOption, JsonOption, app, require_store


@app.command()
def stats(
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the training stats that badges are evaluated against.
    """
    store = require_store(history_path)

    try:
        history = store.load_history()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    bundle = compute_stats(history)

    if json_out:
        print(json.dumps(stats_to_dict(bundle), indent=2))
        return

    views.console.print()
    views.console.print(views.format_stats_display(bundle))
    views.console.print()


@app.command()
def volume(
    history_path: HistoryPathOption = None,
    weeks: Annotated[
        int,
        typer.Option("--weeks", "-w", help="Number of weeks to show"),
    ] = 4,
    json_out: JsonOption = False,
) -> None:
    """
    Show weekly sets per muscle with volume-landmark zones.
    """
    if not 1 <= weeks <= ROLLING_LOOKBACK_WEEKS:
        views.print_error(f"--weeks must be between 1 and {ROLLING_LOOKBACK_WEEKS}")
        raise typer.Exit(1)

    store = require_store(history_path)

    try:
        history = store.load_history()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    rolling = rolling_muscle_history(history, EXERCISE_CATALOG, weeks)

    if json_out:
        print(json.dumps([week_volume_to_dict(w) for w in rolling], indent=2))
        return

    views.console.print()
    views.print_volume(rolling)
    views.console.print()


@app.command()
def deload(
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Check whether any muscle has stayed above MRV long enough to need a deload.
    """
    store = require_store(history_path)

    try:
        history = store.load_history()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    rolling = rolling_muscle_history(history, EXERCISE_CATALOG, OVERREACH_CHECK_WEEKS)
    flagged = overreaching_muscles(rolling)
    severity = deload_severity(flagged)

    if json_out:
        print(json.dumps({
            "needs_deload": bool(flagged),
            "severity": severity,
            "muscles": [overreaching_to_dict(m) for m in flagged],
        }, indent=2))
        return

    views.console.print()
    views.print_deload(flagged, severity)
    views.console.print()
