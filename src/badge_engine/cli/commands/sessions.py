"""Session commands: init, add-session, show-history."""

import json
from pathlib import Path
from typing import Annotated

import typer

from ...core.catalog import EXERCISE_CATALOG, get_badge
from ...io.serializers import ValidationError, dict_to_session, session_to_dict
from .. import views
from ..app import HistoryPathOption, JsonOption, app, get_store, require_store


@app.command()
def init(
    history_path: HistoryPathOption = None,
) -> None:
    """
    Initialize the history file and the unlocked-badge file.

    Existing files are left untouched.
    """
    store = get_store(history_path)
    existed = store.exists()
    store.init()

    if existed:
        views.print_info(f"History already exists: {store.history_path}")
    else:
        views.print_success(f"Created history: {store.history_path}")


@app.command("add-session")
def add_session(
    session_file: Annotated[
        Path,
        typer.Argument(help="JSON file holding one session object or a list of them"),
    ],
    history_path: HistoryPathOption = None,
    check: Annotated[
        bool,
        typer.Option("--check/--no-check", help="Check for new badges after adding"),
    ] = True,
) -> None:
    """
    Add sessions from a JSON file to the history.

    A session whose session_id is already stored replaces the stored one.
    """
    store = require_store(history_path)

    try:
        with open(session_file, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        views.print_error(f"Cannot read {session_file}: {e}")
        raise typer.Exit(1)

    records = data if isinstance(data, list) else [data]

    try:
        sessions = [dict_to_session(r) for r in records]
    except (ValidationError, ValueError, TypeError, AttributeError) as e:
        views.print_error(f"Invalid session in {session_file}: {e}")
        raise typer.Exit(1)

    try:
        for session in sessions:
            store.append_session(session)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Added {len(sessions)} session(s) to {store.history_path}")

    unknown = sorted({
        ex.exercise_id
        for s in sessions
        for ex in s.completed_exercises
        if ex.exercise_id not in EXERCISE_CATALOG
    })
    if unknown:
        views.print_warning(f"Unknown exercise ids (ignored by badges): {', '.join(unknown)}")

    if check:
        new_ids = store.check_badges()
        views.print_new_badges([get_badge(b) for b in new_ids])


@app.command("show-history")
def show_history(
    history_path: HistoryPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show logged sessions.
    """
    store = require_store(history_path)

    try:
        sessions = store.load_history()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps([session_to_dict(s) for s in sessions], indent=2))
        return

    views.print_history(sessions)
