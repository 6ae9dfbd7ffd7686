"""Shared Typer app object, shared option types, and store utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..io.history_store import HistoryStore, get_default_history_path

# Shared --history-path option type used across all commands
HistoryPathOption = Annotated[
    Optional[Path],
    typer.Option("--history-path", "-p", help="Path to history JSONL file"),
]

# Shared --json option type
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="badge-engine",
    help="Achievement badges computed from your workout history.",
    no_args_is_help=True,
)


def get_store(history_path: Path | None) -> HistoryStore:
    """Get history store from path or default location."""
    if history_path is None:
        history_path = get_default_history_path()
    return HistoryStore(history_path)


def require_store(history_path: Path | None) -> HistoryStore:
    """Get the store, exiting with an error when the history file is missing."""
    from . import views

    store = get_store(history_path)
    if not store.exists():
        views.print_error(f"History file not found: {store.history_path}")
        views.print_info("Run 'init' first to create the history file.")
        raise typer.Exit(1)
    return store
