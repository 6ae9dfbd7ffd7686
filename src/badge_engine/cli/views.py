"""
Rich-based views for CLI output.

Formats badge progress, the stats bundle, the rolling muscle-volume
history and the badge summary for terminal display.
"""

from rich.console import Console
from rich.table import Table

from ..core.landmarks import VOLUME_LANDMARKS, VOLUME_ZONES, VolumeZone
from ..core.models import Badge, BadgeProgress, BadgeSummary, WorkoutSession
from ..core.muscles import muscle_label
from ..core.stats import BadgeStats
from ..core.temporal import OverreachingMuscle, WeekVolume

console = Console()

TIER_STYLES: dict[str, str] = {
    "bronze": "dark_orange3",
    "silver": "grey70",
    "gold": "gold1",
    "platinum": "bright_white",
}

ZONE_STYLES: dict[VolumeZone, str] = {
    "below_mv": "dim",
    "mv_mev": "yellow",
    "mev_mav": "green",
    "mav_mrv": "dark_orange",
    "above_mrv": "red",
}


def _progress_bar(percent: float, width: int = 10) -> str:
    filled = int(round(percent / 100 * width))
    return "█" * filled + "░" * (width - filled)


def _fmt_value(value: float) -> str:
    return f"{value:.0f}" if value == int(value) else f"{value:.1f}"


def format_progress_table(progress: list[BadgeProgress]) -> Table:
    """
    Create a Rich table displaying badge progress.

    Secret badges that are still locked show as "???".

    Args:
        progress: Progress records to display

    Returns:
        Rich Table object
    """
    table = Table(title="Badges")

    table.add_column("Badge", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Tier")
    table.add_column("Pts", justify="right")
    table.add_column("Progress")
    table.add_column("Value", justify="right")
    table.add_column("Unlocked", style="green")

    for p in progress:
        badge = p.badge
        hidden = badge.is_secret and not p.is_unlocked
        tier_style = TIER_STYLES.get(badge.tier, "")
        name = "???" if hidden else badge.name
        if p.is_unlocked:
            name = f"[bold]{name}[/bold]"

        table.add_row(
            name,
            badge.category,
            f"[{tier_style}]{badge.tier}[/{tier_style}]",
            str(badge.points),
            f"{_progress_bar(p.progress_percent)} {p.progress_percent:3.0f}%",
            "-" if hidden else f"{_fmt_value(p.current_value)}/{_fmt_value(p.target_value)}",
            (p.unlocked_at or "yes")[:10] if p.is_unlocked else "",
        )

    return table


def print_progress(progress: list[BadgeProgress]) -> None:
    """Print badge progress to console."""
    if not progress:
        console.print("[yellow]No badges to show.[/yellow]")
        return
    console.print(format_progress_table(progress))


def print_new_badges(badges: list[Badge]) -> None:
    """Announce newly unlocked badges."""
    for badge in badges:
        tier_style = TIER_STYLES.get(badge.tier, "")
        console.print(
            f"[green]Unlocked:[/green] [bold]{badge.name}[/bold] "
            f"([{tier_style}]{badge.tier}[/{tier_style}], +{badge.points} pts) "
            f"- {badge.description}"
        )


def format_session_table(sessions: list[WorkoutSession]) -> Table:
    """
    Create a Rich table displaying session history.

    Args:
        sessions: List of sessions to display

    Returns:
        Rich Table object
    """
    table = Table(title="Workout History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Start", style="cyan")
    table.add_column("Workout", style="magenta")
    table.add_column("Min", justify="right")
    table.add_column("Exercises", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("Volume(kg)", justify="right", style="bold")

    for i, session in enumerate(sessions, 1):
        done = [s for ex in session.completed_exercises for s in ex.completed_sets()]
        volume = sum(s.load_kg * s.reps for s in done)
        table.add_row(
            str(i),
            session.start_time.strftime("%Y-%m-%d %H:%M"),
            session.workout_name or "-",
            f"{session.duration_seconds / 60:.0f}" if session.is_ended else "[yellow]live[/yellow]",
            str(len(session.completed_exercises)),
            str(len(done)),
            f"{volume:.0f}",
        )

    return table


def print_history(sessions: list[WorkoutSession]) -> None:
    """
    Print session history to console.

    Args:
        sessions: Sessions to display
    """
    if not sessions:
        console.print("[yellow]No sessions recorded yet.[/yellow]")
        return

    console.print(format_session_table(sessions))


def format_stats_display(stats: BadgeStats) -> str:
    """
    Format the stats bundle as a text block.

    Args:
        stats: Stats to display

    Returns:
        Formatted string
    """
    lines = [
        "Training stats",
        f"- Sessions: {stats.sessions_count}",
        f"- Total volume: {stats.total_volume_kg / 1000:.2f} t",
        f"- Day streak: {stats.day_streak}",
        f"- Weekly goal: {stats.week_goal_count} weeks hit, streak {stats.week_goal_streak}",
        f"- Weekend streak: {stats.weekend_streak_weeks} weeks",
        f"- PRs: {stats.total_prs} ({stats.weight_prs} weight, {stats.volume_prs} volume)",
        f"- Best PR increase: {stats.max_pr_increase_pct:.1f}%",
        f"- Exercises tried: {stats.unique_exercise_count}",
        f"- Equipment types: {stats.unique_equipment_count}",
        f"- Bodyweight-only sessions: {stats.bodyweight_session_count}",
        f"- Muscles trained (30 days): {stats.all_muscles_trained_count}",
        f"- Balanced days: {stats.balanced_days}",
        f"- Longest session: {stats.max_session_duration_hours:.1f} h",
        f"- Deload weeks (24 weeks): {stats.deload_weeks}",
        f"- Frequency streak: {stats.frequency_streak} weeks",
        f"- Sets with RIR: {stats.rir_sets}",
        f"- Readiness checks: {stats.readiness_checks}",
        f"- Feedback sessions: {stats.feedback_sessions}",
    ]

    if stats.muscle_sets:
        lines.append("")
        lines.append("Sets by muscle")
        for muscle, sets in sorted(stats.muscle_sets.items(), key=lambda kv: -kv[1]):
            volume = stats.muscle_volume_kg.get(muscle, 0.0)
            lines.append(f"- {muscle_label(muscle)}: {sets} sets, {volume:.0f} kg")

    return "\n".join(lines)


def format_volume_table(weeks: list[WeekVolume]) -> Table:
    """
    Create a Rich table of weekly sets per muscle, colored by volume zone.

    Args:
        weeks: Rolling history, oldest first

    Returns:
        Rich Table object
    """
    table = Table(title="Weekly sets by muscle")
    table.add_column("Muscle", style="cyan")
    for week in weeks:
        table.add_column(week.week_start.strftime("%m-%d"), justify="right")

    trained = {m for week in weeks for m in week.sets}
    muscles = [m for m in VOLUME_LANDMARKS if m in trained]
    muscles += sorted(trained - set(muscles))

    for muscle in muscles:
        cells = []
        for week in weeks:
            sets = week.sets.get(muscle, 0)
            zone = week.zones.get(muscle)
            if sets == 0:
                cells.append("[dim]·[/dim]")
            elif zone is None:
                cells.append(str(sets))
            else:
                style = ZONE_STYLES[zone]
                cells.append(f"[{style}]{sets}[/{style}]")
        table.add_row(muscle_label(muscle), *cells)

    return table


def print_volume(weeks: list[WeekVolume]) -> None:
    """Print the rolling muscle-volume table with a zone legend."""
    if not any(week.sets for week in weeks):
        console.print("[yellow]No muscle volume in this window.[/yellow]")
        return
    console.print(format_volume_table(weeks))
    legend = "  ".join(f"[{ZONE_STYLES[z]}]{z}[/{ZONE_STYLES[z]}]" for z in VOLUME_ZONES)
    console.print(f"Zones: {legend}")


def print_deload(flagged: list[OverreachingMuscle], severity: str) -> None:
    """Print the deload check: flagged muscles or an all-clear."""
    if not flagged:
        print_success("No muscle has been above MRV for consecutive weeks.")
        return

    table = Table(title="Above MRV")
    table.add_column("Muscle", style="cyan")
    table.add_column("Weeks", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("MRV", justify="right")
    for m in flagged:
        table.add_row(muscle_label(m.muscle), str(m.weeks_above_mrv), str(m.current_sets), str(m.mrv))
    console.print(table)

    names = ", ".join(muscle_label(m.muscle) for m in flagged)
    if severity == "urgent":
        print_error(f"Deload now: {names} far past recoverable volume.")
    else:
        print_warning(f"Consider a deload week at maintenance volume for {names}.")


def format_summary_display(summary: BadgeSummary) -> str:
    """
    Format the badge summary as a text block.

    Args:
        summary: Summary to display

    Returns:
        Formatted string
    """
    lines = [
        f"Level: {summary.level.name}",
        f"- Points: {summary.total_points}",
        f"- Badges: {summary.total_badges}/{summary.available_badges}",
    ]
    if summary.next_level is not None:
        lines.append(
            f"- Next level: {summary.next_level.name} "
            f"({summary.points_to_next_level} pts to go)"
        )
    else:
        lines.append("- Max level reached")

    tiers = ", ".join(f"{tier} {count}" for tier, count in summary.badges_by_tier.items())
    lines.append(f"- By tier: {tiers}")
    if summary.badges_by_category:
        categories = ", ".join(
            f"{cat} {count}" for cat, count in sorted(summary.badges_by_category.items())
        )
        lines.append(f"- By category: {categories}")

    if summary.recent_unlocks:
        lines.append("")
        lines.append("Recent unlocks")
        for p in summary.recent_unlocks:
            lines.append(f"- {p.badge.name} ({(p.unlocked_at or '')[:10]})")

    if summary.next_badge is not None:
        nb = summary.next_badge
        lines.append("")
        lines.append(f"Closest: {nb.badge.name} at {nb.progress_percent:.0f}%")

    return "\n".join(lines)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
