"""CLI commands over a file of user stats: leaderboard, ranking, progress."""

from __future__ import annotations

from pathlib import Path

import typer

from ecotrack.calculator import round_footprint
from ecotrack.cli._errors import echo_json, handle_error, input_errors
from ecotrack.config import get_config
from ecotrack.core.models import UserProjection
from ecotrack.gamification import goal_progress
from ecotrack.leaderboard import build_leaderboard, my_ranking
from ecotrack.records import load_users

app = typer.Typer(help="Rank users by total footprint (lower is better).")

_FILE = typer.Argument(..., exists=True, dir_okay=False, help="Users file")


def _find_user(users: list[UserProjection], username: str) -> UserProjection:
    for user in users:
        if user.username == username:
            return user
    handle_error(f"User not found: {username}")


@app.command()
@input_errors
def leaderboard(
    path: Path = _FILE,
    limit: int = typer.Option(None, "--limit", "-n", min=1, help="Number of entries"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
) -> None:
    """Public users ranked by ascending total footprint."""
    cfg = get_config()
    users = load_users(path, default_goal=cfg.default_goal)
    entries = build_leaderboard(users, limit=limit or cfg.leaderboard_limit)

    if as_json:
        echo_json({"leaderboard": entries})
        return
    if not entries:
        typer.echo("No public users found.")
        return

    typer.echo(f"{'Rank':>4}  {'User':<20} {'Total kg':>10} {'Weekly':>8} {'Level':>6}")
    typer.echo("-" * 54)
    for e in entries:
        typer.echo(
            f"{e.rank:>4}  {e.username:<20} {round_footprint(e.total_footprint):>10.2f} "
            f"{round_footprint(e.weekly_average):>8.2f} {e.level:>6}"
        )


@app.command()
@input_errors
def rank(
    path: Path = _FILE,
    username: str = typer.Argument(..., help="User to rank"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
) -> None:
    """One user's rank and percentile among public users."""
    users = load_users(path, default_goal=get_config().default_goal)
    ranking = my_ranking(_find_user(users, username), users)

    if as_json:
        echo_json(ranking)
        return
    typer.echo(f"Rank:       {ranking.rank} of {ranking.total_users}")
    typer.echo(f"Percentile: {ranking.percentile}")
    typer.echo(f"Total:      {round_footprint(ranking.total_footprint):.2f} kg CO2")


@app.command()
@input_errors
def progress(
    path: Path = _FILE,
    username: str = typer.Argument(..., help="User to report on"),
) -> None:
    """Progress toward the user's yearly footprint goal."""
    users = load_users(path, default_goal=get_config().default_goal)
    result = goal_progress(_find_user(users, username).stats)
    typer.echo(f"Goal:       {round_footprint(result.goal):.2f} kg CO2")
    typer.echo(f"Current:    {round_footprint(result.current):.2f} kg CO2")
    typer.echo(f"Progress:   {round_footprint(result.progress):.2f}%")
    typer.echo(f"Level:      {result.level} ({result.experience} XP)")
