"""CLI commands over a file of logged activities."""

from __future__ import annotations

from pathlib import Path

import typer

from ecotrack.aggregate import (
    PERIODS,
    category_breakdown,
    period_summary,
    recompute_stats,
    select_records,
)
from ecotrack.calculator import round_footprint
from ecotrack.cli._errors import echo_json, input_errors, resolve_now
from ecotrack.cli._tables import active_table
from ecotrack.gamification import achievements as earned_achievements
from ecotrack.records import load_activities, parse_timestamp

app = typer.Typer(help="Aggregate logged activities (JSON or JSONL files).")

_FILE = typer.Argument(..., exists=True, dir_okay=False, help="Activities file")
_NOW = typer.Option(None, "--now", help="Reference time (ISO 8601); defaults to now")
_VARIANT = typer.Option(None, "--variant", help="Factor set for missing footprints")


@app.command("list")
@input_errors
def list_activities(
    path: Path = _FILE,
    category: str = typer.Option(None, "--category", "-c", help="Filter by category"),
    start: str = typer.Option(None, "--from", help="Earliest timestamp (ISO 8601)"),
    end: str = typer.Option(None, "--to", help="Latest timestamp (ISO 8601)"),
    variant: str = _VARIANT,
) -> None:
    """List activities, newest first."""
    records = load_activities(path, table=active_table(variant))
    selected = select_records(
        records,
        category=category,
        start=parse_timestamp(start) if start else None,
        end=parse_timestamp(end) if end else None,
    )
    if not selected:
        typer.echo("No activities found.")
        return
    for r in selected:
        typer.echo(
            f"{r.timestamp:%Y-%m-%d %H:%M}  {r.category.value:<12} {r.subcategory:<12} "
            f"{r.quantity:>8g} {r.unit:<5} {round_footprint(r.footprint):>10.2f} kg"
        )


@app.command()
@input_errors
def stats(
    path: Path = _FILE,
    now: str = _NOW,
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
    variant: str = _VARIANT,
) -> None:
    """Total, weekly and monthly footprint plus a per-category breakdown."""
    ref = resolve_now(now)
    records = load_activities(path, table=active_table(variant))
    user_stats = recompute_stats(records, ref)
    breakdown = category_breakdown(records)

    if as_json:
        echo_json(
            {
                "total_footprint": user_stats.total_footprint,
                "weekly_average": user_stats.weekly_average,
                "monthly_average": user_stats.monthly_average,
                "activity_count": len(records),
                "category_stats": breakdown,
            }
        )
        return

    typer.echo(f"Activities:      {len(records)}")
    typer.echo(f"Total footprint: {round_footprint(user_stats.total_footprint):.2f} kg CO2")
    typer.echo(f"Weekly average:  {round_footprint(user_stats.weekly_average):.2f} kg CO2")
    typer.echo(f"Monthly average: {round_footprint(user_stats.monthly_average):.2f} kg CO2")
    if breakdown:
        typer.echo("")
        typer.echo(f"{'Category':<14} {'Total':>10} {'Count':>6} {'Average':>10}")
        typer.echo("-" * 43)
        for cat, cs in breakdown.items():
            typer.echo(
                f"{cat:<14} {round_footprint(cs.total):>10.2f} {cs.count:>6} "
                f"{round_footprint(cs.average):>10.2f}"
            )


@app.command()
@input_errors
def summary(
    path: Path = _FILE,
    period: str = typer.Option("month", "--period", "-p", help=f"One of {', '.join(PERIODS)}"),
    now: str = _NOW,
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
    variant: str = _VARIANT,
) -> None:
    """Statistics over a reporting period."""
    records = load_activities(path, table=active_table(variant))
    result = period_summary(records, resolve_now(now), period)

    if as_json:
        echo_json(result)
        return

    typer.echo(f"Period:          {result.period} (since {result.start:%Y-%m-%d})")
    typer.echo(f"Activities:      {result.activity_count}")
    typer.echo(f"Total footprint: {round_footprint(result.total_footprint):.2f} kg CO2")
    typer.echo(f"Per day:         {round_footprint(result.average_per_day):.2f} kg CO2")
    typer.echo(f"All time:        {round_footprint(result.all_time_total):.2f} kg CO2")
    typer.echo(f"Last 7 days:     {round_footprint(result.weekly_total):.2f} kg CO2")
    typer.echo(f"Last 30 days:    {round_footprint(result.monthly_total):.2f} kg CO2")


@app.command()
@input_errors
def achievements(
    path: Path = _FILE,
    now: str = _NOW,
    variant: str = _VARIANT,
) -> None:
    """Achievements earned by the logged activities."""
    records = load_activities(path, table=active_table(variant))
    earned = earned_achievements(records, resolve_now(now))
    if not earned:
        typer.echo("No achievements yet.")
        return
    for name in earned:
        typer.echo(name)
