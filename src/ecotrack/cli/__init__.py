"""ecotrack CLI -- typer-based command interface.

Commands:
    ecotrack calc <category> <subcategory> <quantity>   Footprint of one activity
    ecotrack suggest <category>                         Reduction tips
    ecotrack factors list                               Emission factor table
    ecotrack activities list/stats/summary/achievements Aggregate an activities file
    ecotrack users leaderboard/rank/progress            Rank a users file
"""

from __future__ import annotations

import typer

from ecotrack.calculator import build_record, round_footprint
from ecotrack.cli import activities_cmd, factors_cmd, users_cmd
from ecotrack.cli._errors import echo_json, handle_error, input_errors
from ecotrack.cli._tables import active_table
from ecotrack.core.models import Category
from ecotrack.observability import ObservabilityConfig, configure
from ecotrack.suggestions import get_suggestions

app = typer.Typer(
    name="ecotrack",
    help="Calculate, aggregate and rank carbon footprints.",
    no_args_is_help=True,
)

app.add_typer(factors_cmd.app, name="factors")
app.add_typer(activities_cmd.app, name="activities")
app.add_typer(users_cmd.app, name="users")


@app.callback()
def _setup(
    log_level: str = typer.Option(None, "--log-level", help="Override ECOTRACK_LOG_LEVEL."),
) -> None:
    """Configure structured logging and event routing before any command."""
    cfg = ObservabilityConfig()
    if log_level:
        cfg.log_level = log_level
    try:
        configure(cfg)
    except ValueError as e:
        handle_error(str(e))


@app.command()
@input_errors
def calc(
    category: str = typer.Argument(..., help="Activity category, e.g. transport"),
    subcategory: str = typer.Argument(..., help="Subcategory, e.g. car"),
    quantity: float = typer.Argument(..., help="Amount in the category's unit"),
    unit: str = typer.Option("", "--unit", "-u", help="Unit label (not converted)"),
    variant: str = typer.Option(None, "--variant", help="Factor set: 'nested' or 'flat'"),
    as_json: bool = typer.Option(False, "--json", help="Emit the full record as JSON"),
) -> None:
    """Footprint (kg CO2) of a single activity."""
    record = build_record(category, subcategory, quantity, unit, table=active_table(variant))
    if as_json:
        echo_json(record)
        return
    typer.echo(f"{round_footprint(record.footprint):.2f}")


@app.command()
def suggest(
    category: str = typer.Argument(..., help="Activity category"),
) -> None:
    """Reduction tips for a category."""
    if Category.parse(category) is None:
        handle_error(
            f"Invalid category {category!r}. Expected one of {[c.value for c in Category]}."
        )
    tips = get_suggestions(category)
    if not tips:
        typer.echo(f"No suggestions for {category.lower()}.")
        return
    for tip in tips:
        typer.echo(f"{tip.action:<36} {tip.impact:>5.1f} kg/day  ({tip.difficulty})")


def main() -> None:
    """Entry point for the ecotrack CLI."""
    app()
