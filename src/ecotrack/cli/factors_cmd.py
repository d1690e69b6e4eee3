"""CLI commands for inspecting emission factors."""

from __future__ import annotations

from collections.abc import Mapping

import typer

from ecotrack.cli._errors import handle_error, input_errors
from ecotrack.cli._tables import active_table

app = typer.Typer(help="Inspect emission factors (kg CO2 per unit).")


@app.command("list")
@input_errors
def list_factors(
    category: str = typer.Option(None, "--category", "-c", help="Limit to one category"),
    variant: str = typer.Option(None, "--variant", help="Factor set: 'nested' or 'flat'"),
) -> None:
    """List every (category, subcategory) factor."""
    table = active_table(variant)
    rows = [
        (cat, sub, entry)
        for cat, sub, entry in table
        if category is None or cat == category.lower()
    ]
    if not rows:
        handle_error(f"No factors for category {category!r}")

    typer.echo(f"{'Category':<14} {'Subcategory':<20} {'kg CO2/unit':>12}")
    typer.echo("-" * 48)
    for cat, sub, entry in rows:
        if isinstance(entry, Mapping):
            for fuel, value in entry.items():
                typer.echo(f"{cat:<14} {sub + '.' + fuel:<20} {value:>12.3f}")
        else:
            typer.echo(f"{cat:<14} {sub:<20} {entry:>12.3f}")
    typer.echo(f"\nVariant: {table.variant.value}")
