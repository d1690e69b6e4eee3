"""CLI error handling and shared option parsing."""

from __future__ import annotations

import functools
import json
from datetime import UTC, datetime
from typing import Any, Callable, NoReturn

import typer

from ecotrack.records import parse_timestamp, to_jsonable


def handle_error(msg: str) -> NoReturn:
    """Print an error message and exit."""
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(1)


def input_errors(f: Callable) -> Callable:
    """Decorator that turns malformed-input ValueErrors into a clean exit 1."""

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except ValueError as e:
            handle_error(str(e))

    return wrapper


def resolve_now(raw: str | None) -> datetime:
    """--now option: ISO timestamp, or the current UTC time when omitted."""
    if raw is None:
        return datetime.now(UTC)
    return parse_timestamp(raw)


def echo_json(obj: Any) -> None:
    typer.echo(json.dumps(to_jsonable(obj), indent=2))
