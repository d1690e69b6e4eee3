"""Parse activity records and user projections from JSON documents.

Accepted layouts:
- activities: a JSON array, an object with an "activities" array, or JSONL
  (one object per line, for files ending in .jsonl)
- users: a JSON array or an object with a "users" array

Field names are accepted in snake_case or camelCase (``totalFootprint``,
``carbonFootprint``...). Naive timestamps are taken as UTC.

Malformed input raises RecordError; unknown subcategories are not errors,
they simply contribute a zero footprint.
"""

from __future__ import annotations

import json
import math
from dataclasses import asdict, is_dataclass
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from ecotrack.calculator import build_record
from ecotrack.core.models import (
    ActivityRecord,
    Category,
    Privacy,
    UserCarbonStats,
    UserProjection,
)
from ecotrack.factors.table import EmissionFactorTable


class RecordError(ValueError):
    """A document could not be turned into a record."""


def _first(d: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in d and d[key] is not None:
            return d[key]
    return default


def _object(d: dict[str, Any], *keys: str, default: Any) -> dict[str, Any]:
    value = _first(d, *keys, default=default)
    if not isinstance(value, dict):
        raise RecordError(f"{keys[0]} must be an object, got {type(value).__name__}")
    return value


def _tags(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise RecordError(f"tags must be a list, got {type(value).__name__}")
    return tuple(value)


def _number(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise RecordError(f"{field_name} must be a number, got {value!r}")
    try:
        val = float(value)
    except (TypeError, ValueError):
        raise RecordError(f"{field_name} must be a number, got {value!r}") from None
    if not math.isfinite(val):
        raise RecordError(f"{field_name} must be finite, got {value!r}")
    return val


def parse_timestamp(value: Any) -> datetime:
    """ISO 8601 string or datetime -> UTC-aware datetime."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip())
        except ValueError:
            raise RecordError(f"Unparseable timestamp: {value!r}") from None
    else:
        raise RecordError(f"Unparseable timestamp: {value!r}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def activity_from_dict(
    d: dict[str, Any],
    table: EmissionFactorTable | None = None,
) -> ActivityRecord:
    """Build an ActivityRecord; the footprint is computed unless supplied."""
    if not isinstance(d, dict):
        raise RecordError(f"Activity must be an object, got {type(d).__name__}")

    required = ("category", "subcategory", "quantity", "unit")
    missing = [k for k in required if d.get(k) in (None, "")]
    if missing:
        raise RecordError(f"Activity is missing required fields: {', '.join(missing)}")

    category = Category.parse(d["category"])
    if category is None:
        raise RecordError(
            f"Invalid category {d['category']!r}. "
            f"Expected one of {[c.value for c in Category]}."
        )
    quantity = _number(d["quantity"], "quantity")
    if quantity < 0:
        raise RecordError(f"quantity must be >= 0, got {quantity}")

    raw_ts = _first(d, "timestamp", "date")
    timestamp = parse_timestamp(raw_ts) if raw_ts is not None else datetime.now(UTC)

    supplied = _first(d, "footprint", "carbonFootprint", "carbon_footprint")
    if supplied is None:
        return build_record(
            category,
            str(d["subcategory"]),
            quantity,
            str(d["unit"]),
            timestamp=timestamp,
            table=table,
            activity=str(d.get("activity") or ""),
            location=d.get("location"),
            notes=d.get("notes"),
            tags=_tags(d.get("tags")),
        )

    footprint = _number(supplied, "footprint")
    if footprint < 0:
        raise RecordError(f"footprint must be >= 0, got {footprint}")
    return ActivityRecord(
        category=category,
        subcategory=str(d["subcategory"]),
        quantity=quantity,
        unit=str(d["unit"]),
        footprint=footprint,
        timestamp=timestamp,
        activity=str(d.get("activity") or ""),
        location=d.get("location"),
        notes=d.get("notes"),
        tags=_tags(d.get("tags")),
    )


def user_from_dict(d: dict[str, Any], default_goal: float | None = None) -> UserProjection:
    """Build a UserProjection from a flat or ``carbonStats``-nested object."""
    if not isinstance(d, dict):
        raise RecordError(f"User must be an object, got {type(d).__name__}")
    username = d.get("username")
    if not username:
        raise RecordError("User is missing required field: username")

    src = _object(d, "carbonStats", "carbon_stats", "stats", default=d)
    profile = _object(d, "profile", default={})
    defaults = UserCarbonStats()
    goal = _first(src, "goal", default=default_goal if default_goal is not None else defaults.goal)

    stats = UserCarbonStats(
        total_footprint=_number(
            _first(src, "totalFootprint", "total_footprint", default=0.0), "totalFootprint"
        ),
        weekly_average=_number(
            _first(src, "weeklyAverage", "weekly_average", default=0.0), "weeklyAverage"
        ),
        monthly_average=_number(
            _first(src, "monthlyAverage", "monthly_average", default=0.0), "monthlyAverage"
        ),
        goal=_number(goal, "goal"),
        level=int(_number(_first(src, "level", default=defaults.level), "level")),
        experience=int(
            _number(_first(src, "experience", default=defaults.experience), "experience")
        ),
    )

    prefs = _object(d, "preferences", default={})
    raw_privacy = _first(d, "privacy", default=_first(prefs, "privacy", default="public"))
    try:
        privacy = Privacy(str(raw_privacy).lower())
    except ValueError:
        raise RecordError(f"Invalid privacy {raw_privacy!r} for user {username!r}") from None

    first_name = _first(d, "firstName", "first_name", default=_first(profile, "firstName"))
    last_name = _first(d, "lastName", "last_name", default=_first(profile, "lastName"))
    return UserProjection(
        username=str(username),
        stats=stats,
        first_name=str(first_name or ""),
        last_name=str(last_name or ""),
        privacy=privacy,
    )


def _read_documents(path: Path, key: str) -> list[Any]:
    if not path.exists():
        raise RecordError(f"File not found: {path}")
    text = path.read_text()
    try:
        if path.suffix == ".jsonl":
            return [json.loads(line) for line in text.splitlines() if line.strip()]
        data = json.loads(text) if text.strip() else []
    except json.JSONDecodeError as e:
        raise RecordError(f"Invalid JSON in {path}: {e}") from e
    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        raise RecordError(f"{path} must contain a list of {key}")
    return data


def load_activities(path: Path, table: EmissionFactorTable | None = None) -> list[ActivityRecord]:
    """Load activity records from a JSON or JSONL file."""
    records = []
    for i, doc in enumerate(_read_documents(path, "activities")):
        try:
            records.append(activity_from_dict(doc, table=table))
        except RecordError as e:
            raise RecordError(f"{path}, activity #{i + 1}: {e}") from e
    return records


def load_users(path: Path, default_goal: float | None = None) -> list[UserProjection]:
    """Load user projections from a JSON or JSONL file."""
    users = []
    for i, doc in enumerate(_read_documents(path, "users")):
        try:
            users.append(user_from_dict(doc, default_goal=default_goal))
        except RecordError as e:
            raise RecordError(f"{path}, user #{i + 1}: {e}") from e
    return users


def to_jsonable(obj: Any) -> Any:
    """Convert result dataclasses into JSON-serializable plain data."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(asdict(obj))
    if isinstance(obj, dict):
        return {str(to_jsonable(k)): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    return obj
