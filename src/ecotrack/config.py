"""Runtime configuration: YAML file + env var overrides.

Priority: env var > YAML file > default.
Env vars use the ECOTRACK_{SETTING} convention (e.g. ECOTRACK_FACTOR_VARIANT=flat).
YAML file default: ~/.ecotrack/config.yaml
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from ecotrack.core.models import DEFAULT_GOAL
from ecotrack.factors.config import FactorVariant

_DEFAULT_PATH = Path("~/.ecotrack/config.yaml").expanduser()


def _parse_int(name: str, raw: Any, *, min_val: int = 0) -> int:
    try:
        val = int(raw)
    except (TypeError, ValueError):
        raise ValueError(
            f"Invalid integer for {name}: {raw!r}. Expected a number."
        ) from None
    if val < min_val:
        raise ValueError(f"{name}={val} is below minimum {min_val}.")
    return val


def _parse_float(name: str, raw: Any, *, min_val: float = 0.0) -> float:
    try:
        val = float(raw)
    except (TypeError, ValueError):
        raise ValueError(
            f"Invalid float for {name}: {raw!r}. Expected a number."
        ) from None
    if val <= min_val:
        raise ValueError(f"{name}={val} must be greater than {min_val}.")
    return val


def _parse_variant(name: str, raw: Any) -> FactorVariant:
    try:
        return FactorVariant(str(raw).lower())
    except ValueError:
        raise ValueError(
            f"Invalid factor variant for {name}: {raw!r}. "
            f"Expected one of {[v.value for v in FactorVariant]}."
        ) from None


def _parse_path(name: str, raw: Any) -> Path | None:
    if raw in (None, ""):
        return None
    return Path(str(raw)).expanduser()


_PARSERS = {
    "factor_variant": _parse_variant,
    "factors_path": _parse_path,
    "default_goal": _parse_float,
    "leaderboard_limit": lambda name, raw: _parse_int(name, raw, min_val=1),
}


@dataclass
class EcotrackConfig:
    # Which emission factor set lookups resolve against
    factor_variant: FactorVariant = FactorVariant.NESTED
    # Optional YAML file of factor overrides, merged over the variant
    factors_path: Path | None = None
    # Yearly kg CO2 goal assigned to users without one
    default_goal: float = DEFAULT_GOAL
    # Leaderboard size when no limit is given
    leaderboard_limit: int = 10

    @classmethod
    def load(cls, path: Path | None = None) -> EcotrackConfig:
        """Load settings from YAML file, then override with env vars."""
        file_path = path or _DEFAULT_PATH
        file_values: dict[str, Any] = {}

        if file_path.exists():
            raw = yaml.safe_load(file_path.read_text()) or {}
            if isinstance(raw, dict):
                file_values = raw

        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            name = f.name
            env_key = f"ECOTRACK_{name.upper()}"
            parse = _PARSERS[name]

            if env_key in os.environ:
                kwargs[name] = parse(env_key, os.environ[env_key])
            elif name in file_values:
                kwargs[name] = parse(f"{file_path}:{name}", file_values[name])
            # else: use dataclass default

        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "factor_variant": self.factor_variant.value,
            "factors_path": str(self.factors_path) if self.factors_path else None,
            "default_goal": self.default_goal,
            "leaderboard_limit": self.leaderboard_limit,
        }


# Singleton
_config: EcotrackConfig | None = None


def get_config(path: Path | None = None) -> EcotrackConfig:
    """Get the singleton EcotrackConfig instance."""
    global _config
    if _config is None:
        _config = EcotrackConfig.load(path)
    return _config


def reset_config() -> None:
    """Reset for testing."""
    global _config
    _config = None
