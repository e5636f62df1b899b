"""
config.py – Calculation settings with optional environment overrides.

Every constant the engine depends on lives on a ``Settings`` object so that
tests and callers can swap in their own values.  ``get_settings()`` reads
optional environment variables (or a .env file at the project root) and
returns a validated Settings.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from dotenv import load_dotenv

from wastebank_impact.constants import (
    CREDIT_RATE,
    DEFAULT_DISTANCE_KM,
    TRANSPORT_EMISSION_FACTOR,
    VEHICLE_CAPACITY_KG,
)
from wastebank_impact.emission_factors import EMISSION_FACTORS, LANDFILL_DENSITIES

# Project root: the directory holding the wastebank_impact package
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

_env_project = _PROJECT_ROOT / ".env"
if _env_project.exists():
    load_dotenv(_env_project)


@dataclass(frozen=True)
class Settings:
    """Validated calculation settings."""

    transport_emission_factor: float = TRANSPORT_EMISSION_FACTOR
    vehicle_capacity_kg: float = VEHICLE_CAPACITY_KG
    default_distance_km: float = DEFAULT_DISTANCE_KM
    credit_rate: float = CREDIT_RATE
    emission_factors: Mapping[str, float] = field(
        default_factory=lambda: MappingProxyType(dict(EMISSION_FACTORS))
    )
    landfill_densities: tuple[tuple[str, float], ...] = LANDFILL_DENSITIES
    log_level: str = "WARNING"


DEFAULT_SETTINGS = Settings()

_FLOAT_VARS = {
    "WASTEBANK_TRANSPORT_EMISSION_FACTOR": "transport_emission_factor",
    "WASTEBANK_VEHICLE_CAPACITY_KG": "vehicle_capacity_kg",
    "WASTEBANK_DEFAULT_DISTANCE_KM": "default_distance_km",
    "WASTEBANK_CREDIT_RATE": "credit_rate",
}

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _read_float(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise EnvironmentError(
            f"Environment variable {name} must be a number, got {raw!r}"
        ) from None
    if value < 0:
        raise EnvironmentError(
            f"Environment variable {name} must not be negative, got {value}"
        )
    return value


def get_settings(log_level: str | None = None) -> Settings:
    """
    Read optional environment variables and return a Settings.

    Parameters
    ----------
    log_level:
        Override the log level (e.g. from a CLI flag).

    Raises
    ------
    EnvironmentError
        If a variable is set but not a valid non-negative number, or the
        log level is not recognised.
    """
    overrides: dict[str, object] = {}
    for env_name, attr in _FLOAT_VARS.items():
        raw = os.environ.get(env_name)
        if raw:
            overrides[attr] = _read_float(env_name, raw.strip())

    if overrides.get("vehicle_capacity_kg") == 0:
        raise EnvironmentError("WASTEBANK_VEHICLE_CAPACITY_KG must be greater than 0")

    level = (log_level or os.environ.get("WASTEBANK_LOG_LEVEL") or "WARNING").upper()
    if level not in _LOG_LEVELS:
        raise EnvironmentError(
            f"Unknown log level {level!r}; expected one of {', '.join(sorted(_LOG_LEVELS))}"
        )
    overrides["log_level"] = level

    return Settings(**overrides)
