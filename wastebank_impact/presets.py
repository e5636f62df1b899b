"""
presets.py – Calculation presets for each dashboard that reports impact.

The dashboards disagree on transport formula and on how unknown waste types
are treated; each keeps its own numbers through a named preset rather than
one merged behaviour.

 Role              Transport  Unknown waste  Fallback distance
 ──────────────────────────────────────────────────────────────
 government        tripped    0.0            5 km
 industry          linear     0.001          5 km
 wastebank         linear     0.001          5 km
 wastebank_master  linear     0.001          5 km
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable

from wastebank_impact.aggregation import (
    ImpactSummary,
    MonthSort,
    aggregate_statistics,
    filter_by_timeframe,
)
from wastebank_impact.config import Settings
from wastebank_impact.constants import (
    DEFAULT_DISTANCE_KM,
    ROLE_GOVERNMENT,
    ROLE_INDUSTRY,
    ROLE_WASTEBANK,
    ROLE_WASTEBANK_MASTER,
    TIMEFRAME_ALL,
)
from wastebank_impact.emission_factors import (
    UNKNOWN_FACTOR_AGGREGATE,
    UNKNOWN_FACTOR_TRANSACTION,
)
from wastebank_impact.impact import CreditsMode
from wastebank_impact.transport import TransportModel


class UnknownPresetError(KeyError):
    """Raised when no preset exists for a reporting role."""


@dataclass(frozen=True)
class ReportPreset:
    """How one dashboard calculates impact."""
    name: str
    transport_model: TransportModel
    unknown_factor: float
    credits_mode: CreditsMode = CreditsMode.RUNNING_TOTAL
    month_sort: MonthSort = MonthSort.NUMERIC
    distance_fallback_km: float = DEFAULT_DISTANCE_KM

    def options(self) -> dict[str, Any]:
        """Keyword arguments for ``aggregate_statistics``."""
        return {
            "transport_model": self.transport_model,
            "unknown_factor": self.unknown_factor,
            "credits_mode": self.credits_mode,
            "month_sort": self.month_sort,
            "distance_fallback_km": self.distance_fallback_km,
        }


PRESETS: dict[str, ReportPreset] = {
    ROLE_GOVERNMENT: ReportPreset(
        name=ROLE_GOVERNMENT,
        transport_model=TransportModel.TRIPPED,
        unknown_factor=UNKNOWN_FACTOR_AGGREGATE,
    ),
    ROLE_INDUSTRY: ReportPreset(
        name=ROLE_INDUSTRY,
        transport_model=TransportModel.LINEAR,
        unknown_factor=UNKNOWN_FACTOR_TRANSACTION,
    ),
    ROLE_WASTEBANK: ReportPreset(
        name=ROLE_WASTEBANK,
        transport_model=TransportModel.LINEAR,
        unknown_factor=UNKNOWN_FACTOR_TRANSACTION,
    ),
    ROLE_WASTEBANK_MASTER: ReportPreset(
        name=ROLE_WASTEBANK_MASTER,
        transport_model=TransportModel.LINEAR,
        unknown_factor=UNKNOWN_FACTOR_TRANSACTION,
    ),
}


def get_preset(role: str) -> ReportPreset:
    """Return the preset for *role*; raises UnknownPresetError if there is none."""
    try:
        return PRESETS[role]
    except KeyError:
        raise UnknownPresetError(
            f"No report preset for role {role!r}; expected one of {', '.join(PRESETS)}"
        ) from None


def build_role_summary(
    role: str,
    records: Iterable[Any],
    *,
    timeframe: str = TIMEFRAME_ALL,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> ImpactSummary:
    """
    Summarise *records* the way the *role* dashboard does.

    Optionally restricts the records to a timeframe (week / month / quarter /
    year) before aggregating.
    """
    preset = get_preset(role)
    selected = filter_by_timeframe(records, timeframe, now=now)
    return aggregate_statistics(selected, settings=settings, now=now, **preset.options())
