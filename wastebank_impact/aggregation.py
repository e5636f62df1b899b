"""
aggregation.py – Fold many completed transactions into an impact summary.

Each call is a pure fold over an already-materialised list of records: all
running totals are local to the call, so concurrent or repeated calls with
different data never interfere.

Derived metrics
───────────────
 carbon_efficiency        = total_carbon_offset ÷ total_weight        (0 if no weight)
 projected_annual_savings = mean(monthly carbon offset) × 12          (0 if no months)
 average_revenue_per_kg   = total_revenue ÷ total_weight              (0 if no weight)
 revenue_growth           = (this_month − last_month) ÷ last_month × 100
                            (100 if last month is 0 and this month > 0, else 0)

Usage
──────
    from wastebank_impact.aggregation import aggregate_statistics

    summary = aggregate_statistics(pickups)
    payload = summary.to_dict()
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Iterable, Mapping

from dateutil.relativedelta import relativedelta

from wastebank_impact.config import DEFAULT_SETTINGS, Settings
from wastebank_impact.constants import (
    MONTH_LABELS,
    MONTHS_PER_YEAR,
    TIMEFRAME_ALL,
    TIMEFRAME_MONTH,
    TIMEFRAME_QUARTER,
    TIMEFRAME_WEEK,
    TIMEFRAME_YEAR,
)
from wastebank_impact.distance import record_distance_km
from wastebank_impact.emission_factors import (
    UNKNOWN_FACTOR_AGGREGATE,
    get_waste_category,
    make_factor_lookup,
)
from wastebank_impact.impact import CreditsMode, EnvironmentalImpact, compute_impact
from wastebank_impact.schemas import TransactionRecord
from wastebank_impact.timestamps import month_key, parse_timestamp
from wastebank_impact.transport import TransportModel
from wastebank_impact.waste_emissions import iter_entry_emissions

logger = logging.getLogger(__name__)


class MonthSort(str, Enum):
    """
    Ordering of the monthly series.

    NUMERIC sorts by (year, month number).  LABEL reproduces the older
    dashboards, which compared short month names as strings within a year
    ("Apr" < "Feb" < "Jan"); keep it only to match legacy exports.
    """

    NUMERIC = "numeric"
    LABEL = "label"


# ─────────────────────────────────────────────────────────────────────────────
# Result dataclasses
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class WasteTypeStats:
    """Totals for one waste type (or one waste category)."""
    name: str
    weight: float = 0.0
    emissions: float = 0.0
    savings: float = 0.0
    revenue: float = 0.0

    @property
    def net_emission(self) -> float:
        return self.emissions - self.savings

    @property
    def average_price(self) -> float:
        return self.revenue / self.weight if self.weight else 0.0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["net_emission"] = self.net_emission
        data["average_price"] = self.average_price
        return data


@dataclass
class MonthlyBucket:
    """Accumulated figures for one calendar month."""
    key: str                 # "YYYY-MM"
    year: int
    month: int               # 1–12
    label: str               # short month name, e.g. "Mar"
    weight: float = 0.0
    emissions: float = 0.0   # processing + transport
    savings: float = 0.0
    carbon_offset: float = 0.0
    revenue: float = 0.0
    transaction_count: int = 0

    @property
    def net_emissions(self) -> float:
        return self.emissions - self.savings

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["net_emissions"] = self.net_emissions
        return data


@dataclass
class ImpactSummary:
    """Aggregated impact over a reporting period."""
    transaction_count: int = 0
    dated_transaction_count: int = 0
    total_weight: float = 0.0
    total_revenue: float = 0.0
    total_emission: float = 0.0
    total_processing_emission: float = 0.0
    total_transport_emission: float = 0.0
    total_recycling_savings: float = 0.0
    total_carbon: float = 0.0
    total_carbon_offset: float = 0.0
    total_potential_credits: float = 0.0
    total_landfill_volume: float = 0.0
    total_distance_traveled: float = 0.0
    carbon_efficiency: float = 0.0
    projected_annual_savings: float = 0.0
    average_revenue_per_kg: float = 0.0
    this_month_revenue: float = 0.0
    last_month_revenue: float = 0.0
    revenue_growth: float = 0.0
    waste_types: list[WasteTypeStats] = field(default_factory=list)
    categories: list[WasteTypeStats] = field(default_factory=list)
    monthly: list[MonthlyBucket] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = {
            k: v for k, v in asdict(self).items()
            if k not in ("waste_types", "categories", "monthly")
        }
        data["waste_types"] = [w.to_dict() for w in self.waste_types]
        data["categories"] = [c.to_dict() for c in self.categories]
        data["monthly"] = [m.to_dict() for m in self.monthly]
        return data


@dataclass
class _RecordContribution:
    """Everything one record adds to the summary, computed before applying."""
    impact: EnvironmentalImpact
    distance: float
    revenue: float
    completed: datetime | None
    entries: list[tuple[str, float, float, float, float]]  # type, weight, emission, saving, value


# ─────────────────────────────────────────────────────────────────────────────
# Internal helpers
# ─────────────────────────────────────────────────────────────────────────────

def _record_label(raw: Any, index: int) -> str:
    if isinstance(raw, TransactionRecord) and raw.id:
        return raw.id
    if isinstance(raw, Mapping) and raw.get("id"):
        return str(raw["id"])
    return f"#{index}"


def _contribution(
    record: TransactionRecord,
    *,
    transport_model: TransportModel | str,
    unknown_factor: float,
    credits_mode: CreditsMode | str,
    distance_fallback_km: float,
    settings: Settings,
) -> _RecordContribution:
    distance = record_distance_km(record, distance_fallback_km)
    impact = compute_impact(
        record.wastes,
        distance,
        transport_model=transport_model,
        unknown_factor=unknown_factor,
        credits_mode=credits_mode,
        settings=settings,
    )
    lookup = make_factor_lookup(unknown_factor, settings.emission_factors)
    entries = [
        (item.waste_type, item.weight, item.emission, item.saving, item.value)
        for item in iter_entry_emissions(record.wastes, lookup)
    ]
    revenue = record.total_value or sum(value for *_, value in entries)
    return _RecordContribution(
        impact=impact,
        distance=distance,
        revenue=revenue,
        completed=parse_timestamp(record.completed_at),
        entries=entries,
    )


def _add_stats(table: dict[str, WasteTypeStats], name: str, weight: float,
               emission: float, saving: float, value: float) -> None:
    stats = table.get(name)
    if stats is None:
        stats = table[name] = WasteTypeStats(name=name)
    stats.weight += weight
    stats.emissions += emission
    stats.savings += saving
    stats.revenue += value


def _sort_months(buckets: Iterable[MonthlyBucket], month_sort: MonthSort) -> list[MonthlyBucket]:
    if month_sort is MonthSort.LABEL:
        return sorted(buckets, key=lambda b: (b.year, b.label))
    return sorted(buckets, key=lambda b: (b.year, b.month))


def _previous_month(now: datetime) -> tuple[int, int]:
    if now.month == 1:
        return now.year - 1, MONTHS_PER_YEAR
    return now.year, now.month - 1


def revenue_growth(this_month: float, last_month: float) -> float:
    """Month-over-month revenue growth in percent."""
    if last_month:
        return (this_month - last_month) / last_month * 100
    return 100.0 if this_month > 0 else 0.0


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def aggregate_statistics(
    records: Iterable[Any],
    *,
    transport_model: TransportModel | str = TransportModel.TRIPPED,
    unknown_factor: float = UNKNOWN_FACTOR_AGGREGATE,
    credits_mode: CreditsMode | str = CreditsMode.RUNNING_TOTAL,
    month_sort: MonthSort | str = MonthSort.NUMERIC,
    distance_fallback_km: float | None = None,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> ImpactSummary:
    """
    Fold *records* into an ``ImpactSummary``.

    Parameters
    ──────────
    records              : raw record dicts or ``TransactionRecord`` objects
    transport_model      : formula for transport emissions
    unknown_factor       : emission factor for waste types missing from the table
    credits_mode         : potential-credit accumulation rule
    month_sort           : ordering of the monthly series
    distance_fallback_km : distance for records without usable coordinates
                           (defaults to ``settings.default_distance_km``)
    settings             : calculation settings (defaults to DEFAULT_SETTINGS)
    now                  : reference time for this/last month revenue

    Records without a usable completion date are left out of the monthly
    series only.  A record that cannot be processed is logged, counted, and
    contributes nothing else.
    """
    cfg = settings or DEFAULT_SETTINGS
    fallback = cfg.default_distance_km if distance_fallback_km is None else distance_fallback_km
    sort_mode = MonthSort(month_sort)
    ref = now or datetime.now(tz=timezone.utc)
    if ref.tzinfo is None:
        ref = ref.replace(tzinfo=timezone.utc)
    last_year, last_month = _previous_month(ref)

    summary = ImpactSummary()
    by_type: dict[str, WasteTypeStats] = {}
    by_category: dict[str, WasteTypeStats] = {}
    buckets: dict[str, MonthlyBucket] = {}

    for index, raw in enumerate(records):
        summary.transaction_count += 1
        try:
            record = TransactionRecord.from_raw(raw)
            part = _contribution(
                record,
                transport_model=transport_model,
                unknown_factor=unknown_factor,
                credits_mode=credits_mode,
                distance_fallback_km=fallback,
                settings=cfg,
            )
        except Exception as exc:  # noqa: BLE001
            label = _record_label(raw, index)
            logger.error("Record %s skipped: %s", label, exc)
            summary.errors.append(f"record {label}: {exc}")
            continue

        impact = part.impact
        summary.total_weight += impact.total_weight
        summary.total_revenue += part.revenue
        summary.total_emission += impact.total_emission
        summary.total_processing_emission += impact.waste_management_emission
        summary.total_transport_emission += impact.transport_emission
        summary.total_recycling_savings += impact.recycling_savings
        summary.total_carbon += impact.carbon
        summary.total_carbon_offset += impact.carbon_offset
        summary.total_potential_credits += impact.potential_credits
        summary.total_landfill_volume += impact.landfill_volume
        summary.total_distance_traveled += part.distance

        for waste_type, weight, emission, saving, value in part.entries:
            _add_stats(by_type, waste_type, weight, emission, saving, value)
            _add_stats(by_category, get_waste_category(waste_type),
                       weight, emission, saving, value)

        completed = part.completed
        if completed is None:
            continue

        summary.dated_transaction_count += 1
        key = month_key(completed)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = MonthlyBucket(
                key=key,
                year=completed.year,
                month=completed.month,
                label=MONTH_LABELS[completed.month - 1],
            )
        bucket.weight += impact.total_weight
        bucket.emissions += impact.waste_management_emission + impact.transport_emission
        bucket.savings += impact.recycling_savings
        bucket.carbon_offset += impact.carbon_offset
        bucket.revenue += part.revenue
        bucket.transaction_count += 1

        if (completed.year, completed.month) == (ref.year, ref.month):
            summary.this_month_revenue += part.revenue
        elif (completed.year, completed.month) == (last_year, last_month):
            summary.last_month_revenue += part.revenue

    summary.waste_types = sorted(by_type.values(), key=lambda s: s.weight, reverse=True)
    summary.categories = sorted(by_category.values(), key=lambda s: s.weight, reverse=True)
    summary.monthly = _sort_months(buckets.values(), sort_mode)

    if summary.total_weight > 0:
        summary.carbon_efficiency = summary.total_carbon_offset / summary.total_weight
        summary.average_revenue_per_kg = summary.total_revenue / summary.total_weight
    if summary.monthly:
        offsets = [b.carbon_offset for b in summary.monthly]
        summary.projected_annual_savings = sum(offsets) / len(offsets) * MONTHS_PER_YEAR
    summary.revenue_growth = revenue_growth(
        summary.this_month_revenue, summary.last_month_revenue
    )

    logger.info(
        "Aggregated %d record(s): %.2f kg, total emission %.4f kg CO₂e, %d error(s)",
        summary.transaction_count, summary.total_weight,
        summary.total_emission, len(summary.errors),
    )
    return summary


def _completed_value(raw: Any) -> Any:
    if isinstance(raw, TransactionRecord):
        return raw.completed_at
    if isinstance(raw, Mapping):
        value = raw.get("completedAt")
        return raw.get("completed_at") if value is None else value
    return getattr(raw, "completed_at", None)


_TIMEFRAME_DELTAS = {
    TIMEFRAME_WEEK: timedelta(days=7),
    TIMEFRAME_MONTH: relativedelta(months=1),
    TIMEFRAME_QUARTER: relativedelta(months=3),
    TIMEFRAME_YEAR: relativedelta(years=1),
}


def filter_by_timeframe(
    records: Iterable[Any],
    timeframe: str = TIMEFRAME_ALL,
    now: datetime | None = None,
) -> list[Any]:
    """
    Keep the records completed within *timeframe* of *now*.

    ``"all"`` keeps everything (including undated records); the other
    windows drop records without a usable completion date.

    Raises
    ------
    ValueError
        If *timeframe* is not one of all / week / month / quarter / year.
    """
    if timeframe == TIMEFRAME_ALL:
        return list(records)
    delta = _TIMEFRAME_DELTAS.get(timeframe)
    if delta is None:
        raise ValueError(f"Unknown timeframe {timeframe!r}")

    ref = now or datetime.now(tz=timezone.utc)
    if ref.tzinfo is None:
        ref = ref.replace(tzinfo=timezone.utc)
    start = ref - delta

    kept = []
    for raw in records:
        completed = parse_timestamp(_completed_value(raw))
        if completed is not None and completed >= start:
            kept.append(raw)
    return kept
