"""
impact.py – Per-record environmental impact calculations.

Two entry points mirror the two kinds of call site on the dashboards:

 Function                        Transport   Unknown waste   Extras
 ───────────────────────────────────────────────────────────────────────────────
 calculate_emission_breakdown    linear      0.001 kg/kg     –
 compute_impact                  selectable  0 (neutral)     landfill, offset, credits

Identities
──────────
 total_emission = processing_emission + transport_emission − recycling_savings
 carbon         = processing_emission − recycling_savings       (no transport)
 carbon_offset  = recycling_savings

A negative total_emission means the record was a net environmental benefit.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from wastebank_impact.config import DEFAULT_SETTINGS, Settings
from wastebank_impact.emission_factors import (
    UNKNOWN_FACTOR_AGGREGATE,
    UNKNOWN_FACTOR_TRANSACTION,
    get_landfill_density,
    make_factor_lookup,
)
from wastebank_impact.transport import (
    TransportModel,
    linear_transport_emission,
    transport_emission,
)
from wastebank_impact.validators import coerce_weight
from wastebank_impact.waste_emissions import iter_entry_emissions, split_emissions

logger = logging.getLogger(__name__)


class CreditsMode(str, Enum):
    """
    How potential credits are accumulated.

    RUNNING_TOTAL adds ``running_savings × rate`` once per waste type, which
    is the figure the dashboards have always reported.  FINAL_TOTAL charges
    the rate once on the final savings.
    """

    RUNNING_TOTAL = "running_total"
    FINAL_TOTAL = "final_total"


# ─────────────────────────────────────────────────────────────────────────────
# Result dataclasses
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class EmissionBreakdown:
    """Emission figures for one transaction (kg CO₂e, kg)."""
    waste_management_emission: float = 0.0
    transport_emission: float = 0.0
    recycling_savings: float = 0.0
    total_emission: float = 0.0
    total_weight: float = 0.0

    @property
    def processing_emission(self) -> float:
        return self.waste_management_emission

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass
class EnvironmentalImpact(EmissionBreakdown):
    """EmissionBreakdown plus the derived impact metrics of one record."""
    landfill_volume: float = 0.0      # m³
    carbon_offset: float = 0.0        # kg CO₂e, alias of recycling_savings
    potential_credits: float = 0.0
    carbon: float = 0.0               # processing − savings, excluding transport

    @classmethod
    def zero(cls) -> "EnvironmentalImpact":
        return cls()


# ─────────────────────────────────────────────────────────────────────────────
# Per-transaction breakdown (pickups, master requests, industry requests)
# ─────────────────────────────────────────────────────────────────────────────

def calculate_emission_breakdown(
    wastes: Any,
    distance_km: Any = 0.0,
    *,
    settings: Settings | None = None,
    unknown_factor: float = UNKNOWN_FACTOR_TRANSACTION,
) -> EmissionBreakdown:
    """
    Compute the emission breakdown of a single transaction.

    Uses the linear transport model and treats unknown waste types as having
    a negligible processing emission (0.001 kg CO₂e/kg).
    """
    cfg = settings or DEFAULT_SETTINGS
    lookup = make_factor_lookup(unknown_factor, cfg.emission_factors)
    split = split_emissions(wastes, lookup)
    distance = coerce_weight(distance_km)

    transport = linear_transport_emission(
        split.total_weight,
        distance,
        cfg.vehicle_capacity_kg,
        cfg.transport_emission_factor,
    )
    total = split.processing_emission + transport - split.recycling_savings
    return EmissionBreakdown(
        waste_management_emission=split.processing_emission,
        transport_emission=transport,
        recycling_savings=split.recycling_savings,
        total_emission=total,
        total_weight=split.total_weight,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Full impact (aggregate reports)
# ─────────────────────────────────────────────────────────────────────────────

def compute_impact(
    wastes: Any,
    distance_km: Any = 0.0,
    *,
    transport_model: TransportModel | str = TransportModel.TRIPPED,
    unknown_factor: float = UNKNOWN_FACTOR_AGGREGATE,
    credits_mode: CreditsMode | str = CreditsMode.RUNNING_TOTAL,
    settings: Settings | None = None,
) -> EnvironmentalImpact:
    """
    Compute the full environmental impact of one record.

    Steps
    -----
    1. Split each entry into processing emission or recycling saving.
    2. Landfill volume: Σ weight × density(type).
    3. Potential credits, per ``credits_mode``.
    4. Transport emission with the selected model.
    5. Net figures (total_emission, carbon, carbon_offset).

    Any exception is logged and an all-zero impact is returned, so one
    malformed record cannot abort a report.
    """
    cfg = settings or DEFAULT_SETTINGS
    try:
        mode = CreditsMode(credits_mode)
        lookup = make_factor_lookup(unknown_factor, cfg.emission_factors)

        processing = 0.0
        savings = 0.0
        weight = 0.0
        landfill = 0.0
        credits = 0.0
        for item in iter_entry_emissions(wastes, lookup):
            processing += item.emission
            savings += item.saving
            weight += item.weight
            landfill += item.weight * get_landfill_density(
                item.waste_type, cfg.landfill_densities
            )
            if mode is CreditsMode.RUNNING_TOTAL:
                credits += savings * cfg.credit_rate

        if mode is CreditsMode.FINAL_TOTAL:
            credits = savings * cfg.credit_rate

        distance = coerce_weight(distance_km)
        transport = transport_emission(
            transport_model,
            weight,
            distance,
            cfg.vehicle_capacity_kg,
            cfg.transport_emission_factor,
        )

        impact = EnvironmentalImpact(
            waste_management_emission=processing,
            transport_emission=transport,
            recycling_savings=savings,
            total_emission=processing + transport - savings,
            total_weight=weight,
            landfill_volume=landfill,
            carbon_offset=savings,
            potential_credits=credits,
            carbon=processing - savings,
        )
        logger.debug(
            "Impact | %.2f kg over %.2f km → processing=%.4f transport=%.6f "
            "savings=%.4f total=%.4f",
            weight, distance, processing, transport, savings, impact.total_emission,
        )
        return impact
    except Exception as exc:  # noqa: BLE001
        logger.error("Impact calculation failed, counting record as zero: %s", exc)
        return EnvironmentalImpact.zero()
