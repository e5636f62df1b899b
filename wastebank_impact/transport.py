"""
transport.py – Transport emission models.

Two formulas are in use across the dashboards and both are kept:

 Model    Formula                                              Used by
 ──────────────────────────────────────────────────────────────────────────
 LINEAR   factor × (weight / capacity) × distance              per-pickup / per-request
 TRIPPED  factor × distance × ceil(weight / capacity)          government aggregate report

The linear model charges a load-factor share of one trip; the tripped
model rounds the load up to whole truck trips.
"""
from __future__ import annotations

import logging
import math
from enum import Enum

from wastebank_impact.constants import TRANSPORT_EMISSION_FACTOR, VEHICLE_CAPACITY_KG

logger = logging.getLogger(__name__)


class TransportModel(str, Enum):
    """Which transport formula a call site uses."""

    LINEAR = "linear"
    TRIPPED = "tripped"


def _usable_capacity(vehicle_capacity_kg: float) -> bool:
    if vehicle_capacity_kg is None or vehicle_capacity_kg <= 0:
        logger.warning(
            "Vehicle capacity %r is not positive; transport emission set to 0",
            vehicle_capacity_kg,
        )
        return False
    return True


def linear_transport_emission(
    total_weight_kg: float,
    distance_km: float,
    vehicle_capacity_kg: float = VEHICLE_CAPACITY_KG,
    emission_factor: float = TRANSPORT_EMISSION_FACTOR,
) -> float:
    """Transport emission (kg CO₂e) amortised by the vehicle load factor."""
    if not _usable_capacity(vehicle_capacity_kg):
        return 0.0
    return emission_factor * (total_weight_kg / vehicle_capacity_kg) * distance_km


def tripped_transport_emission(
    total_weight_kg: float,
    distance_km: float,
    vehicle_capacity_kg: float = VEHICLE_CAPACITY_KG,
    emission_factor: float = TRANSPORT_EMISSION_FACTOR,
) -> float:
    """Transport emission (kg CO₂e) for whole truck trips."""
    if not _usable_capacity(vehicle_capacity_kg):
        return 0.0
    trips = math.ceil(total_weight_kg / vehicle_capacity_kg)
    return emission_factor * distance_km * trips


_MODEL_FUNCTIONS = {
    TransportModel.LINEAR: linear_transport_emission,
    TransportModel.TRIPPED: tripped_transport_emission,
}


def transport_emission(
    model: TransportModel | str,
    total_weight_kg: float,
    distance_km: float,
    vehicle_capacity_kg: float = VEHICLE_CAPACITY_KG,
    emission_factor: float = TRANSPORT_EMISSION_FACTOR,
) -> float:
    """Dispatch to the formula selected by *model*."""
    func = _MODEL_FUNCTIONS[TransportModel(model)]
    return func(total_weight_kg, distance_km, vehicle_capacity_kg, emission_factor)
