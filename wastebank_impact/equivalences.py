"""
equivalences.py – Express impact figures as real-world equivalences.

Two conversion presets exist on the dashboards and give different numbers,
so they are kept apart:

* ``CARBON_EQUIVALENCE`` – converts kg CO₂ avoided.  One tree absorbs about
  20 kg CO₂ a year; each kg CO₂ ≈ 1.5 L water and 4.5 kWh energy.
* ``ENV_CONVERSION`` – converts kg of material recycled (industry ESG
  report): 2.5 kg CO₂, 1000 L water, 5.3 kWh, 0.05 trees per kg.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class CarbonEquivalencePreset:
    """Ratios applied to an amount of CO₂ (kg)."""
    kg_co2_per_tree_year: float = 20.0
    water_liters_per_kg_co2: float = 1.5
    energy_kwh_per_kg_co2: float = 4.5


@dataclass(frozen=True)
class WeightConversionPreset:
    """Ratios applied to a weight of recycled material (kg)."""
    co2_per_kg: float = 2.5
    water_per_kg: float = 1000.0
    energy_per_kg: float = 5.3
    trees_per_kg: float = 0.05


CARBON_EQUIVALENCE = CarbonEquivalencePreset()
ENV_CONVERSION = WeightConversionPreset()


@dataclass
class Equivalences:
    """Real-world equivalences of an impact figure."""
    co2_kg: float = 0.0
    trees: float = 0.0
    water_liters: float = 0.0
    energy_kwh: float = 0.0
    landfill_kg: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def carbon_equivalences(
    carbon_kg: float,
    preset: CarbonEquivalencePreset = CARBON_EQUIVALENCE,
) -> Equivalences:
    """Trees, water, and energy equivalent to *carbon_kg* of CO₂ avoided."""
    return Equivalences(
        co2_kg=carbon_kg,
        trees=carbon_kg / preset.kg_co2_per_tree_year,
        water_liters=carbon_kg * preset.water_liters_per_kg_co2,
        energy_kwh=carbon_kg * preset.energy_kwh_per_kg_co2,
    )


def weight_equivalences(
    recycled_weight_kg: float,
    preset: WeightConversionPreset = ENV_CONVERSION,
) -> Equivalences:
    """
    Environmental metrics for *recycled_weight_kg* of recycled material.

    Trees are rounded to a whole number, halves up; landfill reduction
    equals the recycled weight.
    """
    weight = recycled_weight_kg or 0.0
    return Equivalences(
        co2_kg=weight * preset.co2_per_kg,
        trees=float(math.floor(weight * preset.trees_per_kg + 0.5)),
        water_liters=weight * preset.water_per_kg,
        energy_kwh=weight * preset.energy_per_kg,
        landfill_kg=weight,
    )
