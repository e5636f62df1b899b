"""
waste_emissions.py – Split a waste composition into processing emissions and
recycling savings.

Formula per entry
─────────────────
 factor ≥ 0   processing_emission += factor × weight
 factor < 0   recycling_savings   += |factor| × weight
 always       total_weight        += weight

A factor of exactly 0 falls on the emission branch and contributes 0.
Both outputs are non-negative by construction.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, NamedTuple

from wastebank_impact.emission_factors import make_factor_lookup
from wastebank_impact.schemas import normalize_waste_map

logger = logging.getLogger(__name__)

FactorLookup = Callable[[str], float]


@dataclass
class EmissionSplit:
    """Processing emissions vs. recycling savings for one waste composition."""
    processing_emission: float = 0.0
    recycling_savings: float = 0.0
    total_weight: float = 0.0


class EntryEmission(NamedTuple):
    """Contribution of a single waste type."""
    waste_type: str
    weight: float
    value: float
    factor: float
    emission: float
    saving: float


def iter_entry_emissions(
    wastes: Any,
    factor_lookup: FactorLookup | None = None,
) -> Iterator[EntryEmission]:
    """
    Yield one ``EntryEmission`` per waste type in *wastes*.

    *wastes* may be the nested ``{type: {"weight": w}}`` map or the flat
    ``{type: w}`` map; both are normalised first.
    """
    lookup = factor_lookup or make_factor_lookup()
    for waste_type, entry in normalize_waste_map(wastes).items():
        factor = lookup(waste_type)
        if factor >= 0:
            emission, saving = factor * entry.weight, 0.0
        else:
            emission, saving = 0.0, abs(factor) * entry.weight
        yield EntryEmission(waste_type, entry.weight, entry.value, factor, emission, saving)


def split_emissions(
    wastes: Any,
    factor_lookup: FactorLookup | None = None,
) -> EmissionSplit:
    """
    Fold a waste composition into an ``EmissionSplit``.

    Parameters
    ──────────
    wastes        : nested or flat waste map (``None`` → all zeros)
    factor_lookup : waste type → kg CO₂e/kg; defaults to the per-transaction
                    lookup (unknown types → 0.001)
    """
    split = EmissionSplit()
    for item in iter_entry_emissions(wastes, factor_lookup):
        split.processing_emission += item.emission
        split.recycling_savings += item.saving
        split.total_weight += item.weight
        logger.debug(
            "%s | %.3f kg × %.5f → emission=%.5f saving=%.5f",
            item.waste_type, item.weight, item.factor, item.emission, item.saving,
        )
    return split
