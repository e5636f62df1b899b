"""
emission_factors.py – Emission factor constants used in waste-bank carbon accounting.

All factors are in kg CO₂e per kg of material.
Sign convention: positive = the material emits when processed,
negative = net saving (avoided emissions from recycling vs. virgin production).

Sources: EPA WARM recycling factors, published secondary-production ranges
for non-ferrous metals, composting / anaerobic digestion literature.
"""
from __future__ import annotations

from typing import Callable, Mapping

# ─────────────────────────────────────────────────────────────
# Defaults for waste types missing from the table.
# Two call sites disagree, so both are kept:
#   aggregate impact report  → unknown waste assumed neutral
#   per-transaction breakdown → negligible processing emission
# ─────────────────────────────────────────────────────────────
UNKNOWN_FACTOR_AGGREGATE: float = 0.0
UNKNOWN_FACTOR_TRANSACTION: float = 0.001

# ─────────────────────────────────────────────────────────────
# Per-waste-type emission factors (kg CO₂e / kg)
# ─────────────────────────────────────────────────────────────
EMISSION_FACTORS: dict[str, float] = {
    # Metals
    "aluminium": 0.283,      # avg of 0.5 and 0.066
    "besi-tebal": 0.2005,    # avg steel recycling (0.357, 0.044)
    "besi-tipis": 0.2005,
    "kaleng": 0.2115,        # steel can
    "kuningan": 1.06,        # midpoint of secondary copper (0.2 – 1.9)
    "perunggu": 1.06,
    "seng": 2.15,            # avg primary / recycled zinc
    "tembaga": 1.099,        # avg recycled wire (0.198) and secondary copper (1.06)
    "sepeda": 0.0057,        # lifecycle estimate

    # Paper / cardboard
    "kardus-bagus": -3.44,   # recycled corrugated containers
    "kardus-jelek": -3.44,
    "koran": -3.03,          # newspaper
    "majalah": -3.38,        # magazines
    "hvs": -3.15,            # office paper
    "duplek": -3.5,          # mixed paper
    "buram": -3.5,
    "sak-semen": -3.5,

    # Plastics
    "botol-bening": -1.04,   # PET
    "botol-bensin": -1.04,
    "botol-bir": -1.04,
    "botol-kecap": -1.04,
    "botol-warna": -1.04,
    "galon-utuh": -1.04,
    "pet-bening": -1.04,
    "pet-biru": -1.04,
    "pet-galon": -1.04,
    "pet-jelek": -1.04,
    "pet-kotor": -1.04,
    "pet-warna": -1.04,
    "plastik-bening": -0.93, # mixed plastics
    "plastik-keras": -0.88,  # HDPE
    "ps-kaca": 2.50,         # primary PS production, no recycling data
    "kresek": 0.00158,       # single-use bag footprint
    "bak-campur": -0.93,
    "bak-hitam": -0.93,

    # Organic
    "jelantah": 0,           # market value proxy
    "karak": 0.09,           # avg composting / anaerobic digestion
    "gembos": 0.09,

    # Other recyclables
    "karung-100": 0.11,      # avg PE (0.00) and PP (0.22)
    "karung-200": 0.11,
    "karung-kecil": 0.11,
    "keping-cd": -0.93,
    "kabel": 0.122,          # processed material and recycled copper wire
    "sachet": -0.93,
    "sablon-tebal": -3.5,    # assumed paper
    "sablon-tipis": -3.5,
    "lembaran-campur": -0.93,
    "tutup-amdk": -0.88,     # assumed HDPE
    "tutup-campur": -0.88,
    "tutup-galon": -0.88,
}


def get_emission_factor(
    waste_type: str | None,
    default: float = UNKNOWN_FACTOR_TRANSACTION,
    factors: Mapping[str, float] | None = None,
) -> float:
    """
    Return the emission factor (kg CO₂e/kg) for *waste_type*.

    Falls back to *default* when the type is missing from the table.
    Never raises.
    """
    table = EMISSION_FACTORS if factors is None else factors
    if waste_type is None:
        return default
    factor = table.get(waste_type)
    if factor is None:
        return default
    return float(factor)


def make_factor_lookup(
    default: float = UNKNOWN_FACTOR_TRANSACTION,
    factors: Mapping[str, float] | None = None,
) -> Callable[[str], float]:
    """Bind a default and a factor table into a one-argument lookup."""

    def lookup(waste_type: str) -> float:
        return get_emission_factor(waste_type, default=default, factors=factors)

    return lookup


# ─────────────────────────────────────────────────────────────
# Waste categories
# ─────────────────────────────────────────────────────────────
CATEGORY_METAL = "metal"
CATEGORY_PAPER = "paper"
CATEGORY_PLASTIC = "plastic"
CATEGORY_ORGANIC = "organic"
CATEGORY_OTHER = "other"

_CATEGORY_MEMBERS: dict[str, tuple[str, ...]] = {
    CATEGORY_METAL: (
        "aluminium", "besi-tebal", "besi-tipis", "kaleng", "kuningan",
        "perunggu", "seng", "tembaga", "sepeda",
    ),
    CATEGORY_PAPER: (
        "kardus-bagus", "kardus-jelek", "koran", "majalah", "hvs",
        "duplek", "buram", "sak-semen",
    ),
    CATEGORY_PLASTIC: (
        "botol-bening", "botol-bensin", "botol-bir", "botol-kecap",
        "botol-warna", "galon-utuh", "pet-bening", "pet-biru", "pet-galon",
        "pet-jelek", "pet-kotor", "pet-warna", "plastik-bening",
        "plastik-keras", "ps-kaca", "kresek", "bak-campur", "bak-hitam",
    ),
    CATEGORY_ORGANIC: ("jelantah", "karak", "gembos"),
    CATEGORY_OTHER: (
        "karung-100", "karung-200", "karung-kecil", "keping-cd", "kabel",
        "sachet", "sablon-tebal", "sablon-tipis", "lembaran-campur",
        "tutup-amdk", "tutup-campur", "tutup-galon",
    ),
}

WASTE_CATEGORIES: dict[str, str] = {
    waste_type: category
    for category, members in _CATEGORY_MEMBERS.items()
    for waste_type in members
}


def get_waste_category(waste_type: str | None) -> str:
    """Return the category of *waste_type*, ``"other"`` when unknown."""
    if not waste_type:
        return CATEGORY_OTHER
    return WASTE_CATEGORIES.get(waste_type, CATEGORY_OTHER)


# ─────────────────────────────────────────────────────────────
# Landfill volume heuristic (m³ per kg)
# Matched by case-sensitive substring of the waste type id,
# in this order; first match wins.
# ─────────────────────────────────────────────────────────────
LANDFILL_DENSITIES: tuple[tuple[str, float], ...] = (
    ("plastic", 0.10),
    ("paper", 0.15),
    ("kardus", 0.15),
    ("metal", 0.05),
    ("glass", 0.08),
    ("organic", 0.20),
)

DEFAULT_LANDFILL_DENSITY: float = 0.20


def get_landfill_density(
    waste_type: str | None,
    densities: tuple[tuple[str, float], ...] | None = None,
) -> float:
    """Return the landfill volume (m³/kg) avoided by diverting *waste_type*."""
    table = LANDFILL_DENSITIES if densities is None else densities
    if not waste_type:
        return DEFAULT_LANDFILL_DENSITY
    for keyword, density in table:
        if keyword in waste_type:
            return density
    return DEFAULT_LANDFILL_DENSITY

