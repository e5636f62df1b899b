"""
constants.py – Shared labels, default values, and thresholds.
"""

# ── Reporting roles (one per dashboard) ───────────────────────
ROLE_GOVERNMENT = "government"
ROLE_INDUSTRY = "industry"
ROLE_WASTEBANK = "wastebank"
ROLE_WASTEBANK_MASTER = "wastebank_master"

ALLOWED_ROLES = [
    ROLE_GOVERNMENT,
    ROLE_INDUSTRY,
    ROLE_WASTEBANK,
    ROLE_WASTEBANK_MASTER,
]

# ── Transport defaults ────────────────────────────────────────
# kg CO₂e per kg of load per km travelled
TRANSPORT_EMISSION_FACTOR = 0.0000191
VEHICLE_CAPACITY_KG = 2500.0
# Used by aggregate call sites when a record has no usable coordinates
DEFAULT_DISTANCE_KM = 5.0
EARTH_RADIUS_KM = 6371.0

# ── Credits ───────────────────────────────────────────────────
# Potential carbon credits per kg CO₂e saved
CREDIT_RATE = 0.001

# ── Time windows ──────────────────────────────────────────────
TIMEFRAME_ALL = "all"
TIMEFRAME_WEEK = "week"
TIMEFRAME_MONTH = "month"
TIMEFRAME_QUARTER = "quarter"
TIMEFRAME_YEAR = "year"

ALLOWED_TIMEFRAMES = [
    TIMEFRAME_ALL,
    TIMEFRAME_WEEK,
    TIMEFRAME_MONTH,
    TIMEFRAME_QUARTER,
    TIMEFRAME_YEAR,
]

MONTHS_PER_YEAR = 12
MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# ── Output file names ─────────────────────────────────────────
OUT_SUMMARY = "summary.json"
