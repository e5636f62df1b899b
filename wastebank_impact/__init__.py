"""
wastebank_impact – carbon accounting engine for waste-bank dashboards.

Keep this file side-effect free; import the submodules you need directly,
e.g. ``from wastebank_impact.aggregation import aggregate_statistics``.
"""

__version__ = "0.1.0"
