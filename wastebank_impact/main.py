"""
main.py – CLI entry point for the waste-bank impact engine.

Usage
-----
Summarise an export the way a dashboard does:
    python -m wastebank_impact.main summarize --file "exports/pickups.json" --role government
    python -m wastebank_impact.main summarize --file "exports/requests.json" --role industry \
        --timeframe quarter --outdir out/

Per-record emission breakdown:
    python -m wastebank_impact.main breakdown --file "exports/pickups.json"

Emission factor table:
    python -m wastebank_impact.main factors --category plastic

Common options:
    --verbose   (log per-record formula values)
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from wastebank_impact.aggregation import ImpactSummary
from wastebank_impact.config import Settings, get_settings
from wastebank_impact.constants import ALLOWED_ROLES, ALLOWED_TIMEFRAMES, ROLE_GOVERNMENT, TIMEFRAME_ALL
from wastebank_impact.distance import record_distance_km
from wastebank_impact.emission_factors import WASTE_CATEGORIES, get_waste_category
from wastebank_impact.equivalences import carbon_equivalences, weight_equivalences
from wastebank_impact.impact import calculate_emission_breakdown
from wastebank_impact.io_utils import RecordFileError, build_meta, load_records, write_summary
from wastebank_impact.presets import build_role_summary
from wastebank_impact.schemas import TransactionRecord

console = Console()
log = logging.getLogger(__name__)


def _configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s  %(levelname)-8s  %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_settings(args: argparse.Namespace) -> Settings | None:
    try:
        settings = get_settings(log_level="DEBUG" if getattr(args, "verbose", False) else None)
    except EnvironmentError as exc:
        console.print(f"[red]Config error:[/] {exc}")
        return None
    _configure_logging(settings)
    return settings


def _load_input(path_str: str) -> list | None:
    path = Path(path_str)
    if not path.exists():
        console.print(f"[red]Error:[/] File not found: {path}")
        return None
    try:
        return load_records(path)
    except RecordFileError as exc:
        console.print(f"[red]Error:[/] {exc}")
        return None


# ─────────────────────────────────────────────────────────────
# Output tables
# ─────────────────────────────────────────────────────────────

def _print_summary(summary: ImpactSummary) -> None:
    totals = Table(title="Impact totals", show_header=True, header_style="bold cyan")
    totals.add_column("Metric")
    totals.add_column("Value", justify="right")
    rows = [
        ("Transactions", f"{summary.transaction_count}"),
        ("Total weight (kg)", f"{summary.total_weight:,.2f}"),
        ("Total revenue", f"{summary.total_revenue:,.0f}"),
        ("Processing emission (kg CO₂e)", f"{summary.total_processing_emission:,.4f}"),
        ("Transport emission (kg CO₂e)", f"{summary.total_transport_emission:,.6f}"),
        ("Recycling savings (kg CO₂e)", f"{summary.total_recycling_savings:,.4f}"),
        ("Net emission (kg CO₂e)", f"{summary.total_emission:,.4f}"),
        ("Landfill volume saved (m³)", f"{summary.total_landfill_volume:,.3f}"),
        ("Potential credits", f"{summary.total_potential_credits:,.4f}"),
        ("Distance travelled (km)", f"{summary.total_distance_traveled:,.2f}"),
        ("Carbon efficiency (kg CO₂e/kg)", f"{summary.carbon_efficiency:,.4f}"),
        ("Projected annual savings (kg CO₂e)", f"{summary.projected_annual_savings:,.2f}"),
        ("Revenue growth (%)", f"{summary.revenue_growth:,.1f}"),
    ]
    for label, value in rows:
        totals.add_row(label, value)
    console.print(totals)

    if summary.waste_types:
        types = Table(title="By waste type", show_header=True, header_style="bold cyan")
        for col in ("Type", "Weight (kg)", "Emissions", "Savings", "Net", "Avg price"):
            types.add_column(col, justify="left" if col == "Type" else "right")
        for s in summary.waste_types:
            types.add_row(
                s.name, f"{s.weight:,.2f}", f"{s.emissions:,.4f}", f"{s.savings:,.4f}",
                f"{s.net_emission:,.4f}", f"{s.average_price:,.0f}",
            )
        console.print(types)

    if summary.monthly:
        months = Table(title="Monthly", show_header=True, header_style="bold cyan")
        for col in ("Month", "Count", "Weight (kg)", "Emissions", "Savings", "Net", "Revenue"):
            months.add_column(col, justify="left" if col == "Month" else "right")
        for b in summary.monthly:
            months.add_row(
                b.key, str(b.transaction_count), f"{b.weight:,.2f}", f"{b.emissions:,.4f}",
                f"{b.savings:,.4f}", f"{b.net_emissions:,.4f}", f"{b.revenue:,.0f}",
            )
        console.print(months)

    eq = carbon_equivalences(summary.total_carbon_offset)
    console.print(
        f"  [green]✓[/] Offset ≈ {eq.trees:,.1f} trees/year, "
        f"{eq.water_liters:,.0f} L water, {eq.energy_kwh:,.0f} kWh"
    )
    esg = weight_equivalences(summary.total_weight)
    console.print(
        f"  [green]✓[/] Recycled weight ≈ {esg.co2_kg:,.1f} kg CO₂, "
        f"{esg.trees:,.0f} trees, {esg.water_liters:,.0f} L water, "
        f"{esg.energy_kwh:,.1f} kWh (ESG conversion)"
    )
    for err in summary.errors:
        console.print(f"  [yellow]![/] {err}")


# ─────────────────────────────────────────────────────────────
# CLI commands
# ─────────────────────────────────────────────────────────────

def cmd_summarize(args: argparse.Namespace) -> int:
    """Handle: summarize --file ... --role ..."""
    settings = _load_settings(args)
    if settings is None:
        return 1
    records = _load_input(args.file)
    if records is None:
        return 1

    console.print(
        Panel(
            f"[bold]Summarising[/]: {len(records)} record(s) as [italic]{args.role}[/] "
            f"({args.timeframe})",
            style="blue",
        )
    )
    summary = build_role_summary(
        args.role, records, timeframe=args.timeframe, settings=settings
    )
    _print_summary(summary)

    if args.outdir:
        meta = build_meta(
            source_file=str(Path(args.file).resolve()),
            role=args.role,
            timeframe=args.timeframe,
            record_count=summary.transaction_count,
            error_count=len(summary.errors),
        )
        path = write_summary(Path(args.outdir), summary.to_dict(), meta)
        console.print(f"  [green]✓[/] Summary written to [bold]{path}[/]")
    return 0


def cmd_breakdown(args: argparse.Namespace) -> int:
    """Handle: breakdown --file ..."""
    settings = _load_settings(args)
    if settings is None:
        return 1
    records = _load_input(args.file)
    if records is None:
        return 1

    table = Table(title="Emission breakdown", show_header=True, header_style="bold cyan")
    for col in ("Record", "Weight (kg)", "Distance (km)", "Processing", "Transport",
                "Savings", "Total"):
        table.add_column(col, justify="left" if col == "Record" else "right")

    failed = 0
    for index, raw in enumerate(records):
        try:
            record = TransactionRecord.from_raw(raw)
        except ValueError as exc:
            log.error("Record #%d invalid: %s", index, exc)
            table.add_row(f"#{index}", "[red]invalid[/]", "", "", "", "", "")
            failed += 1
            continue
        distance = (
            args.distance_km
            if args.distance_km is not None
            else record_distance_km(record, 0.0)
        )
        b = calculate_emission_breakdown(record.wastes, distance, settings=settings)
        table.add_row(
            record.id or f"#{index}",
            f"{b.total_weight:,.2f}",
            f"{distance:,.2f}",
            f"{b.waste_management_emission:,.4f}",
            f"{b.transport_emission:,.6f}",
            f"{b.recycling_savings:,.4f}",
            f"{b.total_emission:,.4f}",
        )
    console.print(table)
    return 0 if failed == 0 else 1


def cmd_factors(args: argparse.Namespace) -> int:
    """Handle: factors [--category ...]"""
    settings = _load_settings(args)
    if settings is None:
        return 1

    table = Table(title="Emission factors (kg CO₂e/kg)", show_header=True, header_style="bold cyan")
    table.add_column("Waste type")
    table.add_column("Category")
    table.add_column("Factor", justify="right")
    for waste_type, factor in sorted(settings.emission_factors.items()):
        category = get_waste_category(waste_type)
        if args.category and category != args.category:
            continue
        colour = "green" if factor < 0 else "red" if factor > 0 else "white"
        table.add_row(waste_type, category, f"[{colour}]{factor:+.5f}[/]")
    console.print(table)
    return 0


# ─────────────────────────────────────────────────────────────
# Argument parsing
# ─────────────────────────────────────────────────────────────

def _build_shared_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments shared by every sub-command."""
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Log per-record formula values",
    )


def build_parser() -> argparse.ArgumentParser:
    """Construct and return the top-level argument parser."""
    root = argparse.ArgumentParser(
        prog="python -m wastebank_impact.main",
        description="Waste-bank environmental impact engine – local CLI tool.",
    )
    sub = root.add_subparsers(dest="command", required=True)

    # ── summarize ─────────────────────────────────────────────
    p_sum = sub.add_parser("summarize", help="Aggregate a record export into an impact summary.")
    p_sum.add_argument("--file", required=True, help='JSON export, e.g. "exports/pickups.json"')
    p_sum.add_argument(
        "--role",
        default=ROLE_GOVERNMENT,
        choices=ALLOWED_ROLES,
        help=f"Dashboard preset to apply (default: {ROLE_GOVERNMENT})",
    )
    p_sum.add_argument(
        "--timeframe",
        default=TIMEFRAME_ALL,
        choices=ALLOWED_TIMEFRAMES,
        help=f"Only include records completed within this window (default: {TIMEFRAME_ALL})",
    )
    p_sum.add_argument(
        "--outdir",
        default=None,
        help="Write summary.json to this directory",
    )
    _build_shared_args(p_sum)

    # ── breakdown ─────────────────────────────────────────────
    p_brk = sub.add_parser("breakdown", help="Per-record emission breakdown.")
    p_brk.add_argument("--file", required=True, help="JSON export of records")
    p_brk.add_argument(
        "--distance-km",
        type=float,
        default=None,
        dest="distance_km",
        help="Use this distance for every record instead of its coordinates",
    )
    _build_shared_args(p_brk)

    # ── factors ───────────────────────────────────────────────
    p_fac = sub.add_parser("factors", help="Print the emission factor table.")
    p_fac.add_argument(
        "--category",
        default=None,
        choices=sorted(set(WASTE_CATEGORIES.values())),
        help="Only show one waste category",
    )
    _build_shared_args(p_fac)

    return root


# ─────────────────────────────────────────────────────────────
# Entry point
# ─────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> None:
    """Parse arguments and dispatch to the correct sub-command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    dispatch = {
        "summarize": cmd_summarize,
        "breakdown": cmd_breakdown,
        "factors": cmd_factors,
    }
    handler = dispatch.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    sys.exit(handler(args))


if __name__ == "__main__":
    main()
