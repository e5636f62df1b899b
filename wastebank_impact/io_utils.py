"""
io_utils.py – Reading exported records and writing summary artefacts.

Input files are JSON exports of completed transactions, either a bare list
of records or an object holding them under ``"records"`` (or ``"pickups"`` /
``"requests"``).

Output is written to *outdir*:
    outdir/
        summary.json

Parent directories are created automatically via ``Path.mkdir(parents=True)``.
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from wastebank_impact.constants import OUT_SUMMARY

_RECORD_KEYS = ("records", "pickups", "requests")


class RecordFileError(ValueError):
    """Raised when an input file does not hold a list of records."""


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────

def _write_json(path: Path, data: Any, indent: int = 2) -> None:
    """Serialise *data* to JSON at *path*, creating parents as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=indent, ensure_ascii=False, default=str)


def load_records(path: Path) -> list[Any]:
    """
    Load transaction records from a JSON file.

    Raises
    ------
    RecordFileError
        If the file cannot be read, is not UTF-8 JSON, or holds no record
        list.
    """
    try:
        with Path(path).open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as exc:
        raise RecordFileError(f"{path}: invalid JSON ({exc})") from exc
    except UnicodeDecodeError as exc:
        raise RecordFileError(f"{path}: not UTF-8 text ({exc})") from exc
    except OSError as exc:
        raise RecordFileError(f"{path}: cannot read file ({exc})") from exc

    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in _RECORD_KEYS:
            if isinstance(data.get(key), list):
                return data[key]
    raise RecordFileError(
        f"{path}: expected a list of records or an object with one of "
        f"{', '.join(_RECORD_KEYS)}"
    )


# ─────────────────────────────────────────────────────────────
# Artefact builders
# ─────────────────────────────────────────────────────────────

def build_meta(
    *,
    source_file: str,
    role: str,
    timeframe: str,
    record_count: int,
    error_count: int = 0,
) -> dict[str, Any]:
    """Build the ``meta`` block embedded in summary.json."""
    return {
        "source_file": source_file,
        "role": role,
        "timeframe": timeframe,
        "record_count": record_count,
        "error_count": error_count,
        "created_at": datetime.now(tz=timezone.utc).isoformat(),
    }


def write_summary(
    outdir: Path,
    summary: dict[str, Any],
    meta: dict[str, Any],
) -> Path:
    """Write ``summary.json`` to *outdir* and return its path."""
    path = Path(outdir) / OUT_SUMMARY
    _write_json(path, {"meta": meta, "summary": summary})
    return path
