"""
schemas.py – Pydantic models for the records handed over by the data layer.

Field names follow the dashboard documents (``completedAt``, ``totalValue``,
``destinationCoordinates``); snake_case names are accepted too.
Numeric fields are coerced leniently – see ``validators.py``.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from wastebank_impact.validators import coerce_weight, to_float

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
# Shared / sub-models
# ─────────────────────────────────────────────────────────────

class WasteEntry(BaseModel):
    """Weight (kg) and value (IDR) of one waste type within a transaction."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    weight: float = Field(0.0, description="Weight in kg, never negative")
    value: float = Field(0.0, description="Amount paid for this waste type")

    @field_validator("weight", "value", mode="before")
    @classmethod
    def _coerce_amount(cls, v: Any) -> float:
        return coerce_weight(v)

    @classmethod
    def from_raw(cls, raw: Any) -> "WasteEntry":
        """
        Build an entry from either shape the dashboards use.

        * ``{"weight": 12.5, "value": 16250}`` (``quantity`` accepted when
          ``weight`` is absent)
        * a bare weight, e.g. ``12.5`` from a ``wasteQuantities`` map
        """
        if isinstance(raw, WasteEntry):
            return raw
        if isinstance(raw, Mapping):
            weight = raw.get("weight")
            if weight is None:
                weight = raw.get("quantity")
            return cls(weight=weight, value=raw.get("value"))
        return cls(weight=raw)


class Coordinates(BaseModel):
    """A point in decimal degrees; either component may be missing."""

    model_config = ConfigDict(extra="ignore")

    lat: Optional[float] = None
    lng: Optional[float] = None

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _coerce_degree(cls, v: Any) -> float | None:
        return to_float(v)


def normalize_waste_map(wastes: Any) -> dict[str, WasteEntry]:
    """
    Normalise a waste composition to ``{waste_type: WasteEntry}``.

    Accepts the nested ``{type: {"weight": w}}`` shape and the flat
    ``{type: w}`` shape.  ``None`` becomes an empty map.

    Raises
    ------
    TypeError
        If *wastes* is neither ``None`` nor a mapping.
    """
    if wastes is None:
        return {}
    if not isinstance(wastes, Mapping):
        raise TypeError(f"waste map must be a mapping, got {type(wastes).__name__}")
    return {str(waste_type): WasteEntry.from_raw(raw) for waste_type, raw in wastes.items()}


# ─────────────────────────────────────────────────────────────
# Transaction record
# ─────────────────────────────────────────────────────────────

class TransactionRecord(BaseModel):
    """A completed pickup, master-bank request, or industry request."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    id: Optional[str] = Field(None, description="Document id in the data layer")
    status: Optional[str] = Field(None, description="Lifecycle status, e.g. completed")
    wastes: dict[str, WasteEntry] = Field(default_factory=dict, description="Composition")
    coordinates: Optional[Coordinates] = Field(None, description="Pickup point")
    destination_coordinates: Optional[Coordinates] = Field(
        None,
        validation_alias=AliasChoices(
            "destination_coordinates", "destinationCoordinates", "wasteBankCoordinates"
        ),
        description="Waste bank / industry drop-off point",
    )
    completed_at: Any = Field(None, alias="completedAt", description="Completion timestamp")
    total_value: float = Field(0.0, alias="totalValue", description="Amount paid (IDR)")
    distance_km: Optional[float] = Field(
        None, alias="distanceKm", description="Known travel distance; overrides coordinates"
    )

    @model_validator(mode="before")
    @classmethod
    def _alternate_waste_shapes(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and data.get("wastes") is None:
            for key in ("wasteQuantities", "wasteWeights"):
                if data.get(key) is not None:
                    return {**data, "wastes": data[key]}
        return data

    @field_validator("id", "status", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @field_validator("coordinates", "destination_coordinates", mode="before")
    @classmethod
    def _drop_malformed_point(cls, v: Any) -> Any:
        if v is None or isinstance(v, (Mapping, Coordinates)):
            return v
        logger.warning("Ignoring coordinates %r: expected an object with lat/lng", v)
        return None

    @field_validator("wastes", mode="before")
    @classmethod
    def _normalise_wastes(cls, v: Any) -> dict[str, WasteEntry]:
        try:
            return normalize_waste_map(v)
        except TypeError as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("total_value", mode="before")
    @classmethod
    def _coerce_value(cls, v: Any) -> float:
        return coerce_weight(v)

    @field_validator("distance_km", mode="before")
    @classmethod
    def _coerce_distance(cls, v: Any) -> float | None:
        return to_float(v)

    @classmethod
    def from_raw(cls, raw: Any) -> "TransactionRecord":
        """Validate a raw dict (or pass through an existing record)."""
        if isinstance(raw, TransactionRecord):
            return raw
        return cls.model_validate(raw)

    @property
    def total_weight(self) -> float:
        return sum(entry.weight for entry in self.wastes.values())
