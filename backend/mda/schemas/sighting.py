"""Pydantic schemas for inbound sightings, track history entries, and hotspots."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, field_validator

from mda.models.base import ShipTypeEnum


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class DetectedShip(BaseModel):
    """A single structured sighting produced upstream for one refresh cycle."""

    id: str
    name: str
    country: str
    type: ShipTypeEnum = ShipTypeEnum.UNKNOWN
    lat: float
    lon: float
    heading: Optional[float] = None
    velocity: Optional[float] = None  # km/h
    location: Optional[str] = None
    timestamp: datetime
    source: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def unknown_type_falls_back(cls, v):
        if isinstance(v, ShipTypeEnum):
            return v
        try:
            return ShipTypeEnum(str(v).strip().lower())
        except ValueError:
            return ShipTypeEnum.UNKNOWN

    @field_validator("timestamp")
    @classmethod
    def timestamp_is_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class PositionHistoryEntry(BaseModel):
    lat: float
    lon: float
    location: Optional[str] = None
    timestamp: datetime
    source: str = ""

    @field_validator("timestamp")
    @classmethod
    def timestamp_is_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @classmethod
    def from_ship(cls, ship: DetectedShip) -> "PositionHistoryEntry":
        return cls(
            lat=ship.lat,
            lon=ship.lon,
            location=ship.location,
            timestamp=ship.timestamp,
            source=ship.source,
        )


class Hotspot(BaseModel):
    name: str
    lat: float
    lon: float
    level: Optional[str] = None
