"""Pydantic schemas for per-cycle threat outputs."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from mda.models.base import ProximitySeverityEnum, ThreatLevelEnum


class ThreatAssessment(BaseModel):
    vessel_id: str
    score: int = Field(ge=0, le=100)
    level: ThreatLevelEnum
    reasoning: list[str] = Field(default_factory=list)


class ProximityAlert(BaseModel):
    ship_id: str
    ship_name: str
    ship_country: str
    hotspot: str
    distance_km: int
    severity: ProximitySeverityEnum
    timestamp: datetime
