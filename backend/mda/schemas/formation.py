from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from mda.models.base import FormationTypeEnum


class ShipFormation(BaseModel):
    id: str
    name: str
    type: FormationTypeEnum
    country: str
    member_ids: list[str] = Field(min_length=2)
    center_lat: float
    center_lon: float
    radius_km: float = Field(ge=0)
    avg_heading: Optional[float] = None
    avg_velocity: Optional[float] = None
