"""Pydantic schema for static vessel capability reference data."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from mda.models.base import ShipTypeEnum


class ShipCapabilities(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    aliases: tuple[str, ...] = ()
    country: str
    ship_class: str
    type: ShipTypeEnum
    displacement_tons: int
    max_speed_knots: float
    armament: tuple[str, ...] = ()
    fixed_wing_aircraft: int = 0
    helicopters: int = 0
    notes: Optional[str] = None
