from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from mda.models.base import MotionSourceEnum


class PredictedPosition(BaseModel):
    vessel_id: str
    lat: float
    lon: float
    confidence: float = Field(ge=0.0, le=1.0)
    timestamp: datetime
    heading_source: MotionSourceEnum = MotionSourceEnum.NONE
    velocity_source: MotionSourceEnum = MotionSourceEnum.NONE
