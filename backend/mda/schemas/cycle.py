from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from mda.schemas.formation import ShipFormation
from mda.schemas.prediction import PredictedPosition
from mda.schemas.threat import ProximityAlert, ThreatAssessment


class CycleResult(BaseModel):
    """Derived outputs of one refresh cycle; recomputed from scratch each time."""

    assessments: list[ThreatAssessment] = Field(default_factory=list)
    formations: list[ShipFormation] = Field(default_factory=list)
    predictions: dict[str, Optional[PredictedPosition]] = Field(default_factory=dict)
    proximity_alerts: list[ProximityAlert] = Field(default_factory=list)
