"""One pass of the engine over the current sighting set.

Steps:
  1. Collapse repeated sightings of a vessel to its latest one
  2. Append every sighting to the TrackStore
  3. Detect formations
  4. Score every sighting, passing its formation membership back in
  5. Predict each vessel's position from its track history
  6. Compute hotspot proximity alerts

Derived outputs are rebuilt from scratch every cycle. Persistence is left to
the caller: this never calls store.load() or store.save().
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

from mda.config import settings
from mda.modules.formation_detector import detect_formations, latest_by_id
from mda.modules.path_predictor import predict_position
from mda.modules.proximity_alerts import check_proximity_alerts
from mda.modules.threat_scoring import assess_all, load_scoring_config
from mda.modules.track_store import TrackStore
from mda.schemas.cycle import CycleResult
from mda.schemas.sighting import DetectedShip, Hotspot

logger = logging.getLogger(__name__)


def run_refresh_cycle(
    ships: Iterable[DetectedShip],
    hotspots: Sequence[Hotspot],
    store: TrackStore,
    hours_ahead: Optional[float] = None,
    regions: Optional[Mapping[str, Sequence[str]]] = None,
    config: Optional[Mapping[str, Any]] = None,
) -> CycleResult:
    if hours_ahead is None:
        hours_ahead = settings.PREDICTION_HOURS_AHEAD
    if config is None:
        config = load_scoring_config()

    current = latest_by_id(ships)
    for ship in current:
        store.record(ship)

    formations = detect_formations(current)
    assessments = assess_all(current, hotspots, formations, config=config, regions=regions)
    predictions = {
        ship.id: predict_position(ship, store.history(ship.id), hours_ahead)
        for ship in current
    }
    alerts = check_proximity_alerts(current, hotspots, config=config)

    logger.info(
        "Refresh cycle: %d sightings, %d formations, %d predictions, %d proximity alerts",
        len(current),
        len(formations),
        sum(1 for p in predictions.values() if p is not None),
        len(alerts),
    )
    return CycleResult(
        assessments=assessments,
        formations=formations,
        predictions=predictions,
        proximity_alerts=alerts,
    )
