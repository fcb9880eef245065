"""Path prediction — great-circle dead reckoning from a sighting and its track.

Bearing: explicit ship.heading, else bearing between the two most recent
history entries. Speed: explicit ship.velocity, else distance / elapsed time
between the two most recent history entries, else stationary.

No prediction (None) is possible only when there is neither an explicit
heading nor two history entries to derive one from. A stationary ship still
gets a prediction (its current position) at reduced confidence.

Confidence = 0.5
           + history tier (single highest match: >=5 entries +0.2, 3-4 entries +0.1)
           + 0.15 if velocity is explicit
           + 0.15 if heading is explicit
clamped to [0, 1].
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional, Sequence

from mda.models.base import MotionSourceEnum
from mda.schemas.prediction import PredictedPosition
from mda.schemas.sighting import DetectedShip, PositionHistoryEntry
from mda.utils.geo import destination_point, haversine_km, initial_bearing_deg

logger = logging.getLogger(__name__)

_BASE_CONFIDENCE: float = 0.5
_EXPLICIT_VELOCITY_BONUS: float = 0.15
_EXPLICIT_HEADING_BONUS: float = 0.15

# (min history entries, bonus), highest tier first; first match wins
_HISTORY_TIERS: list[tuple[int, float]] = [
    (5, 0.2),
    (3, 0.1),
]


def _history_bonus(history_len: int) -> float:
    for min_entries, bonus in _HISTORY_TIERS:
        if history_len >= min_entries:
            return bonus
    return 0.0


def derive_motion(
    history: Sequence[PositionHistoryEntry],
) -> tuple[Optional[float], Optional[float]]:
    """(speed_kmh, bearing_deg) implied by the two most recent history entries.

    Either element is None when it cannot be derived: both need two entries,
    and speed also needs a positive elapsed time.
    """
    if len(history) < 2:
        return None, None
    prev, curr = history[-2], history[-1]
    dist = haversine_km(prev.lat, prev.lon, curr.lat, curr.lon)
    # Coincident fixes have no direction; report due north rather than noise.
    bearing = initial_bearing_deg(prev.lat, prev.lon, curr.lat, curr.lon) if dist > 0 else 0.0
    elapsed_h = (curr.timestamp - prev.timestamp).total_seconds() / 3600.0
    speed = dist / elapsed_h if elapsed_h > 0 else None
    return speed, bearing


def predict_position(
    ship: DetectedShip,
    history: Sequence[PositionHistoryEntry],
    hours_ahead: float,
) -> Optional[PredictedPosition]:
    """Project *ship* forward by *hours_ahead* along a great circle.

    Args:
        ship: Current sighting (position, optional heading/velocity).
        history: The vessel's TrackStore history, oldest first.
        hours_ahead: Projection horizon; 0 returns the current position and
            negative values are treated as 0.

    Returns:
        PredictedPosition, or None when no heading is available or derivable.
    """
    if ship.heading is None and len(history) < 2:
        return None

    derived_speed, derived_bearing = derive_motion(history)

    if ship.heading is not None:
        bearing = ship.heading
        heading_source = MotionSourceEnum.EXPLICIT
    else:
        bearing = derived_bearing if derived_bearing is not None else 0.0
        heading_source = MotionSourceEnum.DERIVED

    if ship.velocity is not None:
        speed = ship.velocity
        velocity_source = MotionSourceEnum.EXPLICIT
    elif derived_speed is not None:
        speed = derived_speed
        velocity_source = MotionSourceEnum.DERIVED
    else:
        speed = 0.0
        velocity_source = MotionSourceEnum.NONE

    hours = max(hours_ahead, 0.0)
    if hours == 0:
        # Non-finite reported speed or heading must not leak into a zero-hour projection.
        lat, lon = ship.lat, ship.lon
    else:
        lat, lon = destination_point(ship.lat, ship.lon, bearing, speed * hours)

    confidence = _BASE_CONFIDENCE + _history_bonus(len(history))
    if velocity_source == MotionSourceEnum.EXPLICIT:
        confidence += _EXPLICIT_VELOCITY_BONUS
    if heading_source == MotionSourceEnum.EXPLICIT:
        confidence += _EXPLICIT_HEADING_BONUS
    confidence = min(max(confidence, 0.0), 1.0)

    return PredictedPosition(
        vessel_id=ship.id,
        lat=lat,
        lon=lon,
        confidence=round(confidence, 4),
        timestamp=ship.timestamp + timedelta(hours=hours),
        heading_source=heading_source,
        velocity_source=velocity_source,
    )
