"""Proximity alerts — sightings within fixed radii of named hotspots.

Severity tiers (first match wins), radii from threat_scoring.yaml
``proximity_alerts``:
  critical <= 50 km
  warning  <= 150 km
  watch    <= 300 km

One alert per (ship, hotspot) pair inside the watch radius, sorted by
severity (critical first) then distance.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

from mda.models.base import ProximitySeverityEnum
from mda.modules.threat_scoring import load_scoring_config
from mda.schemas.sighting import DetectedShip, Hotspot
from mda.schemas.threat import ProximityAlert
from mda.utils.geo import haversine_km

logger = logging.getLogger(__name__)

_SEVERITY_ORDER = {
    ProximitySeverityEnum.CRITICAL: 0,
    ProximitySeverityEnum.WARNING: 1,
    ProximitySeverityEnum.WATCH: 2,
}


def _thresholds(config: Mapping[str, Any]) -> list[tuple[float, ProximitySeverityEnum]]:
    cfg = config.get("proximity_alerts") or {}
    return [
        (float(cfg.get("critical_km", 50)), ProximitySeverityEnum.CRITICAL),
        (float(cfg.get("warning_km", 150)), ProximitySeverityEnum.WARNING),
        (float(cfg.get("watch_km", 300)), ProximitySeverityEnum.WATCH),
    ]


def check_proximity_alerts(
    ships: Iterable[DetectedShip],
    hotspots: Sequence[Hotspot],
    config: Optional[Mapping[str, Any]] = None,
) -> list[ProximityAlert]:
    if config is None:
        config = load_scoring_config()
    thresholds = _thresholds(config)

    alerts: list[ProximityAlert] = []
    for ship in ships:
        for hotspot in hotspots:
            dist = haversine_km(ship.lat, ship.lon, hotspot.lat, hotspot.lon)
            severity = next((sev for limit, sev in thresholds if dist <= limit), None)
            if severity is None:
                continue
            alerts.append(ProximityAlert(
                ship_id=ship.id,
                ship_name=ship.name,
                ship_country=ship.country,
                hotspot=hotspot.name,
                distance_km=round(dist),
                severity=severity,
                timestamp=ship.timestamp,
            ))

    alerts.sort(key=lambda a: (_SEVERITY_ORDER[a.severity], a.distance_km))
    if alerts:
        logger.info(
            "Proximity alerts: %d (%d critical)",
            len(alerts),
            sum(1 for a in alerts if a.severity == ProximitySeverityEnum.CRITICAL),
        )
    return alerts


def format_proximity_alert(alert: ProximityAlert) -> str:
    return (
        f"[{alert.severity.value.upper()}] {alert.ship_name} ({alert.ship_country}) "
        f"is {alert.distance_km}km from {alert.hotspot}"
    )
