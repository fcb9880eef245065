"""Threat scoring engine.

Applies configurable weights from threat_scoring.yaml to produce an explainable
0-100 score for each sighting. Additive model, one budget per factor:

  ship_type            0-30  table lookup by ship type (unknown -> lowest tier)
  hotspot_proximity    0-25  full points inside critical radius, linear to 0 at outer radius
  high_tension_region  0-25  location label names a region configured for the ship's country
  velocity             0-10  proportional to reported speed up to a cap
  formation            0-10  only when the caller supplies formation membership

Each factor is rounded and clamped to its budget before summation, so the
score always equals the sum of the points quoted in ``reasoning``. The total
is clamped to [0, 100]. Levels: >=75 extreme, >=50 high, >=25 medium, else low.
"""
from __future__ import annotations

import logging
import math
import re
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence

import yaml
from unidecode import unidecode

from mda.config import settings
from mda.models.base import FormationTypeEnum, ShipTypeEnum, ThreatLevelEnum
from mda.schemas.formation import ShipFormation
from mda.schemas.sighting import DetectedShip, Hotspot
from mda.schemas.threat import ThreatAssessment
from mda.utils.geo import haversine_km

logger = logging.getLogger(__name__)

_SCORING_CONFIG: dict[str, Any] | None = None

_EXPECTED_SECTIONS = [
    "ship_type", "hotspot_proximity", "high_tension_region", "velocity",
    "formation", "score_bands",
]

_DEFAULTS: dict[str, dict[str, Any]] = {
    "ship_type": {
        "budget": 30,
        ShipTypeEnum.CARRIER.value: 30,
        ShipTypeEnum.SUBMARINE.value: 28,
        ShipTypeEnum.CRUISER.value: 22,
        ShipTypeEnum.DESTROYER.value: 20,
        ShipTypeEnum.AMPHIBIOUS.value: 18,
        ShipTypeEnum.FRIGATE.value: 15,
        ShipTypeEnum.PATROL.value: 5,
        ShipTypeEnum.UNKNOWN.value: 5,
    },
    "hotspot_proximity": {"budget": 25, "critical_radius_km": 50, "outer_radius_km": 500},
    "high_tension_region": {
        "budget": 25,
        "regions": {
            "*": ["Taiwan Strait", "Strait of Hormuz", "Bab el-Mandeb"],
            "US": ["South China Sea", "Persian Gulf", "Red Sea", "Black Sea"],
            "CN": ["South China Sea", "East China Sea", "Philippine Sea", "Miyako Strait"],
            "RU": ["Black Sea", "Baltic Sea", "Sea of Azov", "Barents Sea"],
            "IR": ["Persian Gulf", "Gulf of Oman", "Red Sea"],
            "KP": ["Sea of Japan", "Yellow Sea"],
            "UK": ["Red Sea", "Black Sea"],
        },
    },
    "velocity": {"budget": 10, "cap_kmh": 55},
    "formation": {
        "budget": 10,
        FormationTypeEnum.CARRIER_GROUP.value: 10,
        FormationTypeEnum.NAVAL_TASK_FORCE.value: 10,
        FormationTypeEnum.AMPHIBIOUS_TASK_FORCE.value: 8,
        FormationTypeEnum.PATROL_GROUP.value: 6,
        FormationTypeEnum.CONVOY.value: 5,
    },
    "score_bands": {"extreme": 75, "high": 50, "medium": 25},
}

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def load_scoring_config() -> dict[str, Any]:
    global _SCORING_CONFIG
    if _SCORING_CONFIG is None:
        config_path = Path(settings.THREAT_SCORING_CONFIG)
        if not config_path.exists():
            logger.warning("threat_scoring.yaml not found at %s; using built-in defaults", config_path)
            _SCORING_CONFIG = {}
        else:
            with open(config_path) as f:
                _SCORING_CONFIG = yaml.safe_load(f) or {}
        missing = [s for s in _EXPECTED_SECTIONS if s not in _SCORING_CONFIG]
        if missing:
            logger.warning("threat_scoring.yaml missing sections: %s", ", ".join(missing))
        for section_name in _EXPECTED_SECTIONS:
            section = _SCORING_CONFIG.get(section_name, {})
            if isinstance(section, dict):
                for key, val in section.items():
                    if isinstance(val, (int, float)) and not (0 <= val <= 1000):
                        logger.warning("threat_scoring.yaml %s.%s=%s outside [0,1000]", section_name, key, val)
    return _SCORING_CONFIG


def reload_scoring_config() -> dict[str, Any]:
    """Force-reload scoring config from disk (e.g. after YAML edits)."""
    global _SCORING_CONFIG
    _SCORING_CONFIG = None
    return load_scoring_config()


def _section(config: Mapping[str, Any], name: str) -> dict[str, Any]:
    merged = dict(_DEFAULTS.get(name, {}))
    section = config.get(name)
    if isinstance(section, dict):
        merged.update(section)
    return merged


def _clamp_points(points: float, budget: float) -> int:
    if math.isnan(points):
        return 0
    return int(min(max(round(points), 0), budget))


def _normalize_place(text: str) -> str:
    return " ".join(_NON_ALNUM_RE.split(unidecode(text).casefold())).strip()


# ── Factors (table order) ─────────────────────────────────────────────────────

def _ship_type_points(ship: DetectedShip, cfg: dict) -> tuple[int, str]:
    table_value = cfg.get(ship.type.value, cfg.get(ShipTypeEnum.UNKNOWN.value, 0))
    pts = _clamp_points(table_value, cfg["budget"])
    return pts, f"Ship type {ship.type.value} (+{pts})"


def _hotspot_points(ship: DetectedShip, hotspots: Sequence[Hotspot], cfg: dict) -> tuple[int, str]:
    if not hotspots:
        return 0, ""
    nearest = min(hotspots, key=lambda h: haversine_km(ship.lat, ship.lon, h.lat, h.lon))
    dist = haversine_km(ship.lat, ship.lon, nearest.lat, nearest.lon)
    budget = cfg["budget"]
    critical = float(cfg["critical_radius_km"])
    outer = float(cfg["outer_radius_km"])
    if dist <= critical:
        raw = budget
    elif dist >= outer or outer <= critical:
        raw = 0
    else:
        raw = budget * (outer - dist) / (outer - critical)
    pts = _clamp_points(raw, budget)
    return pts, f"{dist:.0f} km from hotspot {nearest.name} (+{pts})"


def _region_points(
    ship: DetectedShip,
    cfg: dict,
    regions: Optional[Mapping[str, Sequence[str]]],
) -> tuple[int, str]:
    if not ship.location:
        return 0, ""
    region_map = regions if regions is not None else (cfg.get("regions") or {})
    candidates = list(region_map.get(ship.country, ())) + list(region_map.get("*", ()))
    location = f" {_normalize_place(ship.location)} "
    for region in candidates:
        norm = _normalize_place(region)
        if norm and f" {norm} " in location:
            pts = _clamp_points(cfg["budget"], cfg["budget"])
            return pts, f"Operating in high-tension region {region} (+{pts})"
    return 0, ""


def _velocity_points(ship: DetectedShip, cfg: dict) -> tuple[int, str]:
    if ship.velocity is None or ship.velocity <= 0:
        return 0, ""
    cap = float(cfg["cap_kmh"])
    if cap <= 0:
        return 0, ""
    pts = _clamp_points(cfg["budget"] * min(ship.velocity, cap) / cap, cfg["budget"])
    return pts, f"Speed {ship.velocity:.1f} km/h (+{pts})"


def _formation_points(formation: Optional[ShipFormation], cfg: dict) -> tuple[int, str]:
    if formation is None:
        return 0, ""
    pts = _clamp_points(cfg.get(formation.type.value, 0), cfg["budget"])
    return pts, f"Member of {formation.type.value} {formation.name} (+{pts})"


# ── Public API ────────────────────────────────────────────────────────────────

def threat_level(score: int, config: Optional[Mapping[str, Any]] = None) -> ThreatLevelEnum:
    bands = _section(config if config is not None else load_scoring_config(), "score_bands")
    ordered = [
        (bands["extreme"], ThreatLevelEnum.EXTREME),
        (bands["high"], ThreatLevelEnum.HIGH),
        (bands["medium"], ThreatLevelEnum.MEDIUM),
    ]
    for threshold, level in ordered:
        if score >= threshold:
            return level
    return ThreatLevelEnum.LOW


def assess_threat(
    ship: DetectedShip,
    hotspots: Sequence[Hotspot],
    formation: Optional[ShipFormation] = None,
    config: Optional[Mapping[str, Any]] = None,
    regions: Optional[Mapping[str, Sequence[str]]] = None,
) -> ThreatAssessment:
    """Score one sighting.

    Args:
        ship: The sighting to score.
        hotspots: Named points of interest; empty means no proximity points.
        formation: The formation this ship belongs to, if any.
        config: Scoring config; defaults to threat_scoring.yaml.
        regions: Country -> region names; overrides the config's region list.

    Returns:
        A complete ThreatAssessment. Never partial.
    """
    if config is None:
        config = load_scoring_config()

    factors = [
        _ship_type_points(ship, _section(config, "ship_type")),
        _hotspot_points(ship, hotspots, _section(config, "hotspot_proximity")),
        _region_points(ship, _section(config, "high_tension_region"), regions),
        _velocity_points(ship, _section(config, "velocity")),
        _formation_points(formation, _section(config, "formation")),
    ]

    score = min(max(sum(pts for pts, _ in factors), 0), 100)
    reasoning = [reason for pts, reason in factors if pts > 0]
    return ThreatAssessment(
        vessel_id=ship.id,
        score=score,
        level=threat_level(score, config),
        reasoning=reasoning,
    )


def assess_all(
    ships: Iterable[DetectedShip],
    hotspots: Sequence[Hotspot],
    formations: Optional[Iterable[ShipFormation]] = None,
    config: Optional[Mapping[str, Any]] = None,
    regions: Optional[Mapping[str, Sequence[str]]] = None,
) -> list[ThreatAssessment]:
    """Score a batch of sightings, resolving formation membership by vessel id."""
    if config is None:
        config = load_scoring_config()
    membership: dict[str, ShipFormation] = {}
    for formation in formations or ():
        for vessel_id in formation.member_ids:
            membership[vessel_id] = formation

    assessments = [
        assess_threat(ship, hotspots, membership.get(ship.id), config=config, regions=regions)
        for ship in ships
    ]
    high = sum(1 for a in assessments if a.level in (ThreatLevelEnum.HIGH, ThreatLevelEnum.EXTREME))
    logger.info("Scored %d sightings (%d high or extreme)", len(assessments), high)
    return assessments
