"""Formation detection — same-country proximity clustering of sightings.

Ships are partitioned by country (no cross-country formations), then linked
pairwise when within FORMATION_DISTANCE_KM of each other. Connected
components of that graph (union-find, so membership is transitive) with two
or more members become formations:

  center       arithmetic mean of member lat/lon
  radius_km    max member-to-center great-circle distance
  avg_heading  circular mean of reported headings (None if none reported)
  avg_velocity arithmetic mean of reported velocities (None if none reported)

Classification, first matching rule wins:
  carrier member and size >= 3 -> carrier_group
  size >= 5                    -> naval_task_force
  amphibious member            -> amphibious_task_force
  size 3-4                     -> patrol_group
  size 2                       -> convoy

Cost is O(n^2) per country partition; fine for a few hundred sightings.
"""
from __future__ import annotations

import hashlib
import logging
from collections import defaultdict
from typing import Callable, Iterable, Optional, Sequence

from mda.config import settings
from mda.models.base import FormationTypeEnum, ShipTypeEnum
from mda.schemas.formation import ShipFormation
from mda.schemas.sighting import DetectedShip
from mda.utils.geo import circular_mean_deg, haversine_km

logger = logging.getLogger(__name__)


# ── Classification rules ──────────────────────────────────────────────────────

def _has_type(members: Sequence[DetectedShip], ship_type: ShipTypeEnum) -> bool:
    return any(m.type == ship_type for m in members)


_FORMATION_RULES: list[tuple[Callable[[Sequence[DetectedShip]], bool], FormationTypeEnum]] = [
    (lambda m: _has_type(m, ShipTypeEnum.CARRIER) and len(m) >= 3, FormationTypeEnum.CARRIER_GROUP),
    (lambda m: len(m) >= 5, FormationTypeEnum.NAVAL_TASK_FORCE),
    (lambda m: _has_type(m, ShipTypeEnum.AMPHIBIOUS), FormationTypeEnum.AMPHIBIOUS_TASK_FORCE),
    (lambda m: 3 <= len(m) <= 4, FormationTypeEnum.PATROL_GROUP),
    (lambda m: len(m) == 2, FormationTypeEnum.CONVOY),
]

_TYPE_LABELS: dict[FormationTypeEnum, str] = {
    FormationTypeEnum.CONVOY: "Convoy",
    FormationTypeEnum.PATROL_GROUP: "Patrol Group",
    FormationTypeEnum.CARRIER_GROUP: "Carrier Group",
    FormationTypeEnum.NAVAL_TASK_FORCE: "Naval Task Force",
    FormationTypeEnum.AMPHIBIOUS_TASK_FORCE: "Amphibious Task Force",
}


def classify_formation(members: Sequence[DetectedShip]) -> FormationTypeEnum:
    for predicate, formation_type in _FORMATION_RULES:
        if predicate(members):
            return formation_type
    # Unreachable for size >= 2; kept total for direct callers.
    return FormationTypeEnum.CONVOY


# ── Union-Find ────────────────────────────────────────────────────────────────

class _UnionFind:
    """Disjoint-set (union-find) with path compression and union by rank."""

    def __init__(self, size: int) -> None:
        self.parent: list[int] = list(range(size))
        self.rank: list[int] = [0] * size

    def find(self, x: int) -> int:
        while self.parent[x] != x:
            self.parent[x] = self.parent[self.parent[x]]
            x = self.parent[x]
        return x

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return
        if self.rank[ra] < self.rank[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        if self.rank[ra] == self.rank[rb]:
            self.rank[ra] += 1


# ── Helpers ───────────────────────────────────────────────────────────────────

def latest_by_id(ships: Iterable[DetectedShip]) -> list[DetectedShip]:
    """Collapse repeated sightings of one vessel to its most recent one.

    Order follows each vessel's first appearance in *ships*.
    """
    latest: dict[str, DetectedShip] = {}
    for ship in ships:
        prev = latest.get(ship.id)
        if prev is None or ship.timestamp >= prev.timestamp:
            latest[ship.id] = ship
    return list(latest.values())


def _formation_id(country: str, member_ids: list[str]) -> str:
    digest = hashlib.sha1("|".join(sorted(member_ids)).encode()).hexdigest()[:8]
    return f"FORM-{country}-{digest}"


def _lead_ship(members: Sequence[DetectedShip]) -> DetectedShip:
    for ship_type in (ShipTypeEnum.CARRIER, ShipTypeEnum.AMPHIBIOUS):
        for m in members:
            if m.type == ship_type:
                return m
    return min(members, key=lambda m: (m.name, m.id))


def _build_formation(country: str, members: list[DetectedShip]) -> ShipFormation:
    n = len(members)
    center_lat = sum(m.lat for m in members) / n
    center_lon = sum(m.lon for m in members) / n
    radius = max(haversine_km(m.lat, m.lon, center_lat, center_lon) for m in members)

    headings = [m.heading for m in members if m.heading is not None]
    velocities = [m.velocity for m in members if m.velocity is not None]
    avg_heading = circular_mean_deg(headings)
    avg_velocity = sum(velocities) / len(velocities) if velocities else None

    formation_type = classify_formation(members)
    member_ids = sorted(m.id for m in members)
    lead = _lead_ship(members)

    return ShipFormation(
        id=_formation_id(country, member_ids),
        name=f"{lead.name} {_TYPE_LABELS[formation_type]}",
        type=formation_type,
        country=country,
        member_ids=member_ids,
        center_lat=center_lat,
        center_lon=center_lon,
        radius_km=radius,
        avg_heading=avg_heading,
        avg_velocity=avg_velocity,
    )


# ── Main detection function ───────────────────────────────────────────────────

def detect_formations(
    ships: Iterable[DetectedShip],
    distance_km: Optional[float] = None,
) -> list[ShipFormation]:
    """Cluster same-country ships into formations.

    Args:
        ships: Current-cycle sightings. Repeated vessel ids are collapsed to
            the latest sighting.
        distance_km: Max pairwise distance for two ships to be linked.
            Defaults to settings.FORMATION_DISTANCE_KM.

    Returns:
        Formations with >= 2 members, ordered by country then id.
    """
    if distance_km is None:
        distance_km = settings.FORMATION_DISTANCE_KM

    by_country: dict[str, list[DetectedShip]] = defaultdict(list)
    for ship in latest_by_id(ships):
        by_country[ship.country].append(ship)

    formations: list[ShipFormation] = []
    for country in sorted(by_country):
        group = by_country[country]
        if len(group) < 2:
            continue

        uf = _UnionFind(len(group))
        for i in range(len(group)):
            for j in range(i + 1, len(group)):
                a, b = group[i], group[j]
                if haversine_km(a.lat, a.lon, b.lat, b.lon) <= distance_km:
                    uf.union(i, j)

        components: dict[int, list[DetectedShip]] = defaultdict(list)
        for idx, ship in enumerate(group):
            components[uf.find(idx)].append(ship)

        country_formations = [
            _build_formation(country, members)
            for members in components.values()
            if len(members) >= 2
        ]
        formations.extend(sorted(country_formations, key=lambda f: f.id))

    logger.info("Formation detector: %d formations detected.", len(formations))
    return formations
