#!/usr/bin/env python3
"""Generate sample sightings for a few refresh cycles and persist the tracks.

Creates 4 country groups moving over 6 cycles (4h apart) with distinct profiles:
  CN  Carrier group        Liaoning + 2 escorts in the Taiwan Strait
  US  Convoy               2 destroyers in the South China Sea, 40 km apart
  RU  Lone submarine       Black Sea, no reported speed (derived from track)
  FR  Patrol frigate       Mediterranean, far from every hotspot

Each cycle runs the full engine (tracks, formations, threat scores,
predictions, proximity alerts) and prints a short summary.
"""
from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import typer

# Ensure the backend package is importable when running from repo root.
_backend_dir = Path(__file__).resolve().parent.parent / "backend"
if str(_backend_dir) not in sys.path:
    sys.path.insert(0, str(_backend_dir))

from mda.config import configure_logging
from mda.models.base import ShipTypeEnum
from mda.modules.proximity_alerts import format_proximity_alert
from mda.modules.refresh_cycle import run_refresh_cycle
from mda.modules.track_persistence import JsonFileTrackStorage, SqlTrackStorage
from mda.modules.track_store import TrackStore
from mda.schemas.sighting import DetectedShip, Hotspot
from mda.utils.geo import destination_point

cli = typer.Typer(help="Generate sample sightings and run the MDA engine over them.")

# ---------------------------------------------------------------------------
# Reference timestamp: all sightings are relative to this time.
# ---------------------------------------------------------------------------
BASE_TIME = datetime(2026, 2, 1, 6, 0, 0, tzinfo=timezone.utc)
CYCLE_HOURS = 4

HOTSPOTS: list[Hotspot] = [
    Hotspot(name="Taipei", lat=25.03, lon=121.5, level="high"),
    Hotspot(name="Sevastopol", lat=44.6, lon=33.5, level="high"),
    Hotspot(name="Scarborough Shoal", lat=15.15, lon=117.76, level="elevated"),
]

# ---------------------------------------------------------------------------
# Vessel definitions: start position, course (deg), speed (km/h)
# ---------------------------------------------------------------------------
VESSELS: list[dict] = [
    {"id": "CN-Liaoning", "name": "Liaoning", "country": "CN", "type": ShipTypeEnum.CARRIER,
     "lat": 24.6, "lon": 120.2, "course": 45.0, "speed": 30.0, "location": "Taiwan Strait",
     "report_heading": True, "report_speed": True},
    {"id": "CN-CNS-Nanchang", "name": "CNS Nanchang", "country": "CN", "type": ShipTypeEnum.DESTROYER,
     "lat": 24.8, "lon": 120.4, "course": 45.0, "speed": 30.0, "location": "Taiwan Strait",
     "report_heading": True, "report_speed": True},
    {"id": "CN-CNS-Xuzhou", "name": "CNS Xuzhou", "country": "CN", "type": ShipTypeEnum.FRIGATE,
     "lat": 24.4, "lon": 120.0, "course": 45.0, "speed": 30.0, "location": "Taiwan Strait",
     "report_heading": False, "report_speed": True},
    {"id": "US-USS-Dewey", "name": "USS Dewey", "country": "US", "type": ShipTypeEnum.DESTROYER,
     "lat": 15.0, "lon": 116.0, "course": 300.0, "speed": 35.0, "location": "South China Sea",
     "report_heading": True, "report_speed": True},
    {"id": "US-USS-Halsey", "name": "USS Halsey", "country": "US", "type": ShipTypeEnum.DESTROYER,
     "lat": 15.3, "lon": 116.2, "course": 300.0, "speed": 35.0, "location": "South China Sea",
     "report_heading": True, "report_speed": False},
    {"id": "RU-Novorossiysk", "name": "Novorossiysk", "country": "RU", "type": ShipTypeEnum.SUBMARINE,
     "lat": 44.0, "lon": 36.0, "course": 260.0, "speed": 12.0, "location": "Black Sea",
     "report_heading": False, "report_speed": False},
    {"id": "FR-FS-Provence", "name": "FS Provence", "country": "FR", "type": ShipTypeEnum.FRIGATE,
     "lat": 38.0, "lon": 5.0, "course": 90.0, "speed": 20.0, "location": "Mediterranean Sea",
     "report_heading": True, "report_speed": True},
]


def _sightings_for_cycle(cycle: int) -> list[DetectedShip]:
    """Dead-reckon every sample vessel to the given cycle and emit a sighting."""
    ts = BASE_TIME + timedelta(hours=CYCLE_HOURS * cycle)
    ships: list[DetectedShip] = []
    for vdef in VESSELS:
        lat, lon = destination_point(
            vdef["lat"], vdef["lon"], vdef["course"], vdef["speed"] * CYCLE_HOURS * cycle,
        )
        ships.append(DetectedShip(
            id=vdef["id"],
            name=vdef["name"],
            country=vdef["country"],
            type=vdef["type"],
            lat=lat,
            lon=lon,
            heading=vdef["course"] if vdef["report_heading"] else None,
            velocity=vdef["speed"] if vdef["report_speed"] else None,
            location=vdef["location"],
            timestamp=ts,
            source="sample_gen",
        ))
    return ships


# ---------------------------------------------------------------------------
# Main CLI command
# ---------------------------------------------------------------------------

@cli.command()
def generate(
    cycles: int = typer.Option(6, "--cycles", help="Number of refresh cycles to simulate."),
    sql: bool = typer.Option(False, "--sql", help="Persist tracks to DATABASE_URL instead of JSON."),
    output: Optional[Path] = typer.Option(
        None, "--output", help="JSON track file (defaults to TRACK_STORE_PATH)."
    ),
) -> None:
    """Run the engine over generated sightings and save the resulting tracks."""
    configure_logging()

    if sql:
        from mda.database import init_db
        init_db()
        storage = SqlTrackStorage()
    else:
        storage = JsonFileTrackStorage(output)
    store = TrackStore(storage=storage)

    try:
        for cycle in range(cycles):
            result = run_refresh_cycle(_sightings_for_cycle(cycle), HOTSPOTS, store)
            typer.echo(f"\nCycle {cycle + 1}/{cycles}")
            for formation in result.formations:
                typer.echo(
                    f"  Formation {formation.name} [{formation.type.value}] "
                    f"{len(formation.member_ids)} ships, radius {formation.radius_km:.1f} km"
                )
            for assessment in sorted(result.assessments, key=lambda a: -a.score):
                typer.echo(f"  {assessment.vessel_id}: {assessment.score} ({assessment.level.value})")
            for alert in result.proximity_alerts:
                typer.echo(f"  {format_proximity_alert(alert)}")

        store.save()
        typer.echo(f"\nSaved tracks for {len(store)} vessels.")

    except Exception as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    cli()
