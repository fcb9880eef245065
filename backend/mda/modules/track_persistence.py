"""Track history persistence: load/save adapters for TrackStore.

The store's logic never assumes a storage medium; it is handed an object with
``load()`` and ``save(mapping)``. Two adapters are provided:

  JsonFileTrackStorage  single JSON document, {vessel_id: [entry, ...]}
  SqlTrackStorage       one row per entry in vessel_track_entries

Neither adapter is transactional across crashes. The JSON adapter tolerates a
missing or truncated document on load (starts empty) so an interrupted save
never blocks the next cycle.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional, Protocol

from pydantic import ValidationError
from sqlalchemy.orm import Session

from mda.schemas.sighting import PositionHistoryEntry

logger = logging.getLogger(__name__)

TrackMapping = dict[str, list[PositionHistoryEntry]]


class TrackStorageNotConfigured(RuntimeError):
    """Raised when load()/save() is called on a TrackStore without a backend."""


class TrackStorage(Protocol):
    def load(self) -> TrackMapping: ...

    def save(self, mapping: TrackMapping) -> None: ...


# ── Serialization helpers ─────────────────────────────────────────────────────

def entry_to_json(entry: PositionHistoryEntry) -> dict:
    return {
        "lat": entry.lat,
        "lon": entry.lon,
        "location": entry.location,
        "timestamp": entry.timestamp.isoformat().replace("+00:00", "Z"),
        "source": entry.source,
    }


def mapping_to_json(mapping: TrackMapping) -> dict[str, list[dict]]:
    return {vid: [entry_to_json(e) for e in entries] for vid, entries in mapping.items()}


def mapping_from_json(raw: object) -> TrackMapping:
    """Parse a persisted mapping, skipping malformed vessels and entries."""
    mapping: TrackMapping = {}
    if not isinstance(raw, dict):
        logger.warning("Track document is not a JSON object; ignoring")
        return mapping
    skipped = 0
    for vessel_id, entries in raw.items():
        if not isinstance(entries, list):
            skipped += 1
            continue
        parsed = []
        for item in entries:
            try:
                parsed.append(PositionHistoryEntry.model_validate(item))
            except ValidationError:
                skipped += 1
        if parsed:
            mapping[str(vessel_id)] = parsed
    if skipped:
        logger.warning("Skipped %d malformed track entries on load", skipped)
    return mapping


# ── JSON document adapter ─────────────────────────────────────────────────────

class JsonFileTrackStorage:
    """Persist the whole track mapping as one JSON document on disk."""

    def __init__(self, path: str | Path | None = None):
        if path is None:
            from mda.config import settings
            path = settings.TRACK_STORE_PATH
        self.path = Path(path)

    def load(self) -> TrackMapping:
        if not self.path.exists():
            logger.warning("Track store not found at %s, starting empty", self.path)
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Track store at %s unreadable (%s), starting empty", self.path, exc)
            return {}
        return mapping_from_json(raw)

    def save(self, mapping: TrackMapping) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(mapping_to_json(mapping), f)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.info("Saved %d vessel tracks to %s", len(mapping), self.path)


# ── SQL adapter ───────────────────────────────────────────────────────────────

class SqlTrackStorage:
    """Persist track entries as rows via a SQLAlchemy session factory."""

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        if session_factory is None:
            from mda.database import SessionLocal
            session_factory = SessionLocal
        self.session_factory = session_factory

    def load(self) -> TrackMapping:
        from mda.models.track_entry import VesselTrackEntry

        db = self.session_factory()
        try:
            rows = (
                db.query(VesselTrackEntry)
                .order_by(
                    VesselTrackEntry.vessel_id,
                    VesselTrackEntry.position,
                    VesselTrackEntry.track_entry_id,
                )
                .all()
            )
            mapping: TrackMapping = {}
            for row in rows:
                mapping.setdefault(row.vessel_id, []).append(
                    PositionHistoryEntry(
                        lat=row.lat,
                        lon=row.lon,
                        location=row.location,
                        timestamp=row.timestamp_utc,
                        source=row.source or "",
                    )
                )
            return mapping
        finally:
            db.close()

    def save(self, mapping: TrackMapping) -> None:
        """Replace all persisted entries with *mapping* in a single commit."""
        from mda.models.track_entry import VesselTrackEntry

        db = self.session_factory()
        try:
            db.query(VesselTrackEntry).delete()
            for vessel_id, entries in mapping.items():
                for idx, entry in enumerate(entries):
                    db.add(VesselTrackEntry(
                        vessel_id=vessel_id,
                        position=idx,
                        timestamp_utc=entry.timestamp,
                        lat=entry.lat,
                        lon=entry.lon,
                        location=entry.location,
                        source=entry.source,
                    ))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
        logger.info("Saved %d vessel tracks to database", len(mapping))
