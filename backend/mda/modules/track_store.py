"""TrackStore — bounded per-vessel position history.

Each vessel id maps to a chronologically ordered list of PositionHistoryEntry:
  - at most ``max_entries`` per vessel (oldest evicted first)
  - entries older than the retention window are removed by cleanup()
  - duplicate sightings are kept (repeated observations, not an error)

The store is an explicit object handed to whatever needs it; there is no
module-level history. Persistence goes through an optional TrackStorage
backend and only happens when the caller invokes load() or save().
"""
from __future__ import annotations

import bisect
import logging
from datetime import datetime, timedelta, timezone
from typing import Iterator, Optional

from mda.config import settings
from mda.modules.track_persistence import (
    TrackMapping,
    TrackStorage,
    TrackStorageNotConfigured,
    mapping_from_json,
    mapping_to_json,
)
from mda.schemas.sighting import DetectedShip, PositionHistoryEntry

logger = logging.getLogger(__name__)


class TrackStore:
    def __init__(
        self,
        storage: Optional[TrackStorage] = None,
        max_entries: Optional[int] = None,
    ):
        self.storage = storage
        self.max_entries = max_entries if max_entries is not None else settings.TRACK_MAX_ENTRIES
        self._tracks: TrackMapping = {}

    # ── Queries ──────────────────────────────────────────────────────────────

    def history(self, vessel_id: str) -> list[PositionHistoryEntry]:
        """Copy of the vessel's history, oldest first (empty if unknown)."""
        return list(self._tracks.get(vessel_id, ()))

    def vessel_ids(self) -> list[str]:
        return list(self._tracks)

    def __contains__(self, vessel_id: object) -> bool:
        return vessel_id in self._tracks

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tracks)

    # ── Mutation ─────────────────────────────────────────────────────────────

    def append_sighting(self, vessel_id: str, entry: PositionHistoryEntry) -> None:
        """Insert *entry* in timestamp order, evicting the oldest past the cap."""
        history = self._tracks.setdefault(vessel_id, [])
        # bisect_right keeps equal-timestamp observations in arrival order
        keys = [e.timestamp for e in history]
        history.insert(bisect.bisect_right(keys, entry.timestamp), entry)
        overflow = len(history) - self.max_entries
        if overflow > 0:
            del history[:overflow]
            logger.debug("Track %s over capacity, evicted %d oldest entries", vessel_id, overflow)
        if not history:
            del self._tracks[vessel_id]

    def record(self, ship: DetectedShip) -> None:
        """Append the ship's current sighting to its own history."""
        self.append_sighting(ship.id, PositionHistoryEntry.from_ship(ship))

    def cleanup(self, max_age_days: Optional[int] = None, now: Optional[datetime] = None) -> int:
        """Drop entries older than *max_age_days*; drop vessels left empty.

        Returns the number of entries removed.
        """
        if max_age_days is None:
            max_age_days = settings.TRACK_RETENTION_DAYS
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        cutoff = now - timedelta(days=max_age_days)

        removed = 0
        for vessel_id in list(self._tracks):
            history = self._tracks[vessel_id]
            kept = [e for e in history if e.timestamp >= cutoff]
            removed += len(history) - len(kept)
            if kept:
                self._tracks[vessel_id] = kept
            else:
                del self._tracks[vessel_id]
        if removed:
            logger.info("Track cleanup: removed %d entries older than %d days", removed, max_age_days)
        return removed

    def clear(self) -> None:
        self._tracks.clear()

    # ── Persistence ──────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, list[dict]]:
        """The persistence mapping: {vessel_id: [entry-json, ...]}."""
        return mapping_to_json(self._tracks)

    @classmethod
    def from_dict(
        cls,
        raw: dict,
        storage: Optional[TrackStorage] = None,
        max_entries: Optional[int] = None,
    ) -> "TrackStore":
        store = cls(storage=storage, max_entries=max_entries)
        store._replace(mapping_from_json(raw))
        return store

    def load(self) -> int:
        """Replace in-memory history with the backend's contents.

        Returns the number of vessels loaded.
        """
        if self.storage is None:
            raise TrackStorageNotConfigured("TrackStore.load() called without a storage backend")
        self._replace(self.storage.load())
        logger.info("Loaded tracks for %d vessels", len(self._tracks))
        return len(self._tracks)

    def save(self) -> None:
        if self.storage is None:
            raise TrackStorageNotConfigured("TrackStore.save() called without a storage backend")
        self.storage.save({vid: list(h) for vid, h in self._tracks.items()})

    def _replace(self, mapping: TrackMapping) -> None:
        # Persisted data may come from an older or hand-edited document:
        # re-sort and re-cap so the ordering and size invariants hold.
        self._tracks = {}
        for vessel_id, entries in mapping.items():
            ordered = sorted(entries, key=lambda e: e.timestamp)
            if len(ordered) > self.max_entries:
                ordered = ordered[len(ordered) - self.max_entries:]
            if ordered:
                self._tracks[vessel_id] = ordered
