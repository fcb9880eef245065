"""Read-only lookup of named vessel specifications.

Matching strategy (in priority order):
  1. Exact match on normalized name or alias
  2. Fuzzy name match via rapidfuzz.fuzz.ratio at >= CATALOG_FUZZY_THRESHOLD

Normalization transliterates to ASCII (unidecode), uppercases, strips
punctuation and navy hull prefixes (USS, HMS, CNS, ...).
"""
from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Optional

from rapidfuzz import fuzz
from unidecode import unidecode

from mda.config import settings
from mda.schemas.capabilities import ShipCapabilities
from mda.utils.ship_catalog_table import HULL_PREFIXES, SHIP_CATALOG

logger = logging.getLogger(__name__)

_PUNCT_RE = re.compile(r"[^\w\s-]", re.UNICODE)
_MULTI_SPACE_RE = re.compile(r"\s+")


def _normalize_name(name: str) -> str:
    if not name:
        return ""
    text = unidecode(name).upper()
    text = _PUNCT_RE.sub(" ", text)
    tokens = _MULTI_SPACE_RE.sub(" ", text).strip().split(" ")
    while len(tokens) > 1 and tokens[0] in HULL_PREFIXES:
        tokens = tokens[1:]
    return " ".join(tokens)


@lru_cache(maxsize=1)
def _catalog() -> tuple[ShipCapabilities, ...]:
    return tuple(ShipCapabilities(**row) for row in SHIP_CATALOG)


@lru_cache(maxsize=1)
def _name_index() -> dict[str, ShipCapabilities]:
    index: dict[str, ShipCapabilities] = {}
    for entry in _catalog():
        for label in (entry.name, *entry.aliases):
            index.setdefault(_normalize_name(label), entry)
    return index


def list_ship_capabilities() -> list[ShipCapabilities]:
    return list(_catalog())


def get_ship_capabilities(name: str) -> Optional[ShipCapabilities]:
    """Return the catalog entry for *name*, or None if nothing matches."""
    normalized = _normalize_name(name)
    if not normalized:
        return None

    index = _name_index()
    exact = index.get(normalized)
    if exact is not None:
        return exact

    best: Optional[ShipCapabilities] = None
    best_score = float(settings.CATALOG_FUZZY_THRESHOLD)
    for label, entry in index.items():
        score = fuzz.ratio(normalized, label)
        if score >= best_score:
            best_score = score
            best = entry
    if best is not None:
        logger.debug("Catalog fuzzy match: %r -> %s (%.0f)", name, best.name, best_score)
    return best
