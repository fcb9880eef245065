"""Shared declarative base and enums for all models."""
from __future__ import annotations

import enum
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class ShipTypeEnum(str, enum.Enum):
    CARRIER = "carrier"
    SUBMARINE = "submarine"
    CRUISER = "cruiser"
    DESTROYER = "destroyer"
    AMPHIBIOUS = "amphibious"
    FRIGATE = "frigate"
    PATROL = "patrol"
    UNKNOWN = "unknown"


class ThreatLevelEnum(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


class FormationTypeEnum(str, enum.Enum):
    CONVOY = "convoy"
    PATROL_GROUP = "patrol_group"
    CARRIER_GROUP = "carrier_group"
    NAVAL_TASK_FORCE = "naval_task_force"
    AMPHIBIOUS_TASK_FORCE = "amphibious_task_force"


class ProximitySeverityEnum(str, enum.Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    WATCH = "watch"


class MotionSourceEnum(str, enum.Enum):
    # Where a predictor input came from: reported on the sighting, derived
    # from track history, or absent.
    EXPLICIT = "explicit"
    DERIVED = "derived"
    NONE = "none"
