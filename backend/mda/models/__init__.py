"""Import all models to register them with SQLAlchemy metadata."""
from mda.models.base import Base
from mda.models.track_entry import VesselTrackEntry
