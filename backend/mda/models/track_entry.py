"""Durable row for one position history entry."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Integer, Float, String, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column
from mda.models.base import Base


class VesselTrackEntry(Base):
    __tablename__ = "vessel_track_entries"
    __table_args__ = (
        Index("ix_track_vessel_ts", "vessel_id", "timestamp_utc"),
    )

    track_entry_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vessel_id: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    # Position within the vessel's ordered history; breaks timestamp ties on reload.
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    timestamp_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    lat: Mapped[float] = mapped_column(Float, nullable=False)
    lon: Mapped[float] = mapped_column(Float, nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    source: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
