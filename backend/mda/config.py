import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_REPO_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    DATABASE_URL: str = "sqlite:///data/mda_tracks.db"
    THREAT_SCORING_CONFIG: str = str(_REPO_ROOT / "config" / "threat_scoring.yaml")
    LOG_LEVEL: str = "INFO"
    # Track history persistence (JSON document)
    TRACK_STORE_PATH: str = "data/vessel_tracks.json"
    # Per-vessel history cap and retention window
    TRACK_MAX_ENTRIES: int = 50
    TRACK_RETENTION_DAYS: int = 30
    # Formation clustering: max pairwise distance for an edge (km)
    FORMATION_DISTANCE_KM: float = 100.0
    # Default projection horizon for the refresh cycle (hours)
    PREDICTION_HOURS_AHEAD: float = 24.0
    # Capability catalog fuzzy name match threshold (0-100)
    CATALOG_FUZZY_THRESHOLD: int = 90


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Root logging setup for scripts; the library itself never calls this."""
    logging.basicConfig(level=level or settings.LOG_LEVEL)
