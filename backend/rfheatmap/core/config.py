"""Application configuration settings."""

from pydantic_settings import BaseSettings
from typing import List
import os


_DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "RF Heatmap Engine"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    @property
    def allowed_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Antenna pattern data (JSON, see data/antenna_patterns.json for the layout)
    ANTENNA_PATTERN_PATH: str = os.path.join(_DATA_DIR, "antenna_patterns.json")

    # RF Propagation
    FLOOR_HEIGHT_METERS: float = 3.0
    # ITU-R P.1238 distance power loss for residential/office at 5 GHz
    INDOOR_PATH_LOSS_EXPONENT: float = 2.8
    DEFAULT_FLOOR_MATERIAL: str = "floor_wood"

    # Heatmap grid
    DEFAULT_GRID_RESOLUTION_METERS: float = 1.0
    MAX_GRID_DIMENSION: int = 500  # per axis, bounds CPU cost
    NO_COVERAGE_DBM: float = -100.0
    # Row threads share the GIL: the per-cell loop is pure Python, so workers > 1
    # only help when a pattern or material provider releases it (I/O, numpy).
    HEATMAP_WORKERS: int = 1  # 1 = compute rows inline

    # Coverage report
    COVERAGE_THRESHOLD_DBM: float = -70.0

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
