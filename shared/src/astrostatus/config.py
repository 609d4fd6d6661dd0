"""Engine configuration from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # Swiss Ephemeris
    swisseph_ephe_path: str = Field(default="", alias="SWISSEPH_EPHE_PATH")

    # Bisection budgets (iterations, not tolerances)
    bisect_iterations: int = Field(default=30, ge=25, le=40, alias="ASTRO_BISECT_ITERATIONS")
    phase_bisect_iterations: int = Field(default=40, ge=25, le=40, alias="ASTRO_PHASE_BISECT_ITERATIONS")
    void_bisect_iterations: int = Field(default=25, ge=25, le=40, alias="ASTRO_VOID_BISECT_ITERATIONS")

    # Scan resolution
    phase_step_days: float = Field(default=1.0, gt=0.0, alias="ASTRO_PHASE_STEP_DAYS")
    void_step_hours: float = Field(default=0.5, gt=0.0, alias="ASTRO_VOID_STEP_HOURS")
    void_backtrack_days: float = Field(default=5.0, gt=0.0, alias="ASTRO_VOID_BACKTRACK_DAYS")
    aspect_projection_passes: int = Field(default=3, ge=1, alias="ASTRO_ASPECT_PROJECTION_PASSES")

    # Eclipse limits (degrees from the node axis)
    solar_eclipse_orb: float = Field(default=18.5, gt=0.0, alias="ASTRO_SOLAR_ECLIPSE_ORB")
    lunar_eclipse_orb: float = Field(default=12.0, gt=0.0, alias="ASTRO_LUNAR_ECLIPSE_ORB")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reset_settings_cache() -> None:
    """Clear cached settings (useful in tests)."""
    get_settings.cache_clear()
