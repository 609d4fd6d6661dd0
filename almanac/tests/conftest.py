"""Shared fixtures: synthetic position oracles."""

from __future__ import annotations

import pytest
from astrostatus.config import reset_settings_cache

from almanac.oracle import FunctionOracle


def linear(lon0: float, speed: float):
    """Track moving at a constant speed from ``lon0`` at t=0."""

    def track(t: float) -> tuple[float, float]:
        return lon0 + speed * t, speed

    return track


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def linear_track():
    return linear


@pytest.fixture
def lunation_oracle():
    """Moon at 13 deg/day and Sun at 1 deg/day, both from 0 at t=0.

    Elongation grows 12 deg/day, so new moons fall every 30 days.
    """
    return FunctionOracle(
        {
            "sun": linear(0.0, 1.0),
            "moon": linear(0.0, 13.0),
            "north_node": linear(5.0, 0.0),
        }
    )


@pytest.fixture
def void_oracle():
    """Moon at 13 deg/day from 0 deg, Mars parked at 100 deg.

    Aspect points to Mars: 10, 40, 100, 160, 190, 220, 280, 340. In Aries the
    Moon perfects its last aspect at 10 deg (t = 10/13) and leaves the sign at
    t = 30/13.
    """
    return FunctionOracle(
        {
            "moon": linear(0.0, 13.0),
            "mars": linear(100.0, 0.0),
        }
    )
