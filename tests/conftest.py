"""Integration test configuration: a whole synthetic sky."""

import math

import pytest
from astrostatus.config import reset_settings_cache

from almanac.oracle import FunctionOracle

# Mean daily motions (deg/day); Sun and Moon give a 29.53-day lunation
SUN_SPEED = 0.985647
MOON_SPEED = 13.176358


def linear(lon0: float, speed: float):
    def track(t: float) -> tuple[float, float]:
        return lon0 + speed * t, speed

    return track


def mercury_loop(t: float) -> tuple[float, float]:
    """Mean motion 1 deg/day with a 20-day wobble, so it stations every 10 days or so."""
    w = 2 * math.pi / 20.0
    return 50.0 + t + 10.0 * math.sin(w * t), 1.0 + 10.0 * w * math.cos(w * t)


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def sky_oracle():
    """Every modern body plus the true node, with t in days from a new moon at 0 Aries."""
    return FunctionOracle(
        {
            "sun": linear(0.0, SUN_SPEED),
            "moon": linear(0.0, MOON_SPEED),
            "mercury": mercury_loop,
            "venus": linear(40.0, 1.2),
            "mars": linear(100.0, 0.5),
            "jupiter": linear(200.0, 0.08),
            "saturn": linear(330.0, 0.03),
            "uranus": linear(55.0, 0.012),
            "neptune": linear(358.0, 0.006),
            "pluto": linear(302.0, 0.004),
            "north_node": linear(15.0, -0.053),
        }
    )


@pytest.fixture
def linear_track():
    return linear
