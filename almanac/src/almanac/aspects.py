"""Major aspect definitions and detection."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

# Aspect definitions: name -> exact angle. Order matters for detection:
# the first aspect within orb wins.
MAJOR_ASPECTS = MappingProxyType(
    {
        "conjunction": 0.0,
        "sextile": 60.0,
        "square": 90.0,
        "trine": 120.0,
        "opposition": 180.0,
    }
)

MAJOR_ASPECT_ANGLES: tuple[float, ...] = tuple(MAJOR_ASPECTS.values())

# Default orbs by aspect type (in degrees)
DEFAULT_ORBS = MappingProxyType(
    {
        "conjunction": 8.0,
        "sextile": 6.0,
        "square": 8.0,
        "trine": 8.0,
        "opposition": 8.0,
    }
)

# Look-ahead for the applying test, in days
_APPLYING_DT = 0.01


@dataclass(frozen=True)
class AspectMatch:
    type: str
    angle: float
    orb: float
    applying: bool | None = None


def angular_distance(lon1: float, lon2: float) -> float:
    """Calculate the shortest angular distance between two longitudes."""
    diff = abs(lon1 - lon2) % 360.0
    if diff > 180.0:
        diff = 360.0 - diff
    return diff


def find_aspect(
    lon1: float,
    lon2: float,
    speed1: float | None = None,
    speed2: float | None = None,
    orbs: Mapping[str, float] = DEFAULT_ORBS,
) -> AspectMatch | None:
    """Find the major aspect between two longitudes, if any is within orb.

    When both speeds are given the match also says whether the aspect is
    applying (orb shrinking) or separating.
    """
    dist = angular_distance(lon1, lon2)
    for name, angle in MAJOR_ASPECTS.items():
        orb = abs(dist - angle)
        if orb <= orbs[name]:
            applying = None
            if speed1 is not None and speed2 is not None:
                applying = _is_applying(lon1, lon2, speed1, speed2, angle)
            return AspectMatch(type=name, angle=angle, orb=orb, applying=applying)
    return None


def _is_applying(
    lon1: float, lon2: float, speed1: float, speed2: float, aspect_angle: float
) -> bool:
    """Determine if an aspect is applying (getting tighter) or separating."""
    dist_now = angular_distance(lon1, lon2)

    # Project positions forward slightly
    lon1_future = (lon1 + speed1 * _APPLYING_DT) % 360.0
    lon2_future = (lon2 + speed2 * _APPLYING_DT) % 360.0
    dist_future = angular_distance(lon1_future, lon2_future)

    orb_now = abs(dist_now - aspect_angle)
    orb_future = abs(dist_future - aspect_angle)

    return orb_future < orb_now
