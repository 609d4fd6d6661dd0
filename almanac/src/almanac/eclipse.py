"""Eclipse possibility from distance to the lunar node axis."""

from __future__ import annotations

from dataclasses import dataclass

from astrostatus.config import get_settings
from astrostatus.schemas.events import EclipseInfo

from almanac.aspects import angular_distance


@dataclass(frozen=True)
class EclipseLimits:
    """Maximum distance (degrees) from the node axis for each eclipse kind.

    The solar limit includes partial eclipses; the lunar limit includes
    partial and deep penumbral eclipses.
    """

    solar: float = 18.5
    lunar: float = 12.0

    @classmethod
    def from_settings(cls) -> EclipseLimits:
        settings = get_settings()
        return cls(solar=settings.solar_eclipse_orb, lunar=settings.lunar_eclipse_orb)


def distance_to_node_axis(longitude: float, node_longitude: float) -> float:
    """Shorter-arc distance from ``longitude`` to the nearer of node and antinode."""
    antinode = (node_longitude + 180.0) % 360.0
    return min(angular_distance(longitude, node_longitude), angular_distance(longitude, antinode))


def check_eclipse(
    phase_type: str,
    sun_longitude: float,
    moon_longitude: float,
    node_longitude: float,
    limits: EclipseLimits | None = None,
) -> EclipseInfo | None:
    """Classify a new or full moon as a possible eclipse.

    New moons measure the Sun against the node axis, full moons the Moon.
    Returns None when the phase is too far from the nodes.
    """
    if limits is None:
        limits = EclipseLimits.from_settings()

    if phase_type == "new_moon":
        distance = distance_to_node_axis(sun_longitude, node_longitude)
        if distance <= limits.solar:
            return EclipseInfo(kind="solar", distance_to_node_deg=distance)
    elif phase_type == "full_moon":
        distance = distance_to_node_axis(moon_longitude, node_longitude)
        if distance <= limits.lunar:
            return EclipseInfo(kind="lunar", distance_to_node_deg=distance)
    else:
        raise ValueError(f"Unknown phase type '{phase_type}'")
    return None
