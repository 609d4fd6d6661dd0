"""Lunar phase naming, new/full moon detection, and eclipse tagging."""

from __future__ import annotations

import logging
import math

from astrostatus.config import get_settings
from astrostatus.schemas.events import CelestialSample, LunarPhase, PhaseEvent

from almanac.bodies import normalize, sign_index, wrap180
from almanac.eclipse import EclipseLimits, check_eclipse
from almanac.oracle import PositionOracle
from almanac.scan import bisect, scan_points

logger = logging.getLogger(__name__)

# Mean synodic month in days
SYNODIC_MONTH = 29.530588

# Eight named phases, each spanning 45 degrees of elongation centred on a
# multiple of 45 (new moon covers 337.5-22.5)
PHASE_NAMES = (
    "new_moon",
    "waxing_crescent",
    "first_quarter",
    "waxing_gibbous",
    "full_moon",
    "waning_gibbous",
    "last_quarter",
    "waning_crescent",
)

# Phase targets: elongation of the Moon from the Sun, in degrees
PHASE_TARGETS = {"new_moon": 0.0, "full_moon": 180.0}

# A new moon shows up in a coarse scan as elongation wrapping from near 360
# back to near 0; these bounds tolerate the scan skipping the exact wrap.
_WRAP_HIGH = 300.0
_WRAP_LOW = 60.0


def phase_name(elongation: float) -> str:
    """Name of the phase for a Moon-minus-Sun elongation in degrees."""
    return PHASE_NAMES[int(normalize(elongation) / 45.0 + 0.5) % 8]


def illuminated_fraction(elongation: float) -> float:
    """Lit fraction of the lunar disc, 0 at new moon and 1 at full."""
    return (1.0 - math.cos(math.radians(elongation))) / 2.0


def get_sun_moon_elongation(
    oracle: PositionOracle, time: float
) -> tuple[float, CelestialSample, CelestialSample]:
    """Moon-minus-Sun elongation in [0, 360), with the two samples used."""
    sun = oracle.sample("sun", time)
    moon = oracle.sample("moon", time)
    return normalize(moon.longitude - sun.longitude), sun, moon


def get_lunar_phase(oracle: PositionOracle, time: float) -> LunarPhase:
    """Named phase, synodic fraction and illumination of the Moon at ``time``."""
    elongation, _, _ = get_sun_moon_elongation(oracle, time)
    return LunarPhase(
        time=time,
        name=phase_name(elongation),
        elongation=elongation,
        fraction=elongation / 360.0,
        illumination=illuminated_fraction(elongation),
    )


def bisect_phase(
    oracle: PositionOracle,
    low: float,
    high: float,
    target: float,
    *,
    iterations: int | None = None,
) -> float:
    """Refine the instant elongation reaches ``target`` inside ``[low, high]``.

    Elongation grows steadily over a one-day bracket, so a negative deviation
    from the target means it has not been reached yet.
    """
    if iterations is None:
        iterations = get_settings().phase_bisect_iterations

    def not_reached(t: float) -> bool:
        elongation, _, _ = get_sun_moon_elongation(oracle, t)
        return wrap180(elongation - target) < 0

    return bisect(not_reached, low, high, iterations=iterations)


def build_phase_event(
    oracle: PositionOracle,
    time: float,
    phase_type: str,
    limits: EclipseLimits | None = None,
    node: str = "north_node",
) -> PhaseEvent:
    """Assemble a phase event, sampling ``node`` (true node by default) for the eclipse check."""
    sun = oracle.sample("sun", time)
    moon = oracle.sample("moon", time)
    node_pos = oracle.sample(node, time)
    eclipse = check_eclipse(phase_type, sun.longitude, moon.longitude, node_pos.longitude, limits)
    return PhaseEvent(
        type=phase_type,
        time=time,
        moon_sign=sign_index(moon.longitude),
        sun_sign=sign_index(sun.longitude),
        moon_longitude=moon.longitude,
        sun_longitude=sun.longitude,
        eclipse=eclipse,
    )


def find_lunar_phases(
    oracle: PositionOracle,
    start: float,
    end: float,
    step_days: float | None = None,
    *,
    iterations: int | None = None,
    limits: EclipseLimits | None = None,
    node: str = "north_node",
) -> list[PhaseEvent]:
    """Find new and full moons between ``start`` and ``end``, in time order.

    ``node`` picks the lunar node used for eclipse tagging: ``north_node``
    (true node) or ``mean_node``.
    """
    settings = get_settings()
    step = step_days if step_days is not None else settings.phase_step_days
    if iterations is None:
        iterations = settings.phase_bisect_iterations
    if limits is None:
        limits = EclipseLimits.from_settings()
    if step <= 0:
        raise ValueError(f"step_days must be greater than 0, got {step}")
    if end <= start:
        return []

    phases: list[PhaseEvent] = []
    points = scan_points(start, end, step)
    prev_t = next(points)
    prev, _, _ = get_sun_moon_elongation(oracle, prev_t)

    for t in points:
        curr, _, _ = get_sun_moon_elongation(oracle, t)

        found = None
        if prev > _WRAP_HIGH and curr < _WRAP_LOW:
            found = "new_moon"
        elif prev < 180.0 <= curr:
            found = "full_moon"

        if found is not None:
            exact = bisect_phase(oracle, prev_t, t, PHASE_TARGETS[found], iterations=iterations)
            event = build_phase_event(oracle, exact, found, limits, node)
            logger.debug(
                "%s at %.6f%s", found, exact, f" ({event.eclipse.kind} eclipse)" if event.eclipse else ""
            )
            phases.append(event)

        prev_t, prev = t, curr

    logger.info("lunar phases %.2f..%.2f: %d found", start, end, len(phases))
    return phases
