"""Status and schedule assembly - the entry points used by export jobs."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from astrostatus.schemas.events import AlmanacSchedule, AlmanacStatus

from almanac.bodies import MODERN_BODIES, RETROGRADE_TARGETS, Body
from almanac.lunar import find_lunar_phases, get_lunar_phase
from almanac.oracle import PositionOracle
from almanac.planets import find_planet_events, get_planet_status
from almanac.void import find_void_periods, get_void_status

logger = logging.getLogger(__name__)


def calculate_status(
    oracle: PositionOracle,
    time: float,
    *,
    bodies: Sequence[Body] = MODERN_BODIES,
    lookahead_days: float = 2.0,
    step_hours: float = 0.25,
) -> AlmanacStatus:
    """Current sky status at ``time``.

    Args:
        oracle: Position source
        time: Julian Day (UT)
        bodies: Bodies to snapshot
        lookahead_days: Window for upcoming void periods
        step_hours: Scan step for the void search

    Returns:
        AlmanacStatus with body snapshots, Moon phase, void status and
        upcoming voids.
    """
    planets = [get_planet_status(oracle, body, time) for body in bodies]
    moon_phase = get_lunar_phase(oracle, time)
    void = get_void_status(oracle, time)
    upcoming = find_void_periods(oracle, time, time + lookahead_days, step_hours)

    return AlmanacStatus(
        time=time,
        generated_at=datetime.now(UTC),
        planets=planets,
        moon_phase=moon_phase,
        void=void,
        upcoming_voids=upcoming,
    )


def calculate_schedule(
    oracle: PositionOracle,
    start: float,
    end: float,
    *,
    events_end: float | None = None,
    void_end: float | None = None,
    bodies: Sequence[Body] = RETROGRADE_TARGETS,
) -> AlmanacSchedule:
    """Events between ``start`` and ``end``.

    Planet stations/ingresses are usually wanted further ahead than lunar
    phases, so ``events_end`` can extend that search (defaults to ``end``).
    ``void_end`` likewise bounds the void search.
    """
    events_end = end if events_end is None else events_end
    void_end = end if void_end is None else void_end

    lunar_phases = find_lunar_phases(oracle, start, end)

    planet_events = {}
    for body in bodies:
        planet_events[body.key] = find_planet_events(oracle, body, start, events_end)
    timeline = sorted(
        (event for events in planet_events.values() for event in (*events.stations, *events.ingresses)),
        key=lambda event: event.time,
    )

    void_periods = find_void_periods(oracle, start, void_end)

    logger.info(
        "schedule %.2f..%.2f: %d phase(s), %d body event set(s), %d void period(s)",
        start,
        max(end, events_end, void_end),
        len(lunar_phases),
        len(planet_events),
        len(void_periods),
    )

    return AlmanacSchedule(
        start=start,
        end=max(end, events_end, void_end),
        generated_at=datetime.now(UTC),
        lunar_phases=lunar_phases,
        planet_events=planet_events,
        planet_timeline=timeline,
        void_periods=void_periods,
    )
