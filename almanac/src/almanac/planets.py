"""Per-body status snapshots and combined station/ingress searches."""

from __future__ import annotations

import logging

from astrostatus.schemas.events import PlanetEvents, PlanetStatus

from almanac.bodies import Body, default_step_days, degree_in_sign, get_body, sign_index
from almanac.ingresses import find_ingresses
from almanac.oracle import PositionOracle
from almanac.stations import find_stations

logger = logging.getLogger(__name__)


def get_planet_status(oracle: PositionOracle, body: str | Body, time: float) -> PlanetStatus:
    """Snapshot of one body: sign, degree, speed, retrograde flag."""
    target = get_body(body)
    pos = oracle.sample(target.key, time)
    return PlanetStatus(
        body=target.key,
        time=time,
        longitude=pos.longitude,
        speed=pos.speed,
        retrograde=pos.retrograde,
        sign=sign_index(pos.longitude),
        degree_in_sign=degree_in_sign(pos.longitude),
    )


def find_planet_events(
    oracle: PositionOracle,
    body: str | Body,
    start: float,
    end: float,
    step_days: float | None = None,
) -> PlanetEvents:
    """Stations and ingresses of one body between ``start`` and ``end``.

    Inner planets move fast, so the default step depends on the body's
    category (half a day for Mercury-Mars, two days for the outer planets).
    """
    target = get_body(body)
    step = step_days if step_days is not None else default_step_days(target)
    stations = find_stations(oracle, target.key, start, end, step)
    ingresses = find_ingresses(oracle, target.key, start, end, step)
    logger.info(
        "%s %.2f..%.2f: %d station(s), %d ingress(es)", target.key, start, end, len(stations), len(ingresses)
    )
    return PlanetEvents(body=target.key, stations=stations, ingresses=ingresses)
