"""Retrograde and direct station detection."""

from __future__ import annotations

import logging

from astrostatus.config import get_settings
from astrostatus.schemas.events import StationEvent

from almanac.bodies import Body, default_step_days, degree_in_sign, get_body, sign_index
from almanac.oracle import PositionOracle
from almanac.scan import find_transitions

logger = logging.getLogger(__name__)


def find_stations(
    oracle: PositionOracle,
    body: str | Body,
    start: float,
    end: float,
    step_days: float | None = None,
    *,
    iterations: int | None = None,
) -> list[StationEvent]:
    """Find the instants a body's longitudinal speed changes sign.

    Direct motion (speed >= 0) turning retrograde is a ``station_retrograde``;
    the reverse is a ``station_direct``. The body is resampled at each
    refined instant for the reported longitude.
    """
    target = get_body(body)
    step = step_days if step_days is not None else default_step_days(target)
    if iterations is None:
        iterations = get_settings().bisect_iterations

    def is_direct(t: float) -> bool:
        return oracle.sample(target.key, t).speed >= 0

    stations = []
    for transition in find_transitions(is_direct, start, end, step, iterations=iterations):
        exact = oracle.sample(target.key, transition.time)
        station_type = "station_retrograde" if transition.before else "station_direct"
        logger.debug("%s %s at %.6f (%.4f deg)", target.key, station_type, transition.time, exact.longitude)
        stations.append(
            StationEvent(
                type=station_type,
                body=target.key,
                time=transition.time,
                sign=sign_index(exact.longitude),
                degree_in_sign=degree_in_sign(exact.longitude),
                longitude=exact.longitude,
            )
        )
    return stations
