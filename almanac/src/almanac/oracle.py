"""Position oracles: the source of longitude/speed samples for the detectors."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Protocol

import swisseph as swe
from astrostatus.config import get_settings
from astrostatus.schemas.events import CelestialSample

from almanac.bodies import Body, get_body, normalize

logger = logging.getLogger(__name__)


class PositionOracle(Protocol):
    """Anything that can report a body's position at a Julian Day.

    Implementations must be deterministic (same time, same sample). Errors
    are raised to the caller; detectors never catch them.
    """

    def sample(self, body: str, time: float) -> CelestialSample: ...


def datetime_to_jd(dt: datetime) -> float:
    """Convert datetime to Julian Day number (UT)."""
    utc = dt.astimezone(UTC)
    return swe.julday(
        utc.year,
        utc.month,
        utc.day,
        utc.hour + utc.minute / 60.0 + (utc.second + utc.microsecond / 1e6) / 3600.0,
    )


def jd_to_datetime(jd: float) -> datetime:
    """Convert Julian Day number (UT) to an aware UTC datetime."""
    year, month, day, hours = swe.revjul(jd)
    return datetime(year, month, day, tzinfo=UTC) + timedelta(hours=hours)


class SwissEphemerisOracle:
    """Geocentric tropical positions from pyswisseph.

    Falls back to the built-in Moshier ephemeris when the Swiss files are
    missing; if that also fails the error is raised.
    """

    def __init__(self, ephe_path: str | None = None) -> None:
        if ephe_path is None:
            ephe_path = get_settings().swisseph_ephe_path
        ephe_path = str(ephe_path or "").strip()
        swe.set_ephe_path(ephe_path if ephe_path else None)

    def sample(self, body: str | Body, time: float) -> CelestialSample:
        target = get_body(body)
        try:
            result, _ = swe.calc_ut(time, target.id, swe.FLG_SWIEPH | swe.FLG_SPEED)
        except Exception as exc:
            logger.warning("swisseph failed for %s at %.5f (%s), retrying with Moshier", target.key, time, exc)
            try:
                result, _ = swe.calc_ut(time, target.id, swe.FLG_MOSEPH | swe.FLG_SPEED)
            except Exception as moshier_exc:
                raise RuntimeError(
                    f"ephemeris unavailable for {target.key} at JD {time}: {moshier_exc}"
                ) from moshier_exc
        return CelestialSample(
            body=target.key,
            time=time,
            longitude=normalize(result[0]),
            speed=result[3],
        )


class FunctionOracle:
    """Oracle built from per-body callables ``time -> (longitude, speed)``.

    Used for synthetic scenarios and for replaying precomputed tracks.
    """

    def __init__(self, tracks: dict[str, Callable[[float], tuple[float, float]]]) -> None:
        self._tracks = dict(tracks)

    def sample(self, body: str | Body, time: float) -> CelestialSample:
        key = body.key if isinstance(body, Body) else body.lower()
        longitude, speed = self._tracks[key](time)
        return CelestialSample(body=key, time=time, longitude=normalize(longitude), speed=speed)
