"""Void-of-course Moon: point-in-time classification and interval search.

The Moon is void of course from its last exact major aspect to a tracked
body until it leaves its current sign. Classification projects forward from
a single set of samples; interval search scans that classification over
time and refines each boundary by bisection.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping, Sequence

from astrostatus.config import get_settings
from astrostatus.schemas.events import CelestialSample, VoidPeriod, VoidStatus

from almanac.aspects import MAJOR_ASPECT_ANGLES
from almanac.bodies import VOID_ASPECT_TARGETS_MODERN, Body, get_body, normalize, sign_index
from almanac.oracle import PositionOracle
from almanac.scan import bisect, scan

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24.0


def _days_to_aspect(
    moon_longitude: float,
    moon_speed: float,
    base_target: float,
    body_speed: float,
    passes: int,
) -> float | None:
    """Estimate days until the Moon reaches ``base_target`` as the body drifts.

    Fixed-point iteration: move the target by the body's own speed over the
    current estimate, recompute the Moon's travel, repeat ``passes`` times.
    This is an approximation that converges quickly because tracked bodies
    move far slower than the Moon; more passes help for faster bodies.
    Returns None when the target lies more than 180 degrees along the Moon's
    direction of motion (it would have to go the wrong way round).
    """
    abs_speed = abs(moon_speed)
    days = 0.0
    for _ in range(passes):
        target = normalize(base_target + body_speed * days)
        if moon_speed >= 0:
            travel = normalize(target - moon_longitude)
        else:
            travel = normalize(moon_longitude - target)
        if travel > 180.0:
            return None
        days = travel / abs_speed
    return days


def calculate_void_of_course(
    moon_longitude: float,
    moon_speed: float,
    positions: Mapping[str, CelestialSample],
    passes: int | None = None,
) -> tuple[bool, float | None]:
    """Determine if the Moon is void of course.

    Returns:
        Tuple of (is_void, days_to_exit). ``days_to_exit`` is the time until
        the Moon leaves its sign at its current speed, or None when the Moon
        is not moving (treated as void indefinitely).
    """
    if passes is None:
        passes = get_settings().aspect_projection_passes

    moon_longitude = normalize(moon_longitude)
    sign_start = sign_index(moon_longitude) * 30.0
    sign_end = sign_start + 30.0

    # A retrograde Moon leaves through the start of the sign
    if moon_speed >= 0:
        degrees_to_boundary = sign_end - moon_longitude
    else:
        degrees_to_boundary = moon_longitude - sign_start

    if moon_speed == 0:
        return True, None
    days_to_exit = degrees_to_boundary / abs(moon_speed)

    for body_name, body in positions.items():
        if body_name == "moon":
            continue
        for angle in MAJOR_ASPECT_ANGLES:
            for base_target in {normalize(body.longitude + angle), normalize(body.longitude - angle)}:
                days = _days_to_aspect(moon_longitude, moon_speed, base_target, body.speed, passes)
                if days is None or days > days_to_exit:
                    continue
                moon_at_aspect = normalize(moon_longitude + moon_speed * days)
                if sign_start <= moon_at_aspect < sign_end:
                    return False, days_to_exit

    return True, days_to_exit


def _target_keys(targets: Iterable[str | Body] | None) -> tuple[str, ...]:
    if targets is None:
        targets = VOID_ASPECT_TARGETS_MODERN
    return tuple(get_body(t).key for t in targets)


def get_void_status(
    oracle: PositionOracle,
    time: float,
    targets: Sequence[str | Body] | None = None,
    *,
    passes: int | None = None,
) -> VoidStatus:
    """Void-of-course status of the Moon at ``time``.

    ``targets`` are the bodies whose aspects end a void (modern preset by
    default). ``void_ends_at`` is set only while void with a finite exit.
    """
    moon = oracle.sample("moon", time)
    positions = {key: oracle.sample(key, time) for key in _target_keys(targets)}
    is_void, days_to_exit = calculate_void_of_course(moon.longitude, moon.speed, positions, passes)

    void_ends_at = None
    if is_void and days_to_exit is not None and math.isfinite(days_to_exit):
        void_ends_at = time + days_to_exit

    return VoidStatus(
        time=time,
        is_void=is_void,
        moon_longitude=moon.longitude,
        moon_sign=sign_index(moon.longitude),
        moon_speed=moon.speed,
        days_to_exit=days_to_exit,
        void_ends_at=void_ends_at,
    )


def find_void_periods(
    oracle: PositionOracle,
    start: float,
    end: float,
    step_hours: float | None = None,
    targets: Sequence[str | Body] | None = None,
    *,
    iterations: int | None = None,
    max_backtrack_days: float | None = None,
    passes: int | None = None,
) -> list[VoidPeriod]:
    """Find void-of-course periods between ``start`` and ``end``.

    An empty range gives an empty list; a non-positive step is an error.
    A period already running at ``start`` is traced back up to
    ``max_backtrack_days`` to find where it began. A period still running at
    ``end`` is closed at the Moon's estimated sign exit.
    """
    settings = get_settings()
    if step_hours is None:
        step_hours = settings.void_step_hours
    if iterations is None:
        iterations = settings.void_bisect_iterations
    if max_backtrack_days is None:
        max_backtrack_days = settings.void_backtrack_days
    keys = _target_keys(targets)

    if end <= start:
        return []
    step = step_hours / HOURS_PER_DAY
    if step <= 0:
        raise ValueError(f"step_hours must be greater than 0, got {step_hours}")

    def status_at(t: float) -> VoidStatus:
        return get_void_status(oracle, t, keys, passes=passes)

    def is_void(t: float) -> bool:
        return status_at(t).is_void

    def is_not_void(t: float) -> bool:
        return not status_at(t).is_void

    periods: list[VoidPeriod] = []
    current: dict | None = None

    first = status_at(start)
    if first.is_void:
        onset, precise = _find_onset_before(is_not_void, start, step, max_backtrack_days, iterations)
        current = {
            "start_time": onset,
            "moon_sign": first.moon_sign,
            "started_before_range_start": True,
            "start_estimated": not precise,
        }

    for bracket in scan(is_void, start, end, step):
        if bracket.after and current is None:
            onset = bisect(is_not_void, bracket.low, bracket.high, iterations=iterations)
            current = {
                "start_time": onset,
                "moon_sign": status_at(bracket.high).moon_sign,
                "started_before_range_start": False,
                "start_estimated": False,
            }
        elif not bracket.after and current is not None:
            ends = bisect(is_void, bracket.low, bracket.high, iterations=iterations)
            periods.append(VoidPeriod(end_time=ends, **current))
            current = None

    if current is not None:
        closing = status_at(end)
        ends = closing.void_ends_at if closing.void_ends_at is not None else end
        periods.append(VoidPeriod(end_time=ends, **current))

    logger.info("void periods %.4f..%.4f: %d found", start, end, len(periods))
    return periods


def _find_onset_before(
    is_not_void: Callable[[float], bool],
    start: float,
    step: float,
    max_backtrack_days: float,
    iterations: int,
) -> tuple[float, bool]:
    """Step back from ``start`` to find where an ongoing void began.

    Returns (onset, precise). When no non-void sample turns up within
    ``max_backtrack_days`` the onset falls back to ``start`` and is marked
    imprecise.
    """
    max_steps = math.floor(max_backtrack_days / step + 1e-9)
    high = start
    for k in range(1, max_steps + 1):
        low = start - k * step
        if is_not_void(low):
            return bisect(is_not_void, low, high, iterations=iterations), True
        high = low
    logger.debug("no void onset within %.2f days before %.4f", max_backtrack_days, start)
    return start, False
