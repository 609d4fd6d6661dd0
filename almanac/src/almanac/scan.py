"""Coarse scanning and bisection refinement over functions of time.

Detectors describe *what* changes (speed sign, sign index, void state) as a
state function of time; this module finds *where* it changes. A scan samples
``start, start + step, start + 2*step, ...`` up to ``end`` (closing on ``end``
itself when the grid falls short of it) and reports each pair of consecutive
samples whose states differ. Bisection then narrows that bracket for a fixed
number of iterations.

At most one change per step is detected: if the state flips twice inside a
single step the two flips cancel out and neither is seen, so callers pick a
step shorter than the shortest gap between events they care about.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Hashable)

DEFAULT_ITERATIONS = 30


@dataclass(frozen=True)
class Bracket(Generic[S]):
    """Two consecutive scan samples whose states differ."""

    low: float
    high: float
    before: S
    after: S


@dataclass(frozen=True)
class Transition(Generic[S]):
    """A refined state change. ``low <= time <= high`` always holds."""

    time: float
    low: float
    high: float
    before: S
    after: S


def bisect(
    holds: Callable[[float], bool],
    low: float,
    high: float,
    *,
    iterations: int = DEFAULT_ITERATIONS,
) -> float:
    """Narrow ``[low, high]`` to the point where ``holds`` stops being true.

    ``holds`` is expected to be true at ``low`` and false at ``high``; the
    side that keeps that orientation is kept each step. Always runs exactly
    ``iterations`` evaluations and returns the midpoint of the final
    bracket, so it terminates even if ``holds`` is not monotonic.
    """
    for _ in range(iterations):
        mid = (low + high) / 2.0
        if holds(mid):
            low = mid
        else:
            high = mid
    return (low + high) / 2.0


def scan_points(start: float, end: float, step: float) -> Iterator[float]:
    """Yield ``start + k*step`` for k = 0, 1, ... while the point is <= end.

    When the grid stops short of ``end``, ``end`` itself is yielded last so
    the final partial step is covered too.
    """
    if step <= 0:
        raise ValueError(f"step must be greater than 0, got {step}")
    k = 0
    last = None
    while True:
        t = start + k * step
        if t > end:
            break
        yield t
        last = t
        k += 1
    if last is not None and last < end:
        yield end


def scan(
    state: Callable[[float], S],
    start: float,
    end: float,
    step: float,
) -> Iterator[Bracket[S]]:
    """Yield a bracket for every pair of consecutive samples that differ."""
    if step <= 0:
        raise ValueError(f"step must be greater than 0, got {step}")
    if end <= start:
        return
    points = scan_points(start, end, step)
    prev_t = next(points)
    prev_state = state(prev_t)
    for t in points:
        curr_state = state(t)
        if curr_state != prev_state:
            yield Bracket(prev_t, t, prev_state, curr_state)
        prev_t, prev_state = t, curr_state


def find_transitions(
    state: Callable[[float], S],
    start: float,
    end: float,
    step: float,
    *,
    iterations: int = DEFAULT_ITERATIONS,
) -> list[Transition[S]]:
    """Scan ``state`` over ``[start, end]`` and refine every change.

    Each bracket is bisected on "state still equals the value before the
    bracket", which gives every detector the same orientation rule.
    """
    transitions: list[Transition[S]] = []
    for bracket in scan(state, start, end, step):
        before = bracket.before
        t = bisect(lambda x: state(x) == before, bracket.low, bracket.high, iterations=iterations)
        transitions.append(Transition(t, bracket.low, bracket.high, bracket.before, bracket.after))
    logger.debug("scan %.5f..%.5f step %.4f: %d transition(s)", start, end, step, len(transitions))
    return transitions
