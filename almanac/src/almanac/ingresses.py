"""Sign ingress detection."""

from __future__ import annotations

import logging

from astrostatus.config import get_settings
from astrostatus.schemas.events import IngressEvent

from almanac.bodies import Body, default_step_days, get_body, sign_index
from almanac.oracle import PositionOracle
from almanac.scan import find_transitions

logger = logging.getLogger(__name__)


def find_ingresses(
    oracle: PositionOracle,
    body: str | Body,
    start: float,
    end: float,
    step_days: float | None = None,
    *,
    iterations: int | None = None,
) -> list[IngressEvent]:
    """Find the instants a body crosses a sign boundary.

    ``to_sign`` comes from the coarse sample after the crossing, not from the
    refined instant: right at a 30-degree boundary the refined longitude can
    still round into the old sign.
    """
    target = get_body(body)
    step = step_days if step_days is not None else default_step_days(target)
    if iterations is None:
        iterations = get_settings().bisect_iterations

    def sign_at(t: float) -> int:
        return sign_index(oracle.sample(target.key, t).longitude)

    ingresses = []
    for transition in find_transitions(sign_at, start, end, step, iterations=iterations):
        exact = oracle.sample(target.key, transition.time)
        logger.debug(
            "%s ingress %d -> %d at %.6f%s",
            target.key,
            transition.before,
            transition.after,
            transition.time,
            " (retrograde)" if exact.retrograde else "",
        )
        ingresses.append(
            IngressEvent(
                body=target.key,
                time=transition.time,
                from_sign=transition.before,
                to_sign=transition.after,
                retrograde=exact.retrograde,
                longitude=exact.longitude,
            )
        )
    return ingresses
