import logging
from typing import Callable, Optional, Tuple, Union

from diagnostics import DiagnosticLedger
from isolation import Interval

__all__ = ["refine_root_interval_bisection"]
log = logging.getLogger(__name__)

MAX_BISECTION_STEPS = 2000


def _sign(value) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def refine_root_interval_bisection(evaluate: Callable[[float], float],
                                   interval: Union[Interval, Tuple[float, float]],
                                   precision: float,
                                   *,
                                   ledger: Optional[DiagnosticLedger] = None,
                                   max_steps: int = MAX_BISECTION_STEPS) -> float:
    """
    Narrow an isolating interval down to a single root estimate by bisection.

    Parameters
    ----------
    evaluate: Callable[[float], float]
        Continuous real function, typically a compiled polynomial.
    interval: Interval or (lower, upper)
        Contains exactly one root in its interior, or is a point interval.
        The sign hints of an Interval are used in place of endpoint evaluations. Without
        hints, an endpoint that is itself a root of `evaluate` (a neighbouring root
        reported separately) takes the sign opposite to the other endpoint.
    precision: float
        Bisection stops once the bracket is at most this wide.
    ledger: DiagnosticLedger, optional
        Receives a record when the interval does not bracket a sign change.
    max_steps: int
        Hard cap on halvings; bisection also stops when the floating midpoint no longer moves.

    Returns
    -------
    float
        The bracket midpoint, or the midpoint that evaluated to exactly zero.
        A non-bracketing interval yields its midpoint and a logged warning.
    """
    lower, upper = interval
    lower, upper = float(lower), float(upper)
    if lower == upper:
        return lower

    # sign hints from the isolator beat evaluations at ends that may sit on another root
    s_lower = getattr(interval, "lower_sign", 0) or _sign(evaluate(lower))
    s_upper = getattr(interval, "upper_sign", 0) or _sign(evaluate(upper))
    if s_lower == 0 and s_upper != 0:
        s_lower = -s_upper
    elif s_upper == 0 and s_lower != 0:
        s_upper = -s_lower

    if s_lower == 0 or s_lower == s_upper:
        log.warning("Interval (%s, %s) does not bracket a sign change; returning its midpoint.", lower, upper)
        if ledger is not None:
            ledger.add(
                where="refine_root_interval_bisection",
                what=f"interval ({lower}, {upper}) does not bracket a sign change",
                consequence="returned the interval midpoint without refinement",
                data={"interval": (lower, upper), "signs": (s_lower, s_upper)},
            )
        return lower + 0.5 * (upper - lower)

    tolerance = max(precision, 0.0)
    steps = 0
    while upper - lower > tolerance and steps < max_steps:
        mid = lower + 0.5 * (upper - lower)
        if mid <= lower or mid >= upper:
            break # no representable point left between the bounds
        s_mid = _sign(evaluate(mid))
        if s_mid == 0:
            log.debug("Bisection hit the root %s exactly after %d step(s).", mid, steps)
            return mid
        if s_mid == s_lower:
            lower = mid
        else:
            upper = mid
        steps += 1

    log.debug("Bisection converged after %d step(s); bracket width %.3e.", steps, upper - lower)
    return lower + 0.5 * (upper - lower)
