# region Imports & metadata
"""
Continued-fraction isolation of the positive real roots of a square-free polynomial.

The search walks the continued-fraction tree of Vincent, Collins and Akritas with an
explicit work-list. Each node holds a working polynomial q together with the Möbius map
M(x) = (a*x + b)/(c*x + d) that sends the positive roots of q to roots of the input.

Contents
--------
- Interval                : isolating interval (lower, upper), possibly a single point
- Mobius                  : accumulated substitution tracked alongside each node
- isolate_positive_roots  : main entry point

Usage
-----
>>> isolate_positive_roots([-6, 11, -6, 1])   # (x-1)(x-2)(x-3)
[Interval(lower=1.0, upper=1.0), Interval(lower=2.0, upper=2.0), Interval(lower=2.0, upper=4.0)]
"""
import math
import sys
from typing import List, Optional, Sequence, Tuple
from dataclasses import dataclass, field
import logging

from polynomial import sign_variations, positive_root_lower_bound, positive_root_upper_bound
from transformations import (
    BinomialCache,
    map_unit_interval_to_positive_reals,
    taylor_shift,
    taylor_shift_by_1,
    transformed_for_lower_interval,
)
from utils import trim_coefficients

__all__ = ["Interval", "Mobius", "isolate_positive_roots"]
# endregion

# region Constants & module-level config
log = logging.getLogger(__name__)

MAX_ISOLATION_NODES = 100_000
EPS = sys.float_info.epsilon
# endregion

@dataclass(frozen=True)
class Interval:
    """
    Isolating interval for exactly one real root.
    lower < upper for an open interval; lower == upper when the root was hit exactly.

    lower_sign / upper_sign, when non-zero, give the sign of the polynomial just inside
    each end. They come from the coefficients of the working polynomial, so they stay
    exact even when an end coincides with a neighbouring root.
    """
    lower: float
    upper: float
    lower_sign: int = field(default=0, compare=False, repr=False)
    upper_sign: int = field(default=0, compare=False, repr=False)

    def __post_init__(self):
        if self.lower > self.upper:
            raise ValueError(f"Interval bounds out of order: ({self.lower}, {self.upper}).")

    def __iter__(self):
        return iter((self.lower, self.upper))

    @classmethod
    def point(cls, x: float) -> "Interval":
        return cls(x, x)

    @property
    def is_point(self) -> bool:
        return self.lower == self.upper

    @property
    def width(self) -> float:
        return self.upper - self.lower

    @property
    def midpoint(self) -> float:
        return self.lower + 0.5 * (self.upper - self.lower)

    def contains(self, x: float) -> bool:
        if self.is_point:
            return x == self.lower
        return self.lower < x < self.upper

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lower, self.upper)


@dataclass(frozen=True)
class Mobius:
    '''
    M(x) = (a*x + b)/(c*x + d) with c >= 0 and d > 0 along the search, so M is finite
    and monotone on [0, +inf[. The composition methods return M∘T for the substitution T
    that was applied to the working polynomial.
    '''
    a: float
    b: float
    c: float
    d: float

    @classmethod
    def identity(cls) -> "Mobius":
        return cls(1.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_interval(cls, interval: Tuple[float, float]) -> "Mobius":
        """The map y -> (left*y + right)/(y + 1) matching map_interval_to_positive_reals."""
        left, right = interval
        return cls(float(left), float(right), 1.0, 1.0)

    def __call__(self, x: float) -> float:
        if math.isinf(x):
            return self.at_infinity()
        return (self.a * x + self.b) / (self.c * x + self.d)

    def at_zero(self) -> float:
        return self.b / self.d

    def at_infinity(self) -> float:
        if self.c == 0:
            return math.copysign(math.inf, self.a)
        return self.a / self.c

    def shifted(self, s: float) -> "Mobius":
        """Compose with x -> x + s."""
        return Mobius(self.a, self.a * s + self.b, self.c, self.c * s + self.d)

    def inverted_unit(self) -> "Mobius":
        """Compose with x -> 1/(x + 1)."""
        return Mobius(self.b, self.a + self.b, self.d, self.c + self.d)

    def scaled_lower(self, s: float) -> "Mobius":
        """Compose with x -> s/(x + 1)."""
        return Mobius(self.b, self.a * s + self.b, self.d, self.c * s + self.d)

    def image(self, upper_bound: Optional[float] = None,
              sign_at_zero: int = 0, sign_at_infinity: int = 0) -> Interval:
        '''
        Image of ]0,+inf[ under M. For an unbounded map (c == 0) the positive range is cut
        at `upper_bound`, which must exceed every positive root of the working polynomial.
        The signs of the working polynomial near 0 and +inf are attached to the matching ends.
        '''
        if self.c == 0:
            if upper_bound is None:
                raise ValueError("An upper root bound is required for an unbounded Möbius map.")
            end = self(upper_bound)
        else:
            end = self.at_infinity()
        start = self.at_zero()
        if start <= end:
            return Interval(start, end, sign_at_zero, sign_at_infinity)
        return Interval(end, start, sign_at_infinity, sign_at_zero)


def isolate_positive_roots(polynomial: Sequence[float], *,
                           mobius: Optional[Mobius] = None,
                           cache: Optional[BinomialCache] = None,
                           max_nodes: int = MAX_ISOLATION_NODES) -> List[Interval]:
    """
    Isolate the positive real roots of a square-free polynomial.

    Parameters
    ----------
    polynomial: sequence of float
        Ascending coefficients; must be square-free for the interval count to be exact.
    mobius: Mobius, optional
        Map already applied to the polynomial. The returned intervals are expressed through
        it, e.g. Mobius.from_interval((a, b)) for a polynomial produced by
        map_interval_to_positive_reals. Defaults to the identity.
    cache: BinomialCache, optional
        Binomial memo for the Taylor shifts; the shared default if None.
    max_nodes: int
        Work-list budget. Exceeding it raises RuntimeError.

    Returns
    -------
    list of Interval
        Disjoint intervals, one per root, in search order. A root hit exactly on a branch
        boundary is reported as a point interval.
    """
    mobius = mobius if mobius is not None else Mobius.identity()
    intervals: List[Interval] = []

    # roots at x = 0 are not positive and are never reported
    root_poly = trim_coefficients(polynomial)
    while len(root_poly) > 1 and root_poly[0] == 0:
        root_poly = root_poly[1:]
    if len(root_poly) <= 1:
        log.debug("Constant polynomial after removing zero roots; no positive roots.")
        return intervals

    stack = [(root_poly, mobius)]
    nodes = 0
    while stack:
        nodes += 1
        if nodes > max_nodes:
            raise RuntimeError(
                f"Root isolation exceeded {max_nodes} nodes. The polynomial is likely too ill-conditioned "
                "for double precision or not square-free.")
        q, m = stack.pop()

        v = sign_variations(q)
        if v == 0:
            continue
        if v == 1:
            intervals.append(_isolating_interval(q, m))
            continue

        # 1) skip the root-free stretch [0, lb] in one Taylor shift
        lb = positive_root_lower_bound(q)
        if lb >= 1:
            m = m.shifted(lb)
            q = _deflate_boundary(taylor_shift(q, lb, cache), m, intervals, emit=True)
            if q is None:
                continue
            v = sign_variations(q)
            if v == 0:
                continue
            if v == 1:
                intervals.append(_isolating_interval(q, m))
                continue

        # 2) every root below 1: map ]0,ub[ onto ]0,+inf[ without splitting
        ub = positive_root_upper_bound(q)
        if ub < 1:
            m_low = m.scaled_lower(ub)
            q_low = _deflate_boundary(transformed_for_lower_interval(q, ub, cache), m_low, intervals, emit=True)
            if q_low is not None:
                stack.append((q_low, m_low))
            continue

        # 3) split at x = 1; the boundary itself belongs to the large-root branch
        m_large = m.shifted(1.0)
        q_large = _deflate_boundary(taylor_shift_by_1(q, cache), m_large, intervals, emit=True)
        m_small = m.inverted_unit()
        q_small = _deflate_boundary(map_unit_interval_to_positive_reals(q, cache), m_small, intervals, emit=False)
        if q_large is not None:
            stack.append((q_large, m_large))
        if q_small is not None:
            stack.append((q_small, m_small))

    log.debug("Isolated %d positive root(s) in %d node(s).", len(intervals), nodes)
    return intervals


def _isolating_interval(q: Sequence[float], m: Mobius) -> Interval:
    # one sign variation: q changes sign exactly once on ]0,+inf[
    lowest = next(c for c in q if c != 0)
    leading = next(c for c in reversed(q) if c != 0)
    return m.image(positive_root_upper_bound(q),
                   sign_at_zero=1 if lowest > 0 else -1,
                   sign_at_infinity=1 if leading > 0 else -1)


def _vanishes_at_zero(q: Sequence[float]) -> bool:
    # rounding noise of a constant term produced by a Taylor shift is ~ n * eps * sum|q_i|
    scale = sum(abs(c) for c in q)
    return abs(q[0]) <= len(q) * EPS * scale


def _deflate_boundary(q: Sequence[float], m: Mobius, intervals: List[Interval],
                      emit: bool) -> Optional[List[float]]:
    """
    Remove a root of q at x = 0 (a root of the parent node on a branch boundary) and
    report it as a point interval when `emit` is set. Returns None when nothing is left.
    """
    q = trim_coefficients(q)
    if len(q) <= 1:
        return None
    if _vanishes_at_zero(q):
        if emit:
            root = m.at_zero()
            log.debug("Exact root hit on a branch boundary at %s.", root)
            intervals.append(Interval.point(root))
        q = q[1:]
        while len(q) > 1 and q[0] == 0:
            q = q[1:]
        if len(q) <= 1:
            return None
    return q
