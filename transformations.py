# region Imports & metadata
"""
Coefficient-space transformations of univariate real polynomials.

Coefficients are stored in ascending order: p[i] is the coefficient of x**i.
Every function returns a fresh list and leaves its input untouched.

Contents
--------
- taylor_shift, taylor_shift_by_1     : p(x) -> p(x + s)
- scale_input, scale_input_in_reverse_order
- reversed_polynomial                  : p(x) -> x^n p(1/x)
- map_interval_to_positive_reals       : ]a,b[  -> ]0,+inf[
- map_unit_interval_to_positive_reals  : ]0,1[  -> ]0,+inf[
- transformed_for_lower_interval       : ]0,s[  -> ]0,+inf[
- BinomialCache / binomial             : memoized binomial coefficients
"""
from typing import Dict, List, Optional, Sequence, Tuple
import logging

__all__ = [
    "BinomialCache",
    "DEFAULT_BINOMIAL_CACHE",
    "binomial",
    "taylor_shift",
    "taylor_shift_by_1",
    "scale_input",
    "scale_input_in_reverse_order",
    "reversed_polynomial",
    "map_interval_to_positive_reals",
    "map_unit_interval_to_positive_reals",
    "transformed_for_lower_interval",
]
# endregion

# region Constants & module-level config
log = logging.getLogger(__name__)

Polynomial = List[float]
PolynomialLike = Sequence[float]

# Pascal rows for n = 0..10
SMALL_BINOMIALS: Tuple[Tuple[int, ...], ...] = (
    (1,),
    (1, 1),
    (1, 2, 1),
    (1, 3, 3, 1),
    (1, 4, 6, 4, 1),
    (1, 5, 10, 10, 5, 1),
    (1, 6, 15, 20, 15, 6, 1),
    (1, 7, 21, 35, 35, 21, 7, 1),
    (1, 8, 28, 56, 70, 56, 28, 8, 1),
    (1, 9, 36, 84, 126, 126, 84, 36, 9, 1),
    (1, 10, 45, 120, 210, 252, 210, 120, 45, 10, 1),
)
# endregion


# region Binomial coefficients
class BinomialCache:
    """
    Memoized binomial coefficients C(n, k).

    Small rows (n <= 10) come from a literal table, larger ones from Pascal's rule
    with the symmetry C(n, k) = C(n, n-k). Every key is written at most once and
    recomputing it gives the same value, so one instance can be shared freely.
    """
    def __init__(self):
        self._values: Dict[Tuple[int, int], int] = {}

    def __call__(self, n: int, k: int) -> int:
        return self.binomial(n, k)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self):
        return f"{self.__class__.__name__}(cached={len(self._values)})"

    def binomial(self, n: int, k: int) -> int:
        if k < 0 or k > n:
            return 0
        if n < len(SMALL_BINOMIALS):
            return SMALL_BINOMIALS[n][k]
        if k == 0 or k == n:
            return 1
        if k == 1 or k == n - 1:
            return n
        if k > n // 2:
            k = n - k # symmetry keeps the key space at half size

        key = (n, k)
        value = self._values.get(key)
        if value is None:
            value = self.binomial(n - 1, k - 1) + self.binomial(n - 1, k)
            self._values[key] = value
        return value

    def clear(self) -> None:
        self._values.clear()


DEFAULT_BINOMIAL_CACHE = BinomialCache()


def _resolve(cache: Optional[BinomialCache]) -> BinomialCache:
    return DEFAULT_BINOMIAL_CACHE if cache is None else cache


def binomial(n: int, k: int, cache: Optional[BinomialCache] = None) -> int:
    """C(n, k) from the given cache (the shared default if None). Returns 0 unless 0 <= k <= n."""
    return _resolve(cache).binomial(n, k)
# endregion


# region Primitive transforms
def taylor_shift(polynomial: PolynomialLike, shift: float,
                 cache: Optional[BinomialCache] = None) -> Polynomial:
    """
    Apply p(x) := p(x + shift) in O(n^2).

    Parameters
    ----------
    polynomial: sequence of float
        Ascending coefficients.
    shift: float
        Value s in x := x + s.
    cache: BinomialCache, optional
        Binomial coefficient memo; the shared default if None.

    Returns
    -------
    list of float
        Coefficients of p(x + shift).
    """
    cache = _resolve(cache)
    original = [float(c) for c in polynomial]
    shifted = list(original)
    for i in range(1, len(original)):
        if original[i] == 0:
            continue
        for k in range(i):
            shifted[k] += original[i] * cache.binomial(i, k) * shift ** (i - k)
    return shifted


def taylor_shift_by_1(polynomial: PolynomialLike,
                      cache: Optional[BinomialCache] = None) -> Polynomial:
    """p(x) := p(x + 1); the power term of taylor_shift is always 1 here."""
    cache = _resolve(cache)
    original = [float(c) for c in polynomial]
    shifted = list(original)
    for i in range(1, len(original)):
        if original[i] == 0:
            continue
        for k in range(i):
            shifted[k] += original[i] * cache.binomial(i, k)
    return shifted


def scale_input(polynomial: PolynomialLike, scale_factor: float) -> Polynomial:
    """
    Apply x := s*x, i.e. p_i := s^i * p_i.
    With s = -1 this mirrors the roots at the origin.
    """
    return [float(c) * scale_factor ** i for i, c in enumerate(polynomial)]


def scale_input_in_reverse_order(polynomial: PolynomialLike, scale_factor: float) -> Polynomial:
    """Apply P(x) := s^n * P(x/s), i.e. p_i := s^(n-i) * p_i."""
    degree = len(polynomial) - 1
    return [float(c) * scale_factor ** (degree - i) for i, c in enumerate(polynomial)]


def reversed_polynomial(polynomial: PolynomialLike) -> Polynomial:
    """Apply P(x) := x^n * P(1/x), which flips the coefficient list."""
    return [float(c) for c in reversed(polynomial)]
# endregion


# region Composite maps
def map_interval_to_positive_reals(polynomial: PolynomialLike, interval: Tuple[float, float],
                                   cache: Optional[BinomialCache] = None) -> Polynomial:
    '''
    Map ]a,b[ to ]0,+inf[ by P(x) := (x+1)^n * P((a*x + b)/(x + 1)).

    A root y > 0 of the result corresponds to the root (a*y + b)/(y + 1) of P.
    '''
    left, right = interval
    # 1) x := x + a
    transformed = taylor_shift(polynomial, left, cache)
    # 2) x := (b - a) x
    transformed = scale_input(transformed, right - left)
    # 3) P(x) := x^n P(1/x)
    transformed = reversed_polynomial(transformed)
    # 4) x := x + 1
    return taylor_shift_by_1(transformed, cache)


def map_unit_interval_to_positive_reals(polynomial: PolynomialLike,
                                        cache: Optional[BinomialCache] = None) -> Polynomial:
    '''
    Map ]0,1[ to ]0,+inf[ by P(x) := (x+1)^n * P(1/(x + 1)).
    Cheaper special case of map_interval_to_positive_reals for a=0, b=1.
    '''
    return taylor_shift_by_1(reversed_polynomial(polynomial), cache)


def transformed_for_lower_interval(polynomial: PolynomialLike, scale_factor: float,
                                   cache: Optional[BinomialCache] = None) -> Polynomial:
    '''
    Map ]0,s[ to ]0,+inf[ by P(x) := (x+1)^n * P(s/(x + 1)).
    '''
    transformed = scale_input(polynomial, scale_factor)
    transformed = reversed_polynomial(transformed)
    return taylor_shift(transformed, 1.0, cache)
# endregion
