# region Imports & metadata
"""
Polynomial helpers consumed by the real-root isolation pipeline.

Contents
--------
- evaluate_polynomial / make_evaluator : Horner evaluation, numpy or mpmath backend
- sign_variations & Descartes predicates
- positive-root bounds used by the continued-fraction isolator
- make_square_free : same real-root locations, every root simple

Notes
-----
- Logging: this library emits logs; the caller configures handlers.
- The exact square-free reduction runs in SymPy under a time gate (func_timeout);
  on expiry a numeric GCD reduction with NumPy is used instead.
"""
import numpy as np
import mpmath as mp
from numpy.polynomial import polynomial as P
from typing import Callable, List, Optional, Sequence, Tuple
from dataclasses import dataclass
import logging
import warnings
from func_timeout import func_timeout, FunctionTimedOut

from transformations import BinomialCache, map_interval_to_positive_reals, scale_input
from diagnostics import DiagnosticLedger
from utils import to_sympy_poly, from_sympy_poly, trim_coefficients

__all__ = [
    "CompiledPolynomial",
    "evaluate_polynomial",
    "make_evaluator",
    "sign_variations",
    "has_strictly_positive_roots",
    "has_strictly_negative_roots",
    "count_sign_variations_in_interval",
    "positive_root_upper_bound",
    "positive_root_lower_bound",
    "derivative",
    "make_square_free",
]
# endregion

# region Constants & module-level config
log = logging.getLogger(__name__)

TIMEOUT_GATE = 12.0 # seconds for the exact square-free reduction
MP_PREC = 50 # decimal digits for the "mpmath" backend
NUMERIC_GCD_TOL = 1e-10 # relative tolerance for remainders in the numeric GCD
BACKENDS = ("numpy", "mpmath")
# endregion


# region Evaluation
def evaluate_polynomial(polynomial: Sequence[float], x: float) -> float:
    """Evaluate the polynomial (ascending coefficients) at x with Horner's method."""
    result = 0.0
    for c in reversed(polynomial):
        result = result * x + c
    return result


@dataclass(frozen=True)
class CompiledPolynomial:
    """
    Backend-bound numeric callable for p(x).
    Evaluates with numpy's polyval (float) or mpmath's polyval at `prec` digits.
    """
    coefficients: Tuple[float, ...]
    backend: str
    prec: int
    evaluate: Callable

    def __call__(self, x):
        return self.evaluate(x)

    @property
    def degree(self) -> int:
        return len(self.coefficients) - 1


def make_evaluator(polynomial: Sequence[float], backend: str = "numpy",
                   prec: int = MP_PREC) -> CompiledPolynomial:
    """
    Compile a polynomial into a callable evaluator.

    Parameters
    ----------
    polynomial: sequence of float
        Ascending coefficients.
    backend: {"numpy", "mpmath"}
        "numpy" evaluates in double precision, "mpmath" at `prec` decimal digits.
    prec: int
        Working precision for the "mpmath" backend.

    Returns
    -------
    CompiledPolynomial
    """
    if backend not in BACKENDS:
        raise ValueError(f"backend must be one of {BACKENDS}, got {backend!r}")
    coefficients = tuple(float(c) for c in polynomial)

    if backend == "numpy":
        coeff_array = np.asarray(coefficients, dtype=float)
        def evaluate(x):
            return float(P.polyval(x, coeff_array))
    else:
        descending = list(reversed(coefficients)) # mp.polyval expects highest degree first
        def evaluate(x):
            with mp.workdps(prec):
                return mp.polyval(descending, mp.mpf(x))

    return CompiledPolynomial(coefficients=coefficients, backend=backend, prec=prec, evaluate=evaluate)
# endregion


# region Descartes' rule of signs
def sign_variations(polynomial: Sequence[float]) -> int:
    """Number of sign changes between consecutive non-zero coefficients."""
    variations = 0
    last_sign = 0
    for c in polynomial:
        if c == 0:
            continue
        sign = 1 if c > 0 else -1
        if last_sign != 0 and sign != last_sign:
            variations += 1
        last_sign = sign
    return variations


def has_strictly_positive_roots(polynomial: Sequence[float]) -> bool:
    '''
    Descartes' test for roots in ]0,+inf[.
    False is exact. True is exact whenever the variation count is odd and an upper
    bound otherwise, so callers treat it as "positive roots may exist".
    '''
    return sign_variations(polynomial) > 0


def has_strictly_negative_roots(polynomial: Sequence[float]) -> bool:
    '''Descartes' test for roots in ]-inf,0[, applied to p(-x).'''
    return sign_variations(scale_input(polynomial, -1)) > 0


def count_sign_variations_in_interval(polynomial: Sequence[float], interval: Tuple[float, float],
                                      cache: Optional[BinomialCache] = None) -> int:
    '''
    Upper bound on the number of roots in the open interval ]a,b[, obtained by mapping
    ]a,b[ onto ]0,+inf[ and counting sign variations there.
    '''
    left, right = interval
    if not left < right:
        raise ValueError(f"Expected an interval with a < b, got {interval}.")
    return sign_variations(map_interval_to_positive_reals(polynomial, interval, cache))
# endregion


# region Root bounds
def positive_root_upper_bound(polynomial: Sequence[float]) -> float:
    """
    Kioustelidis bound: every positive root is below
    2 * max_{p_i < 0} (-p_i / p_n) ** (1 / (n - i)), with p_n > 0 after normalising the sign.
    Returns 0.0 when no coefficient has a sign opposite to the leading one.
    """
    coeffs = trim_coefficients(polynomial)
    degree = len(coeffs) - 1
    if degree < 1:
        return 0.0
    lead = coeffs[degree]
    if lead < 0:
        coeffs = [-c for c in coeffs]
        lead = -lead
    bound = 0.0
    for i in range(degree):
        if coeffs[i] < 0:
            bound = max(bound, (-coeffs[i] / lead) ** (1.0 / (degree - i)))
    return 2.0 * bound


def positive_root_lower_bound(polynomial: Sequence[float]) -> float:
    """
    Lower bound on the positive roots: the reciprocal of the upper bound of the reversed
    polynomial. Factors of x are ignored. Returns 0.0 when no positive root can exist.
    """
    coeffs = list(polynomial)
    first = next((i for i, c in enumerate(coeffs) if c != 0), None)
    if first is None:
        return 0.0
    reversed_bound = positive_root_upper_bound(list(reversed(coeffs[first:])))
    return 1.0 / reversed_bound if reversed_bound > 0 else 0.0
# endregion


# region Square-free reduction
def derivative(polynomial: Sequence[float]) -> List[float]:
    """Coefficients of p'(x)."""
    if len(polynomial) <= 1:
        return [0.0]
    return P.polyder(np.asarray(polynomial, dtype=float)).tolist()


def make_square_free(polynomial: Sequence[float],
                     ledger: Optional[DiagnosticLedger] = None) -> List[float]:
    """
    Return a polynomial with the same real-root locations as `polynomial`, each root simple.

    First attempt: exact p / gcd(p, p') over the rationals with SymPy, gated by TIMEOUT_GATE.
    When that keeps the degree of a polynomial with non-integer coefficients, the NumPy
    reduction below is tried too: binary rounding of the inputs can hide a repeated root
    from the exact computation.
    Fallback: the same reduction in floating point with NumPy, recorded in `ledger` if given.
    """
    coeffs = trim_coefficients(polynomial)
    if len(coeffs) <= 2:
        return coeffs # constants and linear polynomials are square-free
    try:
        log.debug("Attempting exact square-free reduction for a degree-%d polynomial.", len(coeffs) - 1)
        square_free = func_timeout(TIMEOUT_GATE, _exact_square_free, args=(coeffs,))
        log.debug("Exact square-free reduction successful; degree %d -> %d.", len(coeffs) - 1, len(square_free) - 1)
        if len(square_free) == len(coeffs) and not all(float(c).is_integer() for c in coeffs):
            numeric = _numeric_square_free(coeffs)
            if len(numeric) < len(coeffs):
                log.debug("Numeric GCD found a repeated root hidden by rounding; degree %d -> %d.",
                          len(coeffs) - 1, len(numeric) - 1)
                return numeric
        return square_free
    except FunctionTimedOut:
        warnings.warn(f"Exact square-free reduction exceeded {TIMEOUT_GATE} seconds. Falling back to numeric GCD.")
        if ledger is not None:
            ledger.add(
                where="make_square_free",
                what=f"exact reduction exceeded {TIMEOUT_GATE} seconds",
                consequence="numeric GCD used; nearly repeated roots may be merged or split",
                data={"degree": len(coeffs) - 1},
            )
    square_free = _numeric_square_free(coeffs)
    log.debug("Numeric square-free reduction done; degree %d -> %d.", len(coeffs) - 1, len(square_free) - 1)
    return square_free


def _exact_square_free(coeffs: List[float]) -> List[float]:
    poly = to_sympy_poly(coeffs)
    return from_sympy_poly(poly.sqf_part())


def _numeric_square_free(coeffs: List[float]) -> List[float]:
    c = np.asarray(coeffs, dtype=float)
    # Euclid on normalised remainders, gcd(p, p')
    a = c / np.max(np.abs(c))
    b = np.asarray(derivative(a))
    b = b / np.max(np.abs(b))
    while True:
        _, r = P.polydiv(a, b)
        r = P.polytrim(r, NUMERIC_GCD_TOL)
        if len(r) == 1 and abs(r[0]) <= NUMERIC_GCD_TOL:
            break
        a, b = b, r / np.max(np.abs(r))
    gcd = b
    if len(gcd) == 1:
        return list(coeffs) # gcd is a constant: already square-free
    quotient, _ = P.polydiv(c, gcd)
    return quotient.tolist()
# endregion
