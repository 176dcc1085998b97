# region Imports & metadata
"""
Real-root finding for univariate polynomials with real coefficients.

Contents
--------
- RealRootFinder              : main public class
- find_all_real_roots         : sorted, deduplicated, rounded real roots
- find_strictly_positive_roots / find_strictly_negative_roots
- find_roots_in_interval      : real roots inside an open interval ]a,b[
- insert_root_sorted, decimal_places_from_precision, round_to_precision

Usage
-----
>>> find_all_real_roots([0, -1, 0, 1])   # x^3 - x
[-1.0, 0.0, 1.0]

Notes
-----
- Logging: this library emits logs; your caller configures handlers.
- Diagnostics: see DiagnosticLedger for conditions that were defused instead of raised.

Public exports
--------------
__all__ = ["RealRootFinder", "find_all_real_roots", ...]
"""
import math
import sys
from typing import List, Optional, Sequence, Tuple
import logging

from bisection import refine_root_interval_bisection
from diagnostics import DiagnosticLedger, AggregatedDiagnosticError
from isolation import Mobius, isolate_positive_roots
from polynomial import (
    BACKENDS,
    MP_PREC,
    has_strictly_negative_roots,
    has_strictly_positive_roots,
    make_evaluator,
    make_square_free,
)
from transformations import (
    BinomialCache,
    DEFAULT_BINOMIAL_CACHE,
    map_interval_to_positive_reals,
    scale_input,
)
from utils import PolynomialInput, sanitize_coefficients

__all__ = [
    "RealRootFinder",
    "find_all_real_roots",
    "find_strictly_positive_roots",
    "find_strictly_negative_roots",
    "find_roots_in_interval",
    "insert_root_sorted",
    "decimal_places_from_precision",
    "round_to_precision",
]
# endregion

# region Constants & module-level config
log = logging.getLogger(__name__)

DEFAULT_PRECISION = 1e-5
ZERO_TOL = sys.float_info.epsilon # |p_0| below ZERO_TOL * max|p_i| counts as a root at x = 0
# endregion


# region Rounding & sorted insertion
def decimal_places_from_precision(precision: float) -> int:
    """-floor(log10(precision)), never below 0; a non-positive precision gives 0 decimal places."""
    if precision <= 0:
        return 0
    return max(0, -math.floor(math.log10(precision)))


def round_to_precision(value: float, precision: float) -> float:
    """Round to the number of decimal places implied by `precision`."""
    return round(float(value), decimal_places_from_precision(precision)) + 0.0 # + 0.0 folds -0.0 into 0.0


def insert_root_sorted(roots: List[float], new_root: float, tolerance: float = 1e-6) -> bool:
    '''
    Insert `new_root` into the ascending list `roots` in place, unless an entry met during
    the left-to-right scan lies within `tolerance`; in that case the earlier entry wins.

    Returns True if the root was inserted.
    '''
    insert_index = len(roots)
    for i, existing in enumerate(roots):
        if abs(new_root - existing) <= tolerance:
            return False
        if new_root < existing:
            insert_index = i
            break
    roots.insert(insert_index, new_root)
    return True
# endregion


class RealRootFinder:
    # region Construction & dunder methods
    def __init__(self,
                 precision: float = DEFAULT_PRECISION,
                 *,
                 backend: str = "numpy",
                 prec: int = MP_PREC,
                 strict: bool = False,
                 binomial_cache: Optional[BinomialCache] = None):
        """
        Finder for all real roots of a real univariate polynomial.

        Public API (stable)
        -------------------
        - find_all_real_roots(polynomial) -> list[float]
        - find_strictly_positive_roots(polynomial) -> list[float]
        - find_strictly_negative_roots(polynomial) -> list[float]
        - find_roots_in_interval(polynomial, interval) -> list[float]
        - get_diagnostics(), format_diagnostics()

        Parameters
        ----------
        precision: float
            Target accuracy of every root. Also sets the decimal places of the rounding
            and the tolerance under which two roots are merged.
        backend: {"numpy", "mpmath"}
            Evaluator used during bisection.
        prec: int
            Decimal digits for the "mpmath" backend.
        strict: bool
            If True, diagnostics of warning severity raise AggregatedDiagnosticError
            at the end of a call instead of only being logged.
        binomial_cache: BinomialCache, optional
            Memo for the Taylor shifts; defaults to the shared process-wide cache.

        Notes
        -----
        Polynomials are sequences of real coefficients in ascending order (index i is the
        coefficient of x**i), or a univariate sympy.Poly.
        """
        if backend not in BACKENDS:
            raise ValueError(f"backend must be one of {BACKENDS}, got {backend!r}")
        self.precision = float(precision)
        self.backend = backend
        self.prec = int(prec)
        self.strict = bool(strict)
        self.cache = DEFAULT_BINOMIAL_CACHE if binomial_cache is None else binomial_cache
        self._ledger = DiagnosticLedger()
        log.debug("Initialized %r", self)

    def __repr__(self):
        return (f"{self.__class__.__name__}("
                f"precision={self.precision}, backend={self.backend!r}, "
                f"prec={self.prec}, strict={self.strict})")

    def __str__(self):
        return (
            "RealRootFinder\n"
            f"  precision: {self.precision:g}   decimals: {decimal_places_from_precision(self.precision)}\n"
            f"  backend: {self.backend}" + (f" ({self.prec} digits)" if self.backend == "mpmath" else "") + "\n"
            f"  strict: {self.strict}"
        )
    # endregion

    # region Public API
    def find_all_real_roots(self, polynomial: PolynomialInput) -> List[float]:
        """
        All real roots, ascending, rounded to the precision's decimal places, and without
        two entries closer than the precision.

        Raises
        ------
        ValueError
            If the polynomial is empty.
        """
        self._reset_diagnostics()
        coeffs = sanitize_coefficients(polynomial)
        if len(coeffs) == 0:
            raise ValueError("The polynomial cannot be empty.")
        log.info("Finding all real roots of a degree-%d polynomial.", len(coeffs) - 1)
        self._check_precision()

        roots: List[float] = []
        scale = max(abs(c) for c in coeffs)
        if scale == 0:
            roots.append(0.0)
            self._warn_identically_zero("find_all_real_roots")
            self._finalize_diagnostics_or_raise("find_all_real_roots")
            return roots

        # 1) Root at zero: record it and divide by x; the largest coefficient always survives
        if abs(coeffs[0]) < ZERO_TOL * scale:
            roots.append(0.0)
            while abs(coeffs[0]) < ZERO_TOL * scale:
                coeffs = coeffs[1:]
            log.debug("Root at x = 0 recorded; %d coefficient(s) remain.", len(coeffs))

        # 2) Square-free reduction
        square_free = make_square_free(coeffs, ledger=self._ledger)

        # 3) Negative roots through p(-x)
        if has_strictly_negative_roots(square_free):
            log.debug("Negative roots may exist; isolating the roots of p(-x).")
            self._collect_rounded_roots(scale_input(square_free, -1), roots, negate=True)

        # 4) Positive roots
        if has_strictly_positive_roots(square_free):
            log.debug("Positive roots may exist; isolating the roots of p(x).")
            self._collect_rounded_roots(square_free, roots)

        log.info("Found %d real root(s).", len(roots))
        self._finalize_diagnostics_or_raise("find_all_real_roots")
        return roots

    def find_strictly_positive_roots(self, polynomial: PolynomialInput) -> List[float]:
        """Refined roots in ]0,+inf[, ascending, neither rounded nor merged."""
        self._reset_diagnostics()
        coeffs = sanitize_coefficients(polynomial)
        roots = self._positive_roots(coeffs)
        self._finalize_diagnostics_or_raise("find_strictly_positive_roots")
        return roots

    def find_strictly_negative_roots(self, polynomial: PolynomialInput) -> List[float]:
        """Refined roots in ]-inf,0[, ascending: the mirrored positive roots of p(-x)."""
        self._reset_diagnostics()
        coeffs = sanitize_coefficients(polynomial)
        mirrored = self._positive_roots(scale_input(coeffs, -1))
        self._finalize_diagnostics_or_raise("find_strictly_negative_roots")
        return sorted(-r for r in mirrored)

    def find_roots_in_interval(self, polynomial: PolynomialInput,
                               interval: Tuple[float, float]) -> List[float]:
        """
        Real roots strictly inside ]a,b[, rounded and merged like find_all_real_roots.

        The square-free polynomial is mapped onto ]0,+inf[ with
        map_interval_to_positive_reals and the isolator reports intervals through the
        matching map y -> (a*y + b)/(y + 1).

        Raises
        ------
        ValueError
            If the polynomial is empty or the interval is not finite with a < b.
        """
        self._reset_diagnostics()
        coeffs = sanitize_coefficients(polynomial)
        if len(coeffs) == 0:
            raise ValueError("The polynomial cannot be empty.")
        left, right = (float(x) for x in interval)
        if not (math.isfinite(left) and math.isfinite(right) and left < right):
            raise ValueError(f"Expected a finite interval with a < b, got {interval}.")
        log.info("Finding the real roots of a degree-%d polynomial in ]%s, %s[.", len(coeffs) - 1, left, right)
        self._check_precision()

        roots: List[float] = []
        if not any(coeffs):
            self._warn_identically_zero("find_roots_in_interval")
            self._finalize_diagnostics_or_raise("find_roots_in_interval")
            return roots

        square_free = make_square_free(coeffs, ledger=self._ledger)
        mapped = map_interval_to_positive_reals(square_free, (left, right), self.cache)
        intervals = isolate_positive_roots(mapped, mobius=Mobius.from_interval((left, right)), cache=self.cache)
        evaluate = make_evaluator(square_free, self.backend, self.prec)
        tolerance = max(self.precision, 0.0)
        for isolating in intervals:
            root = refine_root_interval_bisection(evaluate, isolating, self.precision, ledger=self._ledger)
            if not left < root < right:
                log.debug("Root estimate %s falls on the interval boundary; skipped.", root)
                continue
            insert_root_sorted(roots, round_to_precision(root, self.precision), tolerance)

        log.info("Found %d real root(s) in ]%s, %s[.", len(roots), left, right)
        self._finalize_diagnostics_or_raise("find_roots_in_interval")
        return roots
    # endregion

    # region Pipeline steps
    def _positive_roots(self, coeffs: List[float]) -> List[float]:
        if not has_strictly_positive_roots(coeffs):
            log.debug("No sign variation; no positive roots.")
            return []
        square_free = make_square_free(coeffs, ledger=self._ledger)
        intervals = isolate_positive_roots(square_free, cache=self.cache)
        evaluate = make_evaluator(square_free, self.backend, self.prec)
        roots = [refine_root_interval_bisection(evaluate, isolating, self.precision, ledger=self._ledger)
                 for isolating in intervals]
        return sorted(roots)

    def _collect_rounded_roots(self, polynomial: Sequence[float], roots: List[float], negate: bool = False) -> None:
        intervals = isolate_positive_roots(polynomial, cache=self.cache)
        log.debug("%d isolating interval(s) for the %s roots.", len(intervals), "negative" if negate else "positive")
        evaluate = make_evaluator(polynomial, self.backend, self.prec)
        tolerance = max(self.precision, 0.0)
        for isolating in intervals:
            raw_root = refine_root_interval_bisection(evaluate, isolating, self.precision, ledger=self._ledger)
            root = -raw_root if negate else raw_root
            if not insert_root_sorted(roots, round_to_precision(root, self.precision), tolerance):
                log.debug("Root %s merged with an existing root within tolerance %g.", root, tolerance)

    def _check_precision(self) -> None:
        if self.precision > 0:
            return
        log.warning("Non-positive precision %s; rounding to 0 decimal places.", self.precision)
        self._add_diag(
            where="precision",
            what=f"non-positive precision {self.precision}",
            consequence="roots rounded to 0 decimal places, bisection runs to floating-point resolution",
            data={"precision": self.precision},
        )

    def _warn_identically_zero(self, context: str) -> None:
        log.warning("Polynomial is identically zero during %s.", context)
        self._add_diag(
            where=context,
            what="polynomial is identically zero",
            consequence="every real number is a root; only the root at 0 is reported"
                        if context == "find_all_real_roots" else "no roots reported",
        )
    # endregion

    # region Diagnostics helpers
    def _reset_diagnostics(self):
        self._ledger.reset()
        log.debug("Diagnostics ledger reset.")
    def _add_diag(self, **kw): self._ledger.add(**kw)
    def _finalize_diagnostics_or_raise(self, context: str):
        items = self.get_diagnostics()
        if not items:
            return
        # escalate if any is 'error', or any 'warn' in strict mode
        escalate = any(d.severity == "error" for d in items) or (self.strict and self._ledger.escalated())
        summary = self.format_diagnostics()
        if escalate:
            log.error("Diagnostics escalated to error during %s.", context)
            raise AggregatedDiagnosticError(
                f"Diagnostics recorded during {context}:\n{summary}", items=items)
        else:
            log.warning("Diagnostics recorded during %s:\n%s", context, summary)
    def get_diagnostics(self): return self._ledger.items()
    def format_diagnostics(self): return self._ledger.format()
    # endregion


# region Module-level API
def find_all_real_roots(polynomial: PolynomialInput, precision: float = DEFAULT_PRECISION,
                        *, backend: str = "numpy") -> List[float]:
    """Sorted, deduplicated real roots of `polynomial` to the given precision."""
    return RealRootFinder(precision, backend=backend).find_all_real_roots(polynomial)


def find_strictly_positive_roots(polynomial: PolynomialInput, precision: float = DEFAULT_PRECISION,
                                 *, backend: str = "numpy") -> List[float]:
    return RealRootFinder(precision, backend=backend).find_strictly_positive_roots(polynomial)


def find_strictly_negative_roots(polynomial: PolynomialInput, precision: float = DEFAULT_PRECISION,
                                 *, backend: str = "numpy") -> List[float]:
    return RealRootFinder(precision, backend=backend).find_strictly_negative_roots(polynomial)


def find_roots_in_interval(polynomial: PolynomialInput, interval: Tuple[float, float],
                           precision: float = DEFAULT_PRECISION, *, backend: str = "numpy") -> List[float]:
    return RealRootFinder(precision, backend=backend).find_roots_in_interval(polynomial, interval)
# endregion
