import numpy as np
import sympy as sp
from numpy.polynomial import polynomial as P
from fractions import Fraction
from typing import Union, Optional, List, Sequence

PolynomialInput = Union[Sequence[float], np.ndarray, sp.Poly, int, float, sp.Basic]


def is_scalar(x) -> bool:
    '''
    Tiny helper to identify scalar-like values (int, float, np.number, sp.Basic).
    '''
    return (isinstance(x, (int, float, np.number, sp.Basic)))

def sanitize_coefficients(polylike: PolynomialInput) -> List[float]:
    """
    Coerce `polylike` into a fresh list of real float coefficients, ascending degree.

    Accepted inputs:
    - list / tuple / 1-D np.ndarray of real numbers (index i is the coefficient of x**i)
    - univariate sympy.Poly (converted from its descending all_coeffs())
    - scalar-like value, read as a constant polynomial

    Policy:
    - complex entries with vanishing imaginary part are accepted, others raise ValueError
    - nan / inf raise ValueError
    - unsupported containers (str, dict, set, ...) raise TypeError
    - an empty sequence is returned as [] (callers decide whether that is an error)
    """
    if isinstance(polylike, (str, bytes, dict, set)):
        raise TypeError(f"Expected a sequence of coefficients, got {type(polylike).__name__}.")

    if isinstance(polylike, sp.Poly):
        return from_sympy_poly(polylike)

    if isinstance(polylike, np.ndarray) and polylike.ndim == 0:
        polylike = polylike.item() # unwrap 0-dim ndarray to scalar
    if is_scalar(polylike):
        polylike = [polylike] # constant polynomial

    try:
        values = [complex(c) for c in polylike]
    except TypeError as e:
        raise ValueError("Polynomial coefficients must be real numbers.") from e
    arr = np.asarray(values, dtype=complex)
    if arr.ndim != 1:
        raise ValueError(f"Expected a flat coefficient sequence, got shape {arr.shape}.")
    if np.any(arr.imag != 0):
        raise ValueError("Polynomial coefficients must be real; got a non-zero imaginary part.")
    coeffs = arr.real.astype(float)
    if not np.all(np.isfinite(coeffs)):
        raise ValueError("Polynomial coefficients must be finite.")
    return coeffs.tolist()

def trim_coefficients(polynomial: Sequence[float], tol: float = 0.0) -> List[float]:
    """
    Drop highest-degree coefficients with |c| <= tol so that the last entry is the
    true leading coefficient. An all-zero input collapses to [0.0]; [] stays [].
    """
    if len(polynomial) == 0:
        return []
    return P.polytrim(np.asarray(polynomial, dtype=float), tol).tolist()

def to_sympy_poly(polynomial: Sequence[float], var: Optional[sp.Symbol] = None,
                  domain=sp.QQ) -> sp.Poly:
    """
    Build an exact sympy.Poly from float coefficients (ascending).

    Each float is read through its shortest decimal representation, so 0.1 becomes 1/10
    rather than the binary fraction nearest to it.
    """
    var = var if var is not None else sp.Symbol("x")
    exact = []
    for c in reversed(list(polynomial)):
        frac = Fraction(repr(float(c)))
        exact.append(sp.Rational(frac.numerator, frac.denominator))
    return sp.Poly(exact, var, domain=domain)

def from_sympy_poly(poly: sp.Poly) -> List[float]:
    """Ascending float coefficients of a univariate sympy.Poly."""
    if len(poly.gens) != 1:
        raise ValueError(f"Expected a univariate polynomial, got generators {poly.gens}.")
    try:
        coeffs = [float(c) for c in reversed(poly.all_coeffs())]
    except TypeError as e:
        raise ValueError("Polynomial coefficients must be real numbers.") from e
    if not np.all(np.isfinite(coeffs)):
        raise ValueError("Polynomial coefficients must be finite.")
    return coeffs
