import numpy as np
import sympy as sp
import pytest

from utils import (
    is_scalar,
    sanitize_coefficients,
    trim_coefficients,
    to_sympy_poly,
    from_sympy_poly,
)

# ---------- Tests for sanitize_coefficients ----------

def test_sanitize_coefficients_list_and_tuple():
    assert sanitize_coefficients([1, 2, 3]) == [1.0, 2.0, 3.0]
    assert sanitize_coefficients((1.5, -2)) == [1.5, -2.0]

def test_sanitize_coefficients_returns_fresh_list():
    p = [1.0, 2.0]
    out = sanitize_coefficients(p)
    assert out == p
    assert out is not p

def test_sanitize_coefficients_ndarray():
    result = sanitize_coefficients(np.array([0.0, -1.0, 0.0, 1.0]))
    assert isinstance(result, list)
    assert all(isinstance(c, float) for c in result)
    assert result == [0.0, -1.0, 0.0, 1.0]

def test_sanitize_coefficients_scalar_is_constant_polynomial():
    assert sanitize_coefficients(4) == [4.0]
    assert sanitize_coefficients(np.array(2.5)) == [2.5]

def test_sanitize_coefficients_sympy_poly_ascending():
    x = sp.Symbol("x")
    assert sanitize_coefficients(sp.Poly(x**3 - x, x)) == [0.0, -1.0, 0.0, 1.0]

def test_sanitize_coefficients_empty():
    assert sanitize_coefficients([]) == []

def test_sanitize_coefficients_accepts_real_valued_complex():
    assert sanitize_coefficients([1 + 0j, 2]) == [1.0, 2.0]

def test_sanitize_coefficients_rejects_complex():
    with pytest.raises(ValueError, match="real"):
        sanitize_coefficients([1, 2j])

def test_sanitize_coefficients_rejects_non_finite():
    with pytest.raises(ValueError, match="finite"):
        sanitize_coefficients([1.0, np.nan])
    with pytest.raises(ValueError, match="finite"):
        sanitize_coefficients([np.inf, 1.0])

def test_sanitize_coefficients_rejects_symbols():
    a = sp.Symbol("a")
    with pytest.raises(ValueError, match="real numbers"):
        sanitize_coefficients([a, 1])
    x = sp.Symbol("x")
    with pytest.raises(ValueError, match="real numbers"):
        sanitize_coefficients(sp.Poly(a * x + 1, x))

def test_sanitize_coefficients_rejects_bad_containers():
    with pytest.raises(TypeError):
        sanitize_coefficients("1, 2, 3")
    with pytest.raises(TypeError):
        sanitize_coefficients({0: 1.0})

def test_sanitize_coefficients_rejects_nested():
    with pytest.raises(ValueError):
        sanitize_coefficients([[1.0, 2.0], [3.0, 4.0]])

# ---------- Tests for trim_coefficients ----------

def test_trim_coefficients():
    assert trim_coefficients([1.0, 2.0, 0.0, 0.0]) == [1.0, 2.0]
    assert trim_coefficients([0.0, 1.0]) == [0.0, 1.0] # low-order zeros stay
    assert trim_coefficients([0.0, 0.0]) == [0.0]
    assert trim_coefficients([]) == []
    assert trim_coefficients([1.0, 1e-12], tol=1e-9) == [1.0]

# ---------- Tests for sympy conversion ----------

def test_to_sympy_poly_reads_decimal_representation():
    poly = to_sympy_poly([0.1, 1.0])
    assert poly.all_coeffs() == [1, sp.Rational(1, 10)]
    assert poly.domain == sp.QQ

def test_to_sympy_poly_custom_symbol():
    t = sp.Symbol("t")
    poly = to_sympy_poly([-6.0, 11.0, -6.0, 1.0], var=t)
    assert poly.gens == (t,)
    assert poly.as_expr() == t**3 - 6*t**2 + 11*t - 6

def test_from_sympy_poly_round_trip():
    p = [-6.0, 11.0, -6.0, 1.0]
    assert from_sympy_poly(to_sympy_poly(p)) == p

def test_from_sympy_poly_rejects_multivariate():
    x, y = sp.symbols("x y")
    with pytest.raises(ValueError, match="univariate"):
        from_sympy_poly(sp.Poly(x * y + 1, x, y))

# ---------- Tests for is_scalar ----------

def test_is_scalar():
    assert is_scalar(1)
    assert is_scalar(np.float64(2.0))
    assert is_scalar(sp.Integer(3))
    assert not is_scalar([1])
