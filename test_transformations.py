import math
import numpy as np
from numpy.polynomial import polynomial as P
import pytest

from transformations import (
    BinomialCache,
    DEFAULT_BINOMIAL_CACHE,
    binomial,
    taylor_shift,
    taylor_shift_by_1,
    scale_input,
    scale_input_in_reverse_order,
    reversed_polynomial,
    map_interval_to_positive_reals,
    map_unit_interval_to_positive_reals,
    transformed_for_lower_interval,
)

CUBIC = [-6.0, 11.0, -6.0, 1.0] # (x-1)(x-2)(x-3)
SAMPLES = np.linspace(-3.0, 3.0, 13)

# ────────────────────────────────
# region Binomial coefficients
# ────────────────────────────────

def test_binomial_small_table():
    for n in range(11):
        for k in range(n + 1):
            assert binomial(n, k) == math.comb(n, k)

def test_binomial_large_values_match_comb():
    cache = BinomialCache()
    for n in (11, 17, 30, 64):
        for k in range(n + 1):
            assert cache.binomial(n, k) == math.comb(n, k)

def test_binomial_out_of_range_is_zero():
    assert binomial(5, -1) == 0
    assert binomial(5, 6) == 0
    assert binomial(20, 21) == 0

def test_binomial_cache_memoizes_half_the_keys():
    cache = BinomialCache()
    assert len(cache) == 0
    value = cache(20, 15)
    assert value == math.comb(20, 5)
    assert len(cache) > 0
    # symmetric keys only: every cached k is at most n // 2
    assert all(k <= n // 2 for (n, k) in cache._values)
    size = len(cache)
    cache(20, 5)
    assert len(cache) == size

def test_injected_cache_is_used_instead_of_default():
    cache = BinomialCache()
    default_size = len(DEFAULT_BINOMIAL_CACHE)
    shifted = taylor_shift([0.0] * 15 + [1.0], 1.0, cache)
    assert len(cache) > 0
    assert len(DEFAULT_BINOMIAL_CACHE) == default_size
    # (x+1)^15
    assert shifted == [float(math.comb(15, k)) for k in range(16)]

def test_binomial_cache_clear():
    cache = BinomialCache()
    cache(40, 20)
    cache.clear()
    assert len(cache) == 0
    assert cache(40, 20) == math.comb(40, 20)

# endregion

# ────────────────────────────────
# region Primitive transforms
# ────────────────────────────────

def test_taylor_shift_by_1_known_cubic():
    # (x+1-1)(x+1-2)(x+1-3) = x(x-1)(x-2)
    assert taylor_shift_by_1(CUBIC) == [0.0, 2.0, -3.0, 1.0]

def test_taylor_shift_matches_shifted_evaluation():
    shift = 0.75
    shifted = taylor_shift(CUBIC, shift)
    assert np.allclose(P.polyval(SAMPLES, shifted), P.polyval(SAMPLES + shift, CUBIC))

def test_taylor_shift_round_trip():
    p = [2.0, -1.5, 0.0, 3.0, 0.5]
    for s in (-2.0, -0.3, 1.0, 2.5):
        back = taylor_shift(taylor_shift(p, s), -s)
        assert np.allclose(P.polyval(SAMPLES, back), P.polyval(SAMPLES, p))

def test_taylor_shift_by_1_agrees_with_general_shift():
    p = [1.0, -4.0, 0.5, 2.0, -1.0, 3.0]
    assert np.allclose(taylor_shift_by_1(p), taylor_shift(p, 1.0))

def test_transforms_do_not_mutate_input():
    p = [1.0, 2.0, 3.0]
    for out in (taylor_shift(p, 2.0), taylor_shift_by_1(p), scale_input(p, 3.0),
                scale_input_in_reverse_order(p, 3.0), reversed_polynomial(p)):
        assert out is not p
    assert p == [1.0, 2.0, 3.0]

def test_scale_input():
    assert scale_input([1.0, 2.0, 3.0], 2.0) == [1.0, 4.0, 12.0]
    # p(-x) flips odd coefficients
    assert scale_input(CUBIC, -1) == [-6.0, -11.0, -6.0, -1.0]

def test_scale_input_in_reverse_order():
    assert scale_input_in_reverse_order([1.0, 2.0, 3.0], 2.0) == [4.0, 4.0, 3.0]
    # s^n p(x/s) evaluated at s*x equals s^n p(x)
    s = 1.5
    out = scale_input_in_reverse_order(CUBIC, s)
    assert np.allclose(P.polyval(s * SAMPLES, out), s ** 3 * P.polyval(SAMPLES, CUBIC))

def test_reversal_involution():
    p = [0.5, -2.0, 0.0, 7.0]
    assert reversed_polynomial(reversed_polynomial(p)) == p
    assert reversed_polynomial(p) == [7.0, 0.0, -2.0, 0.5]

def test_empty_polynomial_transforms():
    assert taylor_shift([], 2.0) == []
    assert scale_input([], 2.0) == []
    assert reversed_polynomial([]) == []

# endregion

# ────────────────────────────────
# region Composite maps
# ────────────────────────────────

def test_map_interval_to_positive_reals_moves_single_root():
    # only the root 2 of the cubic lies in ]1.5, 2.5[; it maps to y with (1.5y + 2.5)/(y + 1) = 2
    mapped = map_interval_to_positive_reals(CUBIC, (1.5, 2.5))
    assert P.polyval(1.0, mapped) == pytest.approx(0.0, abs=1e-12)
    positive = [r.real for r in P.polyroots(mapped) if abs(r.imag) < 1e-9 and r.real > 0]
    assert len(positive) == 1

def test_map_interval_to_positive_reals_matches_definition():
    a, b = -1.0, 3.0
    mapped = map_interval_to_positive_reals(CUBIC, (a, b))
    y = np.linspace(0.1, 5.0, 9)
    expected = (y + 1) ** 3 * P.polyval((a * y + b) / (y + 1), CUBIC)
    assert np.allclose(P.polyval(y, mapped), expected)

def test_map_unit_interval_to_positive_reals():
    # root 0.5 -> 1/(y+1) = 0.5 -> y = 1
    assert map_unit_interval_to_positive_reals([-0.5, 1.0]) == [0.5, -0.5]
    assert np.allclose(map_unit_interval_to_positive_reals(CUBIC), map_interval_to_positive_reals(CUBIC, (0.0, 1.0)))

def test_transformed_for_lower_interval():
    # root 0.25 in ]0, 0.5[ -> 0.5/(y+1) = 0.25 -> y = 1
    out = transformed_for_lower_interval([-0.25, 1.0], 0.5)
    assert np.allclose(out, [0.25, -0.25])
    y = np.linspace(0.0, 4.0, 9)
    s = 0.8
    out = transformed_for_lower_interval(CUBIC, s)
    assert np.allclose(P.polyval(y, out), (y + 1) ** 3 * P.polyval(s / (y + 1), CUBIC))

# endregion
