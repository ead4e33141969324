"""Tests for SafeInt checked arithmetic wrapper."""

import pytest

from stableswap.models.types import UINT256_MAX
from stableswap.safe_int import (
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Underflow,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_from_invalid_type_raises(self):
        """SafeInt rejects non-integers, including bool."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias_s(self):
        assert S is SafeInt


class TestSafeIntArithmetic:
    """Tests for SafeInt arithmetic operations."""

    def test_add(self):
        assert (S(10) + S(5)).value == 15
        assert (S(10) + 5).value == 15
        assert (5 + S(10)).value == 15

    def test_sub(self):
        assert (S(10) - 3).value == 7
        assert (10 - S(3)).value == 7

    def test_sub_underflow_raises(self):
        """Subtraction below zero raises Underflow."""
        with pytest.raises(Underflow):
            S(3) - 10
        with pytest.raises(Underflow):
            3 - S(10)

    def test_mul(self):
        assert (S(6) * 7).value == 42
        assert (6 * S(7)).value == 42

    def test_floordiv_truncates(self):
        assert (S(10) // 3).value == 3
        assert (10 // S(3)).value == 3

    def test_floordiv_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            S(10) // 0
        with pytest.raises(DivisionByZero):
            10 // S(0)

    def test_errors_are_arithmetic_errors(self):
        """All SafeInt errors share a base class usable in except clauses."""
        assert issubclass(Underflow, SafeIntError)
        assert issubclass(DivisionByZero, SafeIntError)
        assert issubclass(SafeIntError, ArithmeticError)

    def test_large_values_do_not_overflow(self):
        """Intermediate products above uint256 are kept exactly."""
        big = S(UINT256_MAX) * UINT256_MAX // UINT256_MAX
        assert big.value == UINT256_MAX


class TestSafeIntNamedOperations:
    """Tests for abs_diff and saturating_sub."""

    def test_abs_diff(self):
        assert S(10).abs_diff(3).value == 7
        assert S(3).abs_diff(10).value == 7
        assert S(5).abs_diff(S(5)).value == 0

    def test_saturating_sub_clamps_to_zero(self):
        assert S(3).saturating_sub(10).value == 0
        assert S(10).saturating_sub(3).value == 7
