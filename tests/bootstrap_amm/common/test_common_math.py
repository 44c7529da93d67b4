import pytest

from decimal import Decimal

from bootstrap_amm.common.errors import LaunchArithmeticError
from bootstrap_amm.common.math import (
    MAX_UINT256,
    checked,
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
    mul_div,
    relative_approx_equal,
)


@pytest.mark.parametrize(
    "a, b, tol, expected",
    [
        (10 ** 30, 10 ** 30, Decimal("1e-12"), True),

        # 1 part in 1e13 is inside a 1e-12 tolerance
        (10 ** 30, 10 ** 30 + 10 ** 17, Decimal("1e-12"), True),

        # 1 part in 1e11 is not
        (10 ** 30, 10 ** 30 + 10 ** 19, Decimal("1e-12"), False),

        (0, 0, Decimal("1e-12"), True),

        (0, 1, Decimal("1e-12"), False),
    ]
)
def test_relative_approx_equal(a, b, tol, expected):
    """
    Test the relative_approx_equal function with various inputs
    """
    result = relative_approx_equal(a, b, tol)
    assert result == expected, f"Expected {expected} for a={a}, b={b}, tol={tol}, got {result}"


def test_checked_sub_underflow_message():
    with pytest.raises(LaunchArithmeticError, match="subtraction would underflow"):
        checked_sub(1, 2)


def test_checked_sub_is_builtin_arithmetic_error():
    with pytest.raises(ArithmeticError):
        checked_sub(0, 1)


def test_checked_sub_exact():
    assert checked_sub(5, 5) == 0
    assert checked_sub(10 ** 50, 1) == 10 ** 50 - 1


def test_checked_add_overflow():
    assert checked_add(MAX_UINT256 - 1, 1) == MAX_UINT256
    with pytest.raises(LaunchArithmeticError):
        checked_add(MAX_UINT256, 1)


def test_checked_mul_overflow():
    assert checked_mul(2 ** 128, 2 ** 127) == 2 ** 255
    with pytest.raises(LaunchArithmeticError):
        checked_mul(2 ** 128, 2 ** 128)


def test_checked_rejects_negative():
    with pytest.raises(LaunchArithmeticError):
        checked(-1)


def test_checked_div_truncates_and_rejects_zero():
    assert checked_div(7, 2) == 3
    with pytest.raises(LaunchArithmeticError, match="division by zero"):
        checked_div(1, 0)


def test_mul_div_keeps_wide_intermediate():
    """The intermediate product may exceed uint256 as long as the result fits."""
    assert mul_div(2 ** 200, 2 ** 100, 2 ** 100) == 2 ** 200
    assert mul_div(10, 10, 3) == 33
    with pytest.raises(LaunchArithmeticError):
        mul_div(1, 1, 0)
