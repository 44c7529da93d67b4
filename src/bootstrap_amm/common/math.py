from decimal import Decimal, localcontext

from bootstrap_amm.common.errors import LaunchArithmeticError

ONE = 10 ** 18
MAX_UINT256 = 2 ** 256 - 1
DEFAULT_RELATIVE_TOLERANCE = Decimal("1e-12")


def checked(value: int) -> int:
    """Reject values that do not fit in an unsigned 256-bit word."""
    if value < 0 or value > MAX_UINT256:
        raise LaunchArithmeticError(f"value {value} does not fit in uint256")
    return value


def checked_add(a: int, b: int) -> int:
    return checked(a + b)


def checked_mul(a: int, b: int) -> int:
    return checked(a * b)


def checked_sub(a: int, b: int) -> int:
    if b > a:
        raise LaunchArithmeticError("subtraction would underflow")
    return a - b


def checked_div(a: int, b: int) -> int:
    if b == 0:
        raise LaunchArithmeticError("division by zero")
    return a // b


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    Computes floor(a * b / denominator) with the full-width intermediate product,
    only the result has to fit in uint256.
    """
    if denominator == 0:
        raise LaunchArithmeticError("division by zero")
    return checked(a * b // denominator)


def relative_approx_equal(a: int, b: int, tol: Decimal = DEFAULT_RELATIVE_TOLERANCE) -> bool:
    if a == b:
        return True
    with localcontext() as ctx:
        ctx.prec = 100
        scale = max(abs(Decimal(a)), abs(Decimal(b)))
        return abs(Decimal(a) - Decimal(b)) / scale <= tol
