"""Fixed point arithmetic with overflow checking.

Two scaled integer types are used:
- Exp: mantissa scaled by 1e18, for collateral factors, exchange rates and prices
- Double: mantissa scaled by 1e36, for cumulative reward indices

Python integers never wrap, so every operation checks its result against the
fixed width domain of the field instead and raises RangeError when it leaves it.
"""
from dataclasses import dataclass
from .errors import RangeError
from .constants import (
    EXP_SCALE,
    DOUBLE_SCALE,
    UINT32_MAX,
    UINT224_MAX,
    UINT256_MAX
)

def checked_add(a: int, b: int) -> int:
    """Add with overflow checking"""
    result = a + b
    if result > UINT256_MAX:
        raise RangeError("Arithmetic overflow in addition")
    return result

def checked_sub(a: int, b: int) -> int:
    """Subtract with underflow checking"""
    if b > a:
        raise RangeError("Arithmetic underflow in subtraction")
    return a - b

def checked_mul(a: int, b: int) -> int:
    """Multiply with overflow checking"""
    result = a * b
    if result > UINT256_MAX:
        raise RangeError("Arithmetic overflow in multiplication")
    return result

def checked_div(a: int, b: int) -> int:
    """Divide with zero checking"""
    if b == 0:
        raise RangeError("Division by zero")
    return a // b

def safe32(n: int, message: str = "block number exceeds 32 bits") -> int:
    if n < 0 or n > UINT32_MAX:
        raise RangeError(message)
    return n

def safe224(n: int, message: str = "value exceeds 224 bits") -> int:
    if n < 0 or n > UINT224_MAX:
        raise RangeError(message)
    return n

def _check_uint(n: int, name: str) -> None:
    if n < 0:
        raise RangeError(f"{name} must be non-negative")
    if n > UINT256_MAX:
        raise RangeError(f"{name} exceeds 256 bits")

@dataclass(frozen=True)
class Exp:
    """Decimal scaled by 1e18"""
    mantissa: int

    def __post_init__(self) -> None:
        _check_uint(self.mantissa, "Exp mantissa")

    def truncate(self) -> int:
        """Drop the fractional part"""
        return self.mantissa // EXP_SCALE

@dataclass(frozen=True)
class Double:
    """Decimal scaled by 1e36"""
    mantissa: int

    def __post_init__(self) -> None:
        _check_uint(self.mantissa, "Double mantissa")

    def to_index(self) -> int:
        """Narrow to a stored 224 bit index, failing rather than truncating"""
        return safe224(self.mantissa, "reward index exceeds 224 bits")

def mul_exp(a: Exp, b: Exp) -> Exp:
    return Exp(checked_mul(a.mantissa, b.mantissa) // EXP_SCALE)

def mul_exp3(a: Exp, b: Exp, c: Exp) -> Exp:
    return mul_exp(mul_exp(a, b), c)

def mul_scalar_truncate(a: Exp, scalar: int) -> int:
    """Multiply an Exp by an integer and truncate to an integer"""
    return Exp(checked_mul(a.mantissa, scalar)).truncate()

def mul_scalar_truncate_add_uint(a: Exp, scalar: int, addend: int) -> int:
    """Multiply an Exp by an integer, truncate, then add an integer"""
    return checked_add(mul_scalar_truncate(a, scalar), addend)

def div_uint_exp(a: int, b: Exp) -> int:
    """Divide an integer by an Exp, e.g. borrows by a borrow index"""
    return checked_div(checked_mul(a, EXP_SCALE), b.mantissa)

def fraction(numerator: int, denominator: int) -> Double:
    """numerator / denominator as a Double"""
    return Double(checked_div(checked_mul(numerator, DOUBLE_SCALE), denominator))

def add_double(a: Double, b: Double) -> Double:
    return Double(checked_add(a.mantissa, b.mantissa))

def sub_double(a: Double, b: Double) -> Double:
    return Double(checked_sub(a.mantissa, b.mantissa))

def mul_uint_double(a: int, b: Double) -> int:
    """Multiply an integer by a Double and truncate to an integer"""
    return checked_mul(a, b.mantissa) // DOUBLE_SCALE
