"""Fixed point primitive tests"""
import numpy as np
import pytest
from dataclasses import dataclass
from comptroller_model.src.constants import (
    DOUBLE_SCALE,
    EXP_SCALE,
    UINT32_MAX,
    UINT224_MAX,
    UINT256_MAX
)
from comptroller_model.src.errors import RangeError
from comptroller_model.src.exponential import (
    Double,
    Exp,
    add_double,
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
    div_uint_exp,
    fraction,
    mul_exp,
    mul_scalar_truncate,
    mul_uint_double,
    safe32,
    safe224,
    sub_double
)

def test_checked_ops_fail_instead_of_wrapping():
    assert checked_add(UINT256_MAX - 1, 1) == UINT256_MAX
    with pytest.raises(RangeError):
        checked_add(UINT256_MAX, 1)
    with pytest.raises(RangeError):
        checked_mul(2**128, 2**128)
    with pytest.raises(RangeError):
        checked_sub(1, 2)
    with pytest.raises(RangeError):
        checked_div(1, 0)

def test_narrowing_checks():
    assert safe32(UINT32_MAX) == UINT32_MAX
    with pytest.raises(RangeError):
        safe32(UINT32_MAX + 1)
    assert safe224(UINT224_MAX) == UINT224_MAX
    with pytest.raises(RangeError):
        safe224(UINT224_MAX + 1)
    assert Double(UINT224_MAX).to_index() == UINT224_MAX
    with pytest.raises(RangeError):
        Double(UINT224_MAX + 1).to_index()

def test_mantissas_reject_out_of_domain_values():
    with pytest.raises(RangeError):
        Exp(-1)
    with pytest.raises(RangeError):
        Double(UINT256_MAX + 1)

def test_double_helpers():
    assert fraction(100, 100) == Double(DOUBLE_SCALE)
    assert fraction(1, 3).mantissa == DOUBLE_SCALE // 3
    assert add_double(Double(1), Double(2)) == Double(3)
    assert sub_double(Double(5), Double(2)) == Double(3)
    with pytest.raises(RangeError):
        sub_double(Double(2), Double(5))
    # 7 * (1/3) truncates to 2
    assert mul_uint_double(7, fraction(1, 3)) == 2

def test_exp_helpers():
    half = Exp(EXP_SCALE // 2)
    assert mul_exp(half, half) == Exp(EXP_SCALE // 4)
    assert mul_scalar_truncate(half, 3) == 1
    assert Exp(5 * EXP_SCALE + 1).truncate() == 5
    assert div_uint_exp(1_000, Exp(2 * EXP_SCALE)) == 500

@dataclass
class ScalarCase:
    description: str
    mantissa: int
    scalar: int

def test_mul_scalar_truncate_matches_float_reference():
    """Integer result stays within one unit of the float computation"""
    cases = [
        ScalarCase("collateral factor on balance", 75 * EXP_SCALE // 100, 1_234 * EXP_SCALE),
        ScalarCase("tiny price", 3, 10**30),
        ScalarCase("exchange rate above one", 2_020_000_000_000_000_000, 987_654_321),
        ScalarCase("unit", EXP_SCALE, 42),
    ]

    for case in cases:
        exact = mul_scalar_truncate(Exp(case.mantissa), case.scalar)
        reference = np.float64(case.mantissa) / EXP_SCALE * np.float64(case.scalar)
        print(f"{case.description}: exact={exact} reference={reference:.6e}")
        assert np.isclose(exact, reference, rtol=1e-12, atol=1.0), case.description
