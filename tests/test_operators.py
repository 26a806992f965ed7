from __future__ import annotations

import math

import pytest

from cvar_ref.eval.expr import apply_binary_operator, compare_values, divide
from tests.support.harness import FRONTENDS, UnknownOperator, run_runtime_case

SCENARIOS = [
    pytest.param("1 + 2", ("number", 3), None, id="add"),
    pytest.param("10 - 4", ("number", 6), None, id="sub"),
    pytest.param("2 - 5", ("number", -3), None, id="sub-negative"),
    pytest.param("6 * 7", ("number", 42), None, id="mul"),
    pytest.param("7 / 2", ("number", 3.5), None, id="div-fractional"),
    pytest.param("1 + 2 * 3", ("number", 7), None, id="precedence"),
    pytest.param("(1 + 2) * 3", ("number", 9), None, id="parens"),
    pytest.param("10 - 3 - 2", ("number", 5), None, id="sub-left-assoc"),
    pytest.param("16 / 4 / 2", ("number", 2), None, id="div-left-assoc"),
    pytest.param("1 / 0", ("inf", 1), None, id="div-by-zero-positive"),
    pytest.param("(0 - 1) / 0", ("inf", -1), None, id="div-by-zero-negative"),
    pytest.param("0 / 0", ("nan", None), None, id="zero-over-zero"),
    pytest.param("1 / 0 - 1 / 0", ("nan", None), None, id="inf-minus-inf"),
    pytest.param("1 < 2", ("number", 1), None, id="lt-true"),
    pytest.param("2 < 1", ("number", 0), None, id="lt-false"),
    pytest.param("2 > 1", ("number", 1), None, id="gt-true"),
    pytest.param("1 > 1", ("number", 0), None, id="gt-equal-false"),
    pytest.param("1 + 1 > 1", ("number", 1), None, id="compare-after-arith"),
    # (3 > 2) > 1 is 1 > 1
    pytest.param("3 > 2 > 1", ("number", 0), None, id="chained-gt"),
    # (1 < 2) < 3 is 1 < 3
    pytest.param("1 < 2 < 3", ("number", 1), None, id="chained-lt"),
    pytest.param("(1 < 2) + (3 > 1)", ("number", 2), None, id="compare-as-number"),
    pytest.param("0 / 0 < 1", ("number", 0), None, id="nan-compare-false"),
    pytest.param("0 / 0 > 1", ("number", 0), None, id="nan-compare-gt-false"),
    pytest.param("99999999999999999999", ("number", 1e20), None, id="large-literal"),
]


@pytest.mark.parametrize("frontend", FRONTENDS)
@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_operators(source: str, expectation, expected_exc, frontend: str) -> None:
    run_runtime_case(source, expectation, expected_exc, frontend=frontend)


def test_divide_signs() -> None:
    assert divide(1.0, 0.0) == math.inf
    assert divide(-1.0, 0.0) == -math.inf
    assert divide(1.0, -0.0) == -math.inf
    assert divide(-1.0, -0.0) == math.inf
    assert math.isnan(divide(0.0, 0.0))
    assert math.isnan(divide(math.nan, 0.0))
    assert divide(6.0, 3.0) == 2.0


def test_unknown_operator() -> None:
    with pytest.raises(UnknownOperator) as exc_info:
        apply_binary_operator("%", 1.0, 2.0)

    assert exc_info.value.operator == "%"
    assert "Unknown operator: %" in str(exc_info.value)


def test_unknown_comparator() -> None:
    with pytest.raises(UnknownOperator) as exc_info:
        compare_values("==", 1.0, 2.0)

    assert exc_info.value.operator == "=="
    assert "Unknown comparator: ==" in str(exc_info.value)
