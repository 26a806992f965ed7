from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import FRONTENDS, UnboundVariable, run_runtime_case

SCENARIOS = [
    pytest.param(
        dedent(
            """\
            cval = 7;
            if (cval > 5) {
              cresult = 1;
            } else {
              cresult = 0;
            }
            cresult
            """
        ),
        ("number", 1),
        None,
        id="if-then-branch",
    ),
    pytest.param(
        "cval = 3; if (cval > 5) { cresult = 1; } else { cresult = 0; } cresult",
        ("number", 0),
        None,
        id="if-else-branch",
    ),
    pytest.param(
        "if (0) 5",
        ("none", None),
        None,
        id="false-no-else-no-value",
    ),
    pytest.param(
        "if (1) 5",
        ("number", 5),
        None,
        id="if-value-is-branch-value",
    ),
    pytest.param(
        "if (0) 5; else 6;",
        ("number", 6),
        None,
        id="else-value",
    ),
    pytest.param(
        "if (0 - 2) 1; else 2;",
        ("number", 1),
        None,
        id="negative-is-truthy",
    ),
    pytest.param(
        "if (0 / 0) 1; else 2;",
        ("number", 2),
        None,
        id="nan-is-falsy",
    ),
    pytest.param(
        "if (1 / 0) 1; else 2;",
        ("number", 1),
        None,
        id="inf-is-truthy",
    ),
    pytest.param(
        # the untaken branch references an unbound name and must not run
        "if (1) 1; else cmissing;",
        ("number", 1),
        None,
        id="else-not-evaluated",
    ),
    pytest.param(
        "if (0) cmissing;",
        ("none", None),
        None,
        id="then-not-evaluated",
    ),
    pytest.param(
        "if (cmissing) 1;",
        None,
        UnboundVariable,
        id="condition-unbound",
    ),
    pytest.param(
        "ca = 0; cb = 1; if (ca) if (cb) cx = 1; else cx = 2; cx",
        None,
        UnboundVariable,
        id="dangling-else-binds-inner",
    ),
    pytest.param(
        "ca = 1; cb = 0; if (ca) if (cb) cx = 1; else cx = 2; cx",
        ("number", 2),
        None,
        id="dangling-else-inner-false",
    ),
    pytest.param(
        "ca = 0; if (ca) cx = 1; else if (ca + 1) cx = 2; else cx = 3; cx",
        ("number", 2),
        None,
        id="else-if-chain",
    ),
    pytest.param("{ }", ("none", None), None, id="empty-block-no-value"),
    pytest.param("", ("none", None), None, id="empty-program-no-value"),
    pytest.param("{ 1; 2; 3 }", ("number", 3), None, id="block-last-value"),
    pytest.param("cx = 4; { cx = cx * 2; } cx", ("number", 8), None, id="block-shares-scope"),
]


@pytest.mark.parametrize("frontend", FRONTENDS)
@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_control_flow(source: str, expectation, expected_exc, frontend: str) -> None:
    run_runtime_case(source, expectation, expected_exc, frontend=frontend)
