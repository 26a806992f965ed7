from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import FRONTENDS, Session, UnboundVariable, run_runtime_case

SCENARIOS = [
    pytest.param(
        dedent(
            """\
            csum = 0;
            for (ci = 0; ci < 5; ci = ci + 1) {
              csum = csum + ci;
            }
            csum
            """
        ),
        ("number", 10),
        None,
        id="sum-range",
    ),
    pytest.param(
        "for (ci = 0; ci < 3; ci = ci + 1) ci",
        ("none", None),
        None,
        id="loop-has-no-value",
    ),
    pytest.param(
        "for (ci = 0; ci < 3; ci = ci + 1) { } ci",
        ("number", 3),
        None,
        id="loop-variable-leaks",
    ),
    pytest.param(
        "cn = 0; for (ci = 10; ci < 5; ci = ci + 1) cn = cn + 1; cn",
        ("number", 0),
        None,
        id="zero-iterations",
    ),
    pytest.param(
        "for (ci = 10; ci < 5; ci = ci + 1) cbody = 1; cbody",
        None,
        UnboundVariable,
        id="body-skipped-when-false",
    ),
    pytest.param(
        dedent(
            """\
            ctotal = 0;
            for (ci = 0; ci < 3; ci = ci + 1)
              for (cj = 0; cj < 4; cj = cj + 1)
                ctotal = ctotal + 1;
            ctotal
            """
        ),
        ("number", 12),
        None,
        id="nested-loops",
    ),
    pytest.param(
        "cf = 1; for (ci = 1; ci < 6; ci = ci + 1) cf = cf * ci; cf",
        ("number", 120),
        None,
        id="factorial",
    ),
    pytest.param(
        "for (ci = 5; ci > 0; ci = ci - 2) { } ci",
        ("number", -1),
        None,
        id="count-down",
    ),
    pytest.param(
        # the condition is re-evaluated before every iteration
        "climit = 3; cn = 0; for (ci = 0; ci < climit; ci = ci + 1) { climit = 2; cn = cn + 1; } cn",
        ("number", 2),
        None,
        id="condition-reevaluated",
    ),
    pytest.param(
        "for (ci = 0; cmissing; ci = ci + 1) { }",
        None,
        UnboundVariable,
        id="condition-unbound",
    ),
]


@pytest.mark.parametrize("frontend", FRONTENDS)
@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_loops(source: str, expectation, expected_exc, frontend: str) -> None:
    run_runtime_case(source, expectation, expected_exc, frontend=frontend)


def test_loop_order_init_cond_body_update() -> None:
    session = Session()
    # ctrace records each step as a decimal digit: init=1, cond=2, body=3, update=4
    session.interpret(
        dedent(
            """\
            ctrace = 0;
            cn = 0;
            for (ctrace = ctrace * 10 + 1;
                 (ctrace = ctrace * 10 + 2) * 0 + (cn < 2);
                 ctrace = ctrace * 10 + 4) {
              ctrace = ctrace * 10 + 3;
              cn = cn + 1;
            }
            """
        )
    )

    assert session.env.get("ctrace") == 12342342.0
