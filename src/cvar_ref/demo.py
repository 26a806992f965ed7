"""Fixed battery of sample programs, run when `cvar` is given no source."""

from __future__ import annotations

import logging
import sys
from typing import List, NamedTuple, Optional, TextIO

from .evaluator import eval_expr
from .lexer_rd import LexError
from .parser_rd import ParseError
from .runner import Session
from .tree import pretty
from .types import CvarRuntimeError, Value
from .utils import format_number

logger = logging.getLogger(__name__)

RULE = "-" * 33

class DemoCase(NamedTuple):
    title: str
    setup: str
    query: str

DEMO_CASES: List[DemoCase] = [
    DemoCase("Variable assignment", "csum = 0; csum = csum + 5;", "csum"),
    DemoCase(
        "For loop",
        """
        csum = 0;
        for (ci = 0; ci < 5; ci = ci + 1) {
          csum = csum + ci;
        }
        """,
        "csum",
    ),
    DemoCase(
        "If-else",
        """
        cval = 7;
        if (cval > 5) {
          cresult = 1;
        } else {
          cresult = 0;
        }
        """,
        "cresult",
    ),
    DemoCase(
        "If-else",
        "cval = 3; if (cval > 5) { cresult = 1; } else { cresult = 0; }",
        "cresult",
    ),
]

def _traced(session: Session, source: str) -> Value:
    ast = session.parse(source, level=logging.INFO)
    logger.info("tree:\n%s", pretty(ast))
    return eval_expr(ast, session.env)

def run_demo(session: Optional[Session]=None, out: Optional[TextIO]=None) -> bool:
    """Run every case in one session. Returns False if a case failed."""
    session = session or Session()
    out = out or sys.stdout

    try:
        for i, case in enumerate(DEMO_CASES, start=1):
            if i == len(DEMO_CASES):
                print(RULE, file=out)
            print(f"Test {i}: {case.title}", file=out)
            _traced(session, case.setup)
            print(f"Result: {format_number(_traced(session, case.query))}", file=out)

        print(f"\n{RULE}", file=out)
        print("To start the interactive REPL, run: cvar --repl", file=out)
    except (LexError, ParseError, CvarRuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return False

    return True
