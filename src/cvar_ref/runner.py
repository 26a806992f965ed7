from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

from .evaluator import eval_expr
from .lexer_rd import LexError, tokenize
from .parser_rd import ParseError, parse_tokens
from .tree import Block, pretty
from .types import CvarRuntimeError, Environment, Value
from .utils import format_number, log_level_from_env, max_depth_from_env

logger = logging.getLogger(__name__)

FRONTENDS = ("rd", "lark")

class Session:
    """One interpreter session: a variable store that outlives each call."""

    def __init__(self, max_depth: Optional[int]=None, frontend: str="rd") -> None:
        if frontend not in FRONTENDS:
            raise ValueError(f"Unknown front end: {frontend!r}")

        self.max_depth = max_depth
        self.frontend = frontend
        self.env = Environment()

    def parse(self, source: str, level: int=logging.DEBUG) -> Block:
        """Tokenize and parse with this session's front end, logging the tokens at `level`."""
        if self.frontend == "lark":
            from .parse_auto import lex_source_lark, parse_tokens_lark

            tokens, parse = lex_source_lark(source), parse_tokens_lark
        else:
            tokens, parse = tokenize(source), parse_tokens

        if logger.isEnabledFor(level):
            logger.log(level, "tokens: %s", tokens)

        return parse(tokens, max_depth=self.max_depth)

    def interpret(self, source: str) -> Value:
        return interpret(source, self)

def interpret(source: str, session: Session) -> Value:
    """Tokenize, parse and evaluate `source` against the session's variables.

    Errors propagate unchanged. Assignments made before a runtime error stay in
    the session.
    """
    ast = session.parse(source)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("tree:\n%s", pretty(ast))

    return eval_expr(ast, session.env)

def run(source: str, max_depth: Optional[int]=None, frontend: str="rd") -> Value:
    """Interpret `source` in a fresh session."""
    return Session(max_depth=max_depth, frontend=frontend).interpret(source)

def _load_source(arg: str) -> str:
    """
    Resolve CLI input into source text.
    - "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    try:
        if candidate.is_file():
            return candidate.read_text(encoding="utf-8")
    except OSError:
        # literal source such as "cx = 1" can be an invalid path on some platforms
        pass

    return arg

def _configure_logging(debug: bool, default_level: str) -> None:
    level = "DEBUG" if debug else log_level_from_env(default_level)
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

def main(argv: Optional[List[str]]=None) -> int:
    frontend = "rd"
    debug = False
    use_repl = False
    max_depth: Optional[int] = None
    arg = None
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token == "--repl":
            use_repl = True
            continue

        if token == "--lark":
            frontend = "lark"
            continue

        if token == "--debug":
            debug = True
            continue

        if token == "--max-depth" or token.startswith("--max-depth="):
            if token.startswith("--max-depth="):
                raw = token.split("=", 1)[1]
            else:
                try:
                    raw = next(it)
                except StopIteration:
                    raise SystemExit("--max-depth flag requires a number") from None
            try:
                max_depth = int(raw)
            except ValueError:
                raise SystemExit(f"--max-depth expects an integer, got {raw!r}") from None
            if max_depth <= 0:
                raise SystemExit("--max-depth must be positive")
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if max_depth is None:
        max_depth = max_depth_from_env()

    if use_repl:
        _configure_logging(debug, "WARNING")
        from .repl import repl

        return repl(Session(max_depth=max_depth, frontend=frontend))

    if arg is None:
        _configure_logging(debug, "INFO")
        from .demo import run_demo

        run_demo(Session(max_depth=max_depth, frontend=frontend))
        return 0

    _configure_logging(debug, "WARNING")
    source = _load_source(arg)
    try:
        result = Session(max_depth=max_depth, frontend=frontend).interpret(source)
    except (LexError, ParseError, CvarRuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if result is not None:
        print(format_number(result))
    return 0

if __name__ == "__main__":
    sys.exit(main())
