"""
Grammar-driven front end: grammar.lark compiled by lark's LALR parser.

Produces the same tree.py nodes as parser_rd so either front end can feed the
evaluator. Lark exceptions are mapped onto LexError / ParseError.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Optional

from lark import Lark, Token, Transformer, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from .lexer_rd import InvalidIdentifier, LexError, Lexer
from .parser_rd import NestingLimitError, ParseError, describe
from .token_types import TT, Tok
from .tree import (
    Assignment,
    BinaryOp,
    Block,
    Comparison,
    ForLoop,
    Identifier,
    IfElse,
    NumberLiteral,
)
from .utils import max_depth_from_env

logger = logging.getLogger(__name__)

# lark terminal name → token kind, for error reporting
_TERMINAL_TT = {
    "NUMBER": TT.NUMBER,
    "NAME": TT.IDENT,
    "IF": TT.KEYWORD,
    "FOR": TT.KEYWORD,
    "ELSE": TT.KEYWORD,
    "ADD_OP": TT.OPERATOR,
    "MUL_OP": TT.OPERATOR,
    "EQUAL": TT.OPERATOR,
    "COMPARATOR": TT.COMPARATOR,
    "LPAR": TT.PAREN,
    "RPAR": TT.PAREN,
    "LBRACE": TT.BRACE,
    "RBRACE": TT.BRACE,
    "SEMICOLON": TT.SEMI,
}

# Rules that open one nesting level.
_NESTING_RULES = frozenset({"expr_stmt", "if_stmt", "for_stmt", "block", "group", "assign"})


def _check_ident(t: Token) -> Token:
    if not t.startswith(Lexer.SENTINEL) and t not in Lexer.KEYWORDS:
        raise InvalidIdentifier(str(t), t.line, t.column)
    return t


@lru_cache(maxsize=None)
def build_parser() -> Lark:
    return Lark.open(
        "grammar.lark",
        rel_to=__file__,
        parser="lalr",
        lexer="basic",
        start="start",
        maybe_placeholders=False,
        propagate_positions=True,
        lexer_callbacks={"NAME": _check_ident},
    )


def _to_tok(t: Optional[Token]) -> Tok:
    if t is None or t.type == "$END":
        line = getattr(t, "line", None) or 0
        column = getattr(t, "end_column", None) or 0
        return Tok(TT.EOF, None, line, column)

    value = float(t) if t.type == "NUMBER" else str(t)
    return Tok(_TERMINAL_TT.get(t.type, TT.OPERATOR), value, t.line or 0, t.column or 0)


def _fold(node_cls, c):
    """[a, op, b, op, c] → node_cls(op, node_cls(op, a, b), c)"""
    acc = c[0]
    for i in range(1, len(c), 2):
        acc = node_cls(str(c[i]), acc, c[i + 1])
    return acc


class ToAst(Transformer):
    """Lark parse tree → tree.py nodes."""

    def start(self, c):
        return Block(tuple(c))

    def block(self, c):
        return Block(tuple(c))

    def expr_stmt(self, c):
        return c[0]

    def group(self, c):
        return c[0]

    def if_stmt(self, c):
        else_body = c[2] if len(c) > 2 else None
        return IfElse(c[0], c[1], else_body)

    def for_stmt(self, c):
        init, cond, update, body = c
        return ForLoop(init, cond, update, body)

    def assign(self, c):
        name, right = c
        return Assignment(str(name), right)

    def compare(self, c):
        return _fold(Comparison, c)

    def add(self, c):
        return _fold(BinaryOp, c)

    def mul(self, c):
        return _fold(BinaryOp, c)

    def number(self, c):
        return NumberLiteral(float(c[0]))

    def var(self, c):
        return Identifier(str(c[0]))


def nesting_depth(tree: Tree) -> tuple[int, Tree]:
    """Deepest nesting level in a lark parse tree and the node found there."""
    deepest, where = 0, tree
    stack = [(tree, 0)]

    while stack:
        node, depth = stack.pop()
        if node.data in _NESTING_RULES:
            depth += 1
        if depth > deepest:
            deepest, where = depth, node
        stack.extend((child, depth) for child in node.children if isinstance(child, Tree))

    return deepest, where


def lex_source_lark(src: str) -> List[Token]:
    """
    Tokenize all of `src` with the grammar's lexer.

    The parser pulls tokens lazily, so lexing everything first makes a bad
    character or identifier win over a syntax error earlier in the line.
    """
    try:
        return list(build_parser().lex(src))
    except UnexpectedCharacters as e:
        raise LexError(f"Unexpected character: {e.char}", e.line, e.column) from None


def _parse_tree(tokens: List[Token]) -> Tree:
    ip = build_parser().parse_interactive()
    end = Token.new_borrow_pos("$END", "", tokens[-1]) if tokens else Token("$END", "", 0, 1, 1)

    try:
        for tok in tokens:
            ip.feed_token(tok)
        return ip.feed_token(end)
    except (UnexpectedToken, UnexpectedEOF) as e:
        tok = _to_tok(getattr(e, "token", None))
        expected = ", ".join(sorted(e.expected)) if e.expected else None
        raise ParseError(f"Unexpected token: {describe(tok)}", tok, expected=expected) from None
    except UnexpectedInput as e:
        raise ParseError(str(e)) from None


def parse_tokens_lark(tokens: List[Token], max_depth: Optional[int] = None) -> Block:
    """Parse tokens from lex_source_lark into tree.py nodes."""
    limit = max_depth if max_depth is not None else max_depth_from_env()
    tree = _parse_tree(tokens)

    depth, where = nesting_depth(tree)
    if depth > limit:
        first = next(where.scan_values(lambda v: isinstance(v, Token)), None)
        raise NestingLimitError(
            f"Nesting deeper than {limit} levels", _to_tok(first) if first is not None else None
        )

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("lark tree:\n%s", tree.pretty())

    try:
        return ToAst().transform(tree)
    except RecursionError:
        raise NestingLimitError("Nesting too deep for the parser") from None


def parse_source_lark(src: str, max_depth: Optional[int] = None) -> Block:
    """
    Parse cvar source with the lark grammar.

    Args:
        src: Source code to parse
        max_depth: Nesting limit (defaults to CVAR_MAX_DEPTH or 100)
    """
    return parse_tokens_lark(lex_source_lark(src), max_depth=max_depth)
