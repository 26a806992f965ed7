"""
Recursive Descent Parser for cvar

Structure:
- Lexer: Token list from source (lexer_rd)
- Parser: one method per precedence level, no backtracking
- AST: frozen node records from tree.py; the root is always a Block
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional

from .token_types import TT, Tok
from .tree import (
    Assignment,
    BinaryOp,
    Block,
    Comparison,
    ForLoop,
    Identifier,
    IfElse,
    Node,
    NumberLiteral,
)
from .utils import format_number, max_depth_from_env

# ============================================================================
# Errors
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None, expected: Optional[str] = None):
        self.message = message
        self.token = token
        self.expected = expected
        self.line = token.line if token else None
        self.column = token.column if token else None
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )


class NestingLimitError(ParseError):
    """Source nests deeper than the parser is allowed to recurse"""


def describe(tok: Tok) -> str:
    if tok.type == TT.EOF:
        return "end of input"
    if tok.type == TT.NUMBER:
        return f"number {format_number(tok.value)}"
    return f"'{tok.value}'"

# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Recursive descent parser for cvar.

    Expression precedence (lowest to highest):
    1. assignment (IDENT = expr), right recursive
    2. compare (<, >), left associative chain
    3. add (+, -)
    4. mul (*, /)
    5. factor (number, identifier, parens)
    """

    def __init__(self, tokens: List[Tok], max_depth: Optional[int] = None):
        self.tokens = tokens
        self.pos = 0
        self.max_depth = max_depth if max_depth is not None else max_depth_from_env()
        self.depth = 0

        if tokens:
            last = tokens[-1]
            width = len(format_number(last.value) if last.type == TT.NUMBER else str(last.value))
            self._eof = Tok(TT.EOF, None, last.line, last.column + width)
        else:
            self._eof = Tok(TT.EOF, None, 1, 1)

    # ========================================================================
    # Token Navigation
    # ========================================================================

    @property
    def current(self) -> Tok:
        return self.peek()

    def peek(self, offset: int = 0) -> Tok:
        """Look ahead at token"""
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return self._eof

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        self.pos += 1
        return prev

    def check(self, token_type: TT, value: Optional[str] = None) -> bool:
        """Check if current token has the given type (and value, when given)"""
        tok = self.current
        if tok.type != token_type:
            return False
        return value is None or tok.value == value

    def match(self, token_type: TT, value: Optional[str] = None) -> bool:
        """Check and consume if current token matches"""
        if self.check(token_type, value):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, value: str, expected: str) -> Tok:
        """Consume token of expected type/value or raise error"""
        if not self.check(token_type, value):
            tok = self.current
            raise ParseError(f"Expected {expected}, got {describe(tok)}", tok, expected=expected)
        return self.advance()

    @contextmanager
    def nested(self) -> Iterator[None]:
        self.depth += 1
        if self.depth > self.max_depth:
            raise NestingLimitError(
                f"Nesting deeper than {self.max_depth} levels", self.current
            )
        try:
            yield
        finally:
            self.depth -= 1

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Block:
        """Parse entire program"""
        try:
            return self.parse_program()
        except RecursionError:
            raise NestingLimitError("Nesting too deep for the parser", self.current) from None

    def parse_program(self) -> Block:
        statements = []
        while not self.at_end():
            statements.append(self.parse_statement())
        return Block(tuple(statements))

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Node:
        """
        Parse a single statement:
        if / for / { block } / expression with an optional trailing ';'
        """
        with self.nested():
            if self.check(TT.KEYWORD, 'if'):
                return self.parse_if_stmt()
            if self.check(TT.KEYWORD, 'for'):
                return self.parse_for_stmt()
            if self.check(TT.BRACE, '{'):
                return self.parse_block_stmt()

            expr = self.parse_expr()
            self.match(TT.SEMI)
            return expr

    def parse_if_stmt(self) -> IfElse:
        """if (expr) statement [else statement]"""
        self.advance()  # 'if'
        self.expect(TT.PAREN, '(', "'(' after 'if'")
        cond = self.parse_expr()
        self.expect(TT.PAREN, ')', "')' after condition")
        body = self.parse_statement()

        else_body = None
        if self.match(TT.KEYWORD, 'else'):
            else_body = self.parse_statement()

        return IfElse(cond, body, else_body)

    def parse_for_stmt(self) -> ForLoop:
        """for (expr; expr; expr) statement"""
        self.advance()  # 'for'
        self.expect(TT.PAREN, '(', "'(' after 'for'")
        init = self.parse_expr()
        self.expect(TT.SEMI, ';', "';' after init in for loop")
        cond = self.parse_expr()
        self.expect(TT.SEMI, ';', "';' after condition in for loop")
        update = self.parse_expr()
        self.expect(TT.PAREN, ')', "')' after update in for loop")
        body = self.parse_statement()
        return ForLoop(init, cond, update, body)

    def parse_block_stmt(self) -> Block:
        """{ statement* }"""
        self.advance()  # '{'
        statements = []

        while not self.at_end() and not self.check(TT.BRACE, '}'):
            statements.append(self.parse_statement())

        self.expect(TT.BRACE, '}', "'}' to close block")
        return Block(tuple(statements))

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> Node:
        """Assignment when looking at IDENT '=', otherwise a comparison chain"""
        with self.nested():
            if self.check(TT.IDENT) and self.peek(1).is_(TT.OPERATOR, '='):
                target = self.advance()
                self.advance()  # '='
                right = self.parse_expr()
                return Assignment(str(target.value), right)

            return self.parse_compare_expr()

    def parse_compare_expr(self) -> Node:
        """Parse comparisons: a < b > c chains as ((a < b) > c)"""
        left = self.parse_add_expr()

        while self.check(TT.COMPARATOR):
            op = self.advance()
            right = self.parse_add_expr()
            left = Comparison(str(op.value), left, right)

        return left

    def parse_add_expr(self) -> Node:
        """Parse addition/subtraction: expr + expr"""
        left = self.parse_mul_expr()

        while self.check(TT.OPERATOR, '+') or self.check(TT.OPERATOR, '-'):
            op = self.advance()
            right = self.parse_mul_expr()
            left = BinaryOp(str(op.value), left, right)

        return left

    def parse_mul_expr(self) -> Node:
        """Parse multiplication/division: expr * expr"""
        left = self.parse_factor()

        while self.check(TT.OPERATOR, '*') or self.check(TT.OPERATOR, '/'):
            op = self.advance()
            right = self.parse_factor()
            left = BinaryOp(str(op.value), left, right)

        return left

    def parse_factor(self) -> Node:
        """Number, identifier or parenthesized expression"""
        tok = self.current

        if tok.type == TT.NUMBER:
            self.advance()
            return NumberLiteral(float(tok.value))

        if tok.type == TT.IDENT:
            self.advance()
            return Identifier(str(tok.value))

        if tok.is_(TT.PAREN, '('):
            self.advance()
            node = self.parse_expr()
            self.expect(TT.PAREN, ')', "closing parenthesis")
            return node

        raise ParseError(
            f"Unexpected token: {describe(tok)}", tok,
            expected="number, identifier or '('",
        )

# ============================================================================
# Entry points
# ============================================================================

def parse_tokens(tokens: List[Tok], max_depth: Optional[int] = None) -> Block:
    """Parse an already tokenized program."""
    return Parser(tokens, max_depth=max_depth).parse()


def parse_source(source: str, max_depth: Optional[int] = None) -> Block:
    """
    Parse cvar source code to AST.

    Args:
        source: Source code to parse
        max_depth: Nesting limit (defaults to CVAR_MAX_DEPTH or 100)
    """
    from .lexer_rd import tokenize

    return parse_tokens(tokenize(source), max_depth=max_depth)
