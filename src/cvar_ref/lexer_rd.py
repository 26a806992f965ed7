"""
Lexer for cvar - Recursive Descent front end

Tokenizes cvar source code into a list of tokens.

Features:
- Single-pass tokenization, no backtracking
- Maximal munch for number and word runs
- Sentinel-prefix check on identifiers (must start with 'c')
- Position tracking (line, column)
"""

from typing import List
import string

from .token_types import TT, Tok

# ============================================================================
# Errors
# ============================================================================

class LexError(Exception):
    """Lexical analysis error"""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column


class InvalidIdentifier(LexError):
    """Identifier that does not start with the sentinel letter"""

    def __init__(self, name: str, line: int = 0, column: int = 0):
        super().__init__(
            f"Variable names must start with '{Lexer.SENTINEL}': {name}", line, column
        )
        self.name = name

# ============================================================================
# Lexer Implementation
# ============================================================================

DIGITS = frozenset(string.digits)
LETTERS = frozenset(string.ascii_letters)
WORD_CHARS = LETTERS | DIGITS


class Lexer:
    """
    cvar lexer.

    Every token is a single character except numbers and words, which are
    consumed greedily. The first unrecognized character aborts the scan.
    """

    SENTINEL = 'c'

    KEYWORDS = frozenset({'for', 'if', 'else'})

    # Single-character tokens
    PUNCTUATION = {
        '+': TT.OPERATOR,
        '-': TT.OPERATOR,
        '*': TT.OPERATOR,
        '/': TT.OPERATOR,
        '=': TT.OPERATOR,
        '<': TT.COMPARATOR,
        '>': TT.COMPARATOR,
        '(': TT.PAREN,
        ')': TT.PAREN,
        '{': TT.BRACE,
        '}': TT.BRACE,
        ';': TT.SEMI,
    }

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.scan_token()

        return self.tokens

    def scan_token(self):
        """Scan next token"""
        ch = self.peek()

        if ch.isspace():
            self.advance()
            return

        if ch in DIGITS:
            self.scan_number()
            return

        if ch in LETTERS:
            self.scan_word()
            return

        token_type = self.PUNCTUATION.get(ch)
        if token_type is not None:
            self.emit(token_type, ch, self.line, self.column)
            self.advance()
            return

        raise LexError(f"Unexpected character: {ch}", self.line, self.column)

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_number(self):
        """Scan unsigned integer literal into a float"""
        line, column = self.line, self.column
        value = ''

        while self.peek() in DIGITS:
            value += self.advance()

        self.emit(TT.NUMBER, float(value), line, column)

    def scan_word(self):
        """Scan keyword or identifier"""
        line, column = self.line, self.column
        value = ''

        while self.peek() in WORD_CHARS:
            value += self.advance()

        if value in self.KEYWORDS:
            self.emit(TT.KEYWORD, value, line, column)
            return

        if not value.startswith(self.SENTINEL):
            raise InvalidIdentifier(value, line, column)

        self.emit(TT.IDENT, value, line, column)

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self) -> str:
        """Consume one character, keeping line/column current"""
        ch = self.source[self.pos]
        self.pos += 1

        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        return ch

    def emit(self, token_type: TT, value, line: int, column: int):
        """Emit a token"""
        self.tokens.append(Tok(type=token_type, value=value, line=line, column=column))


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()
