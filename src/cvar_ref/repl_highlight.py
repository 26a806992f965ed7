"""prompt_toolkit lexer for live cvar syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable, Dict

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import DIGITS, Lexer as CvarTokenizer, LexError
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE: Dict[str, str] = {
    "keyword": "bold ansicyan",
    "number": "ansimagenta",
    "identifier": "",
    "operator": "",
    "comparator": "ansiyellow",
    "punctuation": "",
    "error": "bold ansired",
}

# Token type → highlight group.
_TT_GROUP = {
    TT.KEYWORD: "keyword",
    TT.NUMBER: "number",
    TT.IDENT: "identifier",
    TT.OPERATOR: "operator",
    TT.COMPARATOR: "comparator",
    TT.PAREN: "punctuation",
    TT.BRACE: "punctuation",
    TT.SEMI: "punctuation",
}


def _token_width(tok: Tok, text: str) -> int:
    # Number tokens hold a float, so measure the digit run in the source.
    if tok.type == TT.NUMBER:
        end = tok.column - 1
        while end < len(text) and text[end] in DIGITS:
            end += 1
        return end - (tok.column - 1)

    return len(str(tok.value))


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments.

    On a lex error the tokens scanned so far keep their styles and the rest of
    the line is marked as an error.
    """
    if not text:
        return [("", "")]

    lexer = CvarTokenizer(text)
    error_at = None
    try:
        tokens = lexer.tokenize()
    except LexError as exc:
        tokens = lexer.tokens
        error_at = exc.column - 1

    result: StyleAndTextTuples = []
    pos = 0

    for tok in tokens:
        start = tok.column - 1
        width = _token_width(tok, text)

        # Unstyled gap before token.
        if start > pos:
            result.append(("", text[pos:start]))

        style = GROUP_STYLE.get(_TT_GROUP.get(tok.type, ""), "")
        result.append((style, text[start:start + width]))
        pos = start + width

    if error_at is not None and error_at >= pos:
        if error_at > pos:
            result.append(("", text[pos:error_at]))
        result.append((GROUP_STYLE["error"], text[error_at:]))
        pos = len(text)

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class CvarLexer(Lexer):
    """prompt_toolkit Lexer that highlights cvar source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
