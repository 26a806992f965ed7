"""Interactive REPL for cvar, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
import traceback
from typing import Optional, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer_rd import LexError, tokenize
from .parser_rd import ParseError
from .repl_highlight import CvarLexer
from .runner import Session
from .token_types import TT
from .types import CvarRuntimeError
from .utils import debug_py_trace_enabled, format_number

BANNER = (
    "cvar interpreter REPL\n"
    "Enter code to interpret. Variables will persist between commands.\n"
    "Ctrl-D to exit, / for commands."
)
FAREWELL = "Exiting interpreter. Goodbye!"

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Forget every variable", ""),
}

_OPENERS = {"(", "{"}
_CLOSERS = {")", "}"}


def _open_depth(text: str) -> int:
    """Count of unclosed '(' and '{' in *text*; 0 when it does not lex."""
    try:
        tokens = tokenize(text)
    except LexError:
        return 0

    depth = 0
    for tok in tokens:
        if tok.type not in (TT.PAREN, TT.BRACE):
            continue
        if tok.value in _OPENERS:
            depth += 1
        elif tok.value in _CLOSERS:
            depth = max(depth - 1, 0)

    return depth


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _handle_slash(line: str, session_box: list[Session]) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ["CVAR_DEBUG_PY_TRACE"] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop("CVAR_DEBUG_PY_TRACE", None)
        elif arg == "":
            # Toggle.
            if debug_py_trace_enabled():
                os.environ.pop("CVAR_DEBUG_PY_TRACE", None)
            else:
                os.environ["CVAR_DEBUG_PY_TRACE"] = "1"
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    if cmd == "/reset":
        old = session_box[0]
        session_box[0] = Session(max_depth=old.max_depth, frontend=old.frontend)
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def eval_line(text: str, session_box: list[Session], out: Optional[TextIO]=None) -> None:
    """Run one submitted REPL entry: a slash command or cvar source.

    Results go to *out* (stdout by default), errors to stderr. Nothing raised by
    the interpreter escapes.
    """
    out = out or sys.stdout
    text = _normalize(text)
    if not text.strip():
        return

    if _handle_slash(text, session_box):
        return

    try:
        result = session_box[0].interpret(text)
    except (ParseError, LexError, CvarRuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if debug_py_trace_enabled() and isinstance(exc, CvarRuntimeError):
            print("\nPython traceback:", file=sys.stderr)
            print(
                "".join(traceback.format_tb(exc.__traceback__)),
                file=sys.stderr,
                end="",
            )
        return

    if result is not None:
        print(format_number(result), file=out)


def _plain_repl(session_box: list[Session], stdin: TextIO) -> int:
    """Line-at-a-time loop for piped input; same semantics as the prompt."""
    for line in stdin:
        try:
            eval_line(line.rstrip("\n"), session_box)
        except KeyboardInterrupt:
            print("KeyboardInterrupt")

    print(f"\n{FAREWELL}")
    return 0


def repl(session: Optional[Session]=None, stdin: Optional[TextIO]=None) -> int:
    """Interactive read-eval-print loop. Returns the process exit status."""
    # Use a mutable box so /reset can swap the session.
    session_box: list[Session] = [session or Session()]
    stdin = stdin or sys.stdin

    print(BANNER)

    if not stdin.isatty():
        return _plain_repl(session_box, stdin)

    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        # Keep reading while a '(' or '{' is still open.
        depth = _open_depth(text)
        if depth and not text.startswith("/"):
            buf.insert_text("\n" + "  " * depth)
            return

        buf.validate_and_handle()

    prompt: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=CvarLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    while True:
        try:
            text = prompt.prompt("> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        try:
            eval_line(text, session_box)
        except KeyboardInterrupt:
            # an endless loop was interrupted; the session keeps what it bound
            print("KeyboardInterrupt")

    print(FAREWELL)
    return 0
