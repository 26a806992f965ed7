"""Evaluator helper modules for the cvar runtime."""

__all__ = [
    "bind",
    "blocks",
    "expr",
    "helpers",
    "loops",
]
