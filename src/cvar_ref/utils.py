from __future__ import annotations

import math
import os
from typing import Optional

DEFAULT_MAX_DEPTH = 100

_TRUTHY = {"1", "true", "yes", "on"}


def debug_py_trace_enabled() -> bool:
    """True when CVAR_DEBUG_PY_TRACE asks for Python tracebacks on errors."""
    return os.environ.get("CVAR_DEBUG_PY_TRACE", "").strip().lower() in _TRUTHY


def max_depth_from_env(default: int = DEFAULT_MAX_DEPTH) -> int:
    raw = os.environ.get("CVAR_MAX_DEPTH")
    if raw is None:
        return default

    try:
        value = int(raw.strip())
    except ValueError:
        return default

    return value if value > 0 else default


def log_level_from_env(default: str = "WARNING") -> str:
    raw = os.environ.get("CVAR_LOG_LEVEL", "").strip().upper()
    return raw or default


def format_number(value: Optional[float]) -> str:
    """Render a result: integral values drop the trailing '.0'."""
    if value is None:
        return ""
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return repr(value)
