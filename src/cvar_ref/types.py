from __future__ import annotations

from typing import Dict, Optional

# ---------- Exceptions (keep Cvar* canonical) ----------

class CvarRuntimeError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class UnboundVariable(CvarRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Variable {name} not found")
        self.name = name

class UnknownOperator(CvarRuntimeError):
    def __init__(self, operator: str, kind: str = "operator"):
        super().__init__(f"Unknown {kind}: {operator}")
        self.operator = operator

class EvalDepthError(CvarRuntimeError):
    pass

# ---------- Variable store ----------

Value = Optional[float]

class Environment:
    """Flat name -> number store shared by every statement of a session."""

    def __init__(self) -> None:
        self.vars: Dict[str, float] = {}

    def get(self, name: str) -> float:
        if name in self.vars:
            return self.vars[name]

        raise UnboundVariable(name)

    def set(self, name: str, val: float) -> None:
        self.vars[name] = val
