from __future__ import annotations

from typing import Callable

from ..tree import Block, Node
from ..types import Environment, Value

EvalFunc = Callable[[Node, Environment], Value]

def eval_block(n: Block, env: Environment, eval_func: EvalFunc) -> Value:
    """Run statements in order, returning the last value (None when empty)."""
    result: Value = None

    for stmt in n.statements:
        result = eval_func(stmt, env)

    return result
