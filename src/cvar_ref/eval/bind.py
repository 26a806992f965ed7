from __future__ import annotations

from typing import Callable

from ..tree import Assignment, Node
from ..types import Environment, Value

EvalFunc = Callable[[Node, Environment], Value]

def eval_assign(n: Assignment, env: Environment, eval_func: EvalFunc) -> Value:
    """Bind the right-hand value to the target and yield it, so `ca = cb = 1` chains."""
    value = eval_func(n.right, env)
    env.set(n.target, value)
    return value
