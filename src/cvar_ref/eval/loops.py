from __future__ import annotations

from typing import Callable

from ..tree import ForLoop, IfElse, Node
from ..types import Environment, Value
from .helpers import is_truthy as _is_truthy

EvalFunc = Callable[[Node, Environment], Value]

def eval_if_stmt(n: IfElse, env: Environment, eval_func: EvalFunc) -> Value:
    if _is_truthy(eval_func(n.condition, env)):
        return eval_func(n.body, env)

    if n.else_body is not None:
        return eval_func(n.else_body, env)
    return None

def eval_for_loop(n: ForLoop, env: Environment, eval_func: EvalFunc) -> Value:
    """C-style loop with no iteration cap; the loop itself has no value."""
    eval_func(n.init, env)

    while _is_truthy(eval_func(n.condition, env)):
        eval_func(n.body, env)
        eval_func(n.update, env)

    return None
