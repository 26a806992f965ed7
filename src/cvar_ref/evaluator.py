from __future__ import annotations

from typing import Callable, Optional

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
from .types import CvarRuntimeError, EvalDepthError, Environment, Value

from .eval.bind import eval_assign
from .eval.blocks import eval_block
from .eval.expr import eval_binop, eval_compare
from .eval.loops import eval_for_loop, eval_if_stmt

EvalFunc = Callable[[Node, Environment], Value]

# ---------------- Public API ----------------

def eval_expr(ast: Node, env: Optional[Environment]=None) -> Value:
    """Evaluate a parsed program against `env` (a fresh one when omitted).

    Bindings made before a failure stay in `env`; there is no rollback.
    """
    if env is None:
        env = Environment()

    try:
        return eval_node(ast, env)
    except RecursionError as exc:
        raise EvalDepthError("Program nests too deeply to evaluate") from exc

# ---------------- Core evaluator ----------------

def eval_node(n: Node, env: Environment) -> Value:
    handler = _NODE_DISPATCH.get(type(n))
    if handler is None:
        raise CvarRuntimeError(f"Unknown node type: {type(n).__name__}")

    return handler(n, env)

def _eval_number(n: NumberLiteral, env: Environment) -> Value:
    return n.value

def _eval_identifier(n: Identifier, env: Environment) -> Value:
    return env.get(n.name)

_NODE_DISPATCH: dict[type, Callable[[Node, Environment], Value]] = {
    NumberLiteral: _eval_number,
    Identifier: _eval_identifier,
    BinaryOp: lambda n, env: eval_binop(n, env, eval_node),
    Comparison: lambda n, env: eval_compare(n, env, eval_node),
    Assignment: lambda n, env: eval_assign(n, env, eval_node),
    Block: lambda n, env: eval_block(n, env, eval_node),
    IfElse: lambda n, env: eval_if_stmt(n, env, eval_node),
    ForLoop: lambda n, env: eval_for_loop(n, env, eval_node),
}
