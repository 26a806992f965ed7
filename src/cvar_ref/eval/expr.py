from __future__ import annotations

import math
from typing import Callable, List, Union

from ..tree import BinaryOp, Comparison, Node
from ..types import Environment, UnknownOperator, Value

EvalFunc = Callable[[Node, Environment], Value]

def eval_binop(n: BinaryOp, env: Environment, eval_func: EvalFunc) -> float:
    return _eval_chain(n, env, eval_func)

def eval_compare(n: Comparison, env: Environment, eval_func: EvalFunc) -> float:
    return _eval_chain(n, env, eval_func)

def _eval_chain(n: Union[BinaryOp, Comparison], env: Environment, eval_func: EvalFunc) -> float:
    """Fold a left-leaning run of operators from the innermost operand out.

    `a + b - c < d` nests to the left, one node per operator. Walking that
    spine in a loop keeps long flat chains off the Python stack.
    """
    links: List[Union[BinaryOp, Comparison]] = []
    node: Node = n
    while isinstance(node, (BinaryOp, Comparison)):
        links.append(node)
        node = node.left

    acc = eval_func(node, env)
    for link in reversed(links):
        rhs = eval_func(link.right, env)
        if isinstance(link, Comparison):
            acc = 1.0 if compare_values(link.operator, acc, rhs) else 0.0
        else:
            acc = apply_binary_operator(link.operator, acc, rhs)

    return acc

def apply_binary_operator(op: str, lhs: float, rhs: float) -> float:
    match op:
        case '+':
            return lhs + rhs
        case '-':
            return lhs - rhs
        case '*':
            return lhs * rhs
        case '/':
            return divide(lhs, rhs)
    raise UnknownOperator(op)

def compare_values(op: str, lhs: float, rhs: float) -> bool:
    match op:
        case '<':
            return lhs < rhs
        case '>':
            return lhs > rhs
    raise UnknownOperator(op, kind="comparator")

def divide(lhs: float, rhs: float) -> float:
    """IEEE-754 division: x/0 is a signed infinity, 0/0 is NaN."""
    try:
        return lhs / rhs
    except ZeroDivisionError:
        if lhs == 0 or math.isnan(lhs):
            return math.nan
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)
