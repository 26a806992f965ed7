"""AST node model shared by both front ends and the evaluator.

Nodes are frozen dataclasses, one per syntactic form, each holding only the
fields that form needs. ``to_tree`` renders any node as a Lark ``Tree`` so dumps
can reuse Lark's ``pretty()``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union
from typing_extensions import TypeAlias

from lark import Token, Tree

from .utils import format_number


@dataclass(frozen=True)
class NumberLiteral:
    value: float


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class BinaryOp:
    operator: str
    left: 'Node'
    right: 'Node'


@dataclass(frozen=True)
class Comparison:
    operator: str
    left: 'Node'
    right: 'Node'


@dataclass(frozen=True)
class Assignment:
    target: str
    right: 'Node'


@dataclass(frozen=True)
class Block:
    statements: Tuple['Node', ...] = ()


@dataclass(frozen=True)
class IfElse:
    condition: 'Node'
    body: 'Node'
    else_body: Optional['Node'] = None


@dataclass(frozen=True)
class ForLoop:
    init: 'Node'
    condition: 'Node'
    update: 'Node'
    body: 'Node'


Node: TypeAlias = Union[
    NumberLiteral,
    Identifier,
    BinaryOp,
    Comparison,
    Assignment,
    Block,
    IfElse,
    ForLoop,
]


# Operators that share a precedence level print as one flat chain.
_LEVEL = {'+': 'add', '-': 'add', '*': 'mul', '/': 'mul'}


def _chain(node: Union[BinaryOp, Comparison], leaf: str) -> list:
    """Operands and operators of a left-leaning same-level run, in source order."""
    kind, level = type(node), _LEVEL.get(node.operator)
    links = []
    while type(node) is kind and _LEVEL.get(node.operator) == level:
        links.append(node)
        node = node.left

    parts = [to_tree(node)]
    for link in reversed(links):
        parts += [Token(leaf, link.operator), to_tree(link.right)]
    return parts


def to_tree(node: Node) -> Union[Tree, Token]:
    """Render a node as a Lark Tree (leaves become Tokens)."""
    match node:
        case NumberLiteral(value=value):
            return Token('NUMBER', format_number(value))
        case Identifier(name=name):
            return Token('IDENT', name)
        case BinaryOp():
            return Tree('binop', _chain(node, 'OPERATOR'))
        case Comparison():
            return Tree('compare', _chain(node, 'COMPARATOR'))
        case Assignment(target=target, right=right):
            return Tree('assign', [Token('IDENT', target), to_tree(right)])
        case Block(statements=statements):
            return Tree('block', [to_tree(stmt) for stmt in statements])
        case IfElse(condition=cond, body=body, else_body=else_body):
            kids = [to_tree(cond), to_tree(body)]
            if else_body is not None:
                kids.append(Tree('else', [to_tree(else_body)]))
            return Tree('ifelse', kids)
        case ForLoop(init=init, condition=cond, update=update, body=body):
            return Tree('forloop', [to_tree(init), to_tree(cond), to_tree(update), to_tree(body)])
        case _:
            raise TypeError(f"Not an AST node: {node!r}")


def pretty(node: Node) -> str:
    """Indented multi-line dump of a node."""
    rendered = to_tree(node)
    if isinstance(rendered, Token):
        return f"{rendered.type}\t{rendered.value}\n"
    return rendered.pretty()

