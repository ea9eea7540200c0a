"""
AST for the Meta-Theory of Links notation.

The node kinds form a closed set. Every traversal in the code base
dispatches over NODE_TYPES with isinstance and raises TypeError on
anything else, so adding a kind means touching every traversal.

    Link(left, right)           a -> b
    NotLink(left, right)        a !-> b     (sugar for !(a -> b))
    Definition(name, form)      s : F
    Equality(left, right)       A = B
    Inequality(left, right)     A != B
    Male(operand)               ♂x
    Female(operand)             x♀
    Not(operand)                !x
    Power(base, exponent)       a^n
    Set(elements)               {A, B, C}
    Infinity()                  ∞
    Num(value)                  0 | 1
    Identifier(name)            x, foo, 42
    CharLit(char)               'c'
    Bracket(side)               [ | ]
    Statement(expr)             Expr .
    File(statements)

Nodes are immutable. Source locations never take part in equality.
"""

from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from .limits import Limits, default_limits


@dataclass(frozen=True)
class Position:
    line: int
    column: int
    offset: int


@dataclass(frozen=True)
class SourceLocation:
    start: Position
    end: Position

    def __str__(self):
        return f"{self.start.line}:{self.start.column}"


def merge_loc(first: Optional[SourceLocation],
              last: Optional[SourceLocation]) -> Optional[SourceLocation]:
    """Span from the start of first to the end of last."""
    if first is None or last is None:
        return None
    return SourceLocation(first.start, last.end)


def _loc():
    return field(default=None, compare=False, repr=False)


class Node:
    """Base class of every AST node kind."""

    @property
    def kind(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class Link(Node):
    left: Node
    right: Node
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class NotLink(Node):
    left: Node
    right: Node
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class Definition(Node):
    name: Node
    form: Node
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class Equality(Node):
    left: Node
    right: Node
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class Inequality(Node):
    left: Node
    right: Node
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class Male(Node):
    operand: Node
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class Female(Node):
    operand: Node
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class Not(Node):
    operand: Node
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class Power(Node):
    base: Node
    exponent: int
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class Set(Node):
    elements: tuple
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class Infinity(Node):
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class Num(Node):
    value: int
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class Identifier(Node):
    name: str
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class CharLit(Node):
    char: str
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class Bracket(Node):
    side: str  # "left" | "right"
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class Statement(Node):
    expr: Node
    loc: Optional[SourceLocation] = _loc()


@dataclass(frozen=True)
class File(Node):
    statements: tuple
    loc: Optional[SourceLocation] = _loc()


BINARY_TYPES = (Link, NotLink, Equality, Inequality)
UNARY_TYPES = (Male, Female, Not)
LEAF_TYPES = (Infinity, Num, Identifier, CharLit, Bracket)

NODE_TYPES = (
    Link, NotLink, Definition, Equality, Inequality,
    Male, Female, Not, Power, Set,
    Infinity, Num, Identifier, CharLit, Bracket,
    Statement, File,
)


def unknown_node(node) -> TypeError:
    return TypeError(f"unknown AST node kind: {type(node).__name__}")


def children(node: Node) -> tuple:
    """Direct sub-nodes, in source order."""
    if isinstance(node, BINARY_TYPES):
        return (node.left, node.right)
    if isinstance(node, Definition):
        return (node.name, node.form)
    if isinstance(node, UNARY_TYPES):
        return (node.operand,)
    if isinstance(node, Power):
        return (node.base,)
    if isinstance(node, Set):
        return node.elements
    if isinstance(node, Statement):
        return (node.expr,)
    if isinstance(node, File):
        return node.statements
    if isinstance(node, LEAF_TYPES):
        return ()
    raise unknown_node(node)


def map_children(node: Node, fn: Callable[[Node], Node]) -> Node:
    """Rebuild node with fn applied to each direct sub-node."""
    if isinstance(node, BINARY_TYPES):
        return replace(node, left=fn(node.left), right=fn(node.right))
    if isinstance(node, Definition):
        return replace(node, name=fn(node.name), form=fn(node.form))
    if isinstance(node, UNARY_TYPES):
        return replace(node, operand=fn(node.operand))
    if isinstance(node, Power):
        return replace(node, base=fn(node.base))
    if isinstance(node, Set):
        return replace(node, elements=tuple(fn(e) for e in node.elements))
    if isinstance(node, Statement):
        return replace(node, expr=fn(node.expr))
    if isinstance(node, File):
        return replace(node, statements=tuple(fn(s) for s in node.statements))
    if isinstance(node, LEAF_TYPES):
        return node
    raise unknown_node(node)


def node_count(node: Node) -> int:
    """Number of nodes in the tree. Iterative, safe on deep chains."""
    count = 0
    stack = [node]
    while stack:
        current = stack.pop()
        count += 1
        stack.extend(children(current))
    return count


def ast_to_string(node: Node, limits: Optional[Limits] = None) -> str:
    """Readable rendering for debugging and reports. Not canonical.

    Raises ResourceLimitError when the tree is deeper than limits.max_depth.
    """
    return _render(node, limits or default_limits(), 0)


def _render(node: Node, limits: Limits, depth: int) -> str:
    limits.check_depth(depth, "rendering")

    def sub(child):
        return _render(child, limits, depth + 1)

    if isinstance(node, Link):
        return f"({sub(node.left)} -> {sub(node.right)})"
    if isinstance(node, NotLink):
        return f"({sub(node.left)} !-> {sub(node.right)})"
    if isinstance(node, Definition):
        return f"{sub(node.name)} : {sub(node.form)}"
    if isinstance(node, Equality):
        return f"({sub(node.left)} = {sub(node.right)})"
    if isinstance(node, Inequality):
        return f"({sub(node.left)} != {sub(node.right)})"
    if isinstance(node, Male):
        return f"♂{sub(node.operand)}"
    if isinstance(node, Female):
        return f"{sub(node.operand)}♀"
    if isinstance(node, Not):
        return f"!{sub(node.operand)}"
    if isinstance(node, Power):
        return f"{sub(node.base)}^{node.exponent}"
    if isinstance(node, Set):
        return "{" + ", ".join([sub(e) for e in node.elements]) + "}"
    if isinstance(node, Infinity):
        return "∞"
    if isinstance(node, Num):
        return str(node.value)
    if isinstance(node, Identifier):
        return node.name
    if isinstance(node, CharLit):
        return f"'{node.char}'"
    if isinstance(node, Bracket):
        return "[" if node.side == "left" else "]"
    if isinstance(node, Statement):
        return f"{sub(node.expr)}."
    if isinstance(node, File):
        return "\n".join([_render(s, limits, depth) for s in node.statements])
    raise unknown_node(node)
