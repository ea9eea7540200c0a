"""
Normalization: desugaring, rewriting to canonical form, well-formedness.

Children are normalized first, then node-local rules fire, so a stack
of prefixes collapses in a single traversal:

    a !-> b   ->  !(a -> b)
    a^1       ->  a
    a^n       ->  (a^(n-1) -> a)            left-associative chain
    !!x       ->  x
    !(♂x)     ->  x♀
    !(x♀)     ->  ♂x

A definition whose name is a plain identifier may only mention that
name under a link (guarded recursion):  inf : (inf -> inf)  is fine,
x : x  and  x : ♂x  are not.

to_canonical_string gives every term a unique signature; two terms are
structurally equal iff their signatures are.
"""

from dataclasses import dataclass
from typing import Optional

from .errors import NormalizationError
from .limits import Limits, default_limits
from .nodes import (
    Node, Link, NotLink, Definition, Equality, Inequality,
    Male, Female, Not, Power, Set, Infinity, Num, Identifier,
    CharLit, Bracket, Statement, File, LEAF_TYPES,
    map_children, node_count, merge_loc, unknown_node,
)


@dataclass(frozen=True)
class NormalizerOptions:
    desugar_not_link: bool = True
    expand_power: bool = True
    canonicalize: bool = True
    check_guarded_recursion: bool = True


DEFAULT_OPTIONS = NormalizerOptions()


def normalize(node: Node, options: Optional[NormalizerOptions] = None,
              limits: Optional[Limits] = None) -> Node:
    """Return the normalized copy of node. The input tree is not modified."""
    return _normalize(node, options or DEFAULT_OPTIONS, limits or default_limits(), 0)


def normalize_file(file: File, options: Optional[NormalizerOptions] = None,
                   limits: Optional[Limits] = None) -> File:
    return normalize(file, options, limits)


def _normalize(node: Node, opts: NormalizerOptions, limits: Limits, depth: int) -> Node:
    limits.check_depth(depth, "normalization")

    def recurse(child):
        return _normalize(child, opts, limits, depth + 1)

    if isinstance(node, NotLink):
        if opts.desugar_not_link:
            link = Link(recurse(node.left), recurse(node.right), loc=node.loc)
            result = Not(link, loc=node.loc)
        else:
            result = map_children(node, recurse)
    elif isinstance(node, Power):
        base = recurse(node.base)
        if opts.expand_power:
            result = expand_power(base, node.exponent, limits, node)
        else:
            result = Power(base, node.exponent, loc=node.loc)
    elif isinstance(node, Definition):
        result = map_children(node, recurse)
        if opts.check_guarded_recursion:
            check_guarded_recursion(result, limits)
    elif isinstance(node, (Link, Equality, Inequality, Male, Female, Not,
                           Set, Statement, File)):
        result = map_children(node, recurse)
    elif isinstance(node, LEAF_TYPES):
        result = node
    else:
        raise unknown_node(node)

    if opts.canonicalize:
        result = canonicalize(result)
    return result


def expand_power(base: Node, exponent: int, limits: Optional[Limits] = None,
                 origin: Optional[Node] = None) -> Node:
    """a^n as the left-associative chain ((a -> a) -> a) ... -> a."""
    if exponent < 1:
        raise NormalizationError("Power exponent must be >= 1", origin or base)
    limits = limits or default_limits()
    limits.check_nodes(exponent * node_count(base) + exponent - 1, "power expansion")
    limits.check_depth(exponent, "power expansion")

    result = base
    for _ in range(exponent - 1):
        result = Link(result, base, loc=merge_loc(result.loc, base.loc))
    return result


def canonicalize(node: Node) -> Node:
    """Apply the inversion rules at the root of node."""
    if not isinstance(node, Not):
        return node
    operand = node.operand
    if isinstance(operand, Not):
        return operand.operand
    if isinstance(operand, Male):
        return Female(operand.operand, loc=node.loc)
    if isinstance(operand, Female):
        return Male(operand.operand, loc=node.loc)
    return node


def check_guarded_recursion(definition: Definition, limits: Optional[Limits] = None):
    if not isinstance(definition.name, Identifier):
        return
    name = definition.name.name
    if occurs_unguarded(definition.form, name, False, limits or default_limits(), 0):
        raise NormalizationError(
            f"Unguarded recursion: '{name}' appears in its definition "
            f"outside of the '->' constructor",
            definition,
        )


def occurs_unguarded(node: Node, name: str, guarded: bool,
                     limits: Limits, depth: int) -> bool:
    """Does identifier name occur in node somewhere not under a link?"""
    limits.check_depth(depth, "recursion check")
    depth += 1

    if isinstance(node, Identifier):
        return node.name == name and not guarded
    if isinstance(node, (Link, NotLink)):
        return (occurs_unguarded(node.left, name, True, limits, depth)
                or occurs_unguarded(node.right, name, True, limits, depth))
    if isinstance(node, (Male, Female, Not)):
        return occurs_unguarded(node.operand, name, guarded, limits, depth)
    if isinstance(node, Power):
        return occurs_unguarded(node.base, name, guarded, limits, depth)
    if isinstance(node, Set):
        return any(occurs_unguarded(e, name, guarded, limits, depth)
                   for e in node.elements)
    if isinstance(node, Definition):
        return (occurs_unguarded(node.name, name, guarded, limits, depth)
                or occurs_unguarded(node.form, name, guarded, limits, depth))
    if isinstance(node, (Equality, Inequality)):
        return (occurs_unguarded(node.left, name, guarded, limits, depth)
                or occurs_unguarded(node.right, name, guarded, limits, depth))
    if isinstance(node, Statement):
        return occurs_unguarded(node.expr, name, guarded, limits, depth)
    if isinstance(node, File):
        return any(occurs_unguarded(s, name, guarded, limits, depth)
                   for s in node.statements)
    if isinstance(node, (Infinity, Num, CharLit, Bracket)):
        return False
    raise unknown_node(node)


def to_canonical_string(node: Node, limits: Optional[Limits] = None) -> str:
    return _canonical(node, limits or default_limits(), 0)


def _canonical(node: Node, limits: Limits, depth: int) -> str:
    limits.check_depth(depth, "canonical form")
    depth += 1

    def c(child):
        return _canonical(child, limits, depth)

    if isinstance(node, Link):
        return f"({c(node.left)}->{c(node.right)})"
    if isinstance(node, NotLink):
        return f"({c(node.left)}!->{c(node.right)})"
    if isinstance(node, Definition):
        return f"({c(node.name)}:{c(node.form)})"
    if isinstance(node, Equality):
        return f"({c(node.left)}={c(node.right)})"
    if isinstance(node, Inequality):
        return f"({c(node.left)}!={c(node.right)})"
    if isinstance(node, Male):
        return f"♂{c(node.operand)}"
    if isinstance(node, Female):
        return f"{c(node.operand)}♀"
    if isinstance(node, Not):
        return f"!{c(node.operand)}"
    if isinstance(node, Power):
        return f"{c(node.base)}^{node.exponent}"
    if isinstance(node, Set):
        return "{" + ",".join(sorted(c(e) for e in node.elements)) + "}"
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
        return f"{c(node.expr)}."
    if isinstance(node, File):
        return "\n".join(c(s) for s in node.statements)
    raise unknown_node(node)


def ast_equal(a: Node, b: Node, limits: Optional[Limits] = None) -> bool:
    return to_canonical_string(a, limits) == to_canonical_string(b, limits)
