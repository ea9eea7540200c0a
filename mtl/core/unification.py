"""
Robinson unification over AST nodes, with occurs check.

Terms:
    Identifier with a single lowercase Latin letter -> variable:  x, v
    every other Identifier                          -> rigid constant:  ab, foo, X, 42
    Link / Male / Female / Not / Set / Equality /
    Inequality / Definition                         -> structure, unified child by child
    Infinity / Num / Bracket / CharLit              -> constants

Substitutions are plain dicts from variable name to node:
    {"x": Link(Identifier("a"), Identifier("b"))}

Sets are unified positionally: equal arity, no permutation search.
There is no backtracking; the first mismatch fails the whole unification.
"""

import re
from typing import Optional

from .limits import Limits, default_limits
from .nodes import (
    Node, Link, Definition, Equality, Inequality,
    Male, Female, Not, Set, Infinity, Num, Identifier, Bracket,
    NODE_TYPES, children, map_children, unknown_node,
)
from .normalizer import to_canonical_string


VARIABLE_NAME = re.compile(r"^[a-z]$")


def is_variable(term) -> bool:
    """Only a one-letter lowercase Latin identifier is a variable."""
    return isinstance(term, Identifier) and VARIABLE_NAME.match(term.name) is not None


def occurs_in(var: str, term: Node) -> bool:
    """Does variable var occur anywhere in term? Prevents infinite substitutions."""
    stack = [term]
    while stack:
        node = stack.pop()
        if isinstance(node, Identifier):
            if node.name == var:
                return True
        elif isinstance(node, NODE_TYPES):
            stack.extend(children(node))
        else:
            raise unknown_node(node)
    return False


def resolve_var(var: str, sub: dict) -> Optional[Node]:
    """Follow a chain of bindings from var to its final term, or None if unbound."""
    if var not in sub:
        return None
    return apply_substitution(sub, sub[var])


def apply_substitution(sub: dict, term: Node, limits: Optional[Limits] = None) -> Node:
    """Apply a substitution dict to a term. Follows chains."""
    if not sub:
        return term
    return _apply(sub, term, limits or default_limits(), 0)


def _apply(sub: dict, term: Node, limits: Limits, depth: int) -> Node:
    limits.check_depth(depth, "substitution")
    if isinstance(term, Identifier):
        if term.name in sub:
            return _apply(sub, sub[term.name], limits, depth + 1)
        return term
    return map_children(term, lambda child: _apply(sub, child, limits, depth + 1))


def unify(a: Node, b: Node, sub: Optional[dict] = None,
          limits: Optional[Limits] = None) -> Optional[dict]:
    """
    Unify two terms under substitution sub.

    Returns the updated substitution dict, or None if unification fails.
    sub itself is never modified.
    """
    if sub is None:
        sub = {}
    return _unify(a, b, sub, limits or default_limits(), 0)


def _unify(a: Node, b: Node, sub: dict, limits: Limits, depth: int) -> Optional[dict]:
    limits.check_depth(depth, "unification")

    a = apply_substitution(sub, a, limits)
    b = apply_substitution(sub, b, limits)

    if to_canonical_string(a, limits) == to_canonical_string(b, limits):
        return sub

    if is_variable(a):
        return _unify_var(a.name, b, sub, limits, depth)
    if is_variable(b):
        return _unify_var(b.name, a, sub, limits, depth)

    def pairwise(pairs, sub):
        for x, y in pairs:
            sub = _unify(x, y, sub, limits, depth + 1)
            if sub is None:
                return None
        return sub

    if isinstance(a, (Link, Equality, Inequality)) and type(a) is type(b):
        return pairwise([(a.left, b.left), (a.right, b.right)], sub)
    if isinstance(a, Definition) and isinstance(b, Definition):
        return pairwise([(a.name, b.name), (a.form, b.form)], sub)
    if isinstance(a, (Male, Female, Not)) and type(a) is type(b):
        return pairwise([(a.operand, b.operand)], sub)
    if isinstance(a, Set) and isinstance(b, Set):
        if len(a.elements) != len(b.elements):
            return None
        return pairwise(zip(a.elements, b.elements), sub)
    if isinstance(a, Infinity) and isinstance(b, Infinity):
        return sub
    if isinstance(a, Num) and isinstance(b, Num) and a.value == b.value:
        return sub
    if isinstance(a, Bracket) and isinstance(b, Bracket) and a.side == b.side:
        return sub

    # Rigid identifiers, distinct literals, mismatched kinds.
    if isinstance(a, NODE_TYPES):
        return None
    raise unknown_node(a)


def _unify_var(var: str, term: Node, sub: dict, limits: Limits, depth: int) -> Optional[dict]:
    if var in sub:
        return _unify(sub[var], term, sub, limits, depth + 1)
    if occurs_in(var, term):
        return None  # occurs check: x unify (x -> a) is unsound
    sub = dict(sub)
    sub[var] = term
    return sub
