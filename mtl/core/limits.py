"""
Resource ceilings for the recursive traversals.

Normalization, unification, substitution, definition expansion and the
debug printer all recurse proportionally to term size. Each of them takes
a Limits and raises ResourceLimitError instead of running into Python's
own recursion limit.

Environment variables:
    MTL_MAX_DEPTH     deepest term a traversal will descend into
    MTL_MAX_NODES     largest term expansion may build
    MTL_MAX_NESTING   deepest ( ... ) / { ... } nesting the parser accepts
"""

import os
from dataclasses import dataclass
from functools import lru_cache

from .errors import ResourceLimitError


@dataclass(frozen=True)
class Limits:
    # One traversal level costs up to three interpreter frames and the
    # parser five per parenthesis; both stay well under the default
    # recursion limit of 1000.
    max_depth: int = 200
    max_nodes: int = 100_000
    max_nesting: int = 100

    @classmethod
    def from_env(cls) -> "Limits":
        defaults = cls()
        return cls(
            max_depth=int(os.getenv("MTL_MAX_DEPTH", defaults.max_depth)),
            max_nodes=int(os.getenv("MTL_MAX_NODES", defaults.max_nodes)),
            max_nesting=int(os.getenv("MTL_MAX_NESTING", defaults.max_nesting)),
        )

    def check_depth(self, depth: int, what: str = "term"):
        if depth > self.max_depth:
            raise ResourceLimitError(
                f"{what} nesting exceeds max_depth={self.max_depth}", "max_depth")

    def check_nodes(self, count: int, what: str = "term"):
        if count > self.max_nodes:
            raise ResourceLimitError(
                f"{what} size {count} exceeds max_nodes={self.max_nodes}", "max_nodes")

    def check_nesting(self, nesting: int):
        if nesting > self.max_nesting:
            raise ResourceLimitError(
                f"bracket nesting exceeds max_nesting={self.max_nesting}", "max_nesting")


@lru_cache(maxsize=1)
def default_limits() -> Limits:
    """Limits from the environment, read once."""
    return Limits.from_env()
