"""
Console reporting of verification results.

A statement too deep to render is shown as TOO_DEEP; its result already
says why it failed.
"""

import json
from typing import Optional

from .core.errors import ResourceLimitError
from .core.limits import Limits
from .core.normalizer import to_canonical_string
from .core.nodes import ast_to_string
from .core.state import ProofResult, ProverState

TOO_DEEP = "<expression too deep to display>"


def _display(statement, limits: Optional[Limits]) -> str:
    try:
        return ast_to_string(statement, limits)
    except ResourceLimitError:
        return TOO_DEEP


def _canonical(statement, limits: Optional[Limits]) -> str:
    try:
        return to_canonical_string(statement, limits)
    except ResourceLimitError:
        return TOO_DEEP


def print_result(statement, result: ProofResult, index: Optional[int] = None,
                 limits: Optional[Limits] = None):
    """Print one statement, its outcome, its proof steps and any hints."""
    mark = "✓" if result.success else "✗"
    prefix = f"{index}. " if index is not None else ""
    print(f"{mark} {prefix}{_display(statement, limits)}")
    print(f"    {result.message}")
    for step in result.proof_steps:
        axiom = f" [{step.axiom.id}]" if step.axiom else ""
        print(f"    {step.index}) {step.action}{axiom}")
        if step.before is not None and step.after is not None:
            print(f"       {step.before}  =>  {step.after}")
        if step.details:
            print(f"       {step.details}")
    for hint in result.hints:
        axiom = f" ({hint.related_axiom})" if hint.related_axiom else ""
        print(f"    hint [{hint.type}]{axiom}: {hint.message}")


def print_results(results: list, quiet: bool = False, limits: Optional[Limits] = None):
    """Print every (statement, result) pair and a summary line."""
    print(f"\n{'='*60}")
    for i, (statement, result) in enumerate(results, 1):
        if quiet:
            mark = "✓" if result.success else "✗"
            print(f"{mark} {i}. {_display(statement, limits)}")
        else:
            print_result(statement, result, i, limits)
    passed = sum(1 for _, r in results if r.success)
    print(f"{'='*60}")
    print(f"{passed}/{len(results)} statements verified")


def print_trace(state: ProverState):
    """Print the session trace."""
    print(f"\n{'='*60}")
    print("Trace:")
    print(f"{'='*60}")
    for line in state.trace:
        print(f"  {line}")


def results_to_json(results: list, limits: Optional[Limits] = None) -> str:
    return json.dumps(
        [{"statement": _canonical(stmt, limits), **result.to_dict(limits)}
         for stmt, result in results],
        ensure_ascii=False, indent=2,
    )
