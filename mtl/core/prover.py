"""
The prover kernel.

An equality is decided by a fixed, ordered procedure; each stage is
logged as a ProofStep:

    1. normalize both sides
    2. canonical forms equal                        -> A1
    3. expand definitions, compare again            -> A0 (+ A1)
    4. unify the expanded sides                     -> A1, with substitution
    5. one-shot schema match, both orientations:
           ♂x = (♂x -> x)                           -> A5
           x♀ = (x -> x♀)                           -> A6
           ∞  = (∞ -> ∞)                            -> A4
    6. otherwise fail, with hints

The schemas in step 5 are matched once, against the whole expanded side,
so  ∞ = ∞ -> ∞ -> ∞  is not derivable even though repeated A4 gives it.
Sessions created with fixpoint_schemas=True additionally fold the
schemas into both sides until nothing changes before giving up.

An inequality holds iff the equality cannot be proven.
"""

import logging
from typing import Optional

from .axioms import AXIOMS, BUILTIN_DEFINITIONS, BUILTIN_FACTS, INFINITY_LINK
from .errors import NormalizationError, ResourceLimitError
from .limits import Limits, default_limits
from .nodes import (
    Node, Link, Definition, Equality, Inequality, Male, Female,
    Infinity, Identifier, Statement, map_children, node_count,
)
from .normalizer import normalize, to_canonical_string
from .parser import parse
from .state import ProofResult, ProofStep, ProverState, VerificationHint
from .unification import unify

logger = logging.getLogger(__name__)


def create_prover_state(fixpoint_schemas: bool = False,
                        limits: Optional[Limits] = None) -> ProverState:
    """A fresh session seeded with the built-in definitions and facts."""
    return ProverState(
        definitions=dict(BUILTIN_DEFINITIONS),
        facts=set(BUILTIN_FACTS),
        fixpoint_schemas=fixpoint_schemas,
        limits=limits or default_limits(),
    )


# ── Definition expansion ────────────────────────────────────────────────────

def expand_definitions(node: Node, state: ProverState) -> Node:
    """
    Replace every identifier that names a definition by its expanded form.

    A name is not unfolded again inside its own expansion, so guarded
    recursive definitions such as  inf : inf -> inf  unfold exactly once.
    """
    return _expand(node, state, frozenset(), 0, [0])


def _expand(node: Node, state: ProverState, expanding: frozenset,
            depth: int, built: list) -> Node:
    state.limits.check_depth(depth, "definition expansion")

    if isinstance(node, Identifier):
        form = state.definitions.get(node.name)
        if form is None or node.name in expanding:
            return node
        built[0] += node_count(form)
        state.limits.check_nodes(built[0], "definition expansion")
        return _expand(form, state, expanding | {node.name}, depth + 1, built)
    if isinstance(node, Definition):
        return node
    return map_children(node, lambda child: _expand(child, state, expanding, depth + 1, built))


# ── Axiom schemas ───────────────────────────────────────────────────────────

def schema_instance(axiom_id: str, node: Node) -> Optional[Node]:
    """The right-hand side of schema axiom_id instantiated at node, if it applies."""
    if axiom_id == "A5" and isinstance(node, Male):
        return Link(node, node.operand)
    if axiom_id == "A6" and isinstance(node, Female):
        return Link(node.operand, node)
    if axiom_id == "A4" and isinstance(node, Infinity):
        return INFINITY_LINK
    return None


SCHEMA_ORDER = ("A5", "A6", "A4")

SCHEMA_DETAILS = {
    "A5": "♂x unfolds to (♂x → x)",
    "A6": "x♀ unfolds to (x → x♀)",
    "A4": "∞ (akoren) unfolds to (∞ → ∞)",
}


def fold_schemas(node: Node, used: list, limits: Optional[Limits] = None,
                 _depth: int = 0) -> Node:
    """Fold (∞->∞) into ∞, (♂x->x) into ♂x and (x->x♀) into x♀, bottom-up."""
    limits = limits or default_limits()
    limits.check_depth(_depth, "schema folding")
    node = map_children(node, lambda child: fold_schemas(child, used, limits, _depth + 1))
    if not isinstance(node, Link):
        return node

    left, right = node.left, node.right
    if isinstance(left, Infinity) and isinstance(right, Infinity):
        used.append("A4")
        return Infinity(loc=node.loc)
    if isinstance(left, Male) and _same(left.operand, right, limits):
        used.append("A5")
        return left
    if isinstance(right, Female) and _same(left, right.operand, limits):
        used.append("A6")
        return right
    return node


def _same(a: Node, b: Node, limits: Limits) -> bool:
    return to_canonical_string(a, limits) == to_canonical_string(b, limits)


def _fold_to_fixpoint(node: Node, used: list, limits: Limits) -> Node:
    current = to_canonical_string(node, limits)
    while True:
        node = fold_schemas(node, used, limits)
        folded = to_canonical_string(node, limits)
        if folded == current:
            return node
        current = folded


# ── Hints ───────────────────────────────────────────────────────────────────

def generate_equality_hints(left: Node, right: Node,
                            exp_left: Node, exp_right: Node) -> list:
    """Every hint that applies, in a fixed order; never empty."""
    hints = []

    if type(left) is not type(right):
        hints.append(VerificationHint(
            "structural", f"Different expression kinds: {left.kind} ≠ {right.kind}"))

    if ((isinstance(exp_left, Male) and isinstance(exp_right, Female))
            or (isinstance(exp_left, Female) and isinstance(exp_right, Male))):
        hints.append(VerificationHint(
            "suggestion", "♂ and ♀ are dual under inversion but not interchangeable", "A7"))

    if isinstance(exp_left, Male) or isinstance(exp_right, Male):
        hints.append(VerificationHint(
            "axiom", "Try axiom A5: ♂x = (♂x → x)", "A5"))

    if isinstance(exp_left, Female) or isinstance(exp_right, Female):
        hints.append(VerificationHint(
            "axiom", "Try axiom A6: x♀ = (x → x♀)", "A6"))

    if isinstance(exp_left, Infinity) or isinstance(exp_right, Infinity):
        hints.append(VerificationHint(
            "axiom", "Try axiom A4: ∞ = (∞ → ∞)", "A4"))

    if isinstance(exp_left, Link) and isinstance(exp_right, Link):
        hints.append(VerificationHint(
            "suggestion", "Compare the link structure: both sides must match branch by branch"))

    if not hints:
        hints.append(VerificationHint(
            "suggestion", "The expressions have different structure and cannot be unified"))

    return hints


# ── Equality and inequality ─────────────────────────────────────────────────

class _ProofLog:
    """Accumulates numbered steps and the axioms they used."""

    def __init__(self):
        self.steps = []
        self.axioms = []

    def add(self, action: str, axiom_id: Optional[str] = None, **kwargs) -> ProofStep:
        axiom = AXIOMS[axiom_id] if axiom_id else None
        step = ProofStep(index=len(self.steps) + 1, action=action, axiom=axiom, **kwargs)
        self.steps.append(step)
        if axiom is not None:
            self.axioms.append(axiom)
        return step

    def result(self, success: bool, message: str, **kwargs) -> ProofResult:
        return ProofResult(success, message, proof_steps=self.steps,
                           applied_axioms=self.axioms, **kwargs)


def check_equality(left: Node, right: Node, state: ProverState) -> ProofResult:
    """Try to prove left = right. Never raises for an unprovable equality."""
    limits = state.limits

    def canon(node):
        return to_canonical_string(node, limits)

    log = _ProofLog()
    norm_left = normalize(left, limits=limits)
    norm_right = normalize(right, limits=limits)
    left_str, right_str = canon(norm_left), canon(norm_right)

    log.add("Normalize expressions",
            before=f"{canon(left)} = {canon(right)}",
            after=f"{left_str} = {right_str}",
            details="Rules applied: !!x→x, !(♂x)→x♀, !(x♀)→♂x")
    state.trace.append(f"Checking: {left_str} = {right_str}")

    if left_str == right_str:
        log.add("Structural comparison", "A1",
                details="Expressions are identical after normalization")
        return log.result(True, "Structural equality (A1: identity)")

    exp_left = expand_definitions(norm_left, state)
    exp_right = expand_definitions(norm_right, state)
    exp_left_str, exp_right_str = canon(exp_left), canon(exp_right)

    if exp_left_str != left_str or exp_right_str != right_str:
        log.add("Expand definitions", "A0",
                before=f"{left_str} = {right_str}",
                after=f"{exp_left_str} = {exp_right_str}",
                details="Axiom A0: defined names are replaced by their forms")
    state.trace.append(f"After expansion: {exp_left_str} = {exp_right_str}")

    if exp_left_str == exp_right_str:
        log.add("Structural comparison after expansion", "A1",
                details="Expressions are identical after expanding definitions")
        return log.result(True, "Equal after expanding definitions (A0, A1)")

    sub = unify(exp_left, exp_right, limits=limits)
    if sub is not None:
        bindings = ", ".join(f"{var} ↦ {canon(term)}" for var, term in sub.items())
        log.add("Unification", "A1",
                details=f"Substitution: {{{bindings}}}" if bindings else "Direct unification")
        return log.result(True, "Unification succeeded (A1: identity)", substitution=sub)

    for axiom_id in SCHEMA_ORDER:
        for side, other, reverse in ((exp_left, exp_right, False),
                                     (exp_right, exp_left, True)):
            instance = schema_instance(axiom_id, side)
            if instance is None or canon(instance) != canon(other):
                continue
            logger.debug("schema %s matched %s", axiom_id, canon(side))
            suffix = " (reversed)" if reverse else ""
            log.add(f"Apply axiom {axiom_id}{suffix}", axiom_id,
                    before=canon(side), after=canon(instance),
                    details=SCHEMA_DETAILS[axiom_id])
            return log.result(True, f"Applied axiom {axiom_id}: {AXIOMS[axiom_id].formula}{suffix}")

    if state.fixpoint_schemas:
        used = []
        fold_left = _fold_to_fixpoint(exp_left, used, limits)
        fold_right = _fold_to_fixpoint(exp_right, used, limits)
        if canon(fold_left) == canon(fold_right):
            logger.debug("fixpoint folding closed %s = %s", exp_left_str, exp_right_str)
            for axiom_id in dict.fromkeys(used):
                log.add(f"Fold axiom {axiom_id} to a fixpoint", axiom_id,
                        before=f"{exp_left_str} = {exp_right_str}",
                        after=f"{canon(fold_left)} = {canon(fold_right)}",
                        details=SCHEMA_DETAILS[axiom_id])
            return log.result(True, "Equal after repeated schema folding")

    hints = generate_equality_hints(norm_left, norm_right, exp_left, exp_right)
    log.add("Verification failed",
            details="No sequence of axioms proves the equality")
    return log.result(False, "Cannot prove equality", hints=hints)


def check_inequality(left: Node, right: Node, state: ProverState) -> ProofResult:
    """left != right holds exactly when left = right cannot be proven."""
    eq = check_equality(left, right, state)
    attempt = ProofStep(1, "Attempt to prove equality",
                        details=f"Checking: {to_canonical_string(left, state.limits)}"
                                f" = {to_canonical_string(right, state.limits)}")

    if not eq.success:
        steps = [
            attempt,
            ProofStep(2, "Equality not proven",
                      details="No sequence of axioms proves the equality"),
            ProofStep(3, "Inequality holds",
                      details="An equality that cannot be proven makes the inequality true"),
        ]
        return ProofResult(True, "Inequality holds (equality cannot be proven)",
                           proof_steps=steps)

    steps = [attempt]
    for step in eq.proof_steps:
        steps.append(ProofStep(len(steps) + 1, step.action, step.before,
                               step.after, step.axiom, step.details))
    steps.append(ProofStep(len(steps) + 1, "Inequality does not hold",
                           details=f"The equality was proven: {eq.message}"))
    return ProofResult(
        False, "Inequality does not hold (equality can be proven)",
        proof_steps=steps,
        applied_axioms=list(eq.applied_axioms),
        hints=[VerificationHint("suggestion", "The expressions are equal, so the inequality fails")],
        substitution=eq.substitution,
    )


# ── Statements ──────────────────────────────────────────────────────────────

def verify(node: Node, state: ProverState) -> ProofResult:
    """
    Verify one statement against the session state.

    Equalities and inequalities are checked; definitions with an
    identifier name are registered in state.definitions. Anything else
    fails with a hint. Raises NormalizationError for malformed input.
    """
    if isinstance(node, Statement):
        node = node.expr
    normalized = normalize(node, limits=state.limits)

    if isinstance(normalized, Equality):
        return check_equality(normalized.left, normalized.right, state)

    if isinstance(normalized, Inequality):
        return check_inequality(normalized.left, normalized.right, state)

    if isinstance(normalized, Definition):
        if isinstance(normalized.name, Identifier):
            name = normalized.name.name
            form = to_canonical_string(normalized.form, state.limits)
            state.definitions[name] = normalized.form
            logger.debug("registered definition %s : %s", name, form)
            log = _ProofLog()
            log.add("Register definition", "A0", details=f"{name} : {form}")
            return log.result(True, f"Added definition: {name}")
        return ProofResult(
            False, "Definition name must be an identifier",
            hints=[VerificationHint("structural", "Definition name must be an identifier")])

    return ProofResult(
        False, f"Cannot verify expression of kind: {normalized.kind}",
        hints=[VerificationHint(
            "suggestion",
            "Supported statements: equality (=), inequality (!=), definition (:)")])


def verify_all(text: str, state: Optional[ProverState] = None,
               verbose: bool = False) -> tuple:
    """
    Parse text and verify its statements in order against one state.

    Returns (results, state) where results is a list of
    (Statement, ProofResult). Lexer and parse errors propagate; a
    statement that fails to normalize becomes a failed result and the
    remaining statements still run.
    """
    if state is None:
        state = create_prover_state()
    file = parse(text, state.limits)
    return verify_statements(file.statements, state, verbose), state


def verify_statements(statements, state: ProverState, verbose: bool = False) -> list:
    """Verify already parsed statements in order; see verify_all."""
    results = []
    for i, stmt in enumerate(statements, 1):
        try:
            result = verify(stmt, state)
        except (NormalizationError, ResourceLimitError) as err:
            logger.debug("statement %d rejected: %s", i, err)
            result = ProofResult(False, str(err),
                                 hints=[VerificationHint("structural", str(err))])
        results.append((stmt, result))
        if verbose:
            mark = "ok" if result.success else "FAIL"
            try:
                shown = to_canonical_string(stmt.expr, state.limits)
            except ResourceLimitError:
                shown = "<expression too deep to display>"
            print(f"  [{mark}] {i}. {shown}  -- {result.message}")
    return results
