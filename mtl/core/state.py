"""
Core data structures: ProofStep, VerificationHint, ProofResult, ProverState.

A ProverState is one checking session. Statements of one file are
verified against the same state strictly in textual order, so a
definition is visible to every statement after it. The state is not
synchronized: a host serving several sessions gives each its own.

ProofResult is what every verification returns, provable or not:
    success         was the statement established
    message         one-line summary
    proof_steps     numbered log of what the kernel did
    applied_axioms  AxiomInfo for every axiom used, in order
    hints           on failure, suggestions about what might help
    substitution    variable bindings, when unification decided it
"""

from dataclasses import dataclass, field
from typing import Optional

from .axioms import AxiomInfo
from .limits import Limits, default_limits
from .normalizer import to_canonical_string


HINT_TYPES = ("structural", "definition", "axiom", "suggestion")


@dataclass
class ProofStep:
    index: int
    action: str
    before: Optional[str] = None
    after: Optional[str] = None
    axiom: Optional[AxiomInfo] = None
    details: Optional[str] = None

    def to_dict(self):
        d = {"index": self.index, "action": self.action}
        for key in ("before", "after", "details"):
            value = getattr(self, key)
            if value is not None:
                d[key] = value
        if self.axiom is not None:
            d["axiom"] = self.axiom.to_dict()
        return d


@dataclass
class VerificationHint:
    type: str
    message: str
    related_axiom: Optional[str] = None

    def __post_init__(self):
        if self.type not in HINT_TYPES:
            raise ValueError(f"unknown hint type: {self.type!r}")

    def to_dict(self):
        d = {"type": self.type, "message": self.message}
        if self.related_axiom is not None:
            d["relatedAxiom"] = self.related_axiom
        return d


@dataclass
class ProofResult:
    success: bool
    message: str
    proof_steps: list = field(default_factory=list)
    applied_axioms: list = field(default_factory=list)
    hints: list = field(default_factory=list)
    substitution: Optional[dict] = None

    @property
    def axiom_ids(self) -> list:
        return [a.id for a in self.applied_axioms]

    def to_dict(self, limits: Optional[Limits] = None):
        d = {
            "success": self.success,
            "message": self.message,
            "proofSteps": [s.to_dict() for s in self.proof_steps],
            "appliedAxioms": [a.to_dict() for a in self.applied_axioms],
            "hints": [h.to_dict() for h in self.hints],
        }
        if self.substitution is not None:
            d["substitution"] = {var: to_canonical_string(term, limits)
                                 for var, term in self.substitution.items()}
        return d


@dataclass
class ProverState:
    """
    Mutable session state.

    definitions:       name -> form, seeded with the built-ins, extended by
                       every verified definition statement
    facts:             canonical strings of known equalities; kept for
                       reference, proof search does not consult them
    axioms:            extra axiom terms; likewise not consulted
    trace:             one line per checking stage, across all statements
    fixpoint_schemas:  retry the ∞/♂/♀ schemas to a fixpoint on failure
    limits:            ceilings for every traversal in this session
    """
    definitions: dict = field(default_factory=dict)
    facts: set = field(default_factory=set)
    axioms: list = field(default_factory=list)
    trace: list = field(default_factory=list)
    fixpoint_schemas: bool = False
    limits: Limits = field(default_factory=default_limits)
