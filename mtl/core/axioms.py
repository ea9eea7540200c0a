"""
The axiom catalog A0..A11 and the built-in definitions a fresh session starts with.

AXIOMS is static reference data for reports and documentation. The
built-in definitions and facts are AST literals built once at import;
nodes are immutable, so every session can share them.
"""

from dataclasses import dataclass, asdict

from .nodes import Link, Male, Female, Not, Infinity, Num, Equality
from .normalizer import to_canonical_string


@dataclass(frozen=True)
class AxiomInfo:
    id: str
    name: str
    formula: str
    description: str

    def to_dict(self):
        return asdict(self)


AXIOMS = {
    "A0": AxiomInfo("A0", "Definition", "(s : F) → (s = F)",
                    "A sign is a request by form: a defined name equals its form"),
    "A1": AxiomInfo("A1", "Identity", "x = x",
                    "Reflexivity, symmetry, transitivity"),
    "A2": AxiomInfo("A2", "Congruence", "{(a = c), (b = d)} → ((a → b) = (c → d))",
                    "Structural transparency of links"),
    "A3": AxiomInfo("A3", "Link", "be : (b → e)",
                    "The basic constructor"),
    "A4": AxiomInfo("A4", "Meaning (akoren)", "∞ : (∞ → ∞)",
                    "Complete self-closure"),
    "A5": AxiomInfo("A5", "Self-closure of the beginning", "♂x : (♂x → x)",
                    "The beginning is closed onto the link"),
    "A6": AxiomInfo("A6", "Self-closure of the end", "x♀ : (x → x♀)",
                    "The end is closed onto the link"),
    "A7": AxiomInfo("A7", "Inversion",
                    "!(a → b) = (b → a), !(♂x) = x♀, !(x♀) = ♂x, !∞ = ∞, !!x = x",
                    "Duality"),
    "A8": AxiomInfo("A8", "Unit of meaning", "1 : (♂∞ → ∞♀)",
                    "Directed link"),
    "A9": AxiomInfo("A9", "Zero of meaning", "0 : !1",
                    "Inversion of the unit"),
    "A10": AxiomInfo("A10", "Abits", "'[' : ♂∞, ']' : ∞♀, '1' : 1, '0' : 0",
                     "Quaternary system"),
    "A11": AxiomInfo("A11", "Left associativity", "(a → b → c) = ((a → b) → c)",
                     "Grouping order, built into the parser"),
}


def get_axiom(axiom_id: str) -> AxiomInfo:
    return AXIOMS[axiom_id]


INFINITY_LINK = Link(Infinity(), Infinity())

# Keyed by the symbol each one defines. Only identifiers are looked up
# during expansion, so these document the axioms rather than rewrite terms.
BUILTIN_DEFINITIONS = {
    "∞": INFINITY_LINK,                               # A4
    "1": Link(Male(Infinity()), Female(Infinity())),  # A8
    "0": Not(Num(1)),                                 # A9
    "[": Male(Infinity()),                            # A10
    "]": Female(Infinity()),                          # A10
}

BUILTIN_FACTS = frozenset({
    "(x=x)",                                                  # A1
    to_canonical_string(Equality(Not(Infinity()), Infinity())),  # A7: !∞ = ∞
})
