"""
Property-based and unit tests for unification over AST nodes.

The core claims:
    - Variables:     exactly one lowercase Latin letter; everything else is rigid
    - Symmetry:      unify(A,B) succeeds iff unify(B,A) succeeds
    - Correctness:   if unify(A,B)=σ then apply(σ,A) == apply(σ,B)
    - Occurs check:  unify(x, x -> a) always fails
    - Idempotence:   a term unifies with itself under the empty substitution
    - Sets unify positionally, without permutation search
"""

import pytest
from hypothesis import given, assume
from hypothesis import strategies as st

from mtl.core.errors import ResourceLimitError
from mtl.core.limits import Limits
from mtl.core.nodes import (
    Link, Equality, Male, Female, Not, Set, Infinity, Num, Identifier, Bracket,
)
from mtl.core.normalizer import to_canonical_string
from mtl.core.parser import parse_expr
from mtl.core.unification import (
    is_variable, occurs_in, resolve_var, apply_substitution, unify,
)


def canon(node):
    return to_canonical_string(node)


x, y, z = Identifier("x"), Identifier("y"), Identifier("z")
a, b = Identifier("foo"), Identifier("bar")


# ── Generators ──────────────────────────────────────────────────────────────

# Rigid constants: multi-letter names, capitals, digits-only names
constants = st.one_of(
    st.from_regex(r"[a-z]{2,4}", fullmatch=True),
    st.sampled_from(["X", "Foo", "42", "связь"]),
).map(Identifier)

variables = st.sampled_from("xyzuv").map(Identifier)

atoms = st.one_of(
    constants,
    st.just(Infinity()),
    st.sampled_from([0, 1]).map(Num),
    st.sampled_from(["left", "right"]).map(Bracket),
)


@st.composite
def ground_terms(draw, max_depth=3):
    if max_depth == 0:
        return draw(atoms)
    choice = draw(st.integers(min_value=0, max_value=3))
    sub = ground_terms(max_depth=max_depth - 1)
    if choice == 0:
        return draw(atoms)
    if choice == 1:
        return Link(draw(sub), draw(sub))
    if choice == 2:
        return Male(draw(sub))
    return Female(draw(sub))


@st.composite
def terms(draw, max_depth=3):
    """Terms with variables."""
    if max_depth == 0:
        return draw(st.one_of(atoms, variables))
    choice = draw(st.integers(min_value=0, max_value=4))
    sub = terms(max_depth=max_depth - 1)
    if choice == 0:
        return draw(atoms)
    if choice == 1:
        return draw(variables)
    if choice == 2:
        return Link(draw(sub), draw(sub))
    if choice == 3:
        return Male(draw(sub))
    return Female(draw(sub))


# ── Unit tests ───────────────────────────────────────────────────────────────

class TestIsVariable:
    def test_single_lowercase_letter(self):
        assert is_variable(x)
        assert is_variable(Identifier("v"))

    def test_multi_letter_is_rigid(self):
        assert not is_variable(Identifier("ab"))
        assert not is_variable(Identifier("foo"))

    def test_uppercase_is_rigid(self):
        assert not is_variable(Identifier("X"))

    def test_non_latin_is_rigid(self):
        assert not is_variable(Identifier("я"))
        assert not is_variable(Identifier("_"))

    def test_digits_are_rigid(self):
        assert not is_variable(Identifier("42"))

    def test_non_identifier(self):
        assert not is_variable(Infinity())
        assert not is_variable(Male(x))


class TestOccursIn:
    def test_variable_occurs_in_itself(self):
        assert occurs_in("x", x)

    def test_occurs_deep(self):
        assert occurs_in("x", parse_expr("a -> {b, ♂(c -> x♀)}"))

    def test_not_present(self):
        assert not occurs_in("x", parse_expr("a -> y -> ∞"))

    def test_very_deep_term(self):
        term = x
        for _ in range(5000):
            term = Link(a, term)
        assert occurs_in("x", term)


class TestApplySubstitution:
    def test_empty_is_identity(self):
        term = parse_expr("x -> y")
        assert apply_substitution({}, term) is term

    def test_replaces_variable(self):
        assert apply_substitution({"x": a}, Link(x, y)) == Link(a, y)

    def test_follows_chains(self):
        sub = {"x": y, "y": Male(a)}
        assert apply_substitution(sub, Female(x)) == Female(Male(a))

    def test_resolve_var(self):
        sub = {"x": y, "y": b}
        assert resolve_var("x", sub) == b
        assert resolve_var("z", sub) is None


class TestUnify:
    def test_identical(self):
        assert unify(a, a) == {}

    def test_rigid_mismatch(self):
        assert unify(Identifier("aa"), Identifier("bb")) is None

    def test_variable_binds(self):
        term = parse_expr("a -> ∞")
        assert unify(x, term) == {"x": term}

    def test_variable_on_right(self):
        assert unify(Male(a), y) == {"y": Male(a)}

    def test_occurs_check(self):
        assert unify(x, Link(x, a)) is None

    def test_structural(self):
        sub = unify(parse_expr("x -> ♂y"), parse_expr("a -> ♂(b -> ∞)"))
        assert canon(sub["x"]) == "a"
        assert canon(sub["y"]) == "(b->∞)"

    def test_bound_variable_reused(self):
        assert unify(Link(x, x), Link(a, a)) == {"x": a}
        assert unify(Link(x, x), Link(a, b)) is None

    def test_variable_to_variable(self):
        sub = unify(Link(x, y), Link(y, a))
        assert apply_substitution(sub, x) == a
        assert apply_substitution(sub, y) == a

    def test_kind_mismatch(self):
        assert unify(Male(x), Female(x)) is None
        assert unify(Not(a), Male(a)) is None
        assert unify(Link(a, b), Equality(a, b)) is None

    def test_constants(self):
        assert unify(Infinity(), Infinity()) == {}
        assert unify(Num(0), Num(1)) is None
        assert unify(Bracket("left"), Bracket("right")) is None

    def test_relations(self):
        sub = unify(parse_expr("x = bb"), parse_expr("aa = bb"))
        assert sub == {"x": Identifier("aa")}

    def test_definitions(self):
        sub = unify(parse_expr("s : x"), parse_expr("s : a -> b"))
        assert canon(sub["x"]) == "(a->b)"

    def test_sets_positional(self):
        assert unify(Set((x, b)), Set((a, b))) == {"x": a}
        # Canonically equal, so no search is needed.
        assert unify(Set((a, b)), Set((b, a))) == {}
        # Not equal, and positional matching fails on b vs a.
        assert unify(Set((x, b)), Set((b, a))) is None

    def test_set_arity(self):
        assert unify(Set((x,)), Set((a, b))) is None

    def test_input_substitution_not_modified(self):
        sub = {"y": b}
        result = unify(x, a, sub)
        assert sub == {"y": b}
        assert result == {"y": b, "x": a}

    def test_depth_limit(self):
        left, right = x, a
        for _ in range(50):
            left, right = Male(left), Male(right)
        with pytest.raises(ResourceLimitError):
            unify(left, right, limits=Limits(max_depth=20))


# ── Property-based tests ─────────────────────────────────────────────────────

class TestUnificationProperties:

    @given(terms(), terms())
    def test_symmetry(self, t1, t2):
        """unify(A, B) succeeds iff unify(B, A) succeeds."""
        assert (unify(t1, t2) is None) == (unify(t2, t1) is None)

    @given(terms(), terms())
    def test_correctness(self, t1, t2):
        """If unify(A, B) = σ, then apply(σ, A) == apply(σ, B)."""
        sub = unify(t1, t2)
        if sub is not None:
            assert canon(apply_substitution(sub, t1)) == canon(apply_substitution(sub, t2))

    @given(ground_terms(), ground_terms())
    def test_ground_terms_unify_iff_equal(self, t1, t2):
        sub = unify(t1, t2)
        if canon(t1) == canon(t2):
            assert sub == {}
        else:
            assert sub is None

    @given(variables, terms())
    def test_occurs_check_soundness(self, v, t):
        """x never unifies with a proper term containing x."""
        assert unify(v, Link(t, v)) is None
        assert unify(v, Male(Link(v, t))) is None

    @given(terms())
    def test_idempotence(self, t):
        assert unify(t, t) == {}

    @given(variables, terms())
    def test_variable_unifies_with_any_non_occurring_term(self, v, t):
        assume(not occurs_in(v.name, t))
        sub = unify(v, t)
        assert sub is not None
        assert canon(apply_substitution(sub, v)) == canon(t)
