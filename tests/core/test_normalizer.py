"""
Property-based and unit tests for normalization and canonical forms.

The core claims:
    - Idempotence:  normalize(normalize(x)) == normalize(x)
    - Involution:   !!x -> x, at any depth of stacking
    - Duality:      !(♂x) -> x♀ and !(x♀) -> ♂x
    - Power:        a^n is the left-associative chain of n copies of a
    - Sets:         element order does not affect the canonical form
    - Guarded recursion: a defined name may recur only under a link
    - Limits:       oversized inputs raise ResourceLimitError, not RecursionError
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from mtl.core.errors import NormalizationError, ResourceLimitError
from mtl.core.limits import Limits
from mtl.core.nodes import (
    Link, NotLink, Definition, Male, Female, Not, Power, Set,
    Infinity, Num, Identifier, CharLit, Bracket, Statement,
)
from mtl.core.normalizer import (
    NormalizerOptions, normalize, normalize_file, expand_power,
    to_canonical_string, ast_equal,
)
from mtl.core.parser import parse, parse_expr


def canon(text):
    return to_canonical_string(normalize(parse_expr(text)))


a, b = Identifier("a"), Identifier("b")


# ── Generators ──────────────────────────────────────────────────────────────

leaves = st.one_of(
    st.sampled_from("abcxyz").map(Identifier),
    st.just(Infinity()),
    st.sampled_from([0, 1]).map(Num),
    st.sampled_from("pq'").map(CharLit),
    st.sampled_from(["left", "right"]).map(Bracket),
)


@st.composite
def terms(draw, max_depth=4):
    """Unnormalized terms over every expression node kind."""
    if max_depth == 0:
        return draw(leaves)
    choice = draw(st.integers(min_value=0, max_value=7))
    sub = terms(max_depth=max_depth - 1)
    if choice == 0:
        return draw(leaves)
    if choice == 1:
        return Link(draw(sub), draw(sub))
    if choice == 2:
        return NotLink(draw(sub), draw(sub))
    if choice == 3:
        return Male(draw(sub))
    if choice == 4:
        return Female(draw(sub))
    if choice == 5:
        return Not(draw(sub))
    if choice == 6:
        return Power(draw(sub), draw(st.integers(min_value=1, max_value=3)))
    return Set(tuple(draw(st.lists(sub, max_size=3))))


# ── Unit tests ───────────────────────────────────────────────────────────────

class TestRewriteRules:
    def test_double_not(self):
        assert canon("!!a") == "a"

    def test_quadruple_not(self):
        assert canon("!!!!a") == "a"

    def test_triple_not(self):
        assert canon("!!!a") == "!a"

    def test_not_male(self):
        assert canon("!♂a") == canon("a♀")

    def test_not_female(self):
        assert canon("!(a♀)") == canon("♂a")

    def test_prefix_stack_collapses(self):
        # !!♂a -> ♂a, and !!!♂a -> a♀
        assert canon("!!♂a") == "♂a"
        assert canon("!!!♂a") == "a♀"

    def test_not_link_desugars(self):
        assert normalize(parse_expr("a !-> b")) == Not(Link(a, b))

    def test_not_not_link(self):
        assert normalize(parse_expr("!(a !-> b)")) == Link(a, b)

    def test_not_infinity_stays(self):
        assert canon("!∞") == "!∞"

    def test_rules_apply_inside(self):
        assert canon("{!!a, b -> !♂c}") == "{(b->c♀),a}"

    def test_input_not_modified(self):
        expr = parse_expr("!!a -> b^2")
        before = to_canonical_string(expr)
        normalize(expr)
        assert to_canonical_string(expr) == before


class TestPower:
    def test_power_one(self):
        assert canon("a^1") == canon("a")

    def test_power_two(self):
        assert canon("a^2") == canon("a -> a")

    def test_power_three(self):
        assert canon("a^3") == canon("(a -> a) -> a")

    def test_power_of_compound(self):
        assert canon("(a -> b)^2") == "((a->b)->(a->b))"

    def test_power_zero_rejected(self):
        with pytest.raises(NormalizationError, match="exponent"):
            normalize(parse_expr("a^0"))

    def test_error_carries_location(self):
        with pytest.raises(NormalizationError, match=r"^Normalization error at 1:1: "):
            normalize(parse_expr("a^0"))

    def test_huge_power_rejected(self):
        with pytest.raises(ResourceLimitError):
            normalize(parse_expr("a^1000000"))

    def test_expand_power_direct(self):
        assert expand_power(a, 3) == Link(Link(a, a), a)


class TestCanonicalString:
    def test_formats(self):
        assert canon("a -> b") == "(a->b)"
        assert canon("♂a♀") == "♂a♀"
        assert canon("∞") == "∞"
        assert canon("'x'") == "'x'"
        assert canon("[ -> ]") == "([->])"
        assert canon("0 -> 1") == "(0->1)"

    def test_relations(self):
        assert canon("a = b") == "(a=b)"
        assert canon("a != b") == "(a!=b)"
        assert canon("s : a -> b") == "(s:(a->b))"

    def test_unnormalized_forms(self):
        assert to_canonical_string(NotLink(a, b)) == "(a!->b)"
        assert to_canonical_string(Power(a, 3)) == "a^3"

    def test_set_order_irrelevant(self):
        assert canon("{b, a}") == canon("{a, b}")

    def test_statement_and_file(self):
        file = parse("a = b. c.")
        assert to_canonical_string(file) == "(a=b).\nc."

    def test_associativity(self):
        assert canon("a -> b -> c") == canon("(a -> b) -> c")
        assert canon("a -> b -> c") != canon("a -> (b -> c)")

    def test_ast_equal(self):
        assert ast_equal(parse_expr("{a, b}"), parse_expr("{b, a}"))
        assert not ast_equal(parse_expr("a"), parse_expr("b"))

    def test_male_female_ambiguity(self):
        # Both nestings print the same signature.
        assert to_canonical_string(Male(Female(a))) == to_canonical_string(Female(Male(a)))


class TestGuardedRecursion:
    def test_direct_self_reference(self):
        with pytest.raises(NormalizationError, match="Unguarded recursion"):
            normalize(parse_expr("x : x"))

    def test_through_male(self):
        with pytest.raises(NormalizationError):
            normalize(parse_expr("x : ♂x"))

    def test_through_set(self):
        with pytest.raises(NormalizationError):
            normalize(parse_expr("x : {x, a}"))

    def test_under_link(self):
        normalize(parse_expr("inf : (inf -> inf)"))

    def test_under_not_link(self):
        normalize(parse_expr("s : a !-> s"))

    def test_male_under_link(self):
        normalize(parse_expr("s : ♂s -> a"))

    def test_non_identifier_name_not_checked(self):
        normalize(parse_expr("♂x : ♂x"))

    def test_check_can_be_disabled(self):
        opts = NormalizerOptions(check_guarded_recursion=False)
        assert normalize(parse_expr("x : x"), opts) == Definition(Identifier("x"), Identifier("x"))


class TestOptions:
    def test_keep_not_link(self):
        opts = NormalizerOptions(desugar_not_link=False)
        assert normalize(parse_expr("a !-> b"), opts) == NotLink(a, b)

    def test_keep_power(self):
        opts = NormalizerOptions(expand_power=False)
        assert normalize(parse_expr("a^3"), opts) == Power(a, 3)

    def test_no_canonicalize(self):
        opts = NormalizerOptions(canonicalize=False)
        assert normalize(parse_expr("!!a"), opts) == Not(Not(a))

    def test_normalize_file(self):
        file = normalize_file(parse("!!a = b^2."))
        assert to_canonical_string(file) == "(a=(b->b))."
        assert isinstance(file.statements[0], Statement)


class TestLimits:
    def test_deep_prefix_chain(self):
        with pytest.raises(ResourceLimitError) as info:
            normalize(parse_expr("♂" * 50 + "a"), limits=Limits(max_depth=20))
        assert info.value.limit == "max_depth"

    def test_deep_term_within_default(self):
        term = a
        for _ in range(150):
            term = Male(term)
        assert to_canonical_string(normalize(term)) == "♂" * 150 + "a"

    def test_node_budget(self):
        with pytest.raises(ResourceLimitError) as info:
            normalize(parse_expr("a^50"), limits=Limits(max_nodes=20))
        assert info.value.limit == "max_nodes"


# ── Property-based tests ─────────────────────────────────────────────────────

class TestNormalizerProperties:

    @given(terms())
    def test_idempotence(self, t):
        once = normalize(t)
        assert to_canonical_string(normalize(once)) == to_canonical_string(once)

    @given(terms())
    def test_double_not_vanishes(self, t):
        assert to_canonical_string(normalize(Not(Not(t)))) == to_canonical_string(normalize(t))

    @given(terms())
    def test_duality(self, t):
        assert ast_equal(normalize(Not(Male(t))), normalize(Female(t)))
        assert ast_equal(normalize(Not(Female(t))), normalize(Male(t)))

    @given(terms())
    def test_no_sugar_left(self, t):
        text = to_canonical_string(normalize(t))
        assert "!->" not in text
        assert "^" not in text
        assert "!!" not in text

    @given(st.lists(terms(max_depth=2), max_size=4), st.randoms())
    def test_set_permutation_invariant(self, elements, rnd):
        shuffled = list(elements)
        rnd.shuffle(shuffled)
        assert ast_equal(Set(tuple(elements)), Set(tuple(shuffled)))
