"""Test the selector model: specificity tally, serialization, and caching."""

import pytest

from csscascade.errors import InvalidInput
from csscascade.selector import Selector, Specificity, render_nth, tally_specificity, tokens_to_string
from csscascade.tokens import (
    WILDCARD,
    AdjacentSiblingCombinator,
    AttributeOperator,
    AttributePresenceSelector,
    AttributeValueSelector,
    ChildCombinator,
    ClassSelector,
    DescendantCombinator,
    GeneralSiblingCombinator,
    IdSelector,
    Identity,
    NegationSelector,
    NthFormula,
    NthKeyword,
    PseudoClassSelector,
    PseudoElementSelector,
    SpecificityType,
    StringValue,
    TypeSelector,
    UniversalSelector,
)


class TestSpecificity:
    def test_ordering_is_lexicographic(self):
        assert Specificity(0, 1, 0, 0) > Specificity(0, 0, 9, 9)
        assert Specificity(1, 0, 0, 0) > Specificity(0, 9, 9, 9)
        assert Specificity(0, 0, 1, 1) > Specificity(0, 0, 1, 0)

    def test_str(self):
        assert str(Specificity(0, 1, 2, 3)) == "0,1,2,3"


class TestTally:
    def test_compound(self):
        tokens = [TypeSelector("div"), ClassSelector("a"), IdSelector("b")]
        assert tally_specificity(tokens) == Specificity(0, 1, 1, 1)

    def test_universal_and_combinators_skipped(self):
        tokens = [UniversalSelector(), ChildCombinator(), UniversalSelector(namespace=WILDCARD)]
        assert tally_specificity(tokens) == Specificity(0, 0, 0, 0)

    def test_pseudo_element_counts_as_type(self):
        tokens = [TypeSelector("p"), PseudoElementSelector("first-line")]
        assert tally_specificity(tokens) == Specificity(0, 0, 0, 2)

    def test_attributes_and_pseudo_classes(self):
        tokens = [
            AttributePresenceSelector("href"),
            AttributeValueSelector("lang", AttributeOperator.DASH_MATCH, "en"),
            PseudoClassSelector("hover"),
            PseudoClassSelector("nth-child", NthFormula(2, 1)),
        ]
        assert tally_specificity(tokens) == Specificity(0, 0, 4, 0)

    def test_negation_recurses(self):
        tokens = [
            TypeSelector("div"),
            ClassSelector("foo"),
            NegationSelector((IdSelector("a"),)),
        ]
        assert tally_specificity(tokens) == Specificity(0, 1, 1, 1)

    def test_negation_with_own_type_is_counted_once(self):
        tokens = [NegationSelector((IdSelector("a"),), specificity_type=SpecificityType.C)]
        assert tally_specificity(tokens) == Specificity(0, 0, 1, 0)

    def test_explicit_bucket_a(self):
        tokens = [ClassSelector("x", specificity_type=SpecificityType.A)]
        assert tally_specificity(tokens) == Specificity(1, 0, 0, 0)

    def test_token_without_type_skipped(self):
        tokens = [TypeSelector("x", specificity_type=None), ClassSelector("y")]
        assert tally_specificity(tokens) == Specificity(0, 0, 1, 0)

    def test_sum_matches_typed_token_count(self):
        tokens = [
            TypeSelector("ul"),
            DescendantCombinator(),
            TypeSelector("li"),
            NegationSelector((ClassSelector("x"),)),
            AdjacentSiblingCombinator(),
            UniversalSelector(),
            PseudoElementSelector("after"),
        ]
        assert sum(tally_specificity(tokens)) == 4


class TestRenderNth:
    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            (1, 0, "n"),
            (-1, 0, "-n"),
            (2, 1, "2n+1"),
            (0, 0, "0"),
            (0, 5, "5"),
            (2, 0, "2n"),
            (0, -3, "-3"),
            (2, -1, "2n-1"),
            (-1, 3, "-n+3"),
            (-2, -2, "-2n-2"),
            (1, 1, "n+1"),
        ],
    )
    def test_render(self, a, b, expected):
        assert render_nth(a, b) == expected


class TestTokensToString:
    def test_combinators(self):
        tokens = [
            TypeSelector("a"),
            DescendantCombinator(),
            TypeSelector("b"),
            ChildCombinator(),
            TypeSelector("c"),
            AdjacentSiblingCombinator(),
            TypeSelector("d"),
            GeneralSiblingCombinator(),
            TypeSelector("e"),
        ]
        assert tokens_to_string(tokens) == "a b > c + d ~ e"

    def test_namespaces(self):
        assert tokens_to_string([TypeSelector("rect", namespace="svg")]) == "svg|rect"
        assert tokens_to_string([TypeSelector("rect", namespace=WILDCARD)]) == "*|rect"
        assert tokens_to_string([UniversalSelector(namespace=WILDCARD)]) == "*|*"
        assert tokens_to_string([UniversalSelector(namespace="")]) == "|*"
        assert tokens_to_string([UniversalSelector()]) == "*"

    def test_escaped_names(self):
        tokens = [TypeSelector("1x"), IdSelector("-1"), ClassSelector("a.b")]
        assert tokens_to_string(tokens) == "\\31 x#-\\31 .a\\.b"

    def test_attributes(self):
        tokens = [
            AttributePresenceSelector("data-x", namespace=WILDCARD),
            AttributeValueSelector("title", AttributeOperator.SUBSTRING, 'say "hi"'),
        ]
        assert tokens_to_string(tokens) == '[*|data-x][title*="say \\"hi\\""]'

    def test_attribute_namespace_escaped(self):
        token = AttributeValueSelector("href", AttributeOperator.EQUALS, "", namespace="1ns")
        assert tokens_to_string([token]) == '[\\31 ns|href=""]'

    def test_pseudo_element_not_escaped(self):
        assert tokens_to_string([PseudoElementSelector("before")]) == "::before"

    def test_pseudo_class_expressions(self):
        tokens = [
            PseudoClassSelector("lang", Identity("1en")),
            PseudoClassSelector("contains", StringValue("a\\b")),
            PseudoClassSelector("nth-child", NthKeyword("odd")),
            PseudoClassSelector("nth-last-child", NthFormula(-1, 0)),
            PseudoClassSelector("hover"),
        ]
        assert tokens_to_string(tokens) == (
            ':lang(\\31 en):contains("a\\\\b"):nth-child(odd):nth-last-child(-n):hover'
        )

    def test_negation(self):
        tokens = [TypeSelector("DIV"), ClassSelector("foo"), NegationSelector((IdSelector("a"),))]
        assert tokens_to_string(tokens) == "DIV.foo:not(#a)"

    def test_unknown_token_raises(self):
        with pytest.raises(InvalidInput, match="unknown selector token"):
            tokens_to_string([TypeSelector("a"), object()])


class TestSelector:
    def test_construct(self):
        selector = Selector([TypeSelector("a"), ClassSelector("b")])
        assert selector.specificity == Specificity(0, 0, 1, 1)
        assert str(selector) == "a.b"
        assert selector.to_string() == "a.b"
        assert selector.tokens == (TypeSelector("a"), ClassSelector("b"))

    def test_empty_tokens(self):
        with pytest.raises(InvalidInput):
            Selector([])

    def test_malformed_tokens(self):
        with pytest.raises(InvalidInput):
            Selector([TypeSelector("a"), "b"])

    def test_set_tokens_refreshes_caches(self):
        selector = Selector([TypeSelector("a")])
        assert selector.to_string() == "a"
        selector.set_tokens([IdSelector("b")])
        assert selector.specificity == Specificity(0, 1, 0, 0)
        assert selector.to_string() == "#b"

    def test_failed_set_tokens_keeps_previous_state(self):
        selector = Selector([TypeSelector("a")])
        with pytest.raises(InvalidInput):
            selector.set_tokens([])
        assert selector.to_string() == "a"
        assert selector.specificity == Specificity(0, 0, 0, 1)

    def test_to_string_is_memoized(self):
        selector = Selector([TypeSelector("a")])
        assert selector.to_string() is selector.to_string()

    def test_equality(self):
        assert Selector([TypeSelector("a")]) == Selector([TypeSelector("a")])
        assert Selector([TypeSelector("a")]) != Selector([TypeSelector("b")])

    def test_repr(self):
        assert repr(Selector([ClassSelector("x")])) == "Selector('.x')"
