"""Selector text to Selector objects, using cssselect as the grammar.

cssselect builds a left-nested tree (``Class(Hash(Element(...)))`` chained
through ``CombinedSelector``); this module flattens it into the token
sequence the selector model works on.
"""

from __future__ import annotations

import re

import cssselect
from cssselect.parser import (
    Attrib,
    Class,
    CombinedSelector,
    Element,
    Function,
    FunctionalPseudoElement,
    Hash,
    Negation,
    Pseudo,
    SelectorError,
    parse_series,
)

from csscascade.errors import InvalidInput, ParseError, Position
from csscascade.selector import Selector
from csscascade.tokens import (
    AdjacentSiblingCombinator,
    AttributeOperator,
    AttributePresenceSelector,
    AttributeValueSelector,
    ChildCombinator,
    ClassSelector,
    DescendantCombinator,
    Expression,
    GeneralSiblingCombinator,
    IdSelector,
    Identity,
    Namespace,
    NegationSelector,
    NthFormula,
    NthKeyword,
    NTH_KEYWORDS,
    PseudoClassSelector,
    PseudoElementSelector,
    StringValue,
    Token,
    TypeSelector,
    UniversalSelector,
    WILDCARD,
)

NTH_PSEUDO_CLASSES = frozenset(
    {"nth-child", "nth-last-child", "nth-of-type", "nth-last-of-type"}
)

_COMBINATORS: dict[str, type] = {
    " ": DescendantCombinator,
    ">": ChildCombinator,
    "+": AdjacentSiblingCombinator,
    "~": GeneralSiblingCombinator,
}

# cssselect reports positions inside token reprs: "<IDENT 'x' at 4>"
_OFFSET_RE = re.compile(r" at (\d+)>")


def parse(source: str) -> list[Selector]:
    """Parse a comma-separated selector list."""
    try:
        parsed = cssselect.parse(source)
    except SelectorError as exc:
        raise _grammar_error(str(exc), source) from exc

    return [Selector(_convert_selector(item, source)) for item in parsed]


def parse_selector(source: str) -> Selector:
    """Parse text holding exactly one selector."""
    selectors = parse(source)
    if len(selectors) != 1:
        raise InvalidInput(f"expected a single selector, got {len(selectors)}: {source!r}")
    return selectors[0]


def is_valid(source: str) -> bool:
    """Return True if *source* parses as a selector list."""
    try:
        parse(source)
    except InvalidInput:
        return False
    return True


def normalize(source: str) -> str:
    """Return the canonical text of a selector list."""
    return ", ".join(s.to_string() for s in parse(source))


def _grammar_error(message: str, source: str) -> ParseError:
    match = _OFFSET_RE.search(message)
    position = Position.from_offset(source, int(match.group(1))) if match else None
    return ParseError(message, source, position)


# ---------------------------------------------------------------------------
# Tree conversion
# ---------------------------------------------------------------------------


def _convert_selector(parsed: cssselect.Selector, source: str) -> list[Token]:
    tokens = _convert_tree(parsed.parsed_tree, source)
    pseudo_element = parsed.pseudo_element
    if isinstance(pseudo_element, FunctionalPseudoElement):
        raise ParseError(f"unsupported functional pseudo-element ::{pseudo_element.name}()", source)
    if pseudo_element:
        if tokens[-1] == UniversalSelector():
            # "::before" stands alone the same way ".a" does
            tokens.pop()
        tokens.append(PseudoElementSelector(pseudo_element))
    return tokens


def _convert_tree(node: object, source: str) -> list[Token]:
    if isinstance(node, CombinedSelector):
        combinator = _COMBINATORS.get(node.combinator)
        if combinator is None:
            raise ParseError(f"unsupported combinator {node.combinator!r}", source)
        return (
            _convert_tree(node.selector, source)
            + [combinator()]
            + _convert_tree(node.subselector, source)
        )
    return _convert_compound(node, source)


def _convert_compound(node: object, source: str) -> list[Token]:
    chain: list[object] = []
    while not isinstance(node, Element):
        if not isinstance(node, (Hash, Class, Attrib, Pseudo, Function, Negation)):
            raise ParseError(f"unsupported selector construct: {node!r}", source)
        chain.append(node)
        node = node.selector

    namespace = _namespace(node.namespace)
    tokens: list[Token] = []
    if node.element is not None:
        tokens.append(TypeSelector(node.element, namespace=namespace))
    elif namespace is not None or not chain:
        # The universal selector is implied when other simple selectors follow it
        tokens.append(UniversalSelector(namespace=namespace))

    for simple in reversed(chain):
        tokens.append(_convert_simple(simple, source))
    return tokens


def _convert_simple(node: object, source: str) -> Token:
    if isinstance(node, Hash):
        return IdSelector(node.id)
    if isinstance(node, Class):
        return ClassSelector(node.class_name)
    if isinstance(node, Attrib):
        return _convert_attrib(node, source)
    if isinstance(node, Pseudo):
        return PseudoClassSelector(node.ident)
    if isinstance(node, Function):
        return PseudoClassSelector(node.name, expression=_convert_arguments(node, source))
    if isinstance(node, Negation):
        return NegationSelector(tuple(_convert_tree(node.subselector, source)))
    raise ParseError(f"unsupported selector construct: {node!r}", source)


def _convert_attrib(node: Attrib, source: str) -> Token:
    if node.attrib is None:
        raise ParseError("attribute selector is missing its name", source)
    namespace = _namespace(node.namespace)
    if node.operator == "exists":
        return AttributePresenceSelector(node.attrib, namespace=namespace)
    try:
        operator = AttributeOperator(node.operator)
    except ValueError:
        raise ParseError(f"unsupported attribute operator {node.operator!r}", source) from None
    # Older cssselect releases store the value as a plain string
    value = getattr(node.value, "value", node.value)
    return AttributeValueSelector(node.attrib, operator, value, namespace=namespace)


def _namespace(namespace: str | None) -> Namespace:
    # "*|" arrives as the namespace "*"
    return WILDCARD if namespace == "*" else namespace


def _convert_arguments(node: Function, source: str) -> Expression:
    arguments = node.arguments
    if node.name in NTH_PSEUDO_CLASSES:
        if len(arguments) == 1 and arguments[0].type == "IDENT":
            keyword = arguments[0].value.lower()
            if keyword in NTH_KEYWORDS:
                return NthKeyword(keyword)
        try:
            a, b = parse_series(arguments)
        except ValueError:
            raise ParseError(
                f"invalid :{node.name}() argument "
                f"{''.join(str(arg.value) for arg in arguments)!r}",
                source,
            ) from None
        return NthFormula(a, b)

    if len(arguments) == 1:
        argument = arguments[0]
        if argument.type == "IDENT":
            return Identity(argument.value)
        if argument.type == "STRING":
            return StringValue(argument.value)
    raise ParseError(f"unsupported argument to :{node.name}()", source)
