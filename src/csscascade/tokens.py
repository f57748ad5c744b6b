"""Selector token types, validation, and loading from plain data."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from csscascade.errors import InvalidInput


class SpecificityType(Enum):
    """CSS2 cascade bucket a simple selector contributes to."""

    A = "a"  # inline style
    B = "b"  # ID selectors
    C = "c"  # classes, attributes, pseudo-classes
    D = "d"  # type selectors, pseudo-elements


class Wildcard(Enum):
    """Marker for the ``*|`` any-namespace prefix."""

    ANY = "*"


WILDCARD = Wildcard.ANY

# None: no prefix; str: named namespace (may be empty for ``|name``); WILDCARD: ``*|``
Namespace = str | Wildcard | None


class AttributeOperator(Enum):
    EQUALS = "="
    INCLUDES = "~="
    DASH_MATCH = "|="
    PREFIX = "^="
    SUFFIX = "$="
    SUBSTRING = "*="


# ---------------------------------------------------------------------------
# Pseudo-class expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Identity:
    """Identifier argument, e.g. ``:lang(en)``."""

    value: str


@dataclass(frozen=True, slots=True)
class StringValue:
    """Quoted string argument."""

    value: str


@dataclass(frozen=True, slots=True)
class NthKeyword:
    """``odd`` or ``even``."""

    value: str


@dataclass(frozen=True, slots=True)
class NthFormula:
    """An+B formula."""

    a: int
    b: int


Expression = Identity | StringValue | NthKeyword | NthFormula

NTH_KEYWORDS = frozenset({"odd", "even"})


# ---------------------------------------------------------------------------
# Simple selectors
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class UniversalSelector:
    namespace: Namespace = None
    specificity_type: SpecificityType | None = None


@dataclass(frozen=True, slots=True)
class TypeSelector:
    name: str
    namespace: Namespace = None
    specificity_type: SpecificityType | None = SpecificityType.D


@dataclass(frozen=True, slots=True)
class IdSelector:
    name: str
    specificity_type: SpecificityType | None = SpecificityType.B


@dataclass(frozen=True, slots=True)
class ClassSelector:
    name: str
    specificity_type: SpecificityType | None = SpecificityType.C


@dataclass(frozen=True, slots=True)
class AttributePresenceSelector:
    name: str
    namespace: Namespace = None
    specificity_type: SpecificityType | None = SpecificityType.C


@dataclass(frozen=True, slots=True)
class AttributeValueSelector:
    name: str
    operator: AttributeOperator
    value: str
    namespace: Namespace = None
    specificity_type: SpecificityType | None = SpecificityType.C


@dataclass(frozen=True, slots=True)
class PseudoElementSelector:
    name: str
    specificity_type: SpecificityType | None = SpecificityType.D


@dataclass(frozen=True, slots=True)
class PseudoClassSelector:
    name: str
    expression: Expression | None = None
    specificity_type: SpecificityType | None = SpecificityType.C


@dataclass(frozen=True, slots=True)
class NegationSelector:
    """``:not(...)``; contributes the specificity of its argument."""

    tokens: tuple[Token, ...]
    specificity_type: SpecificityType | None = None


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DescendantCombinator:
    pass


@dataclass(frozen=True, slots=True)
class ChildCombinator:
    pass


@dataclass(frozen=True, slots=True)
class AdjacentSiblingCombinator:
    pass


@dataclass(frozen=True, slots=True)
class GeneralSiblingCombinator:
    pass


Combinator = (
    DescendantCombinator | ChildCombinator | AdjacentSiblingCombinator | GeneralSiblingCombinator
)

Token = (
    UniversalSelector
    | TypeSelector
    | IdSelector
    | ClassSelector
    | AttributePresenceSelector
    | AttributeValueSelector
    | PseudoElementSelector
    | PseudoClassSelector
    | NegationSelector
    | Combinator
)

_TOKEN_CLASSES: tuple[type, ...] = (
    UniversalSelector,
    TypeSelector,
    IdSelector,
    ClassSelector,
    AttributePresenceSelector,
    AttributeValueSelector,
    PseudoElementSelector,
    PseudoClassSelector,
    NegationSelector,
    DescendantCombinator,
    ChildCombinator,
    AdjacentSiblingCombinator,
    GeneralSiblingCombinator,
)

_COMBINATOR_CLASSES: tuple[type, ...] = _TOKEN_CLASSES[-4:]


def is_combinator(token: Token) -> bool:
    return isinstance(token, _COMBINATOR_CLASSES)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def check_tokens(tokens: Sequence[Token]) -> tuple[Token, ...]:
    """Validate a token sequence and return it as a tuple.

    Raises InvalidInput on an empty sequence, an unknown token kind, or a
    token whose required fields are missing or of the wrong type.
    """
    if isinstance(tokens, (str, bytes)) or not isinstance(tokens, Sequence) or not tokens:
        raise InvalidInput("expected a non-empty sequence of selector tokens")
    for token in tokens:
        _check_token(token)
    return tuple(tokens)


def _check_token(token: object) -> None:
    if not isinstance(token, _TOKEN_CLASSES):
        raise InvalidInput(f"unknown selector token: {token!r}")
    if is_combinator(token):
        return

    specificity_type = token.specificity_type
    if specificity_type is not None and not isinstance(specificity_type, SpecificityType):
        raise InvalidInput(f"invalid specificity type {specificity_type!r} on {token!r}")

    if isinstance(token, NegationSelector):
        check_tokens(token.tokens)
        return

    if not isinstance(token, UniversalSelector):
        _check_name(token, token.name)

    namespace = getattr(token, "namespace", None)
    if namespace is not None and not isinstance(namespace, (str, Wildcard)):
        raise InvalidInput(f"invalid namespace {namespace!r} on {token!r}")

    if isinstance(token, AttributeValueSelector):
        if not isinstance(token.operator, AttributeOperator):
            raise InvalidInput(f"invalid attribute operator {token.operator!r}")
        if not isinstance(token.value, str):
            raise InvalidInput(f"attribute value must be a string, got {token.value!r}")
    elif isinstance(token, PseudoClassSelector) and token.expression is not None:
        _check_expression(token.expression)


def _check_name(token: object, name: object) -> None:
    if not isinstance(name, str) or not name:
        raise InvalidInput(f"missing name on {type(token).__name__}")


def _check_expression(expression: object) -> None:
    if isinstance(expression, NthFormula):
        if not all(type(n) is int for n in (expression.a, expression.b)):
            raise InvalidInput(f"nth formula coefficients must be integers: {expression!r}")
    elif isinstance(expression, NthKeyword):
        if expression.value not in NTH_KEYWORDS:
            raise InvalidInput(f"unknown nth keyword: {expression.value!r}")
    elif isinstance(expression, (Identity, StringValue)):
        if not isinstance(expression.value, str):
            raise InvalidInput(f"expression value must be a string: {expression!r}")
        if isinstance(expression, Identity) and not expression.value:
            raise InvalidInput("identifier expression must not be empty")
    else:
        raise InvalidInput(f"unknown pseudo-class expression: {expression!r}")


# ---------------------------------------------------------------------------
# Loading from plain data (camelCase tags, as produced by grammar front ends)
# ---------------------------------------------------------------------------

_COMBINATORS_BY_TAG: dict[str, type] = {
    "descendantCombinator": DescendantCombinator,
    "childCombinator": ChildCombinator,
    "adjacentSiblingCombinator": AdjacentSiblingCombinator,
    "generalSiblingCombinator": GeneralSiblingCombinator,
}


def load_tokens(data: Any) -> tuple[Token, ...]:
    """Build a validated token tuple from a list of token mappings.

    Each mapping carries a ``type`` tag (``"typeSelector"``, ``"idSelector"``,
    ``"negationSelector"``, ...) plus the fields of that kind. Raises
    InvalidInput on anything that does not describe a token.
    """
    if isinstance(data, (str, bytes, Mapping)) or not isinstance(data, Sequence) or not data:
        raise InvalidInput("expected a non-empty list of token mappings")
    return check_tokens([_load_token(item) for item in data])


def _load_token(item: Any) -> Token:
    if not isinstance(item, Mapping):
        raise InvalidInput(f"token must be a mapping, got {item!r}")
    tag = item.get("type")
    if not isinstance(tag, str):
        raise InvalidInput(f"token is missing its type tag: {item!r}")

    combinator = _COMBINATORS_BY_TAG.get(tag)
    if combinator is not None:
        return combinator()

    kwargs: dict[str, Any] = {}
    if "specificityType" in item:
        kwargs["specificity_type"] = _load_specificity_type(item["specificityType"])

    if tag == "universalSelector":
        return UniversalSelector(namespace=_load_namespace(item), **kwargs)
    if tag == "typeSelector":
        return TypeSelector(_require(item, "name"), namespace=_load_namespace(item), **kwargs)
    if tag == "idSelector":
        return IdSelector(_require(item, "name"), **kwargs)
    if tag == "classSelector":
        return ClassSelector(_require(item, "name"), **kwargs)
    if tag == "attributePresenceSelector":
        return AttributePresenceSelector(
            _require(item, "name"), namespace=_load_namespace(item), **kwargs
        )
    if tag == "attributeValueSelector":
        operator = _require(item, "operator")
        try:
            op = AttributeOperator(operator)
        except ValueError:
            raise InvalidInput(f"unknown attribute operator: {operator!r}") from None
        return AttributeValueSelector(
            _require(item, "name"),
            op,
            _require(item, "value"),
            namespace=_load_namespace(item),
            **kwargs,
        )
    if tag == "pseudoElementSelector":
        return PseudoElementSelector(_require(item, "name"), **kwargs)
    if tag == "pseudoClassSelector":
        expression = item.get("expression")
        return PseudoClassSelector(
            _require(item, "name"),
            expression=_load_expression(expression) if expression is not None else None,
            **kwargs,
        )
    if tag == "negationSelector":
        return NegationSelector(load_tokens(item.get("tokens")), **kwargs)

    raise InvalidInput(f"unknown token type: {tag!r}")


def _require(item: Mapping[str, Any], key: str) -> Any:
    if key not in item or item[key] is None:
        raise InvalidInput(f"{item.get('type')} token is missing required field {key!r}")
    return item[key]


def _load_specificity_type(value: Any) -> SpecificityType | None:
    if value is None:
        return None
    try:
        return SpecificityType(value)
    except ValueError:
        raise InvalidInput(f"unknown specificity type: {value!r}") from None


def _load_namespace(item: Mapping[str, Any]) -> Namespace:
    namespace = item.get("namespace")
    if namespace is True or namespace == "*":
        return WILDCARD
    if namespace is None or isinstance(namespace, str):
        return namespace
    raise InvalidInput(f"invalid namespace: {namespace!r}")


def _load_expression(data: Any) -> Expression:
    if not isinstance(data, Mapping):
        raise InvalidInput(f"pseudo-class expression must be a mapping, got {data!r}")
    kind = data.get("kind")
    parsed = data.get("parsed")
    if kind == "identity":
        return Identity(parsed)
    if kind == "string":
        return StringValue(parsed)
    if kind == "nthKeyword":
        return NthKeyword(parsed)
    if kind == "nthFormula":
        if isinstance(parsed, Mapping):
            return NthFormula(parsed.get("a"), parsed.get("b"))
        if isinstance(parsed, Sequence) and not isinstance(parsed, str) and len(parsed) == 2:
            return NthFormula(parsed[0], parsed[1])
        raise InvalidInput(f"nth formula must be {{a, b}}, got {parsed!r}")
    raise InvalidInput(f"unknown pseudo-class expression kind: {kind!r}")
