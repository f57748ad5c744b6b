"""Selector model: specificity tally and canonical serialization of a token sequence."""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from csscascade.errors import InvalidInput
from csscascade.escape import escape_identifier, escape_string
from csscascade.tokens import (
    AdjacentSiblingCombinator,
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
    PseudoClassSelector,
    PseudoElementSelector,
    SpecificityType,
    StringValue,
    Token,
    TypeSelector,
    UniversalSelector,
    Wildcard,
    check_tokens,
)


class Specificity(NamedTuple):
    """CSS2 specificity; tuple ordering is cascade ordering (higher wins).

    See https://www.w3.org/TR/CSS2/cascade.html#specificity.
    """

    a: int = 0
    b: int = 0
    c: int = 0
    d: int = 0

    def __str__(self) -> str:
        return f"{self.a},{self.b},{self.c},{self.d}"


INLINE_SPECIFICITY = Specificity(1, 0, 0, 0)


def tally_specificity(tokens: Sequence[Token]) -> Specificity:
    """Count tokens per specificity bucket, descending into ``:not()`` arguments."""
    counts = dict.fromkeys(SpecificityType, 0)
    _tally(tokens, counts)
    return Specificity(*(counts[t] for t in SpecificityType))


def _tally(tokens: Sequence[Token], counts: dict[SpecificityType, int]) -> None:
    for token in tokens:
        specificity_type = getattr(token, "specificity_type", None)
        if specificity_type is not None:
            counts[specificity_type] += 1
        elif isinstance(token, NegationSelector):
            _tally(token.tokens, counts)


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def tokens_to_string(tokens: Sequence[Token]) -> str:
    """Render tokens to canonical selector text."""
    return "".join(_render_token(token) for token in tokens)


def _render_token(token: Token) -> str:
    match token:
        case DescendantCombinator():
            return " "
        case ChildCombinator():
            return " > "
        case AdjacentSiblingCombinator():
            return " + "
        case GeneralSiblingCombinator():
            return " ~ "
        case UniversalSelector():
            return _namespace_prefix(token.namespace) + "*"
        case TypeSelector():
            return _namespace_prefix(token.namespace) + escape_identifier(token.name)
        case IdSelector():
            return "#" + escape_identifier(token.name)
        case ClassSelector():
            return "." + escape_identifier(token.name)
        case AttributePresenceSelector():
            return f"[{_namespace_prefix(token.namespace)}{escape_identifier(token.name)}]"
        case AttributeValueSelector():
            return (
                f"[{_namespace_prefix(token.namespace)}{escape_identifier(token.name)}"
                f"{token.operator.value}{escape_string(token.value)}]"
            )
        case PseudoElementSelector():
            # Pseudo-element names are plain identifiers
            return "::" + token.name
        case PseudoClassSelector():
            if token.expression is None:
                return ":" + token.name
            return f":{token.name}({_render_expression(token.expression)})"
        case NegationSelector():
            return f":not({tokens_to_string(token.tokens)})"
    raise InvalidInput(f"cannot serialize unknown selector token: {token!r}")


def _namespace_prefix(namespace: Namespace) -> str:
    if isinstance(namespace, Wildcard):
        return "*|"
    if isinstance(namespace, str):
        return escape_identifier(namespace) + "|"
    return ""


def _render_expression(expression: Expression) -> str:
    if isinstance(expression, Identity):
        return escape_identifier(expression.value)
    if isinstance(expression, StringValue):
        return escape_string(expression.value)
    if isinstance(expression, NthKeyword):
        return expression.value
    if isinstance(expression, NthFormula):
        return render_nth(expression.a, expression.b)
    raise InvalidInput(f"cannot serialize pseudo-class expression: {expression!r}")


def render_nth(a: int, b: int) -> str:
    """Render an An+B formula in its shortest form.

    ``n``/``-n`` for a coefficient of +/-1, no ``An`` term when A is 0, and
    ``B`` only when non-zero or when it is the whole expression.
    """
    result = ""
    if a == 1:
        result = "n"
    elif a == -1:
        result = "-n"
    elif a != 0:
        result = f"{a}n"

    if b != 0 or not result:
        if b > 0 and result:
            result += f"+{b}"
        else:
            result += str(b)
    return result


# ---------------------------------------------------------------------------
# Selector
# ---------------------------------------------------------------------------


class Selector:
    """A single complex selector: its tokens, specificity, and canonical text.

    Specificity is computed whenever the tokens are set. The serialized text
    is computed on first use and dropped together with the tokens.
    """

    __slots__ = ("_tokens", "_specificity", "_text")

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.set_tokens(tokens)

    def set_tokens(self, tokens: Sequence[Token]) -> None:
        """Replace the token sequence. Raises InvalidInput on malformed tokens."""
        checked = check_tokens(tokens)
        specificity = tally_specificity(checked)
        self._tokens = checked
        self._specificity = specificity
        self._text: str | None = None

    @property
    def tokens(self) -> tuple[Token, ...]:
        return self._tokens

    @property
    def specificity(self) -> Specificity:
        return self._specificity

    def to_string(self) -> str:
        if self._text is None:
            self._text = tokens_to_string(self._tokens)
        return self._text

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Selector({self.to_string()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Selector):
            return NotImplemented
        return self._tokens == other._tokens

    __hash__ = None  # type: ignore[assignment]
