"""--debug token tree dump to stderr."""

from __future__ import annotations

import sys
from collections.abc import Iterable, Sequence
from typing import TextIO

from csscascade.selector import Selector
from csscascade.tokens import (
    AttributeValueSelector,
    NegationSelector,
    PseudoClassSelector,
    Token,
    Wildcard,
    is_combinator,
)


def dump_tokens(selectors: Iterable[Selector], *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable token tree for each selector to *file*."""
    for selector in selectors:
        file.write(f"Selector {selector.to_string()!r} specificity={selector.specificity}\n")
        _dump_sequence(selector.tokens, 1, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_sequence(tokens: Sequence[Token], depth: int, f: TextIO) -> None:
    for token in tokens:
        _dump_token(token, depth, f)


def _dump_token(token: Token, depth: int, f: TextIO) -> None:
    name = type(token).__name__
    if is_combinator(token):
        f.write(f"{_indent(depth)}{name}\n")
        return

    details: list[str] = []
    if hasattr(token, "namespace") and token.namespace is not None:
        ns = "*" if isinstance(token.namespace, Wildcard) else token.namespace
        details.append(f"ns={ns!r}")
    if hasattr(token, "name"):
        details.append(repr(token.name))
    if isinstance(token, AttributeValueSelector):
        details.append(f"{token.operator.value} {token.value!r}")
    elif isinstance(token, PseudoClassSelector) and token.expression is not None:
        details.append(repr(token.expression))
    if token.specificity_type is not None:
        details.append(f"[{token.specificity_type.value}]")

    f.write(f"{_indent(depth)}{name} {' '.join(details)}".rstrip() + "\n")
    if isinstance(token, NegationSelector):
        _dump_sequence(token.tokens, depth + 1, f)
