"""Cascade precedence of declarations by origin, importance and specificity.

See https://www.w3.org/TR/CSS2/cascade.html#cascading-order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum, IntEnum
from functools import cmp_to_key
from typing import Any

from csscascade.errors import InvalidInput, InvalidState
from csscascade.selector import INLINE_SPECIFICITY, Selector, Specificity


class Origin(Enum):
    INLINE = "inline"
    AUTHOR = "author"
    USER = "user"
    USER_AGENT = "userAgent"


class Precedence(IntEnum):
    """Origin/importance levels, lower wins."""

    USER_IMPORTANT = 0
    AUTHOR_IMPORTANT = 1
    AUTHOR_NORMAL = 2
    USER_NORMAL = 3
    USER_AGENT = 4


_ORIGINS_BY_VALUE = {origin.value: origin for origin in Origin}
_STYLESHEET_ORIGINS = frozenset({Origin.AUTHOR, Origin.USER, Origin.USER_AGENT})

_CONFIG_KEYS = frozenset({"origin", "important", "selector"})


@dataclass(frozen=True, slots=True, eq=False)
class PropertyTest:
    """Cascade identity of one declaration: where it came from and what it matched with.

    Inline declarations have no selector; stylesheet declarations (author,
    user, user agent) must have one. Inconsistent combinations are accepted
    here and reported as InvalidState when specificity or precedence is asked
    for.
    """

    origin: Origin | str = Origin.INLINE
    important: bool = False
    selector: Selector | None = None

    def __post_init__(self) -> None:
        # Unrecognized origin strings are kept as given and rejected lazily
        if isinstance(self.origin, str) and self.origin in _ORIGINS_BY_VALUE:
            object.__setattr__(self, "origin", _ORIGINS_BY_VALUE[self.origin])

    @classmethod
    def coerce(cls, item: PropertyTest | Selector | Mapping[str, Any]) -> PropertyTest:
        """Build a PropertyTest from a PropertyTest, a Selector, or a config mapping.

        A bare Selector is treated as a normal author declaration. A config
        mapping may give its selector as text.
        """
        if isinstance(item, PropertyTest):
            return item
        if isinstance(item, Selector):
            return cls(origin=Origin.AUTHOR, selector=item)
        if isinstance(item, Mapping):
            return cls.from_config(item)
        raise TypeError(
            f"expected PropertyTest, Selector, or mapping, got {type(item).__name__}"
        )

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> PropertyTest:
        unknown = set(config) - _CONFIG_KEYS
        if unknown:
            raise InvalidState(f"unknown property test options: {', '.join(sorted(unknown))}")

        selector = config.get("selector")
        if isinstance(selector, str):
            from csscascade.parser import parse_selector

            selector = parse_selector(selector)
        elif selector is not None and not isinstance(selector, Selector):
            raise InvalidInput(f"selector must be a Selector or text, got {selector!r}")

        return cls(
            origin=config.get("origin", Origin.INLINE),
            important=config.get("important", False),
            selector=selector,
        )

    def specificity(self) -> Specificity:
        stylesheet = isinstance(self.origin, Origin) and self.origin in _STYLESHEET_ORIGINS
        if stylesheet and isinstance(self.selector, Selector):
            return self.selector.specificity
        if self.origin is Origin.INLINE and self.selector is None:
            return INLINE_SPECIFICITY
        raise InvalidState(
            f"invalid property test: origin {_origin_name(self.origin)!r} "
            f"{'with' if self.selector is not None else 'without'} a selector"
        )

    def precedence_level(self) -> Precedence:
        important = self.important is True
        match self.origin:
            case Origin.USER_AGENT:
                # User agent declarations have a single level regardless of !important
                return Precedence.USER_AGENT
            case Origin.INLINE | Origin.AUTHOR:
                return Precedence.AUTHOR_IMPORTANT if important else Precedence.AUTHOR_NORMAL
            case Origin.USER:
                return Precedence.USER_IMPORTANT if important else Precedence.USER_NORMAL
        raise InvalidState(f"invalid origin type: {_origin_name(self.origin)!r}")

    def __repr__(self) -> str:
        parts = [f"origin={_origin_name(self.origin)!r}"]
        if self.important:
            parts.append("important=True")
        if self.selector is not None:
            parts.append(f"selector={self.selector.to_string()!r}")
        return f"PropertyTest({', '.join(parts)})"


def _origin_name(origin: Origin | str) -> str:
    return origin.value if isinstance(origin, Origin) else str(origin)


def compare(x: PropertyTest, y: PropertyTest) -> int:
    """Order two declarations by cascade precedence.

    Returns -1 when *x* wins over *y*, 1 when *y* wins, and 0 on a full tie.
    """
    if not isinstance(x, PropertyTest) or not isinstance(y, PropertyTest):
        raise TypeError(
            f"compare() expects two PropertyTest objects, got "
            f"{type(x).__name__} and {type(y).__name__}"
        )

    x_level, y_level = x.precedence_level(), y.precedence_level()
    if x_level != y_level:
        return -1 if x_level < y_level else 1

    x_spec, y_spec = x.specificity(), y.specificity()
    if x_spec != y_spec:
        return -1 if x_spec > y_spec else 1
    return 0


def sort_cascade(
    items: Iterable[PropertyTest | Selector | Mapping[str, Any]],
) -> list[PropertyTest]:
    """Return declarations ordered winner first.

    Items may be PropertyTest objects, Selectors, or config mappings (see
    PropertyTest.coerce). Among full ties the later item comes first.
    """
    tests = [PropertyTest.coerce(item) for item in items]

    def _compare_indexed(i: int, j: int) -> int:
        result = compare(tests[i], tests[j])
        if result:
            return result
        return (i < j) - (i > j)

    order = sorted(range(len(tests)), key=cmp_to_key(_compare_indexed))
    return [tests[i] for i in order]
