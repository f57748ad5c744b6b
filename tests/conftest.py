"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from csscascade.cascade import Origin, PropertyTest
from csscascade.parser import parse_selector
from csscascade.selector import Selector


@pytest.fixture
def sel():
    """Return a helper that parses text holding one selector."""

    def _sel(source: str) -> Selector:
        return parse_selector(source)

    return _sel


def declaration(
    source: str | None,
    origin: Origin = Origin.AUTHOR,
    important: bool = False,
) -> PropertyTest:
    """Build a PropertyTest from selector text (None for inline declarations)."""
    selector = parse_selector(source) if source is not None else None
    return PropertyTest(origin=origin, important=important, selector=selector)


def canonical(source: str) -> str:
    """Canonical text of a single selector."""
    return parse_selector(source).to_string()
