"""Static CSS selector specificity, serialization, and cascade ordering."""

from __future__ import annotations

from csscascade.cascade import Origin, Precedence, PropertyTest, compare, sort_cascade
from csscascade.errors import CascadeError, InvalidInput, InvalidState, ParseError
from csscascade.escape import escape_identifier, escape_string
from csscascade.parser import is_valid, normalize, parse, parse_selector
from csscascade.selector import Selector, Specificity, tally_specificity, tokens_to_string
from csscascade.tokens import WILDCARD, SpecificityType, load_tokens

__version__ = "0.1.0"

__all__ = [
    "WILDCARD",
    "CascadeError",
    "InvalidInput",
    "InvalidState",
    "Origin",
    "ParseError",
    "Precedence",
    "PropertyTest",
    "Selector",
    "Specificity",
    "SpecificityType",
    "compare",
    "escape_identifier",
    "escape_string",
    "is_valid",
    "load_tokens",
    "normalize",
    "parse",
    "parse_selector",
    "sort_cascade",
    "tally_specificity",
    "tokens_to_string",
]
