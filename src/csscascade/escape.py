"""CSSOM serialization of identifiers and strings.

See https://drafts.csswg.org/cssom/#serialize-an-identifier and
https://drafts.csswg.org/cssom/#serialize-a-string. Python strings iterate by
code point, so astral characters are never split.
"""

from __future__ import annotations

_IDENT_ASCII = frozenset("-_0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")


def _is_control(cp: int) -> bool:
    return 0x01 <= cp <= 0x1F or cp == 0x7F


def _hex_escape(cp: int) -> str:
    return f"\\{cp:x} "


def escape_identifier(ident: str) -> str:
    """Escape *ident* for use as a CSS identifier."""
    ident = str(ident)
    if ident == "-":
        return "\\-"

    result: list[str] = []
    for index, ch in enumerate(ident):
        cp = ord(ch)
        if cp == 0:
            result.append("\ufffd")
        elif _is_control(cp) or (
            ch.isascii()
            and ch.isdigit()
            and (index == 0 or (index == 1 and ident[0] == "-"))
        ):
            result.append(_hex_escape(cp))
        elif cp >= 0x80 or ch in _IDENT_ASCII:
            result.append(ch)
        else:
            result.append("\\" + ch)
    return "".join(result)


def escape_string(value: str) -> str:
    """Escape *value* as a double-quoted CSS string, quotes included."""
    value = str(value)
    result: list[str] = ['"']
    for ch in value:
        cp = ord(ch)
        if cp == 0:
            result.append("\ufffd")
        elif _is_control(cp):
            result.append(_hex_escape(cp))
        elif ch in ('"', "\\"):
            result.append("\\" + ch)
        else:
            result.append(ch)
    result.append('"')
    return "".join(result)
