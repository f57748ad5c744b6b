"""Error types with formatted source context."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int

    @classmethod
    def from_offset(cls, source: str, offset: int) -> Position:
        """Resolve a 0-based offset in *source* to a line/column position."""
        offset = max(0, min(offset, len(source)))
        before = source[:offset]
        line = before.count("\n") + 1
        column = offset - (before.rfind("\n") + 1) + 1
        return cls(line, column, offset)


class CascadeError(Exception):
    """Base class for every error raised by csscascade."""


class InvalidInput(CascadeError, ValueError):
    """Raised when a token sequence is empty or malformed."""


class InvalidState(CascadeError, ValueError):
    """Raised when a property test has an inconsistent origin/selector combination."""


class ParseError(InvalidInput):
    """Raised when selector text cannot be turned into tokens, with source context."""

    def __init__(self, message: str, source: str, position: Position | None = None) -> None:
        self.message = message
        self.source = source
        self.position = position
        super().__init__(self.format())

    def format(self, filename: str = "<selector>") -> str:
        if self.position is None:
            return f"error: {self.message}\n  --> {filename}\n   | {self.source}"

        lines = self.source.splitlines(keepends=True)
        line_idx = self.position.line - 1
        col = self.position.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        # Underline a single character, or the end of line marker at EOF
        pad = " " * (col - 1)
        carets = "^"

        line_num = str(self.position.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.position.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )
