"""
The text surface the list engine reads and writes.

The engine never holds a document model of its own: every operation reads lines
through a `TextSurface` and writes its results back through it. Editor
integrations implement the protocol over their buffers; `LineBuffer` is the
in-memory implementation used by the CLI and the tests.

Line numbers are 1-based and ranges are inclusive throughout.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class TextSurface(Protocol):
    """Line access the engine needs from a host document."""

    def get_line(self, n: int) -> str:
        """Text of line `n`, or "" past either end of the document."""
        ...

    def get_lines(self, start: int, end: int) -> list[str]: ...

    def set_lines(self, start: int, end: int, new_lines: Sequence[str]) -> None:
        """
        Replace lines `start..end` with `new_lines` as one edit. An empty range
        (`end == start - 1`) inserts `new_lines` before line `start`.
        """
        ...

    def indent_width(self, n: int) -> int:
        """Width in columns of line `n`'s leading whitespace, or -1 past either end."""
        ...

    def last_line(self) -> int: ...


def leading_whitespace(text: str) -> str:
    return text[: len(text) - len(text.lstrip(" \t"))]


def measure_indent(text: str, tab_width: int) -> int:
    """Columns taken by the leading whitespace of `text`, expanding tabs."""
    width = 0
    for char in leading_whitespace(text):
        if char == "\t":
            width += tab_width - width % tab_width
        else:
            width += 1
    return width


class LineBuffer:
    """
    A `TextSurface` over a list of strings.

    Usage:
        buffer = LineBuffer.from_text("1. a\\n3. b\\n")
        buffer.get_line(2)  # "3. b"
        buffer.text()  # "1. a\\n3. b\\n"
    """

    def __init__(self, lines: Sequence[str] = (), tab_width: int = 4) -> None:
        self._lines: list[str] = list(lines)
        self.tab_width: int = tab_width
        self._trailing_newline: bool = True

    @classmethod
    def from_text(cls, text: str, tab_width: int = 4) -> LineBuffer:
        lines = text.split("\n")
        trailing_newline = text.endswith("\n")
        if trailing_newline:
            lines.pop()
        buffer = cls(lines, tab_width=tab_width)
        buffer._trailing_newline = trailing_newline
        return buffer

    def text(self) -> str:
        """The whole buffer as text, ending in a newline if the source did."""
        if not self._lines:
            return ""
        joined = "\n".join(self._lines)
        return joined + "\n" if self._trailing_newline else joined

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def last_line(self) -> int:
        return len(self._lines)

    def get_line(self, n: int) -> str:
        if 1 <= n <= len(self._lines):
            return self._lines[n - 1]
        return ""

    def get_lines(self, start: int, end: int) -> list[str]:
        self._check_range(start, end)
        return self._lines[start - 1 : end]

    def set_lines(self, start: int, end: int, new_lines: Sequence[str]) -> None:
        """
        Replace lines `start..end` with `new_lines`. An empty range
        (`end == start - 1`) inserts before `start`.
        """
        if end == start - 1 and 1 <= start <= len(self._lines) + 1:
            self._lines[start - 1 : start - 1] = list(new_lines)
            return
        self._check_range(start, end)
        self._lines[start - 1 : end] = list(new_lines)

    def insert_lines(self, after: int, new_lines: Sequence[str]) -> None:
        """Insert `new_lines` after line `after` (0 inserts at the top)."""
        self.set_lines(after + 1, after, new_lines)

    def indent_width(self, n: int) -> int:
        if 1 <= n <= len(self._lines):
            return measure_indent(self._lines[n - 1], self.tab_width)
        return -1

    def _check_range(self, start: int, end: int) -> None:
        if start < 1 or end > len(self._lines) or start > end:
            raise IndexError(f"Invalid line range {start}-{end} (buffer has {len(self._lines)} lines)")
