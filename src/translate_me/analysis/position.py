"""Offset to (line, column) mapping.

Line terminator policy: only ``\\n`` ends a line. A ``\\r`` that precedes it
stays part of the previous line, so ``\\r\\n`` and ``\\n`` files map the first
character of every line to column 0 and no normalization shifts offsets.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    line: int
    column: int


class LineIndex:
    __slots__ = ("_length", "_line_starts")

    def __init__(self, text: str) -> None:
        starts = [0]
        index = text.find("\n")
        while index != -1:
            starts.append(index + 1)
            index = text.find("\n", index + 1)
        self._line_starts = tuple(starts)
        self._length = len(text)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def position(self, offset: int) -> Position:
        offset = min(max(offset, 0), self._length)
        line = bisect_right(self._line_starts, offset) - 1
        return Position(line=line, column=offset - self._line_starts[line])


def line_and_column(text: str, offset: int) -> Position:
    return LineIndex(text).position(offset)
