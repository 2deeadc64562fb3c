"""String literal lexing and balanced argument-list extraction.

Both operations walk the text with the same ``LiteralTracker`` so that quotes,
``${...}`` interpolation and comments are interpreted identically by the
literal lexer, the parenthesis matcher and the comment stripper.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Iterator

from translate_me.analysis.model import StringLiteral

DELIMITERS = frozenset("'\"`")


class LexState(StrEnum):
    CODE = "code"
    STRING = "string"
    INTERPOLATION = "interpolation"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"


class LexEvent(StrEnum):
    NONE = "none"
    LITERAL_OPEN = "literal_open"
    LITERAL_CLOSE = "literal_close"
    COMMENT_OPEN = "comment_open"
    COMMENT_CLOSE = "comment_close"


class LiteralTracker:
    """Character-level state machine for literals, interpolation and comments.

    ``step`` consumes the character at ``index`` and returns the event it
    produced together with the index of the next unconsumed character. Inside
    ``${...}`` the opening delimiter has no meaning; braces are counted from
    depth 0 and the interpolation ends on a ``}`` seen at depth 0. A closing
    delimiter preceded by an odd run of backslashes is escaped. A run of three
    quotes opens a multi-line literal that only the same run closes.
    """

    __slots__ = (
        "state",
        "delimiter",
        "literal_start",
        "comment_start",
        "_brace_depth",
        "_comment_depth",
        "_backslashes",
    )

    def __init__(self) -> None:
        self.state = LexState.CODE
        self.delimiter = ""
        self.literal_start = -1
        self.comment_start = -1
        self._brace_depth = 0
        self._comment_depth = 0
        self._backslashes = 0

    @property
    def counts_parentheses(self) -> bool:
        return self.state is LexState.CODE or self.state is LexState.INTERPOLATION

    @property
    def in_comment(self) -> bool:
        return self.state is LexState.LINE_COMMENT or self.state is LexState.BLOCK_COMMENT

    def step(self, text: str, index: int) -> tuple[LexEvent, int]:
        char = text[index]
        state = self.state
        if state is LexState.CODE:
            return self._step_code(text, index, char)
        if state is LexState.STRING:
            return self._step_string(text, index, char)
        if state is LexState.INTERPOLATION:
            if char == "{":
                self._brace_depth += 1
            elif char == "}":
                if self._brace_depth == 0:
                    self.state = LexState.STRING
                    self._backslashes = 0
                else:
                    self._brace_depth -= 1
            return LexEvent.NONE, index + 1
        if state is LexState.LINE_COMMENT:
            if char == "\n":
                self.state = LexState.CODE
                return LexEvent.COMMENT_CLOSE, index
            return LexEvent.NONE, index + 1
        # Dart block comments nest.
        if text.startswith("/*", index):
            self._comment_depth += 1
            return LexEvent.NONE, index + 2
        if text.startswith("*/", index):
            self._comment_depth -= 1
            if self._comment_depth == 0:
                self.state = LexState.CODE
                return LexEvent.COMMENT_CLOSE, index + 2
            return LexEvent.NONE, index + 2
        return LexEvent.NONE, index + 1

    def _step_code(self, text: str, index: int, char: str) -> tuple[LexEvent, int]:
        if char in DELIMITERS:
            self.state = LexState.STRING
            self.delimiter = char * 3 if text.startswith(char * 3, index) else char
            self.literal_start = index
            self._backslashes = 0
            return LexEvent.LITERAL_OPEN, index + len(self.delimiter)
        if char == "/" and index + 1 < len(text):
            follower = text[index + 1]
            if follower == "/":
                self.state = LexState.LINE_COMMENT
                self.comment_start = index
                return LexEvent.COMMENT_OPEN, index + 2
            if follower == "*":
                self.state = LexState.BLOCK_COMMENT
                self.comment_start = index
                self._comment_depth = 1
                return LexEvent.COMMENT_OPEN, index + 2
        return LexEvent.NONE, index + 1

    def _step_string(self, text: str, index: int, char: str) -> tuple[LexEvent, int]:
        if char == "\\":
            self._backslashes += 1
            return LexEvent.NONE, index + 1
        escaped = self._backslashes % 2 == 1
        self._backslashes = 0
        if escaped:
            return LexEvent.NONE, index + 1
        if char == "$" and text.startswith("{", index + 1):
            self.state = LexState.INTERPOLATION
            self._brace_depth = 0
            return LexEvent.NONE, index + 2
        if char == self.delimiter[0] and text.startswith(self.delimiter, index):
            self.state = LexState.CODE
            return LexEvent.LITERAL_CLOSE, index + len(self.delimiter)
        return LexEvent.NONE, index + 1


def iter_string_literals(text: str) -> Iterator[StringLiteral]:
    """Yield every closed literal in ``text`` from left to right.

    A literal still open at end of input is dropped.
    """
    tracker = LiteralTracker()
    index = 0
    length = len(text)
    while index < length:
        event, next_index = tracker.step(text, index)
        if event is LexEvent.LITERAL_CLOSE:
            start = tracker.literal_start
            yield StringLiteral(
                delimiter=tracker.delimiter,
                content=text[start + len(tracker.delimiter) : index],
                start=start,
                length=next_index - start,
            )
        index = next_index


def find_string_literals(text: str) -> list[StringLiteral]:
    return list(iter_string_literals(text))


def extract_balanced(text: str, open_index: int) -> str | None:
    """Return the text strictly inside the parenthesis opened at ``open_index``.

    Parentheses inside a literal (outside its interpolations) or inside a
    comment do not count. ``None`` means the call is unbalanced.
    """
    if open_index < 0 or open_index >= len(text) or text[open_index] != "(":
        return None
    tracker = LiteralTracker()
    depth = 1
    index = open_index + 1
    length = len(text)
    while index < length:
        if tracker.counts_parentheses:
            char = text[index]
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth == 0:
                    return text[open_index + 1 : index]
        _, index = tracker.step(text, index)
    return None


def iter_comment_spans(text: str) -> Iterator[tuple[int, int]]:
    """Yield ``(start, end)`` for every comment; ``end`` excludes the newline."""
    tracker = LiteralTracker()
    index = 0
    length = len(text)
    while index < length:
        event, next_index = tracker.step(text, index)
        if event is LexEvent.COMMENT_CLOSE:
            yield tracker.comment_start, next_index
        index = next_index
    if tracker.in_comment:
        yield tracker.comment_start, length


def inert_spans(text: str) -> list[tuple[int, int]]:
    """Sorted spans covered by literals or comments, where calls are not code."""
    tracker = LiteralTracker()
    spans: list[tuple[int, int]] = []
    index = 0
    length = len(text)
    while index < length:
        event, next_index = tracker.step(text, index)
        if event is LexEvent.LITERAL_CLOSE:
            spans.append((tracker.literal_start, next_index))
        elif event is LexEvent.COMMENT_CLOSE:
            spans.append((tracker.comment_start, next_index))
        index = next_index
    if tracker.state is LexState.STRING or tracker.state is LexState.INTERPOLATION:
        spans.append((tracker.literal_start, length))
    elif tracker.in_comment:
        spans.append((tracker.comment_start, length))
    return spans


def mask_literals(text: str) -> str:
    """Replace literal characters with spaces, keeping code and offsets."""
    if not text:
        return text
    chars = list(text)
    for literal in iter_string_literals(text):
        for position in range(literal.start, literal.end):
            if chars[position] != "\n":
                chars[position] = " "
    return "".join(chars)
