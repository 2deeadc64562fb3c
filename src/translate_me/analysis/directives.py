"""Ignore directives: parsing, comment stripping and the final match filter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, TypeAlias

from translate_me.analysis.lexer import iter_comment_spans
from translate_me.analysis.model import Match

IGNORE_LINE = "// translate-me-ignore"
IGNORE_NEXT_LINE = "// translate-me-ignore-next-line"
IGNORE_ALL_FILE = "// translate-me-ignore-all-file"
IGNORE_MARKERS: tuple[str, ...] = (IGNORE_LINE, IGNORE_NEXT_LINE, IGNORE_ALL_FILE)


@dataclass(frozen=True)
class LineRule:
    start_line: int

    def covers(self, line: int) -> bool:
        return line == self.start_line


@dataclass(frozen=True)
class NextLineRule:
    # start_line is the suppressed line, one below the marker.
    start_line: int

    def covers(self, line: int) -> bool:
        return line == self.start_line


@dataclass(frozen=True)
class BlockRule:
    start_line: int
    end_line: int

    def covers(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


IgnoreRule: TypeAlias = LineRule | NextLineRule | BlockRule


def parse_ignore_directives(text: str) -> list[IgnoreRule]:
    """Collect rules from the comment-intact source.

    The markers are plain substrings, so a next-line or all-file marker also
    contains the line marker and yields a line rule as well.
    """
    if not text:
        return []
    lines = text.split("\n")
    last_line = len(lines) - 1
    rules: list[IgnoreRule] = []
    for number, line in enumerate(lines):
        if IGNORE_LINE in line:
            rules.append(LineRule(start_line=number))
        if IGNORE_NEXT_LINE in line:
            rules.append(NextLineRule(start_line=number + 1))
        if IGNORE_ALL_FILE in line:
            rules.append(BlockRule(start_line=number, end_line=last_line))
    return rules


def strip_comments(text: str, markers: Sequence[str] = IGNORE_MARKERS) -> str:
    """Blank ordinary comments with spaces; keep directive comments verbatim.

    Newlines survive, so every offset, line and column of the result matches
    the input.
    """
    spans = list(iter_comment_spans(text))
    if not spans:
        return text
    chars = list(text)
    for start, end in spans:
        body = text[start:end]
        if any(marker in body for marker in markers):
            continue
        for position in range(start, end):
            if chars[position] not in "\r\n":
                chars[position] = " "
    return "".join(chars)


def is_ignored(match: Match, rules: Iterable[IgnoreRule]) -> bool:
    return any(rule.covers(match.start_line) for rule in rules)


def filter_ignored(matches: Iterable[Match], rules: Sequence[IgnoreRule]) -> list[Match]:
    if not rules:
        return list(matches)
    return [match for match in matches if not is_ignored(match, rules)]
