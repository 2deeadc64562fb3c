"""Ignore-comment insertions offered as quick fixes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from translate_me.analysis.directives import IGNORE_ALL_FILE, IGNORE_LINE, IGNORE_NEXT_LINE

FILE_HEADER_SCAN_LIMIT = 20

_HEADER_LINE_RE = re.compile(r"^\s*(?:$|//|/\*|\*|import\b|export\b|library\b|part\b)")


@dataclass(frozen=True)
class TextEdit:
    """Zero-width insertion at ``(line, character)``."""

    line: int
    character: int
    new_text: str


def _line(lines: Sequence[str], line: int) -> str:
    if 0 <= line < len(lines):
        return lines[line].rstrip("\r\n")
    return ""


def _indentation(text: str) -> str:
    return text[: len(text) - len(text.lstrip())]


def ignore_next_line_edit(lines: Sequence[str], line: int) -> TextEdit:
    indent = _indentation(_line(lines, line))
    return TextEdit(line=line, character=0, new_text=f"{indent}{IGNORE_NEXT_LINE}\n")


def ignore_line_edit(lines: Sequence[str], line: int) -> TextEdit:
    text = _line(lines, line).rstrip()
    return TextEdit(line=line, character=len(text), new_text=f" {IGNORE_LINE}")


def file_ignore_insert_line(lines: Sequence[str]) -> int:
    insert_at = 0
    for number, raw in enumerate(lines[:FILE_HEADER_SCAN_LIMIT]):
        if not _HEADER_LINE_RE.match(raw.rstrip("\r\n")):
            break
        insert_at = number + 1
    return insert_at


def ignore_file_edit(lines: Sequence[str]) -> TextEdit:
    return TextEdit(line=file_ignore_insert_line(lines), character=0, new_text=f"{IGNORE_ALL_FILE}\n")


def has_line_ignore(lines: Sequence[str], line: int) -> bool:
    if IGNORE_LINE in _line(lines, line):
        return True
    return line > 0 and IGNORE_NEXT_LINE in _line(lines, line - 1)


def has_file_ignore(text: str) -> bool:
    return IGNORE_ALL_FILE in text
