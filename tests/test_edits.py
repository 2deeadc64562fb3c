from __future__ import annotations

from translate_me.edits import (
    TextEdit,
    file_ignore_insert_line,
    has_file_ignore,
    has_line_ignore,
    ignore_file_edit,
    ignore_line_edit,
    ignore_next_line_edit,
)

SOURCE = [
    "// Copyright 2024 Example",
    "library home;",
    "",
    "import 'package:flutter/material.dart';",
    "part 'home.g.dart';",
    "",
    "Widget build() {",
    "    return Text('Hello world');   ",
    "}",
]


def test_next_line_edit_keeps_indentation() -> None:
    assert ignore_next_line_edit(SOURCE, 7) == TextEdit(
        line=7, character=0, new_text="    // translate-me-ignore-next-line\n"
    )


def test_line_edit_appends_after_trimmed_text() -> None:
    edit = ignore_line_edit(SOURCE, 7)
    assert edit.line == 7
    assert edit.character == len("    return Text('Hello world');")
    assert edit.new_text == " // translate-me-ignore"


def test_file_edit_skips_header_run() -> None:
    assert file_ignore_insert_line(SOURCE) == 6
    assert ignore_file_edit(SOURCE) == TextEdit(
        line=6, character=0, new_text="// translate-me-ignore-all-file\n"
    )


def test_file_edit_at_top_without_header() -> None:
    assert file_ignore_insert_line(["Text('a');"]) == 0
    assert file_ignore_insert_line([]) == 0


def test_file_header_scan_is_bounded() -> None:
    lines = ["import 'a.dart';"] * 30 + ["Text('a');"]
    assert file_ignore_insert_line(lines) == 20


def test_handles_crlf_lines() -> None:
    lines = ["import 'a.dart';\r\n", "  Text('a');\r\n"]
    assert file_ignore_insert_line(lines) == 1
    assert ignore_line_edit(lines, 1).character == len("  Text('a');")


def test_has_line_ignore() -> None:
    lines = [
        "// translate-me-ignore-next-line",
        "Text('a');",
        "Text('b'); // translate-me-ignore",
        "Text('c');",
    ]
    assert has_line_ignore(lines, 1)
    assert has_line_ignore(lines, 2)
    assert not has_line_ignore(lines, 3)
    assert not has_line_ignore(lines, 99)


def test_has_file_ignore() -> None:
    assert has_file_ignore("a\n// translate-me-ignore-all-file\n")
    assert not has_file_ignore("// translate-me-ignore\n")
