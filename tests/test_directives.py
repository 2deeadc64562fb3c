from __future__ import annotations

from translate_me.analysis.directives import (
    IGNORE_ALL_FILE,
    IGNORE_LINE,
    IGNORE_NEXT_LINE,
    BlockRule,
    LineRule,
    NextLineRule,
    filter_ignored,
    is_ignored,
    parse_ignore_directives,
    strip_comments,
)
from translate_me.analysis.model import Match


def _match(line: int) -> Match:
    return Match(
        literal="'x'",
        start_line=line,
        start_col=0,
        end_line=line,
        end_col=3,
        widget="Text",
    )


def test_line_marker_yields_line_rule() -> None:
    rules = parse_ignore_directives(f"a\nText('x') {IGNORE_LINE}\nb")
    assert rules == [LineRule(start_line=1)]


def test_next_line_marker_also_covers_own_line() -> None:
    rules = parse_ignore_directives(f"{IGNORE_NEXT_LINE}\nText('x')")
    assert rules == [LineRule(start_line=0), NextLineRule(start_line=1)]


def test_all_file_marker_runs_to_last_line() -> None:
    rules = parse_ignore_directives(f"a\n{IGNORE_ALL_FILE}\nb\nc")
    assert BlockRule(start_line=1, end_line=3) in rules
    assert not is_ignored(_match(0), rules)
    assert all(is_ignored(_match(line), rules) for line in (1, 2, 3))


def test_markers_are_case_sensitive() -> None:
    assert parse_ignore_directives("// Translate-Me-Ignore") == []
    assert parse_ignore_directives("") == []


def test_filter_ignored_keeps_order_and_unmatched_lines() -> None:
    matches = [_match(0), _match(1), _match(2)]
    rules = [NextLineRule(start_line=1)]
    assert filter_ignored(matches, rules) == [_match(0), _match(2)]
    assert filter_ignored(matches, []) == matches


def test_strip_comments_blanks_ordinary_comments() -> None:
    text = "a // note\n/* x\ny */ b"
    stripped = strip_comments(text)
    assert len(stripped) == len(text)
    assert stripped.count("\n") == text.count("\n")
    assert "note" not in stripped
    assert stripped.endswith(" b")
    assert stripped.splitlines()[0].rstrip() == "a"


def test_strip_comments_keeps_directive_comments() -> None:
    text = f"Text('x') {IGNORE_LINE}\n// plain"
    stripped = strip_comments(text)
    assert stripped.splitlines()[0] == f"Text('x') {IGNORE_LINE}"
    assert stripped.splitlines()[1].strip() == ""


def test_strip_comments_leaves_literals_alone() -> None:
    text = "Text('http://example.com')"
    assert strip_comments(text) == text
