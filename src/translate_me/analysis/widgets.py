"""Widget call-site location: catalog pass followed by the custom-widget pass."""

from __future__ import annotations

import re
from bisect import bisect_right
from typing import Iterator, Sequence

from translate_me.analysis.lexer import extract_balanced, mask_literals
from translate_me.analysis.model import CallSite, WidgetPattern
from translate_me.analysis.patterns import DEFAULT_FILTER_TABLES, FilterTables

_CUSTOM_CALL_RE = re.compile(
    r"(?:\bconst\s+)?\b([A-Z][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)?)\s*\("
)
_NAMED_PARAMETER_RE = re.compile(r"\b[A-Za-z_]\w*\s*:(?!:)")
_TRIVIAL_BODY_RE = re.compile(
    r"""'[^']*'|"[^"]*"|true|false|null|[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*"""
)


class SpanSet:
    """Sorted, non-overlapping ``(start, end)`` spans with point lookup."""

    __slots__ = ("_starts", "_ends")

    def __init__(self, spans: Sequence[tuple[int, int]] = ()) -> None:
        ordered = sorted(spans)
        self._starts = [start for start, _ in ordered]
        self._ends = [end for _, end in ordered]

    def contains(self, offset: int) -> bool:
        position = bisect_right(self._starts, offset) - 1
        return position >= 0 and offset < self._ends[position]


def _known_call_re(name: str) -> re.Pattern[str]:
    return re.compile(rf"(?:\bconst\s+)?\b({re.escape(name)})\s*\(")


def find_known_call_sites(
    text: str,
    pattern: WidgetPattern,
    inert: SpanSet | None = None,
) -> Iterator[CallSite]:
    inert = inert or SpanSet()
    for found in _known_call_re(pattern.widget).finditer(text):
        if inert.contains(found.start(1)):
            continue
        open_index = found.end() - 1
        arg_text = extract_balanced(text, open_index)
        if arg_text is None:
            continue
        yield CallSite(
            widget=pattern.widget,
            arg_text=arg_text,
            arg_start=open_index + 1,
            known=True,
            params=pattern.params,
        )


def in_denied_context(text: str, offset: int, tables: FilterTables) -> bool:
    window = text[max(0, offset - tables.context_window) : offset].rstrip()
    return any(pattern.search(window) for pattern in tables.context_patterns)


def has_named_parameter(arg_text: str) -> bool:
    return _NAMED_PARAMETER_RE.search(mask_literals(arg_text)) is not None


def is_trivial_body(arg_text: str) -> bool:
    return _TRIVIAL_BODY_RE.fullmatch(arg_text.strip()) is not None


def looks_like_widget(arg_text: str) -> bool:
    return not is_trivial_body(arg_text) and has_named_parameter(arg_text)


def find_custom_call_sites(
    text: str,
    known_names: frozenset[str] | set[str],
    tables: FilterTables = DEFAULT_FILTER_TABLES,
    inert: SpanSet | None = None,
) -> Iterator[CallSite]:
    inert = inert or SpanSet()
    for found in _CUSTOM_CALL_RE.finditer(text):
        name = found.group(1)
        base = name.split(".", 1)[0]
        if name in known_names or base in known_names:
            continue
        if base in tables.non_widget_classes:
            continue
        if inert.contains(found.start(1)):
            continue
        if in_denied_context(text, found.start(), tables):
            continue
        open_index = found.end() - 1
        arg_text = extract_balanced(text, open_index)
        if arg_text is None or not looks_like_widget(arg_text):
            continue
        yield CallSite(widget=name, arg_text=arg_text, arg_start=open_index + 1, known=False)


def iter_call_sites(
    text: str,
    catalog: Sequence[WidgetPattern],
    tables: FilterTables = DEFAULT_FILTER_TABLES,
    inert: SpanSet | None = None,
) -> Iterator[CallSite]:
    """Known-widget sites in catalog order, then custom-widget sites."""
    for pattern in catalog:
        yield from find_known_call_sites(text, pattern, inert)
    known_names = frozenset(pattern.widget for pattern in catalog)
    yield from find_custom_call_sites(text, known_names, tables, inert)
