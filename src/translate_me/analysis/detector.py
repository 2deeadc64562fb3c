"""Hardcoded string detection over the text of one source file."""

from __future__ import annotations

from typing import Iterable, Iterator

from translate_me.analysis.directives import (
    filter_ignored,
    parse_ignore_directives,
    strip_comments,
)
from translate_me.analysis.filters import (
    ClassificationContext,
    classify,
    infer_generic_parameter,
    infer_parameter,
    named_tokens,
)
from translate_me.analysis.lexer import inert_spans, iter_string_literals
from translate_me.analysis.model import CallSite, Match, WidgetCatalog, normalize_catalog
from translate_me.analysis.patterns import DEFAULT_FILTER_TABLES, DEFAULT_WIDGET_CATALOG, FilterTables
from translate_me.analysis.position import LineIndex
from translate_me.analysis.widgets import SpanSet, iter_call_sites


def matches_for_call_site(
    site: CallSite,
    index: LineIndex,
    tables: FilterTables = DEFAULT_FILTER_TABLES,
) -> Iterator[Match]:
    tokens: list[tuple[int, str]] | None = None
    for literal in iter_string_literals(site.arg_text):
        context = ClassificationContext(
            literal.content, site.arg_text, literal.start, len(literal.delimiter)
        )
        if not classify(context, tables).keep:
            continue
        if tokens is None:
            tokens = named_tokens(site.arg_text)
        if site.known:
            parameter = infer_parameter(site.arg_text, literal.start, site.params, tokens)
        else:
            parameter = infer_generic_parameter(site.arg_text, literal.start, tokens)
        start = index.position(site.arg_start + literal.start)
        end = index.position(site.arg_start + literal.end)
        yield Match(
            literal=literal.raw,
            start_line=start.line,
            start_col=start.column,
            end_line=end.line,
            end_col=end.column,
            widget=site.widget,
            parameter=parameter,
        )


def dedupe_matches(matches: Iterable[Match]) -> list[Match]:
    seen: set[tuple[int, int, int, int]] = set()
    unique: list[Match] = []
    for match in matches:
        if match.span in seen:
            continue
        seen.add(match.span)
        unique.append(match)
    return unique


def find_hardcoded_strings(
    text: str,
    catalog: WidgetCatalog = DEFAULT_WIDGET_CATALOG,
    *,
    tables: FilterTables = DEFAULT_FILTER_TABLES,
) -> list[Match]:
    """Return the hardcoded user-facing literals in ``text``.

    Never raises on malformed input: unterminated literals and unbalanced
    calls contribute no matches. The result is ordered by discovery, known
    catalog widgets first, and holds at most one match per span.
    """
    if not text:
        return []
    rules = parse_ignore_directives(text)
    source = strip_comments(text)
    index = LineIndex(source)
    inert = SpanSet(inert_spans(source))
    patterns = normalize_catalog(catalog)
    found: list[Match] = []
    for site in iter_call_sites(source, patterns, tables, inert):
        found.extend(matches_for_call_site(site, index, tables))
    return filter_ignored(dedupe_matches(found), rules)
