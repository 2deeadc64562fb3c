from translate_me.analysis.detector import dedupe_matches, find_hardcoded_strings
from translate_me.analysis.filters import (
    FILTER_PIPELINE,
    Classification,
    ClassificationContext,
    classify,
    is_translatable,
)
from translate_me.analysis.lexer import extract_balanced, find_string_literals
from translate_me.analysis.model import Match, StringLiteral, WidgetPattern
from translate_me.analysis.patterns import (
    DEFAULT_FILTER_TABLES,
    DEFAULT_WIDGET_CATALOG,
    FilterTables,
)
from translate_me.analysis.position import Position, line_and_column

__all__ = [
    "Classification",
    "ClassificationContext",
    "DEFAULT_FILTER_TABLES",
    "DEFAULT_WIDGET_CATALOG",
    "FILTER_PIPELINE",
    "FilterTables",
    "Match",
    "Position",
    "StringLiteral",
    "WidgetPattern",
    "classify",
    "dedupe_matches",
    "extract_balanced",
    "find_hardcoded_strings",
    "find_string_literals",
    "is_translatable",
    "line_and_column",
]
