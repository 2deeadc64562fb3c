"""Classification of literal contents found inside widget argument lists.

The pipeline is an ordered tuple of ``FilterStep`` values. Steps are evaluated
in order and the first one that fires decides the outcome: a ``drop`` step
discards the literal, the ``prose`` guard keeps it without consulting the
remaining shape checks. A literal no step claims is kept. The order is part of
the observable behavior; several shapes overlap (a lowercase underscored
phrase is both a possible sentence and a snake_case key) and the order is what
resolves them.

    1  blank               empty or whitespace-only content
    2  localized           already-localized call shape, or 'key'.tr() style
    3  symbol_reference    preceded by '.' or followed by '(' in the arguments
    4  technical_argument  sole argument of Uri.parse-like calls, or the value
                           of a technical named parameter
    5  technical_shape     URLs, domains, bundle ids, colors, hashes, versions,
                           platform ids, ENV_CONSTANTS, long tokens, paths
    -  prose               keep: natural language or a proper noun
    6  mask                symbols only, date/number/currency masks, regexes
    7  interpolation       fewer than 3 meaningful characters around ${...}
    8  identifier          snake_case, lowerCamelCase, dotted Class.property,
                           field names

Context predicates only look at the ``CONTEXT_SPAN`` characters on either side
of the literal, so classifying one literal costs the same however long the
enclosing argument list is.
"""

from __future__ import annotations

import re
from bisect import bisect_left
from dataclasses import dataclass
from enum import StrEnum
from functools import cached_property
from typing import Callable, Iterator

from translate_me.analysis.lexer import mask_literals
from translate_me.analysis.patterns import DEFAULT_FILTER_TABLES, FilterTables

CONTEXT_SPAN = 200


class Verdict(StrEnum):
    KEEP = "keep"
    DROP = "drop"


@dataclass(frozen=True)
class ClassificationContext:
    """One literal as seen from inside its enclosing argument list.

    ``offset`` is the index of the opening delimiter within ``arg_text`` and
    ``quote_width`` the length of that delimiter (3 for ``'''``).
    """

    content: str
    arg_text: str = ""
    offset: int = 0
    quote_width: int = 1

    @property
    def end(self) -> int:
        return self.offset + len(self.content) + 2 * self.quote_width

    @cached_property
    def before(self) -> str:
        return self.arg_text[max(0, self.offset - CONTEXT_SPAN) : self.offset]

    @cached_property
    def after(self) -> str:
        return self.arg_text[self.end : self.end + CONTEXT_SPAN]

    @cached_property
    def stripped(self) -> str:
        return strip_interpolation(self.content).strip()


@dataclass(frozen=True)
class FilterStep:
    name: str
    verdict: Verdict
    predicate: Callable[[ClassificationContext, FilterTables], bool]


@dataclass(frozen=True)
class Classification:
    verdict: Verdict
    step: str = ""

    @property
    def keep(self) -> bool:
        return self.verdict is Verdict.KEEP


# ---------------------------------------------------------------------------
# Interpolation helpers
# ---------------------------------------------------------------------------
_SIMPLE_INTERPOLATION_RE = re.compile(r"\$[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*")


def strip_interpolation(content: str) -> str:
    """Remove ``${...}`` spans (brace balanced) and ``$name.field`` references."""
    if "$" not in content:
        return content
    pieces: list[str] = []
    index = 0
    length = len(content)
    while index < length:
        if content.startswith("${", index):
            depth = 0
            cursor = index + 2
            while cursor < length:
                char = content[cursor]
                if char == "{":
                    depth += 1
                elif char == "}":
                    if depth == 0:
                        break
                    depth -= 1
                cursor += 1
            index = cursor + 1
            continue
        pieces.append(content[index])
        index += 1
    return _SIMPLE_INTERPOLATION_RE.sub("", "".join(pieces))


# ---------------------------------------------------------------------------
# 1-4: context predicates
# ---------------------------------------------------------------------------
def is_blank(ctx: ClassificationContext, tables: FilterTables) -> bool:
    return not ctx.content.strip()


def is_localized(ctx: ClassificationContext, tables: FilterTables) -> bool:
    if any(pattern.search(ctx.content) for pattern in tables.translation_patterns):
        return True
    return any(pattern.match(ctx.after) for pattern in tables.translation_suffixes)


def is_symbol_reference(ctx: ClassificationContext, tables: FilterTables) -> bool:
    if ctx.before.rstrip().endswith("."):
        return True
    return ctx.after.lstrip().startswith("(")


_NAMED_VALUE_RE = re.compile(r"\b([A-Za-z_]\w*)\s*:\s*$")


def is_technical_argument(ctx: ClassificationContext, tables: FilterTables) -> bool:
    before = ctx.before
    if tables.technical_call_re.search(before):
        following = ctx.after.lstrip()
        if following.startswith(")") or following.startswith(","):
            return True
    named = _NAMED_VALUE_RE.search(before)
    return named is not None and named.group(1) in tables.technical_parameters


# ---------------------------------------------------------------------------
# 5: technical configuration shapes
# ---------------------------------------------------------------------------
_TLDS = (
    "com|org|net|io|dev|app|co|gov|edu|info|biz|me|ai|cloud|xyz|us|uk|de|fr|br"
    "|es|it|nl|ru|jp|cn|in|ca|au|pt"
)
_TECHNICAL_SHAPES: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        # URL or scheme prefix
        r"^[A-Za-z][A-Za-z0-9+.\-]*://",
        r"^(?:mailto|tel|sms|package|dart|data|file|content|intent):\S",
        r"^www\.\S+$",
        # domain and e-mail
        rf"^(?:[a-z0-9](?:[a-z0-9\-]*[a-z0-9])?\.)+(?:{_TLDS})(?::\d+)?(?:/\S*)?$",
        r"^[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}$",
        # bundle identifier
        r"^[a-z][a-z0-9_]*(?:\.[a-z0-9_]+){2,}$",
        # colors and hashes
        r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$",
        r"^0[xX][0-9a-fA-F]{6,8}$",
        r"^[0-9a-fA-F]{8,}$",
        # semantic version
        r"^v?\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.\-]+)?$",
        # platform integration identifiers
        r"\.(?:firebaseio|firebaseapp|appspot|cloudfunctions)\.(?:com|net)\b",
        r"^AIza[0-9A-Za-z_\-]{20,}$",
        r"^ca-app-pub-\d+[~/]\d+$",
        r"^\d+:\d+:(?:android|ios|web):[0-9a-fA-F]+$",
        r"^(?:G|UA)-[A-Z0-9\-]{6,}$",
        r"^(?:pk|sk)_(?:live|test)_\w+$",
        # ENVIRONMENT_CONSTANT
        r"^[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)+$",
        # long opaque token
        r"^(?=[^\s]*\d)(?=[^\s]*[A-Za-z])[A-Za-z0-9_\-]{20,}$",
        # file paths with an extension, asset folders, absolute paths and routes
        r"^[\w\-./@]+\.(?:png|jpe?g|gif|webp|bmp|svg|ico|ttf|otf|woff2?|json|ya?ml"
        r"|xml|txt|csv|md|html?|css|js|dart|mp3|mp4|wav|ogg|pdf|zip|riv|lottie|db)$",
        r"^(?:assets|images|img|icons|fonts|lib|packages)/\S*$",
        r"^/[^\s]*$",
        r"^[A-Za-z]:\\\S*$",
    )
)


def is_technical_shape(ctx: ClassificationContext, tables: FilterTables) -> bool:
    text = ctx.content.strip()
    return any(pattern.search(text) for pattern in _TECHNICAL_SHAPES)


# ---------------------------------------------------------------------------
# Prose guard
# ---------------------------------------------------------------------------
_WORD_RE = re.compile(r"[^\W\d_]{2,}")
_DATE_RUN_WORD_RE = re.compile(
    r"(?:d{2,4}|M{2,5}|y{2,4}|H{2}|h{2}|m{2}|s{2}|S{2,4}|E{2,5}|a{2}|z{2,4}|Z{2,5}"
    r"|L{2,5}|Q{2,4}|k{2}|K{2}|G{2,5})+"
)
_SINGLE_DATE_RUN_RE = re.compile(r"([dMyHhmsSEazZLQkKG])\1*")
_SENTENCE_PUNCTUATION_RE = re.compile(r"[!?,;:¿¡…。！？，；：]|\.(?=\s|$)")
_WHITESPACE_RE = re.compile(r"\s")


def _is_date_word(word: str) -> bool:
    return bool(_SINGLE_DATE_RUN_RE.fullmatch(word) or _DATE_RUN_WORD_RE.fullmatch(word))


def has_prose_word(text: str) -> bool:
    return any(not _is_date_word(word) for word in _WORD_RE.findall(text))


def is_proper_noun(text: str) -> bool:
    return len(text) >= 2 and text.isalpha() and text[0].isupper() and text[1:].islower()


def is_prose(ctx: ClassificationContext, tables: FilterTables) -> bool:
    text = ctx.stripped
    if is_proper_noun(text):
        return True
    if not has_prose_word(text):
        return False
    return bool(_WHITESPACE_RE.search(text) or _SENTENCE_PUNCTUATION_RE.search(text))


# ---------------------------------------------------------------------------
# 6: masks
# ---------------------------------------------------------------------------
_DATE_MASK_RE = re.compile(r"(?:[dMyHhmsSEazZLQkKG]+|[\s/.\-:,'T])+")
_DATE_SEPARATOR_RE = re.compile(r"[\s/.\-:,]+")
_NUMERIC_MASK_RE = re.compile(r"[\s#0-9.,:;+\-/()*%]*[#0-9][\s#0-9.,:;+\-/()*%]*")
_CURRENCY_MASK_RE = re.compile(
    r"(?:[A-Z]{0,3}\s?[$€£¥₹¤]\s?[#0-9.,\s]*[#0][#0-9.,\s]*)"
    r"|(?:[#0-9.,\s]*[#0][#0-9.,\s]*\s?[$€£¥₹¤])"
)
_REGEX_SHAPE_RE = re.compile(
    r"^\^|[^\\]\$$|\\[dDwWsSbB]|\[[^\]]*-[^\]]*\]|\(\?[:=!<]|\{\d+(?:,\d*)?\}|[*+?]\)|\]\+|\]\*"
)


def is_symbols_only(text: str) -> bool:
    return not any(char.isalnum() for char in text)


def is_date_format_mask(text: str) -> bool:
    if not text or not _DATE_MASK_RE.fullmatch(text):
        return False
    words = re.findall(r"[A-Za-z]+", text)
    if not words or not all(_is_date_word(word) for word in words):
        return False
    has_run = any(len(word) >= 2 for word in words)
    return has_run or (len(words) >= 2 and bool(_DATE_SEPARATOR_RE.search(text)))


def is_number_mask(text: str) -> bool:
    return bool(_NUMERIC_MASK_RE.fullmatch(text) or _CURRENCY_MASK_RE.fullmatch(text))


def is_regex_shape(text: str) -> bool:
    return bool(_REGEX_SHAPE_RE.search(text))


def is_mask(ctx: ClassificationContext, tables: FilterTables) -> bool:
    text = ctx.content.strip()
    return (
        is_symbols_only(text)
        or is_date_format_mask(text)
        or is_number_mask(text)
        or is_regex_shape(text)
    )


# ---------------------------------------------------------------------------
# 7: mostly interpolation
# ---------------------------------------------------------------------------
_NOISE_RE = re.compile(r"[\s+\-*/%'\"`]")


def is_mainly_interpolation(ctx: ClassificationContext, tables: FilterTables) -> bool:
    if "$" not in ctx.content:
        return False
    remainder = _NOISE_RE.sub("", strip_interpolation(ctx.content))
    return len(remainder) < 3


# ---------------------------------------------------------------------------
# 8: identifiers and keys
# ---------------------------------------------------------------------------
_SNAKE_CASE_RE = re.compile(r"[a-z][a-z0-9]*(?:_[a-z0-9]+)+|_[a-z0-9_]+")
_DOTTED_RE = re.compile(r"[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)+")
_CAMEL_CASE_RE = re.compile(r"[a-z][a-z0-9]*(?:[A-Z][a-z0-9]*)+")


def is_identifier(ctx: ClassificationContext, tables: FilterTables) -> bool:
    text = ctx.content.strip()
    if _SNAKE_CASE_RE.fullmatch(text) or _CAMEL_CASE_RE.fullmatch(text):
        return True
    if _DOTTED_RE.fullmatch(text):
        return True
    return text in tables.field_names


FILTER_PIPELINE: tuple[FilterStep, ...] = (
    FilterStep("blank", Verdict.DROP, is_blank),
    FilterStep("localized", Verdict.DROP, is_localized),
    FilterStep("symbol_reference", Verdict.DROP, is_symbol_reference),
    FilterStep("technical_argument", Verdict.DROP, is_technical_argument),
    FilterStep("technical_shape", Verdict.DROP, is_technical_shape),
    FilterStep("prose", Verdict.KEEP, is_prose),
    FilterStep("mask", Verdict.DROP, is_mask),
    FilterStep("interpolation", Verdict.DROP, is_mainly_interpolation),
    FilterStep("identifier", Verdict.DROP, is_identifier),
)


def classify(
    ctx: ClassificationContext,
    tables: FilterTables = DEFAULT_FILTER_TABLES,
    pipeline: tuple[FilterStep, ...] = FILTER_PIPELINE,
) -> Classification:
    for step in pipeline:
        if step.predicate(ctx, tables):
            return Classification(verdict=step.verdict, step=step.name)
    return Classification(verdict=Verdict.KEEP)


def is_translatable(
    content: str,
    arg_text: str = "",
    offset: int = 0,
    tables: FilterTables = DEFAULT_FILTER_TABLES,
) -> bool:
    return classify(ClassificationContext(content, arg_text, offset), tables).keep


# ---------------------------------------------------------------------------
# Parameter inference
# ---------------------------------------------------------------------------
_NAMED_TOKEN_RE = re.compile(r"\b([A-Za-z_]\w*)\s*:")


def named_tokens(arg_text: str) -> list[tuple[int, str]]:
    """``(offset, name)`` of every ``name:`` token outside literals."""
    code = mask_literals(arg_text)
    return [(found.start(), found.group(1)) for found in _NAMED_TOKEN_RE.finditer(code)]


def _tokens_before(
    arg_text: str, offset: int, tokens: list[tuple[int, str]] | None
) -> Iterator[tuple[int, str]]:
    ordered = tokens if tokens is not None else named_tokens(arg_text)
    for index in range(bisect_left(ordered, (offset,)) - 1, -1, -1):
        yield ordered[index]


def infer_parameter(
    arg_text: str,
    offset: int,
    candidates: tuple[str, ...],
    tokens: list[tuple[int, str]] | None = None,
) -> str:
    """Nearest ``name:`` before ``offset`` whose name is a candidate."""
    allowed = {candidate for candidate in candidates if candidate}
    if not allowed:
        return ""
    for _, name in _tokens_before(arg_text, offset, tokens):
        if name in allowed:
            return name
    return ""


def infer_generic_parameter(
    arg_text: str,
    offset: int,
    tokens: list[tuple[int, str]] | None = None,
) -> str:
    """Nearest ``name:`` before ``offset`` on the literal's own line."""
    line_start = arg_text.rfind("\n", 0, offset) + 1
    for position, name in _tokens_before(arg_text, offset, tokens):
        if position < line_start:
            break
        return name
    return ""
