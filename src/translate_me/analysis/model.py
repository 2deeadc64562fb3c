"""Value types shared by the detection passes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence, TypeAlias


@dataclass(frozen=True)
class WidgetPattern:
    widget: str
    params: tuple[str, ...] = ()


@dataclass(frozen=True)
class StringLiteral:
    delimiter: str
    content: str
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def raw(self) -> str:
        return f"{self.delimiter}{self.content}{self.delimiter}"


@dataclass(frozen=True)
class CallSite:
    widget: str
    arg_text: str
    arg_start: int
    known: bool
    params: tuple[str, ...] = ()


@dataclass(frozen=True)
class Match:
    literal: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    widget: str
    parameter: str = ""

    @property
    def span(self) -> tuple[int, int, int, int]:
        return (self.start_line, self.start_col, self.end_line, self.end_col)


WidgetCatalog: TypeAlias = Mapping[str, Sequence[str]] | Iterable[WidgetPattern] | None


def normalize_catalog(catalog: WidgetCatalog) -> tuple[WidgetPattern, ...]:
    if catalog is None:
        return ()
    if isinstance(catalog, Mapping):
        entries = [
            WidgetPattern(widget=str(name), params=tuple(str(p) for p in params))
            for name, params in catalog.items()
        ]
    else:
        entries = [
            entry
            if isinstance(entry, WidgetPattern)
            else WidgetPattern(widget=str(entry[0]), params=tuple(entry[1]))
            for entry in catalog
        ]
    seen: set[str] = set()
    patterns: list[WidgetPattern] = []
    for entry in entries:
        name = entry.widget.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        patterns.append(WidgetPattern(widget=name, params=entry.params))
    return tuple(patterns)
