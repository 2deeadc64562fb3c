from __future__ import annotations

import re
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from translate_me.analysis.model import WidgetPattern, normalize_catalog
from translate_me.analysis.patterns import (
    DEFAULT_FILTER_TABLES,
    DEFAULT_WIDGET_CATALOG,
    FilterTables,
)
from translate_me.exceptions import ConfigError

DEFAULT_CONFIG_NAME = "translate-me.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def _section(data: TomlTable, name: str) -> TomlTable:
    section = data.get(name, {})
    return section if isinstance(section, dict) else {}


def scan_defaults(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    return _section(load_config(root=root, config_path=config_path), "scan")


def widget_defaults(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    return _section(load_config(root=root, config_path=config_path), "widgets")


def filter_defaults(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    return _section(load_config(root=root, config_path=config_path), "filters")


def _normalize_name_list(value: TomlValue) -> list[str]:
    items: list[str] = []
    if value is None:
        return items
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple, set)):
        for item in value:
            if isinstance(item, str):
                items.extend([part.strip() for part in item.split(",") if part.strip()])
    return [item for item in items if item]


def _normalize_pattern_list(value: TomlValue) -> list[str]:
    # Regular expressions may contain commas, so no splitting here.
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str) and item.strip()]
    return []


def _as_bool(value: TomlValue) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return False


def scan_exclude_dirs(section: TomlTable | None) -> set[str]:
    if not isinstance(section, dict):
        return set()
    return set(_normalize_name_list(section.get("exclude")))


def scan_exclude_globs(section: TomlTable | None) -> list[str]:
    if not isinstance(section, dict):
        return []
    return _normalize_name_list(section.get("exclude_globs"))


def scan_include_tests(section: TomlTable | None) -> bool:
    if not isinstance(section, dict):
        return False
    return _as_bool(section.get("include_tests"))


def scan_extensions(section: TomlTable | None) -> tuple[str, ...]:
    if not isinstance(section, dict):
        return (".dart",)
    names = _normalize_name_list(section.get("extensions"))
    if not names:
        return (".dart",)
    return tuple(name if name.startswith(".") else f".{name}" for name in names)


def widget_catalog_from_section(
    section: TomlTable | None,
    base: tuple[WidgetPattern, ...] = DEFAULT_WIDGET_CATALOG,
) -> tuple[WidgetPattern, ...]:
    """Overlay ``[widgets]`` entries on ``base``.

    An entry naming a catalog widget replaces its parameters in place; new
    names are appended in table order.
    """
    if not isinstance(section, dict) or not section:
        return base
    overrides = {
        str(name): tuple(_normalize_name_list(params))
        for name, params in section.items()
        if str(name).strip()
    }
    merged = [
        WidgetPattern(pattern.widget, overrides.pop(pattern.widget))
        if pattern.widget in overrides
        else pattern
        for pattern in base
    ]
    merged.extend(WidgetPattern(name, params) for name, params in overrides.items())
    return normalize_catalog(merged)


def filter_tables_from_section(
    section: TomlTable | None,
    base: FilterTables = DEFAULT_FILTER_TABLES,
) -> FilterTables:
    if not isinstance(section, dict) or not section:
        return base
    translation_patterns = _normalize_pattern_list(section.get("translation_patterns"))
    for pattern in translation_patterns:
        try:
            re.compile(pattern)
        except re.error as exc:
            raise ConfigError(
                f"invalid translation pattern {pattern!r}: {exc}",
                key="filters.translation_patterns",
            ) from exc
    return base.with_overrides(
        technical_parameters=_normalize_name_list(section.get("technical_parameters")),
        translation_patterns=translation_patterns,
        non_widget_classes=_normalize_name_list(section.get("non_widget_classes")),
        technical_calls=_normalize_name_list(section.get("technical_calls")),
        field_names=_normalize_name_list(section.get("field_names")),
    )


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged
