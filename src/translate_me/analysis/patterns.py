"""Read-only pattern tables consulted by the widget locator and the filters."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Iterable, Pattern

from translate_me.analysis.model import WidgetPattern

DEFAULT_WIDGET_CATALOG: tuple[WidgetPattern, ...] = (
    # Text
    WidgetPattern("Text", ("", "data")),
    WidgetPattern("RichText", ("text",)),
    # Components
    WidgetPattern("Tooltip", ("message",)),
    WidgetPattern("SnackBar", ("content",)),
    WidgetPattern("AppBar", ("title",)),
    # Buttons
    WidgetPattern("ElevatedButton", ("child",)),
    WidgetPattern("TextButton", ("child",)),
    WidgetPattern("OutlinedButton", ("child",)),
    WidgetPattern("IconButton", ("tooltip",)),
    WidgetPattern("FloatingActionButton", ("tooltip", "child")),
    # Dialogs and overlays
    WidgetPattern("AlertDialog", ("title", "content")),
    WidgetPattern("SimpleDialog", ("title",)),
    WidgetPattern("BottomSheet", ("",)),
    # Navigation
    WidgetPattern("ListTile", ("title", "subtitle", "leading", "trailing")),
    WidgetPattern("BottomNavigationBarItem", ("label", "tooltip")),
    WidgetPattern("Tab", ("text", "child")),
    WidgetPattern("TabBar", ("",)),
    WidgetPattern("Drawer", ("child",)),
    # Containers
    WidgetPattern("Card", ("child",)),
    WidgetPattern("Chip", ("label",)),
    WidgetPattern("Badge", ("label",)),
    # Form inputs
    WidgetPattern("TextField", ("",)),
    WidgetPattern("TextFormField", ("",)),
    WidgetPattern("InputDecoration", ("labelText", "hintText", "helperText", "errorText")),
    WidgetPattern("DropdownButton", ("hint",)),
    WidgetPattern("DropdownMenuItem", ("child",)),
    # Progress
    WidgetPattern("LinearProgressIndicator", ("",)),
    WidgetPattern("CircularProgressIndicator", ("",)),
    # Cupertino
    WidgetPattern("CupertinoButton", ("child",)),
    WidgetPattern("CupertinoAlertDialog", ("title", "content")),
    WidgetPattern("CupertinoActionSheet", ("title", "message")),
    WidgetPattern("CupertinoNavigationBar", ("middle",)),
    WidgetPattern("CupertinoTextField", ("placeholder",)),
    # Stepper and expansion
    WidgetPattern("Stepper", ("",)),
    WidgetPattern("ExpansionTile", ("title",)),
    WidgetPattern("ExpansionPanel", ("headerBuilder",)),
    # Menus
    WidgetPattern("PopupMenuButton", ("tooltip",)),
    WidgetPattern("PopupMenuItem", ("child",)),
    # Data display
    WidgetPattern("DataTable", ("",)),
    WidgetPattern("DataColumn", ("label",)),
    WidgetPattern("DataCell", ("",)),
)

NON_WIDGET_CLASSES: tuple[str, ...] = (
    # primitives and collections
    "String", "int", "double", "num", "bool", "List", "Map", "Set", "Iterable",
    "Future", "Stream", "Duration", "DateTime", "Color", "Size", "Offset", "Rect",
    "Object", "Symbol", "Uri", "RegExp", "Exception", "Error", "StateError",
    "ArgumentError", "FormatException", "Completer", "Timer",
    # navigation
    "Navigator", "Route", "PageRoute", "MaterialPageRoute", "CupertinoPageRoute",
    "GoRouter", "GoRoute", "RouteSettings",
    # state management
    "Provider", "Consumer", "Selector", "ChangeNotifier", "ValueNotifier",
    "StateNotifier", "StreamController", "BlocProvider", "Bloc", "Cubit",
    # animation
    "Animation", "AnimationController", "Tween", "ColorTween", "Curve", "Curves",
    "CurvedAnimation", "Interval",
    # network and serialization
    "Http", "Dio", "Response", "Request", "Json", "Serializable", "BaseOptions",
    "Options", "FormData", "JsonKey", "JsonSerializable",
    # storage
    "Database", "Hive", "SqlFlite", "Sqflite", "Firebase", "Firestore",
    "SharedPreferences", "Box",
    # test doubles
    "Test", "Mock", "Fake", "Stub", "When", "Verify", "Expect",
)

# Tested against the right-trimmed ~50 characters before a candidate call.
CONTEXT_PATTERNS: tuple[str, ...] = (
    r"\bimport\s+[^\n]*$",
    r"\bclass\s+[^\n]*$",
    r"\bextends\s+[^\n]*$",
    r"\bimplements\s+[^\n]*$",
    r"\btypedef\s+[^\n]*$",
    r"\benum\s+[^\n]*$",
    r"\bmixin\s+[^\n]*$",
    r"\.$",
    r"\bnew$",
    r"\bas$",
    r"\bis$",
)

TRANSLATION_PATTERNS: tuple[str, ...] = (
    r"context\.l10n\.",
    r"AppLocalizations\.of\(context\)",
    r"Localizations\.of\(context\)",
    r"\bS\.of\(context\)",
    r"\.tr\(\)",
    r"\.tr\s*$",
    r"\bintl\.",
    r"\.i18n",
    r"\bLocaleKeys\.",
    r"\bI18n\.",
    r"\btranslations\.",
    r"\blocale\.",
)

# Accessors chained directly onto a literal: 'welcome'.tr(), 'key'.i18n
TRANSLATION_SUFFIX_PATTERNS: tuple[str, ...] = (
    r"^\s*\.\s*tr\b",
    r"^\s*\.\s*tr[A-Z]\w*\b",
    r"^\s*\.\s*i18n\b",
    r"^\s*\.\s*plural\s*\(",
    r"^\s*\.\s*translate\s*\(",
)

TECHNICAL_PARAMETERS: tuple[str, ...] = (
    # identity
    "id", "key", "tag", "heroTag", "restorationId", "restorationScopeId",
    "debugLabel", "identifier", "groupTag", "testId",
    # values and routing
    "value", "groupValue", "initialValue", "routeName", "initialRoute",
    "route", "path", "url", "uri", "scheme", "host",
    # typography and layout
    "fontFamily", "package", "textDirection", "textAlign", "locale",
    # assets and formats
    "assetName", "image", "mimeType", "pattern", "format", "dateFormat",
    # storage and plumbing
    "storageKey", "prefsKey", "channel", "method", "eventName",
)

# Calls whose literal argument is a technical value.
TECHNICAL_CALLS: tuple[str, ...] = (
    "Uri.parse",
    "Uri.tryParse",
    "Key",
    "ValueKey",
    "ObjectKey",
    "PageStorageKey",
    "RegExp",
    "DateFormat",
    "NumberFormat",
    "AssetImage",
    "NetworkImage",
    "Image.asset",
    "Image.network",
    "SvgPicture.asset",
)

FIELD_NAMES: tuple[str, ...] = (
    "id", "uid", "uuid", "type", "value", "values", "status", "state", "key",
    "code", "data", "name", "count", "index", "url", "path", "json", "true",
    "false", "null",
)


def _compile_all(patterns: Iterable[str]) -> tuple[Pattern[str], ...]:
    return tuple(re.compile(pattern) for pattern in patterns)


def _merge(base: tuple[str, ...], extra: Iterable[str]) -> tuple[str, ...]:
    merged = list(base)
    for item in extra:
        if item and item not in merged:
            merged.append(item)
    return tuple(merged)


@dataclass(frozen=True)
class FilterTables:
    non_widget_classes: frozenset[str] = frozenset(NON_WIDGET_CLASSES)
    context_patterns: tuple[Pattern[str], ...] = _compile_all(CONTEXT_PATTERNS)
    translation_patterns: tuple[Pattern[str], ...] = _compile_all(TRANSLATION_PATTERNS)
    translation_suffixes: tuple[Pattern[str], ...] = _compile_all(TRANSLATION_SUFFIX_PATTERNS)
    technical_parameters: frozenset[str] = frozenset(TECHNICAL_PARAMETERS)
    technical_calls: tuple[str, ...] = TECHNICAL_CALLS
    field_names: frozenset[str] = frozenset(FIELD_NAMES)
    context_window: int = 50
    _technical_call_re: Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        names = "|".join(
            re.escape(name) for name in sorted(self.technical_calls, key=len, reverse=True)
        )
        pattern = rf"(?<![\w.])(?:{names})\s*\(\s*$" if names else r"(?!)"
        object.__setattr__(self, "_technical_call_re", re.compile(pattern))

    @property
    def technical_call_re(self) -> Pattern[str]:
        return self._technical_call_re

    def with_overrides(
        self,
        *,
        technical_parameters: Iterable[str] = (),
        translation_patterns: Iterable[str] = (),
        non_widget_classes: Iterable[str] = (),
        technical_calls: Iterable[str] = (),
        field_names: Iterable[str] = (),
    ) -> FilterTables:
        """Return a copy extended with extra entries; ``self`` is untouched.

        Raises ``re.error`` for an invalid translation pattern.
        """
        return replace(
            self,
            technical_parameters=self.technical_parameters | frozenset(technical_parameters),
            translation_patterns=self.translation_patterns + _compile_all(translation_patterns),
            non_widget_classes=self.non_widget_classes | frozenset(non_widget_classes),
            technical_calls=_merge(self.technical_calls, technical_calls),
            field_names=self.field_names | frozenset(field_names),
        )


DEFAULT_FILTER_TABLES = FilterTables()
