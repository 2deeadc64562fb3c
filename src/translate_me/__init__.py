"""translate-me package root."""

from translate_me.analysis import Match, WidgetPattern, find_hardcoded_strings

__all__ = ["__version__", "Match", "WidgetPattern", "find_hardcoded_strings"]

__version__ = "0.1.0"
