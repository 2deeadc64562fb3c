"""Errors raised at the translate-me boundaries."""

from __future__ import annotations


class ConfigError(ValueError):
    """User-supplied configuration that cannot be degraded to a default."""

    def __init__(self, message: str, *, key: str | None = None):
        super().__init__(message)
        self.key = key
