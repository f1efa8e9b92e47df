"""Exceptions raised by the Sonarr API client."""

from __future__ import annotations


class SonarrAPIError(Exception):
    """Base exception for client-side failures."""


class ConfigError(SonarrAPIError, TypeError):
    """Raised when client options fail validation at construction time."""


class ArgumentError(SonarrAPIError, TypeError):
    """Raised when a verb method is called with invalid arguments."""


__all__ = [
    "SonarrAPIError",
    "ConfigError",
    "ArgumentError",
]
