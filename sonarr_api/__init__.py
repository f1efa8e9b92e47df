"""Async client for the Sonarr REST API."""

from __future__ import annotations

from .client import APIClient, SonarrAPI
from .config import ClientConfig, load_config
from .exceptions import ArgumentError, ConfigError, SonarrAPIError
from .models import HttpMethod, RequestSpec, TransportFailure

__all__ = [
    "APIClient",
    "ArgumentError",
    "ClientConfig",
    "ConfigError",
    "HttpMethod",
    "RequestSpec",
    "SonarrAPI",
    "SonarrAPIError",
    "TransportFailure",
    "load_config",
]
