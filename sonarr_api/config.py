"""Configuration loading and validation for the Sonarr API client."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .exceptions import ConfigError

DEFAULT_PORT = 8989
DEFAULT_CONFIG_PATH = Path("sonarr.yaml")

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_API_KEY_RE = re.compile(r"[a-z0-9]{32}")

# camelCase option names accepted alongside the snake_case field names.
_OPTION_ALIASES = {
    "apiKey": "api_key",
    "urlBase": "url_base",
    "timeoutSeconds": "timeout_seconds",
}


@dataclass(frozen=True)
class ClientConfig:
    """Validated connection settings for one Sonarr instance.

    Build instances through :meth:`from_options` or :meth:`from_mapping`; the
    plain constructor performs no validation.
    """

    hostname: str
    api_key: str
    port: int = DEFAULT_PORT
    url_base: Optional[str] = None
    ssl: bool = False
    username: Optional[str] = None
    password: Optional[str] = None
    timeout_seconds: Optional[float] = None
    base_url: str = field(init=False)

    def __post_init__(self) -> None:
        scheme = "https" if self.ssl else "http"
        server_url = f"{scheme}://{self.hostname}:{self.port}{self.url_base or ''}"
        object.__setattr__(self, "base_url", f"{server_url}/api/")

    @property
    def auth(self) -> bool:
        """Basic auth is only used when both credentials are present."""
        return bool(self.username and self.password)

    @classmethod
    def from_options(
        cls,
        hostname: Optional[str] = None,
        port: Any = None,
        api_key: Optional[str] = None,
        url_base: Optional[str] = None,
        ssl: Any = False,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ) -> "ClientConfig":
        if not hostname:
            raise ConfigError("hostname required")
        hostname = _SCHEME_RE.sub("", str(hostname).strip())
        if not hostname:
            raise ConfigError("hostname required")

        return cls(
            hostname=hostname,
            port=_parse_port(port),
            api_key=_validate_api_key(api_key),
            url_base=_normalize_url_base(url_base),
            ssl=_as_bool(ssl, False),
            username=username or None,
            password=password or None,
            timeout_seconds=timeout_seconds,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ClientConfig":
        options: dict[str, Any] = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key, key)
            options[name] = value

        timeout = _maybe_float(options.get("timeout_seconds"), None)
        if timeout is not None and timeout <= 0.0:
            timeout = None

        return cls.from_options(
            hostname=options.get("hostname"),
            port=options.get("port"),
            api_key=options.get("api_key"),
            url_base=options.get("url_base"),
            ssl=_as_bool(options.get("ssl"), False),
            username=options.get("username"),
            password=options.get("password"),
            timeout_seconds=timeout,
        )


def load_config(path: str | Path | None = None, *, env: Mapping[str, str] | None = None) -> ClientConfig:
    """Read options from YAML, overlay ``SONARR_*`` environment variables and validate."""
    env = env if env is not None else os.environ

    candidate_paths: list[Path] = []
    if path:
        candidate_paths.append(Path(path))
    elif env.get("SONARR_CONFIG_PATH"):
        candidate_paths.append(Path(env["SONARR_CONFIG_PATH"]))
    candidate_paths.append(DEFAULT_CONFIG_PATH)

    config_data: dict[str, Any] = {}
    for candidate in candidate_paths:
        if candidate.exists():
            with candidate.open("r", encoding="utf-8") as handle:
                loaded = yaml.safe_load(handle) or {}
            config_data = dict(loaded) if isinstance(loaded, dict) else {}
            break

    return ClientConfig.from_mapping(_apply_env_overrides(config_data, env))


_ENV_OVERRIDES = {
    "SONARR_HOSTNAME": "hostname",
    "SONARR_PORT": "port",
    "SONARR_API_KEY": "api_key",
    "SONARR_URL_BASE": "url_base",
    "SONARR_SSL": "ssl",
    "SONARR_USERNAME": "username",
    "SONARR_PASSWORD": "password",
    "SONARR_TIMEOUT_SECONDS": "timeout_seconds",
}


def _apply_env_overrides(data: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    merged = {_OPTION_ALIASES.get(key, key): value for key, value in data.items()}
    for env_name, option in _ENV_OVERRIDES.items():
        if env_name not in env:
            continue
        value = env[env_name].strip()
        if value:
            merged[option] = value
    return merged


def _parse_port(value: Any) -> int:
    if value is None or value == "":
        return DEFAULT_PORT
    if isinstance(value, bool):
        raise ConfigError("invalid port")
    if isinstance(value, int):
        port = value
    else:
        try:
            port = int(str(value).strip())
        except (TypeError, ValueError) as exc:
            raise ConfigError("invalid port") from exc
    if not 1 <= port <= 65535:
        raise ConfigError("invalid port")
    return port


def _validate_api_key(value: Any) -> str:
    if not isinstance(value, str) or not _API_KEY_RE.fullmatch(value):
        raise ConfigError("invalid api key")
    return value


def _normalize_url_base(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    value = str(value)
    if not value.startswith("/"):
        value = "/" + value
    return value


def _maybe_float(value: Any, default: Optional[float]) -> Optional[float]:
    if value in {None, "", "None"}:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


__all__ = [
    "ClientConfig",
    "DEFAULT_PORT",
    "load_config",
]
