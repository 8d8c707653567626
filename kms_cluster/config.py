"""Frozen dataclasses for configuration and YAML loader with env-var interpolation.

Strings may reference the environment as ``${KMS_API_KEY}`` or, with a
fallback, ``${KMS_TIMEOUT:-10}``. ``server.endpoints`` may be a list or a
single comma/whitespace separated string, so a whole cluster can be given
as ``endpoints: ${KMS_ENDPOINTS}``.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError

_ENV_PATTERN = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}")
_ENDPOINT_SEPARATOR = re.compile(r"[,\s]+")


def _expand(value: Any) -> Any:
    """Substitute environment references in every string of a nested structure."""
    if isinstance(value, dict):
        return {k: _expand(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand(v) for v in value]
    if not isinstance(value, str):
        return value

    def _lookup(match: re.Match) -> str:
        name, default = match.group("name"), match.group("default")
        resolved = os.environ.get(name, default)
        if resolved is None:
            raise ConfigError(f"Environment variable '{name}' is not set")
        return resolved

    return _ENV_PATTERN.sub(_lookup, value)


def _normalize_server(server: Any) -> Any:
    """Accept the string forms environment references produce in `server`.

    A string `endpoints` is split into the endpoints it names and a string
    `timeout` is read as a number.
    """
    if not isinstance(server, dict):
        return server
    server = dict(server)
    if isinstance(server.get("endpoints"), str):
        server["endpoints"] = [e for e in _ENDPOINT_SEPARATOR.split(server["endpoints"]) if e]
    if isinstance(server.get("timeout"), str):
        try:
            server["timeout"] = float(server["timeout"])
        except ValueError:
            raise ConfigError(f"server.timeout is not a number: {server['timeout']!r}") from None
    return server


@dataclass(frozen=True)
class TLSConfig:
    verify: bool = True
    ca_file: str = ""  # empty = system trust store
    client_cert: str = ""
    client_key: str = ""


@dataclass(frozen=True)
class ServerConfig:
    endpoints: list[str] = field(default_factory=list)
    api_key: str = ""
    timeout: float = 10
    tls: TLSConfig = field(default_factory=TLSConfig)


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    format: str = "json"  # "json" or "text"


@dataclass(frozen=True)
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_NESTED_TYPES: dict[str, type] = {
    "TLSConfig": TLSConfig,
    "ServerConfig": ServerConfig,
    "LoggingConfig": LoggingConfig,
}


def _build_nested(cls: type, data: dict[str, Any]) -> Any:
    """Construct a frozen dataclass, recursively building nested dataclass fields."""
    if not isinstance(data, dict):
        return data
    field_types = {f.name: f.type for f in cls.__dataclass_fields__.values()}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key not in field_types:
            continue
        ft = field_types[key]
        # Annotations are strings under `from __future__ import annotations`
        if isinstance(ft, str):
            ft = _NESTED_TYPES.get(ft, ft)
        if isinstance(ft, type) and hasattr(ft, "__dataclass_fields__") and isinstance(value, dict):
            kwargs[key] = _build_nested(ft, value)
        else:
            kwargs[key] = value
    return cls(**kwargs)


def load_config(path: str | Path) -> AppConfig:
    """Load and validate configuration from a YAML file."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Configuration file must be a YAML mapping")

    raw = _expand(raw)
    if "server" in raw:
        raw["server"] = _normalize_server(raw["server"])

    config = _build_nested(AppConfig, raw)
    _validate(config)
    return config


def _validate(config: AppConfig) -> None:
    """Validate configuration values."""
    endpoints = config.server.endpoints
    if not isinstance(endpoints, list) or not endpoints:
        raise ConfigError("server.endpoints must be a non-empty list")

    for endpoint in endpoints:
        if not isinstance(endpoint, str) or not endpoint.strip():
            raise ConfigError(f"server.endpoints contains an invalid entry: {endpoint!r}")

    if not isinstance(config.server.timeout, (int, float)) or config.server.timeout <= 0:
        raise ConfigError("server.timeout must be a positive number")

    if config.server.tls.client_cert and not config.server.tls.client_key:
        raise ConfigError("server.tls.client_key is required when client_cert is set")

    if config.logging.format not in ("json", "text"):
        raise ConfigError("logging.format must be 'json' or 'text'")
