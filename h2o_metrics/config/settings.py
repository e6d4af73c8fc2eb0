"""YAML config loader with environment variable expansion."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


def _expand_env_vars(value: str) -> str:
    """Replace ${VAR_NAME} with environment variable values."""
    pattern = re.compile(r"\$\{([^}]+)\}")
    def replacer(match: re.Match) -> str:
        var = match.group(1)
        return os.environ.get(var, match.group(0))
    return pattern.sub(replacer, value)


def _walk_and_expand(obj: object) -> object:
    """Recursively expand environment variables in strings."""
    if isinstance(obj, str):
        return _expand_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _walk_and_expand(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_expand(item) for item in obj]
    return obj


class PluginConfig(BaseModel):
    host: str = "127.0.0.1"
    scheme: str = "http"
    port: int = Field(80, ge=1, le=65535)
    path: str = "/server-status/json"
    basic_auth: str = ""           # "user:pass", embedded in the URI
    with_durations: bool = False   # needs "duration-stats: ON" in h2o.conf
    with_server_stats: bool = False
    metric_key_prefix: str = "h2o"
    tempfile: str | None = None
    timeout: float = Field(10.0, gt=0)

    @field_validator("scheme")
    @classmethod
    def _check_scheme(cls, value: str) -> str:
        value = value.lower()
        if value not in ("http", "https"):
            raise ValueError(f"Unsupported scheme '{value}'")
        return value

    @field_validator("path")
    @classmethod
    def _ensure_leading_slash(cls, value: str) -> str:
        return value if value.startswith("/") else f"/{value}"

    @property
    def uri(self) -> str:
        if self.basic_auth:
            return f"{self.scheme}://{self.basic_auth}@{self.host}:{self.port}{self.path}"
        return f"{self.scheme}://{self.host}:{self.port}{self.path}"

    @property
    def display_uri(self) -> str:
        """The URI with any password masked, for logs and error messages."""
        if self.basic_auth:
            user = self.basic_auth.split(":", 1)[0]
            return f"{self.scheme}://{user}:***@{self.host}:{self.port}{self.path}"
        return self.uri


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> PluginConfig:
    """Load configuration from a YAML file, then apply explicit overrides.

    Keys in the file may use either ``basic-auth`` or ``basic_auth``
    spelling. Overrides whose value is None are ignored so unset CLI
    flags never clobber file values.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if not path.is_file():
            raise ValueError(f"Config file not found: {path}")
        with open(path) as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        raw = _walk_and_expand(loaded)
        raw = {str(k).replace("-", "_"): v for k, v in raw.items()}

    for key, value in (overrides or {}).items():
        if value is not None:
            raw[key] = value

    return PluginConfig.model_validate(raw)
