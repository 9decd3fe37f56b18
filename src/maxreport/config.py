"""Configuration loading and precedence resolution."""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from maxreport.errors import ConfigError

DEFAULT_CONFIG_PATH = "~/.maxcdn.yml"
DEFAULT_API_HOST = "https://rws.maxcdn.com"

# Credential fields that may also come from the environment, in validation order.
CREDENTIAL_FIELDS = ("alias", "token", "secret")
ENV_VARS = {"alias": "ALIAS", "token": "TOKEN", "secret": "SECRET"}


@dataclass(frozen=True)
class FileConfig:
    host: str = ""
    alias: str = ""
    token: str = ""
    secret: str = ""


@dataclass(frozen=True)
class Config:
    alias: str = ""
    token: str = ""
    secret: str = ""
    host: str = ""
    verbose: bool = False

    @property
    def api_host(self) -> str:
        """Base URL for API calls, falling back to the standard endpoint."""
        if not self.host:
            return DEFAULT_API_HOST
        host = self.host.rstrip("/")
        if "://" not in host:
            host = f"https://{host}"
        return host

    def validate(self) -> str:
        """Return one line per missing credential; empty when the config is usable."""
        out = ""
        for name in CREDENTIAL_FIELDS:
            if not getattr(self, name):
                out += f"- missing {name} value\n"
        return out


def _optional_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ConfigError(f"config.{key} must be a scalar value")
    # YAML 1.1 reads yes/no/on/off as booleans.
    if isinstance(value, bool):
        raise ConfigError(f"config.{key} must be a string, got boolean {value}")
    return str(value).strip()


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> FileConfig:
    """Read the optional YAML config file.

    A missing or unreadable file yields an empty FileConfig. A file that exists
    but is not a YAML mapping raises ConfigError.
    """
    cfg_path = Path(path).expanduser()
    try:
        text = cfg_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigError(f"Config {cfg_path} is not valid UTF-8: {exc}") from exc
    except OSError:
        return FileConfig()

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {cfg_path}: {exc}") from exc

    if raw is None:
        return FileConfig()
    if not isinstance(raw, dict):
        raise ConfigError(f"Config {cfg_path} must be a mapping")

    return FileConfig(
        host=_optional_str(raw, "host"),
        alias=_optional_str(raw, "alias"),
        token=_optional_str(raw, "token"),
        secret=_optional_str(raw, "secret"),
    )


def _first(*values: str | None) -> str:
    for value in values:
        if value:
            return value
    return ""


def resolve_config(
    file_config: FileConfig,
    cli: Mapping[str, Any],
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Merge CLI arguments, environment and file values into a Config.

    Precedence is argument > environment > file, per field. ``host`` has no
    environment fallback.
    """
    env = os.environ if environ is None else environ

    resolved = {
        name: _first(cli.get(name), env.get(ENV_VARS[name]), getattr(file_config, name))
        for name in CREDENTIAL_FIELDS
    }
    return Config(
        host=_first(cli.get("host"), file_config.host),
        verbose=bool(cli.get("verbose", False)),
        **resolved,
    )
