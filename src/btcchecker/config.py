# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Service configuration.

Values come from a YAML file (``configs/btcchecker.yml`` by default) and are
then overridden by ``BTCCHECKER_<FIELD>`` environment variables. Anything left
unset keeps the dataclass default.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from btcchecker.auth.passwords import MIN_ROUNDS, check_rounds
from btcchecker.auth.session import DEFAULT_COOKIE_NAME, DEFAULT_MAX_AGE_SECONDS
from btcchecker.errors import ConfigError

DEFAULT_CONFIG_PATH = Path("configs") / "btcchecker.yml"
ENV_PREFIX = "BTCCHECKER_"

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off", ""}


@dataclass
class Config:
    bind_addr: str = ":8080"
    log_level: str = "debug"
    log_format: str = "text"
    database_path: str = "storage/db.csv"

    session_key: str = ""
    session_cookie_name: str = DEFAULT_COOKIE_NAME
    session_max_age: int = DEFAULT_MAX_AGE_SECONDS
    session_cookie_secure: bool = False

    hash_rounds: int = MIN_ROUNDS

    rate_api_url: str = "https://api.coingecko.com/api/v3/simple/price"
    rate_currency: str = "uah"
    rate_timeout: float = 10.0

    def host_port(self) -> Tuple[str, int]:
        """Split ``bind_addr`` (``host:port`` or ``:port``) for uvicorn."""
        host, sep, port = self.bind_addr.rpartition(":")
        if not sep:
            raise ConfigError(f"bind_addr must look like host:port, got {self.bind_addr!r}")
        try:
            port_num = int(port)
        except ValueError:
            raise ConfigError(f"invalid port in bind_addr {self.bind_addr!r}") from None
        return (host or "0.0.0.0"), port_num


def _coerce(name: str, field_type: Any, value: Any) -> Any:
    type_name = field_type if isinstance(field_type, str) else getattr(field_type, "__name__", "")
    try:
        if type_name == "bool":
            if isinstance(value, bool):
                return value
            s = str(value).strip().lower()
            if s in _TRUE:
                return True
            if s in _FALSE:
                return False
            raise ValueError(value)
        if type_name == "int":
            return int(value)
        if type_name == "float":
            return float(value)
        return "" if value is None else str(value)
    except (TypeError, ValueError):
        raise ConfigError(f"invalid value for {name}: {value!r}") from None


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"config {path} must be a mapping")
    return raw


def load_config(
    path: Optional[Union[str, Path]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """Build a Config from ``path`` plus environment overrides.

    A missing file is not an error when ``path`` is the default; an explicit
    path that does not exist is.
    """
    env = os.environ if environ is None else environ
    explicit = path is not None
    cfg_path = Path(path) if explicit else DEFAULT_CONFIG_PATH

    raw: Dict[str, Any] = {}
    if cfg_path.exists():
        raw = _read_yaml(cfg_path)
    elif explicit:
        raise ConfigError(f"config file not found: {cfg_path}")

    fields = {f.name: f for f in dataclasses.fields(Config)}
    unknown = sorted(set(raw) - set(fields))
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    for name, f in fields.items():
        if name in raw:
            values[name] = _coerce(name, f.type, raw[name])
        env_value = env.get(ENV_PREFIX + name.upper())
        if env_value is not None:
            values[name] = _coerce(name, f.type, env_value)

    cfg = Config(**values)
    try:
        check_rounds(cfg.hash_rounds)
    except ValueError as e:
        raise ConfigError(str(e)) from None
    return cfg
