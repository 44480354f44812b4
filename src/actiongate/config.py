"""Configuration loading with env var substitution and validation."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


class ConfigError(Exception):
    """Raised on configuration loading or validation errors."""


# --- Env var substitution ---

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")


def _replacer(match: re.Match) -> str:
    var = match.group(1)
    val = os.environ.get(var)
    if val is None:
        raise ConfigError(f"Environment variable {var} is not set")
    return val


def substitute_env_vars(obj: Any) -> Any:
    """Recursively substitute ${VAR} in all string values."""
    if isinstance(obj, str):
        return _ENV_VAR_RE.sub(_replacer, obj)
    if isinstance(obj, dict):
        return {k: substitute_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [substitute_env_vars(item) for item in obj]
    return obj


# --- Config dataclasses ---


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class PartnerConfig:
    partner_id: str
    key: str
    actions: list[str] | None = None  # None = every non-public action


@dataclass
class Config:
    server: ServerConfig = field(default_factory=ServerConfig)
    default_format: str = "xml"
    public_actions: list[str] = field(default_factory=list)
    mime_map: dict[str, str] | None = None
    actions: dict[str, str] = field(default_factory=dict)  # name -> "module:Class"
    realm: str = "actiongate"
    partners: dict[str, PartnerConfig] = field(default_factory=dict)
    templates: str | None = None


# --- Helpers ---


def _require(data: dict, key: str, context: str) -> Any:
    """Get a required key from a dict or raise ConfigError."""
    if key not in data or data[key] is None:
        raise ConfigError(f"Missing required config: {context}.{key}")
    return data[key]


def _coerce_int(value: Any, field_name: str) -> int:
    """Coerce a value to int (handles env-substituted strings)."""
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Cannot convert {field_name} to int: {value!r}") from None


def _string_list(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{field_name} must be a list")
    return [str(v) for v in value]


# --- Loaders ---


def parse_config(raw: dict | None, base_dir: Path | None = None) -> Config:
    """Validate an already-loaded YAML mapping and return a typed Config."""
    raw = substitute_env_vars(raw or {})
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")

    # Server
    srv_raw = raw.get("server") or {}
    server = ServerConfig(
        host=srv_raw.get("host", "127.0.0.1"),
        port=_coerce_int(srv_raw.get("port", 8080), "server.port"),
    )

    default_format = str(raw.get("default_format", "xml")).lower()
    public_actions = _string_list(raw.get("public_actions"), "public_actions")

    mime_map = None
    if raw.get("mime_map") is not None:
        if not isinstance(raw["mime_map"], dict):
            raise ConfigError("mime_map must be a mapping of media type to format")
        mime_map = {str(k): str(v) for k, v in raw["mime_map"].items()}

    # Actions
    actions_raw = raw.get("actions") or {}
    if not isinstance(actions_raw, dict):
        raise ConfigError("actions must be a mapping of action name to 'module:Class'")
    actions: dict[str, str] = {}
    for name, spec in actions_raw.items():
        if not isinstance(spec, str) or ":" not in spec:
            raise ConfigError(
                f"Invalid handler for action '{name}': "
                f"expected 'module.path:ClassName', got {spec!r}"
            )
        actions[str(name)] = spec

    # Partners
    partners: dict[str, PartnerConfig] = {}
    for partner_id, p_raw in (raw.get("partners") or {}).items():
        if not isinstance(p_raw, dict):
            raise ConfigError(f"Partner '{partner_id}' must be a mapping")
        key = _require(p_raw, "key", f"partners.{partner_id}")
        partner_actions = p_raw.get("actions")
        partners[str(partner_id)] = PartnerConfig(
            partner_id=str(partner_id),
            key=str(key),
            actions=(
                _string_list(partner_actions, f"partners.{partner_id}.actions")
                if partner_actions is not None
                else None
            ),
        )

    templates = raw.get("templates")
    if templates and base_dir is not None:
        templates = str(base_dir / templates)

    return Config(
        server=server,
        default_format=default_format,
        public_actions=public_actions,
        mime_map=mime_map,
        actions=actions,
        realm=str(raw.get("realm", "actiongate")),
        partners=partners,
        templates=templates,
    )


def load_config(path: str = "config.yaml") -> Config:
    """Load and validate config.yaml, returning a typed Config."""
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {path}")

    with open(p) as f:
        raw = yaml.safe_load(f)

    return parse_config(raw, base_dir=p.parent)
