from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union
import os
import re

import yaml

from ..models import Provider


BASE_DIR = Path(__file__).resolve().parent
DEFAULT_STATIC_DIR = BASE_DIR.parent / "static"

_ENV_PATTERN = re.compile(r"^\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>.*))?\}$")
_FALSE_STRINGS = {"", "0", "false", "no", "off"}


def load_yaml(path: Path) -> Dict[str, Any]:
    """Safely load a YAML file, returning an empty dict if it does not exist."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data or {}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries, with values from override taking precedence."""
    result: Dict[str, Any] = base.copy()
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _replace_env(value: Any, environ: Optional[Mapping[str, str]] = None) -> Any:
    """
    Replace strings of the form ${ENV_VAR} or ${ENV_VAR:-default} with the
    corresponding environment variable. An unset or empty variable yields the
    default (or "" when no default is given). Non-string values are returned unchanged.
    """
    env = os.environ if environ is None else environ
    if isinstance(value, str):
        match = _ENV_PATTERN.match(value)
        if match is None:
            return value
        return env.get(match.group("name")) or (match.group("default") or "")
    if isinstance(value, dict):
        return {k: _replace_env(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_replace_env(v, env) for v in value]
    return value


def load_config(
    base_dir: Path = BASE_DIR,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Load and merge config.yaml and local.yaml, then apply environment variable substitution.
    local.yaml is optional and overrides values from config.yaml when present.
    """
    base_cfg = load_yaml(base_dir / "config.yaml")
    local_cfg = load_yaml(base_dir / "local.yaml")
    merged = deep_merge(base_cfg, local_cfg) if local_cfg else base_cfg
    return _replace_env(merged, environ)


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() not in _FALSE_STRINGS


def _as_str(value: Any) -> str:
    return "" if value is None else str(value).strip()


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration, built once at start-up and passed explicitly
    to the router and adapters.

    The two credentials decide which provider answers chat requests; the
    `providers` mapping holds the remaining per-provider settings
    (api_base, model, timeout, ...) without the keys.
    """

    google_api_key: str = ""
    openai_api_key: str = ""
    port: int = 3001
    serverless: bool = False
    static_dir: Path = DEFAULT_STATIC_DIR
    cors_origins: Tuple[str, ...] = ("*",)
    max_body_bytes: int = 1024 * 1024
    log_level: str = "INFO"
    log_file: str = ""
    log_max_bytes: int = 10 * 1024 * 1024
    log_backup_count: int = 5
    providers: Mapping[str, Mapping[str, Any]] = field(default_factory=lambda: MappingProxyType({}))

    def api_key_for(self, provider: Provider) -> str:
        if provider is Provider.GOOGLE:
            return self.google_api_key
        if provider is Provider.OPENAI:
            return self.openai_api_key
        return ""


def load_settings(cfg: Optional[Dict[str, Any]] = None) -> Settings:
    """
    Build the immutable Settings from the merged configuration.

    When cfg is None the configuration files and the current environment are
    read; this is meant to happen exactly once per process.
    """
    if cfg is None:
        cfg = load_config()

    server = cfg.get("server") or {}
    logging_cfg = cfg.get("logging") or {}
    providers_cfg = cfg.get("providers") or {}

    providers: Dict[str, Mapping[str, Any]] = {}
    for name, provider_cfg in providers_cfg.items():
        provider_cfg = dict(provider_cfg or {})
        provider_cfg.pop("api_key", None)
        providers[str(name).lower()] = MappingProxyType(provider_cfg)

    static_dir = _as_str(server.get("static_dir"))
    origins = server.get("cors_origins") or ["*"]
    if isinstance(origins, str):
        origins = [o.strip() for o in origins.split(",") if o.strip()]

    return Settings(
        google_api_key=_as_str((providers_cfg.get("google") or {}).get("api_key")),
        openai_api_key=_as_str((providers_cfg.get("openai") or {}).get("api_key")),
        port=int(server.get("port") or 3001),
        serverless=_as_bool(server.get("serverless")),
        static_dir=Path(static_dir) if static_dir else DEFAULT_STATIC_DIR,
        cors_origins=tuple(str(o) for o in origins),
        max_body_bytes=int(server.get("max_body_bytes") or 1024 * 1024),
        log_level=_as_str(logging_cfg.get("level")).upper() or "INFO",
        log_file=_as_str(logging_cfg.get("file")),
        log_max_bytes=int(logging_cfg.get("max_bytes") or 10 * 1024 * 1024),
        log_backup_count=int(logging_cfg.get("backup_count") or 5),
        providers=MappingProxyType(providers),
    )


def get_provider_api_config(
    settings: Settings,
    provider: Union[Provider, str],
) -> Dict[str, Any]:
    """
    Build the effective adapter configuration for a given provider.

    It merges the provider-level settings (api_base, model, timeout, ...)
    with the provider's credential from Settings.
    """
    if not isinstance(provider, Provider):
        provider = Provider(str(provider).lower())
    if provider is Provider.NONE or provider.value not in settings.providers:
        raise ValueError(f"Unknown provider: {provider.value}")

    merged: Dict[str, Any] = dict(settings.providers[provider.value])
    merged["api_key"] = settings.api_key_for(provider)
    return merged
