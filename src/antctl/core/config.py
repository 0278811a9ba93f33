import dataclasses
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, cast

import yaml

from .exceptions import ConfigError
from .runtime import RuntimeMode, parse_runtime_mode

logger = logging.getLogger("antctl.core.config")

CONFIG_ENV = "ANTCTL_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.antctl/config.yml")

ENV_MODE = "ANTCTL_MODE"
ENV_SERVER = "ANTCTL_SERVER"
ENV_TIMEOUT = "ANTCTL_TIMEOUT"
ENV_LOG_LEVEL = "ANTCTL_LOG_LEVEL"

DEFAULT_CONFIG: Dict[str, Any] = {
    "mode": RuntimeMode.AGENT.value,
    "servers": {
        RuntimeMode.AGENT.value: "http://127.0.0.1:10350",
        RuntimeMode.CONTROLLER.value: "https://127.0.0.1:10349",
        RuntimeMode.FLOW_AGGREGATOR.value: "http://127.0.0.1:10348",
    },
    "timeout_seconds": 10.0,
    "auth_token_env": "ANTCTL_TOKEN",
    "verify_tls": True,
    "log_level": "WARNING",
}

__all__ = [
    "ClientConfig",
    "ConfigError",
    "load_client_config",
    "resolve_config_path",
]


@dataclasses.dataclass(frozen=True)
class ClientConfig:
    mode: RuntimeMode
    servers: Mapping[RuntimeMode, str]
    timeout_seconds: float
    auth_token_env: Optional[str]
    verify_tls: bool
    log_level: str
    config_path: Optional[Path] = None
    raw: Dict[str, Any] = dataclasses.field(default_factory=dict)

    def server_for(self, mode: RuntimeMode) -> str:
        try:
            return self.servers[mode]
        except KeyError as exc:
            raise ConfigError(f"No server configured for mode {mode.value}") from exc

    def auth_token(self, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
        if not self.auth_token_env:
            return None
        source = os.environ if env is None else env
        value = (source.get(self.auth_token_env) or "").strip()
        return value or None


def _merge_defaults(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = cast(Dict[str, Any], json.loads(json.dumps(base)))
    for key, value in overrides.items():
        if isinstance(value, dict) and key in merged and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml_dict(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a mapping: {path}")
    return data


def resolve_config_path(env: Optional[Mapping[str, str]] = None) -> Path:
    source = os.environ if env is None else env
    explicit = (source.get(CONFIG_ENV) or "").strip()
    if explicit:
        return Path(explicit).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def collect_env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    mode = (env.get(ENV_MODE) or "").strip()
    if mode:
        overrides["mode"] = mode
    timeout = (env.get(ENV_TIMEOUT) or "").strip()
    if timeout:
        overrides["timeout_seconds"] = timeout
    log_level = (env.get(ENV_LOG_LEVEL) or "").strip()
    if log_level:
        overrides["log_level"] = log_level
    return overrides


def _parse_timeout(value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"timeout_seconds must be a number, got {value!r}") from exc
    if timeout <= 0:
        raise ConfigError(f"timeout_seconds must be positive, got {timeout}")
    return timeout


def _parse_servers(raw: Any) -> Dict[RuntimeMode, str]:
    if not isinstance(raw, dict):
        raise ConfigError("servers must be a mapping of mode to URL")
    servers: Dict[RuntimeMode, str] = {}
    for key, value in raw.items():
        mode = parse_runtime_mode(key)
        url = str(value or "").strip()
        if not url:
            raise ConfigError(f"servers.{key} must be a non-empty URL")
        servers[mode] = url.rstrip("/")
    return servers


def _build_client_config(
    cfg: Dict[str, Any], *, config_path: Optional[Path], env: Mapping[str, str]
) -> ClientConfig:
    mode = parse_runtime_mode(cfg.get("mode", RuntimeMode.AGENT.value))
    servers = _parse_servers(cfg.get("servers", {}))
    server_override = (env.get(ENV_SERVER) or "").strip()
    if server_override:
        servers[mode] = server_override.rstrip("/")
    token_env = str(cfg.get("auth_token_env") or "").strip()
    return ClientConfig(
        mode=mode,
        servers=servers,
        timeout_seconds=_parse_timeout(cfg.get("timeout_seconds")),
        auth_token_env=token_env or None,
        verify_tls=bool(cfg.get("verify_tls", True)),
        log_level=str(cfg.get("log_level") or "WARNING").upper(),
        config_path=config_path,
        raw=cfg,
    )


def load_client_config(
    path: Optional[Path] = None, *, env: Optional[Mapping[str, str]] = None
) -> ClientConfig:
    """Load defaults, then the YAML config file, then environment overrides."""
    source: Mapping[str, str] = os.environ if env is None else env
    config_path = path if path is not None else resolve_config_path(source)
    file_data = _load_yaml_dict(config_path)
    merged = _merge_defaults(DEFAULT_CONFIG, file_data)
    merged = _merge_defaults(merged, collect_env_overrides(source))
    config = _build_client_config(
        merged,
        config_path=config_path if file_data else None,
        env=source,
    )
    logger.debug("Loaded antctl config (mode=%s, path=%s)", config.mode.value, config_path)
    return config
