"""Process configuration: optional YAML file, then environment overrides."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from ollama_bridge.common.errors import ConfigError

LOGGER = logging.getLogger("ollama_bridge.common.config")

CONFIG_ENV = "OLLAMA_BRIDGE_CONFIG"

@dataclass(frozen=True)
class Settings:
    """Read-only settings shared by the client and the HTTP app."""
    ollama_host: str = "http://ollama:11434"
    ollama_model: str = "deepseek-coder:14b"
    timeout_s: float = 30.0
    log_level: str = "INFO"


def load_cfg(path: str | Path) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _to_float(name: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}") from None


def _env_timeout_ms(value: str) -> int:
    """Milliseconds from OLLAMA_TIMEOUT; 0 when unusable so the configured value stays."""
    try:
        ms = int(float(value))
    except (ValueError, OverflowError):
        return 0
    return ms if ms > 0 else 0


def load_settings(path: str | Path | None = None, env: Mapping[str, str] | None = None) -> Settings:
    """
    Build settings once at startup.

    Args:
        path: YAML config file. Falls back to $OLLAMA_BRIDGE_CONFIG when unset.
        env: Environment mapping, defaults to os.environ.

    Returns:
        Frozen settings. OLLAMA_TIMEOUT is given in milliseconds.
    """
    env = os.environ if env is None else env
    path = path or env.get(CONFIG_ENV)

    settings = Settings()
    if path:
        raw = load_cfg(path)
        known = {f.name for f in fields(Settings)}
        data = {k: v for k, v in raw.items() if k in known}
        if "timeout_s" in data:
            data["timeout_s"] = _to_float("timeout_s", data["timeout_s"])
        settings = replace(settings, **data)

    overrides: dict[str, Any] = {}
    if env.get("OLLAMA_HOST"):
        overrides["ollama_host"] = env["OLLAMA_HOST"]
    if env.get("OLLAMA_MODEL"):
        overrides["ollama_model"] = env["OLLAMA_MODEL"]
    if env.get("OLLAMA_TIMEOUT"):
        timeout_ms = _env_timeout_ms(env["OLLAMA_TIMEOUT"])
        if timeout_ms:
            overrides["timeout_s"] = timeout_ms / 1000.0
        else:
            LOGGER.warning("Ignoring OLLAMA_TIMEOUT=%r, keeping %ss", env["OLLAMA_TIMEOUT"], settings.timeout_s)
    if env.get("LOG_LEVEL"):
        overrides["log_level"] = env["LOG_LEVEL"].upper()

    settings = replace(settings, **overrides)
    if settings.timeout_s <= 0:
        raise ConfigError(f"timeout must be positive, got {settings.timeout_s}")
    return settings
