from __future__ import annotations

from pathlib import Path

import pytest

from ollama_bridge.common.config import Settings, load_settings
from ollama_bridge.common.errors import ConfigError


def test_defaults_without_file_or_env() -> None:
    assert load_settings(env={}) == Settings()
    assert Settings().timeout_s == 30.0


def test_env_overrides(tmp_path: Path) -> None:
    s = load_settings(env={"OLLAMA_HOST": "http://gpu:11434", "OLLAMA_MODEL": "llama3", "OLLAMA_TIMEOUT": "45000", "LOG_LEVEL": "debug"})
    assert s.ollama_host == "http://gpu:11434"
    assert s.ollama_model == "llama3"
    assert s.timeout_s == 45.0
    assert s.log_level == "DEBUG"


def test_yaml_file_then_env(tmp_path: Path) -> None:
    cfg = tmp_path / "bridge.yaml"
    cfg.write_text("ollama_host: http://file:11434\nollama_model: from-file\ntimeout_s: 12\nunknown_key: 1\n", encoding="utf-8")
    s = load_settings(env={"OLLAMA_BRIDGE_CONFIG": str(cfg), "OLLAMA_MODEL": "from-env"})
    assert s.ollama_host == "http://file:11434"
    assert s.ollama_model == "from-env"
    assert s.timeout_s == 12.0


def test_repo_config_file_loads() -> None:
    s = load_settings(Path(__file__).parents[1] / "configs" / "bridge.yaml", env={})
    assert s.ollama_model == "deepseek-coder:14b"


@pytest.mark.parametrize("value", ["0", "soon", "-5", "inf"])
def test_unusable_env_timeout_keeps_default(value: str) -> None:
    assert load_settings(env={"OLLAMA_TIMEOUT": value}).timeout_s == 30.0


def test_unusable_env_timeout_keeps_file_value(tmp_path: Path) -> None:
    cfg = tmp_path / "bridge.yaml"
    cfg.write_text("timeout_s: 12\n", encoding="utf-8")
    assert load_settings(cfg, env={"OLLAMA_TIMEOUT": "0"}).timeout_s == 12.0


def test_invalid_file_timeout(tmp_path: Path) -> None:
    cfg = tmp_path / "bridge.yaml"
    cfg.write_text("timeout_s: soon\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(cfg, env={})
    cfg.write_text("timeout_s: 0\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(cfg, env={})


def test_missing_or_broken_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "absent.yaml", env={})
    cfg = tmp_path / "bridge.yaml"
    cfg.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(cfg, env={})


def test_settings_are_frozen() -> None:
    with pytest.raises(AttributeError):
        Settings().ollama_model = "other"  # type: ignore[misc]
