"""Tests for config loading."""

import os
import tempfile

import pytest

from hwkeeper.config import KeeperConfig, load_config


@pytest.fixture(autouse=True)
def _no_api_keys(monkeypatch):
    for var in ("GOOGLE_VISION_API_KEY", "ANTHROPIC_API_KEY", "GEMINI_API_KEY"):
        monkeypatch.delenv(var, raising=False)


def _write_toml(content: bytes) -> str:
    with tempfile.NamedTemporaryFile(suffix=".toml", delete=False) as f:
        f.write(content)
        return f.name


def test_load_config_defaults():
    """Loading with no path returns all defaults."""
    config = load_config()
    assert isinstance(config, KeeperConfig)
    assert config.ocr.backend == "auto"
    assert config.ocr.fallback_to_mock is True
    assert config.ocr.mock_delay == 2.0
    assert config.ocr.google_vision.api_key == ""
    assert config.ocr.claude.model == "claude-sonnet-4-5-20250929"
    assert config.ocr.gemini.model == "gemini-2.0-flash"
    assert config.processing.simulated_delay == 1.5
    assert config.database.path == "~/.config/hwkeeper/products.db"


def test_load_config_nonexistent_file():
    """Loading a nonexistent file returns defaults."""
    config = load_config("/nonexistent/path.toml")
    assert config.ocr.backend == "auto"


def test_load_config_from_toml():
    """Loading a valid TOML file populates config."""
    path = _write_toml(b"""\
[ocr]
backend = "claude"
fallback_to_mock = false
mock_delay = 0

[ocr.claude]
api_key = "test-key-123"
model = "claude-test"

[ocr.google_vision]
api_key = "vision-key"

[processing]
simulated_delay = 0.25

[database]
path = "/var/lib/hwkeeper/products.db"
""")
    try:
        config = load_config(path)
    finally:
        os.unlink(path)

    assert config.ocr.backend == "claude"
    assert config.ocr.fallback_to_mock is False
    assert config.ocr.mock_delay == 0.0
    assert config.ocr.claude.api_key == "test-key-123"
    assert config.ocr.claude.model == "claude-test"
    assert config.ocr.google_vision.api_key == "vision-key"
    assert config.ocr.gemini.model == "gemini-2.0-flash"
    assert config.processing.simulated_delay == 0.25
    assert config.database.path == "/var/lib/hwkeeper/products.db"


def test_env_var_api_keys(monkeypatch):
    """API keys fall back to environment variables."""
    monkeypatch.setenv("GOOGLE_VISION_API_KEY", "env-vision")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-claude")
    monkeypatch.setenv("GEMINI_API_KEY", "env-gemini")

    config = load_config()
    assert config.ocr.google_vision.api_key == "env-vision"
    assert config.ocr.claude.api_key == "env-claude"
    assert config.ocr.gemini.api_key == "env-gemini"


def test_config_file_key_wins_over_env(monkeypatch):
    monkeypatch.setenv("GOOGLE_VISION_API_KEY", "env-vision")
    path = _write_toml(b'[ocr.google_vision]\napi_key = "file-vision"\n')
    try:
        config = load_config(path)
    finally:
        os.unlink(path)

    assert config.ocr.google_vision.api_key == "file-vision"
