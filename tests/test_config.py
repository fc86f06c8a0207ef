"""Tests for configuration loading."""

from __future__ import annotations

import logging

import pytest
import yaml

from ideaforge.config import DEFAULT_API_URL, Config, configure_logging

ENV_VARS = (
    "IDEAFORGE_HOME",
    "IDEAFORGE_API_URL",
    "IDEAFORGE_POLL_INTERVAL",
    "IDEAFORGE_LOG_LEVEL",
    "IDEAFORGE_USE_IDEAS_API",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path):
    config = Config.load(tmp_path)
    assert config.home_path == tmp_path
    assert config.base_url == DEFAULT_API_URL
    assert config.poll_interval is None
    assert config.ideas_api_enabled is True
    assert config.credentials_db_path == tmp_path / "credentials.db"


def test_yaml_file(tmp_path):
    (tmp_path / "config.yaml").write_text(
        yaml.dump(
            {
                "base_url": "https://api.example.test/",
                "poll_interval": 30,
                "request_timeout": 5,
                "ideas_api_enabled": "no",
                "unknown_key": "ignored",
            }
        )
    )
    config = Config.load(tmp_path)

    assert config.base_url == "https://api.example.test"
    assert config.poll_interval == 30.0
    assert config.request_timeout == 5.0
    assert config.ideas_api_enabled is False
    assert not hasattr(config, "unknown_key")


def test_yaml_must_be_mapping(tmp_path):
    (tmp_path / "config.yaml").write_text("- just\n- a list\n")
    with pytest.raises(ValueError, match="must contain a mapping"):
        Config.load(tmp_path)


def test_env_overrides_yaml(tmp_path, monkeypatch):
    (tmp_path / "config.yaml").write_text(yaml.dump({"base_url": "https://from-yaml.test"}))
    monkeypatch.setenv("IDEAFORGE_API_URL", "https://from-env.test/")
    monkeypatch.setenv("IDEAFORGE_POLL_INTERVAL", "2.5")
    monkeypatch.setenv("IDEAFORGE_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("IDEAFORGE_USE_IDEAS_API", "false")

    config = Config.load(tmp_path)

    assert config.base_url == "https://from-env.test"
    assert config.poll_interval == 2.5
    assert config.log_level == "DEBUG"
    assert config.ideas_api_enabled is False


def test_env_home(tmp_path, monkeypatch):
    home = tmp_path / "elsewhere"
    monkeypatch.setenv("IDEAFORGE_HOME", str(home))
    assert Config.load(tmp_path).home_path == home


@pytest.mark.parametrize("raw", ["0", "-5", ""])
def test_non_positive_poll_interval_disables_polling(tmp_path, monkeypatch, raw):
    monkeypatch.setenv("IDEAFORGE_POLL_INTERVAL", raw)
    assert Config.load(tmp_path).poll_interval is None


def test_invalid_bool_raises(tmp_path, monkeypatch):
    monkeypatch.setenv("IDEAFORGE_USE_IDEAS_API", "maybe")
    with pytest.raises(ValueError, match="Invalid boolean"):
        Config.load(tmp_path)


def test_save_and_reload(tmp_path):
    config = Config(home_path=tmp_path, base_url="https://saved.test", poll_interval=15.0)
    config.ideas_api_enabled = False
    config.save()

    loaded = Config.load(tmp_path)
    assert loaded.base_url == "https://saved.test"
    assert loaded.poll_interval == 15.0
    assert loaded.ideas_api_enabled is False


def test_configure_logging():
    logger = logging.getLogger("ideaforge")
    try:
        configure_logging("debug")
        assert logger.level == logging.DEBUG
        configure_logging("WARNING")
        assert logger.level == logging.WARNING
    finally:
        logger.setLevel(logging.NOTSET)
