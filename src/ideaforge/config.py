"""Ideaforge configuration management."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

DEFAULT_API_URL = "http://localhost:8080"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


def _parse_interval(value: object) -> float | None:
    if value is None or value == "":
        return None
    interval = float(value)
    if interval <= 0:
        return None
    return interval


@dataclass
class Config:
    """Ideaforge configuration.

    ``base_url`` is read once when the client is built. ``poll_interval`` is
    the background history refresh cadence in seconds; ``None`` disables
    polling.
    """

    home_path: Path = field(default_factory=lambda: Path.home() / ".ideaforge")
    base_url: str = DEFAULT_API_URL
    poll_interval: float | None = None
    request_timeout: float = 30.0
    log_level: str = "INFO"
    ideas_api_enabled: bool = True

    @classmethod
    def load(cls, home_path: Path | None = None) -> Config:
        """Load config from YAML file, env vars, then defaults."""
        config = cls()

        if home_path:
            config.home_path = home_path

        env_home = os.environ.get("IDEAFORGE_HOME")
        if env_home:
            config.home_path = Path(env_home)

        # YAML first, env wins
        config_file = config.home_path / "config.yaml"
        if config_file.exists():
            with open(config_file) as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError(f"Config file {config_file} must contain a mapping")
            for key, value in data.items():
                config._apply(key, value)

        env_url = os.environ.get("IDEAFORGE_API_URL")
        if env_url:
            config.base_url = env_url

        env_poll = os.environ.get("IDEAFORGE_POLL_INTERVAL")
        if env_poll is not None:
            config.poll_interval = _parse_interval(env_poll)

        env_log = os.environ.get("IDEAFORGE_LOG_LEVEL")
        if env_log:
            config.log_level = env_log

        env_enabled = os.environ.get("IDEAFORGE_USE_IDEAS_API")
        if env_enabled:
            config.ideas_api_enabled = _parse_bool(env_enabled)

        config.base_url = config.base_url.rstrip("/")
        return config

    def _apply(self, key: str, value: object) -> None:
        if key == "poll_interval":
            self.poll_interval = _parse_interval(value)
        elif key == "home_path":
            self.home_path = Path(str(value))
        elif key == "ideas_api_enabled" and isinstance(value, str):
            self.ideas_api_enabled = _parse_bool(value)
        elif hasattr(self, key):
            expected_type = type(getattr(self, key))
            setattr(self, key, expected_type(value))

    @property
    def credentials_db_path(self) -> Path:
        return self.home_path / "credentials.db"

    def save(self) -> None:
        """Save current config to YAML."""
        self.home_path.mkdir(parents=True, exist_ok=True)
        config_file = self.home_path / "config.yaml"
        data = {
            "base_url": self.base_url,
            "poll_interval": self.poll_interval,
            "request_timeout": self.request_timeout,
            "log_level": self.log_level,
            "ideas_api_enabled": self.ideas_api_enabled,
        }
        with open(config_file, "w") as f:
            yaml.dump(data, f, default_flow_style=False)


def configure_logging(level: str = "INFO") -> None:
    """Route ideaforge loggers to stderr at the given level."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("ideaforge").setLevel(level.upper())
