"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, SecretStr

from src.notifier.context import Metadata

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


class TelegramConfig(BaseModel):
    """A single Telegram chat to deliver alerts to."""

    enabled: bool = False
    bot_token: SecretStr = SecretStr("")
    chat_id: str = ""
    api_url: str = "https://api.telegram.org"


class StreamConfig(BaseModel):
    """Write alerts to stdout (handy for local runs and CI logs)."""

    enabled: bool = False
    labels: list[str] = []


class MetadataConfig(BaseModel):
    """Application metadata attached to every alert."""

    app_name: str = ""
    instance_name: str = ""
    commit: str = ""
    build_date: str = ""
    extra: dict[str, str] = {}

    def to_metadata(self) -> Metadata:
        return Metadata(
            app_name=self.app_name,
            instance_name=self.instance_name,
            commit=self.commit,
            build_date=self.build_date,
            extra=dict(self.extra),
        )


class AlertsConfig(BaseModel):
    """Alert destinations."""

    telegram: list[TelegramConfig] = []
    stream: StreamConfig = StreamConfig()


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container."""

    alerts: AlertsConfig = AlertsConfig()
    metadata: MetadataConfig = MetadataConfig()
    logging: LoggingConfig = LoggingConfig()


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.

    Returns:
        Parsed Settings instance.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    _settings = Settings(**data)
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
