"""Client configuration models."""

from enum import Enum
from pathlib import Path

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ditto_client.models.docker import DockerOptions

DEFAULT_CONFIG_DIR = Path.home() / ".ditto-client"


def _merge_settings(base: dict, overrides: dict) -> dict:
    """Recursively overlay ``overrides`` onto ``base``."""
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_settings(merged[key], value)
        else:
            merged[key] = value
    return merged


class RunnerKind(str, Enum):
    """Which container runner to attach to the service."""

    NONE = "none"
    DOCKER = "docker"
    COMPOSE = "compose"


class DittoSettings(BaseSettings):
    """Connection and container settings for the Ditto client."""

    model_config = SettingsConfigDict(
        env_prefix="DITTO_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Connection settings
    base_url: str = "http://localhost:8090"
    app_id: str = "default"
    request_timeout: float = Field(default=30.0, gt=0)
    probe_collection: str = "chat"

    # Logging
    log_level: str = "INFO"

    # Container settings
    runner: RunnerKind = RunnerKind.NONE
    docker: DockerOptions = Field(default_factory=DockerOptions)

    config_dir: Path = Field(default_factory=lambda: DEFAULT_CONFIG_DIR)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v):
        """Validate the base URL is an http(s) URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("Base URL must start with http:// or https://")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Normalize and validate the log level name."""
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return v

    @staticmethod
    def read_file(config_path: Path) -> dict:
        """Return the raw mapping stored in a YAML settings file."""
        if not config_path.exists():
            return {}

        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}

        if not isinstance(config_data, dict):
            raise ValueError(f"Invalid settings file: {config_path}")
        return config_data

    @classmethod
    def load_from_file(cls, config_path: Path | None = None) -> "DittoSettings":
        """Load settings from a YAML file, falling back to defaults and environment."""
        if config_path is None:
            config_path = DEFAULT_CONFIG_DIR / "config.yaml"

        if not config_path.exists():
            return cls()

        config_data = cls.read_file(config_path)

        # DITTO_* variables and .env take precedence over the file
        environment = cls().model_dump(exclude_unset=True)
        return cls(**_merge_settings(config_data, environment))

    def save_to_file(self, config_path: Path | None = None) -> Path:
        """Save settings to a YAML file."""
        if config_path is None:
            config_path = self.config_dir / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(mode="json", exclude={"config_dir"})

        with open(config_path, "w") as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False)

        return config_path


__all__ = ["DittoSettings", "RunnerKind", "DEFAULT_CONFIG_DIR"]
