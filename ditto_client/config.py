"""Configuration management for the Ditto client."""

from pathlib import Path

from ditto_client.models.settings import DEFAULT_CONFIG_DIR, DittoSettings

# Cached settings instance used by the CLI
_settings: DittoSettings | None = None


def get_settings(config_path: Path | None = None) -> DittoSettings:
    """Get the cached settings instance, loading it on first use."""
    global _settings
    if _settings is None:
        _settings = DittoSettings.load_from_file(config_path)
    return _settings


def set_settings(settings: DittoSettings | None) -> None:
    """Replace (or with None, reset) the cached settings instance."""
    global _settings
    _settings = settings


def get_config_file_path() -> Path:
    """Get the default YAML settings file path."""
    return DEFAULT_CONFIG_DIR / "config.yaml"


def get_execute_url(base_url: str, app_id: str) -> str:
    """Get the execute endpoint URL for an application."""
    return f"{base_url.rstrip('/')}/{app_id}/execute"
