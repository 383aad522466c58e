"""Unit tests for settings and configuration helpers."""

import os

import pytest
import yaml
from pydantic import ValidationError

from ditto_client.config import get_execute_url, get_settings, set_settings
from ditto_client.models.docker import DEFAULT_COMPOSE_SERVICE, DockerOptions
from ditto_client.models.settings import DittoSettings, RunnerKind


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from DITTO_* variables and any local .env file."""
    for key in list(os.environ):
        if key.startswith("DITTO_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    set_settings(None)
    yield
    set_settings(None)


class TestDittoSettings:
    """Test settings defaults, validation and environment overrides."""

    def test_defaults(self):
        settings = DittoSettings()

        assert settings.base_url == "http://localhost:8090"
        assert settings.request_timeout == 30.0
        assert settings.probe_collection == "chat"
        assert settings.runner == RunnerKind.NONE
        assert settings.docker.container_name == "ditto-edge"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DITTO_APP_ID", "shop")
        monkeypatch.setenv("DITTO_RUNNER", "compose")
        monkeypatch.setenv("DITTO_DOCKER__COMPOSE_FILE", "/srv/compose.yml")

        settings = DittoSettings()

        assert settings.app_id == "shop"
        assert settings.runner == RunnerKind.COMPOSE
        assert settings.docker.compose_file == "/srv/compose.yml"

    def test_invalid_base_url(self):
        with pytest.raises(ValidationError):
            DittoSettings(base_url="localhost:8090")

    def test_invalid_timeout(self):
        with pytest.raises(ValidationError):
            DittoSettings(request_timeout=0)

    def test_log_level_normalized(self):
        assert DittoSettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            DittoSettings(log_level="chatty")


class TestSettingsFile:
    """Test YAML persistence."""

    def test_missing_file_gives_defaults(self, tmp_path):
        settings = DittoSettings.load_from_file(tmp_path / "missing.yaml")
        assert settings.app_id == "default"

    def test_round_trip_through_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        original = DittoSettings(
            app_id="shop",
            runner=RunnerKind.DOCKER,
            docker=DockerOptions(image_tar_path="/tmp/edge.tar"),
        )

        original.save_to_file(path)
        loaded = DittoSettings.load_from_file(path)

        assert loaded.app_id == "shop"
        assert loaded.runner == RunnerKind.DOCKER
        assert loaded.docker.image_tar_path == "/tmp/edge.tar"

    def test_saved_file_is_plain_yaml(self, tmp_path):
        path = tmp_path / "nested" / "config.yaml"
        DittoSettings(runner="compose").save_to_file(path)

        data = yaml.safe_load(path.read_text())
        assert data["runner"] == "compose"
        assert "config_dir" not in data

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert DittoSettings.load_from_file(path).base_url == "http://localhost:8090"

    def test_environment_takes_precedence_over_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "app_id": "fromfile",
                    "request_timeout": 5,
                    "docker": {"container_name": "edge-from-file"},
                }
            )
        )
        monkeypatch.setenv("DITTO_APP_ID", "fromenv")
        monkeypatch.setenv("DITTO_DOCKER__IMAGE_NAME", "edge:env")

        settings = DittoSettings.load_from_file(path)

        assert settings.app_id == "fromenv"
        assert settings.request_timeout == 5
        assert settings.docker.container_name == "edge-from-file"
        assert settings.docker.image_name == "edge:env"

    def test_read_file_returns_raw_mapping(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("app_id: fromfile\n")
        monkeypatch.setenv("DITTO_APP_ID", "fromenv")

        assert DittoSettings.read_file(path) == {"app_id": "fromfile"}
        assert DittoSettings.read_file(tmp_path / "missing.yaml") == {}

    def test_non_mapping_file_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError):
            DittoSettings.load_from_file(path)


class TestDockerOptions:
    """Test container option validation."""

    def test_blank_compose_service_uses_default(self):
        assert DockerOptions(compose_service=" ").compose_service == DEFAULT_COMPOSE_SERVICE

    def test_blank_container_name_rejected(self):
        with pytest.raises(ValidationError):
            DockerOptions(container_name="  ")


class TestConfigHelpers:
    """Test module level configuration helpers."""

    def test_get_settings_is_cached(self, tmp_path):
        first = get_settings(tmp_path / "none.yaml")
        assert get_settings() is first

    def test_set_settings_replaces_cache(self):
        custom = DittoSettings(app_id="other")
        set_settings(custom)
        assert get_settings() is custom

    @pytest.mark.parametrize(
        "base_url",
        ["http://localhost:8090", "http://localhost:8090/", "http://localhost:8090//"],
    )
    def test_get_execute_url(self, base_url):
        assert get_execute_url(base_url, "app") == "http://localhost:8090/app/execute"
