"""Tests for streetwalk/config.py."""

import pytest

from streetwalk.config import PipelineConfig, get_config, load_env_files, validate_config


class TestDefaults:

    def test_global_config(self):
        assert isinstance(get_config(), PipelineConfig)
        assert get_config() is get_config()

    def test_default_values(self):
        config = PipelineConfig()

        assert config.default_boundary == "Torrent, Valencia"
        assert config.max_workers == 1
        assert config.api.overpass_url == "https://overpass-api.de/api/interpreter"
        assert config.api.overpass_timeout == 180
        assert config.naming.name_tags == ["name", "name:ca", "name:val", "name:es", "official_name"]
        assert "residential" in config.naming.highway_types
        assert "footway" not in config.naming.highway_types

    def test_database_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("STREETWALK_DATABASE_URL", "postgresql://localhost/streets")

        assert PipelineConfig().store.database_url == "postgresql://localhost/streets"

    def test_cache_dir_from_environment(self, monkeypatch):
        monkeypatch.setenv("STREETWALK_CACHE_DIR", "/tmp/overpass")
        assert PipelineConfig().cache_dir == "/tmp/overpass"

        monkeypatch.delenv("STREETWALK_CACHE_DIR")
        assert PipelineConfig().cache_dir is None


class TestValidation:

    def test_defaults_are_valid(self):
        validate_config(PipelineConfig())

    def test_all_errors_reported(self):
        config = PipelineConfig()
        config.max_workers = 0
        config.api.overpass_url = ""
        config.api.max_retries = 0
        config.naming.name_tags = []

        with pytest.raises(ValueError) as exc_info:
            validate_config(config)

        message = str(exc_info.value)
        assert "max_workers" in message
        assert "api.overpass_url" in message
        assert "api.max_retries" in message
        assert "naming.name_tags" in message

    def test_timeouts_must_be_positive(self):
        config = PipelineConfig()
        config.api.request_timeout = 0

        with pytest.raises(ValueError, match="request_timeout"):
            validate_config(config)


class TestEnvFiles:

    @pytest.fixture(autouse=True)
    def clean_environment(self, monkeypatch):
        # setenv first so teardown removes whatever the env files add
        for name in ("STREETWALK_DATABASE_URL", "STREETWALK_CACHE_DIR"):
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)

    def test_database_url_from_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("STREETWALK_DATABASE_URL=postgresql://db/streets\n", encoding="utf-8")

        assert load_env_files(str(env_file)) == [str(env_file)]
        assert PipelineConfig().store.database_url == "postgresql://db/streets"

    def test_earlier_file_wins(self, tmp_path):
        local = tmp_path / ".env.local"
        local.write_text("STREETWALK_CACHE_DIR=/tmp/local-cache\n", encoding="utf-8")
        shared = tmp_path / ".env"
        shared.write_text("STREETWALK_CACHE_DIR=/tmp/shared-cache\n", encoding="utf-8")

        load_env_files(str(local), str(shared))

        assert PipelineConfig().cache_dir == "/tmp/local-cache"

    def test_existing_variables_kept(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STREETWALK_DATABASE_URL", "sqlite:///from-shell.db")
        env_file = tmp_path / ".env"
        env_file.write_text("STREETWALK_DATABASE_URL=postgresql://db/streets\n", encoding="utf-8")

        load_env_files(str(env_file))

        assert PipelineConfig().store.database_url == "sqlite:///from-shell.db"

    def test_missing_files_skipped(self, tmp_path):
        assert load_env_files(str(tmp_path / ".env.local")) == []
