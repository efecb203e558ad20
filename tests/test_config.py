# tests/test_config.py
"""
Tests for settings loading.
"""
import pytest
from pydantic import ValidationError

from gateway.config import Settings, load_settings
from gateway.file_access.errors import ConfigurationError


class TestSettings:
    """Test defaults and validation."""

    def test_defaults(self, settings):
        assert settings.NEXTCLOUD_URL == "https://cloud.example.com"
        assert settings.FTP_PORT == 2121
        assert settings.PASV_MIN_PORT == 30000
        assert settings.PASV_MAX_PORT == 30100
        assert settings.FTP_TLS is False
        assert settings.DEBUG is False
        assert settings.INSECURE_SKIP_VERIFY is False
        assert settings.LOG_LEVEL == "INFO"
        assert settings.HTTP_TIMEOUT == 30.0

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("NEXTCLOUD_URL", "https://files.example.org")
        monkeypatch.setenv("FTP_PORT", "2021")
        monkeypatch.setenv("FTP_TLS", "true")
        monkeypatch.setenv("DEBUG", "1")

        settings = Settings(_env_file=None)

        assert settings.NEXTCLOUD_URL == "https://files.example.org"
        assert settings.FTP_PORT == 2021
        assert settings.FTP_TLS is True
        assert settings.DEBUG is True

    def test_settings_are_immutable(self, settings):
        with pytest.raises(ValidationError):
            settings.FTP_PORT = 21

    @pytest.mark.parametrize("field, value", [
        ("FTP_PORT", 0),
        ("FTP_PORT", 70000),
        ("PASV_MIN_PORT", -1),
        ("HTTP_TIMEOUT", 0),
    ])
    def test_out_of_range_values(self, field, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, NEXTCLOUD_URL="https://x.example", **{field: value})

    def test_passive_range_must_be_ordered(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, NEXTCLOUD_URL="https://x.example", PASV_MIN_PORT=40001, PASV_MAX_PORT=40000)


class TestLoadSettings:
    """Test error conversion."""

    def test_missing_url(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ConfigurationError):
            load_settings()

    def test_empty_url(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("NEXTCLOUD_URL", "")

        with pytest.raises(ConfigurationError):
            load_settings()

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("NEXTCLOUD_URL", "https://cloud.example.com")

        settings = load_settings(FTP_PORT=10021)

        assert settings.FTP_PORT == 10021

    def test_reads_dotenv(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("NEXTCLOUD_URL=https://dotenv.example.com\nPASV_MAX_PORT=30010\n")

        settings = load_settings()

        assert settings.NEXTCLOUD_URL == "https://dotenv.example.com"
        assert settings.PASV_MAX_PORT == 30010
