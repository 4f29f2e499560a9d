"""
Tests for the config infrastructure layer.

This module tests the settings model, repository and manager components.
"""

import json
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import SecretStr, ValidationError

from ccmclient.domain.settings import ToolkitSettings, WinRMSettings
from ccmclient.domain.targets import TransportPreference
from ccmclient.infrastructure.config.manager import ConfigManager
from ccmclient.infrastructure.config.repository import ConfigRepository, strip_comments


class TestToolkitSettings:
    """Test cases for the settings models."""

    def test_defaults(self):
        settings = ToolkitSettings()
        assert settings.powershell_executable == "powershell.exe"
        assert settings.local_timeout_seconds is None
        assert settings.default_preference is None
        assert settings.winrm.port_https == 5986

    def test_read_timeout_is_raised_above_operation_timeout(self):
        settings = WinRMSettings(operation_timeout_sec=60, read_timeout_sec=30)
        assert settings.read_timeout_sec == 70

    def test_log_level_is_normalized(self):
        assert ToolkitSettings(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            ToolkitSettings(log_level="chatty")

    def test_preference_from_value(self):
        assert ToolkitSettings(default_preference="pssession").default_preference is TransportPreference.PS_SESSION

    def test_password_from_settings(self):
        settings = ToolkitSettings(password=SecretStr("s3cret"))
        assert settings.resolve_password() == "s3cret"
        assert "s3cret" not in repr(settings)

    def test_password_from_environment(self):
        settings = ToolkitSettings(password_env="TEST_CCM_PW")
        with patch.dict("os.environ", {"TEST_CCM_PW": "from-env"}):
            assert settings.resolve_password() == "from-env"
        with patch.dict("os.environ", {}, clear=True):
            assert settings.resolve_password() is None


class TestConfigRepository:
    """Test cases for ConfigRepository."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.repo = ConfigRepository(self.temp_dir)

    def teardown_method(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir)

    def test_load_json_file_success(self):
        test_data = {"key": "value", "number": 42}
        (self.temp_dir / "test.json").write_text(json.dumps(test_data))

        assert self.repo.load_json_file("test") == test_data

    def test_load_jsonc_file_with_comments(self):
        (self.temp_dir / "test.jsonc").write_text(
            '{\n  // WinRM share\n  "path": "\\\\\\\\server\\\\share",\n  "url": "https://x//y" // trailing\n}'
        )

        data = self.repo.load_json_file("test")
        assert data == {"path": "\\\\server\\share", "url": "https://x//y"}

    def test_json_preferred_over_jsonc(self):
        (self.temp_dir / "test.json").write_text('{"from": "json"}')
        (self.temp_dir / "test.jsonc").write_text('{"from": "jsonc"}')

        assert self.repo.load_json_file("test") == {"from": "json"}

    def test_load_json_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            self.repo.load_json_file("nonexistent")

    def test_load_invalid_json(self):
        (self.temp_dir / "test.json").write_text("{not json")
        with pytest.raises(ValueError):
            self.repo.load_json_file("test")

    def test_save_json_file(self):
        test_data = {"key": "value", "number": 42}
        self.repo.save_json_file("test", test_data)

        assert json.loads((self.temp_dir / "test.json").read_text()) == test_data

    def test_load_settings_success(self):
        (self.temp_dir / "ccmclient.json").write_text(json.dumps({
            "powershell_executable": "pwsh",
            "default_preference": "cim",
            "winrm": {"verify_ssl": False, "allow_http": False},
            "username": "CORP\\svc_ccm",
        }))

        settings = self.repo.load_settings()
        assert settings.powershell_executable == "pwsh"
        assert settings.default_preference is TransportPreference.CIM_SESSION
        assert settings.winrm.verify_ssl is False
        assert settings.username == "CORP\\svc_ccm"

    def test_load_settings_invalid(self):
        (self.temp_dir / "ccmclient.json").write_text(json.dumps({"default_preference": "telnet"}))
        with pytest.raises(ValueError, match="Invalid toolkit settings"):
            self.repo.load_settings()

    def test_save_settings_omits_password(self):
        self.repo.save_settings(ToolkitSettings(username="svc", password=SecretStr("pw")))

        saved = json.loads((self.temp_dir / "ccmclient.json").read_text())
        assert saved["username"] == "svc"
        assert "password" not in saved

    def test_strip_comments_keeps_strings(self):
        assert strip_comments('{"a": "//not a comment"} // comment') == '{"a": "//not a comment"} '


class TestConfigManager:
    """Test cases for ConfigManager."""

    def setup_method(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.manager = ConfigManager(self.temp_dir)

    def teardown_method(self):
        shutil.rmtree(self.temp_dir)

    def test_defaults_without_file(self):
        settings = self.manager.load_settings()
        assert settings == ToolkitSettings()

    @patch.object(ConfigRepository, "load_settings")
    def test_load_settings_caching(self, mock_load):
        (self.temp_dir / "ccmclient.json").write_text("{}")
        mock_load.return_value = ToolkitSettings(log_level="WARNING")

        first = self.manager.load_settings()
        second = self.manager.load_settings()
        assert first is second
        mock_load.assert_called_once()

        self.manager.load_settings(force_reload=True)
        assert mock_load.call_count == 2

    def test_invalid_file_raises(self):
        (self.temp_dir / "ccmclient.jsonc").write_text('{"log_level": 5')
        with pytest.raises(ValueError):
            self.manager.load_settings()

    def test_default_directory(self):
        assert ConfigManager().config_dir == Path.cwd() / "config"
