"""
Tests for configuration models and the configuration loader.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from cmdroute.config import (
    AppConfig, CmdRouteConfig, ConfigLoader, ConfigurationError, DispatchSettings, ShellConfig,
    validate_config_file
)

pytestmark = pytest.mark.unit


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestModels:
    """Pydantic model defaults and validators."""

    def test_defaults(self):
        config = CmdRouteConfig()

        assert config.app.name == "cmdroute"
        assert config.dispatch == DispatchSettings()
        assert config.dispatch.log_execution is False
        assert config.dispatch.permission_prefix == ""
        assert config.shell.dispatcher == "cmdroute.demo:create_dispatcher"
        assert config.shell.declared_commands is None

    def test_dispatcher_path_must_name_attribute(self):
        with pytest.raises(ValidationError):
            ShellConfig(dispatcher="cmdroute.demo")

    def test_declared_commands_are_lowercased(self):
        assert ShellConfig(declared_commands=["Econ", "BANK"]).declared_commands == ["econ", "bank"]

    def test_log_file_expands_home(self):
        config = AppConfig(log_file="~/cmdroute.log")

        assert not config.log_file.startswith("~")

    def test_app_name_cannot_be_empty(self):
        with pytest.raises(ValidationError):
            AppConfig(name="")

    def test_assignment_is_validated(self):
        config = CmdRouteConfig()

        with pytest.raises(ValidationError):
            config.shell = {"dispatcher": "nope"}


class TestConfigLoader:
    """Merging of files and environment overrides."""

    @pytest.fixture(autouse=True)
    def clean_environment(self):
        with patch.dict(os.environ, {}, clear=True):
            yield

    def test_builtin_defaults_without_files(self, tmp_path):
        config = ConfigLoader(search_root=tmp_path).load_config()

        assert config == CmdRouteConfig()

    def test_default_file_is_loaded(self, tmp_path):
        write(tmp_path / "configs" / "default.yaml", "dispatch:\n  log_execution: true\n")

        config = ConfigLoader(search_root=tmp_path).load_config()

        assert config.dispatch.log_execution is True

    def test_environment_file_overrides_default(self, tmp_path):
        write(tmp_path / "configs" / "default.yaml", "app:\n  log_level: INFO\n  debug: false\n")
        write(tmp_path / "configs" / "development.yaml", "app:\n  debug: true\n")

        with patch.dict(os.environ, {"CMDROUTE_ENV": "development"}):
            config = ConfigLoader(search_root=tmp_path).load_config()

        assert config.app.debug is True
        assert config.app.log_level.value == "INFO"

    def test_explicit_file_overrides_environment_file(self, tmp_path):
        write(tmp_path / "config" / "default.yaml", "shell:\n  prompt: 'a> '\n")
        explicit = write(tmp_path / "custom.yaml", "shell:\n  prompt: 'b> '\n")

        loader = ConfigLoader(search_root=tmp_path)
        config = loader.load_config(explicit)

        assert config.shell.prompt == "b> "
        assert loader.config_path == explicit

    def test_missing_explicit_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigLoader(search_root=tmp_path).load_config(tmp_path / "missing.yaml")

    def test_environment_variables_win(self, tmp_path):
        write(tmp_path / "configs" / "default.yaml", "dispatch:\n  log_execution: false\n")

        overrides = {
            "CMDROUTE_DISPATCH_LOG_EXECUTION": "yes",
            "CMDROUTE_DISPATCH_PERMISSION_PREFIX": "plugin.",
            "CMDROUTE_SHELL_DECLARED_COMMANDS": "econ,Bank",
            "CMDROUTE_APP_MAX_LOG_SIZE_MB": "20",
        }
        with patch.dict(os.environ, overrides):
            config = ConfigLoader(search_root=tmp_path).load_config()

        assert config.dispatch.log_execution is True
        assert config.dispatch.permission_prefix == "plugin."
        assert config.shell.declared_commands == ["econ", "bank"]
        assert config.app.max_log_size_mb == 20

    def test_dotenv_file_is_read(self, tmp_path):
        write(tmp_path / ".env", "CMDROUTE_DISPATCH_DEBUG=true\n")

        config = ConfigLoader(search_root=tmp_path).load_config()

        assert config.dispatch.debug is True

    def test_invalid_values_raise_configuration_error(self, tmp_path):
        write(tmp_path / "configs" / "default.yaml", "app:\n  max_log_size_mb: 0\n")

        with pytest.raises(ConfigurationError, match="max_log_size_mb"):
            ConfigLoader(search_root=tmp_path).load_config()

    def test_non_mapping_file_raises(self, tmp_path):
        write(tmp_path / "configs" / "default.yaml", "- just\n- a list\n")

        with pytest.raises(ConfigurationError, match="YAML object"):
            ConfigLoader(search_root=tmp_path).load_config()

    def test_malformed_yaml_raises(self, tmp_path):
        write(tmp_path / "configs" / "default.yaml", "app: [unclosed\n")

        with pytest.raises(ConfigurationError):
            ConfigLoader(search_root=tmp_path).load_config()

    def test_empty_file_is_ignored(self, tmp_path):
        write(tmp_path / "configs" / "default.yaml", "")

        assert ConfigLoader(search_root=tmp_path).load_config() == CmdRouteConfig()

    def test_get_config_caches(self, tmp_path):
        loader = ConfigLoader(search_root=tmp_path)

        assert loader.get_config() is loader.get_config()
        assert loader.reload_config() is not None

    def test_single_declared_command_from_environment(self, tmp_path):
        with patch.dict(os.environ, {"CMDROUTE_SHELL_DECLARED_COMMANDS": "Econ"}):
            config = ConfigLoader(search_root=tmp_path).load_config()

        assert config.shell.declared_commands == ["econ"]

    def test_number_like_value_for_string_field(self, tmp_path):
        overrides = {
            "CMDROUTE_DISPATCH_PERMISSION_PREFIX": "1",
            "CMDROUTE_SHELL_INVOKER_NAME": "42",
        }
        with patch.dict(os.environ, overrides):
            config = ConfigLoader(search_root=tmp_path).load_config()

        assert config.dispatch.permission_prefix == "1"
        assert config.shell.invoker_name == "42"

    def test_comma_in_string_field_is_kept(self, tmp_path):
        with patch.dict(os.environ, {"CMDROUTE_SHELL_PROMPT": "a,b> "}):
            config = ConfigLoader(search_root=tmp_path).load_config()

        assert config.shell.prompt == "a,b> "

    @pytest.mark.parametrize("section, key, raw, expected", [
        ("dispatch", "debug", "Off", "Off"),
        ("app", "backup_count", "3", "3"),
        ("shell", "declared_commands", "econ", ["econ"]),
        ("shell", "declared_commands", "a, b,", ["a", "b"]),
        ("shell", "prompt", "a, b", "a, b"),
        ("custom", "anything", "x,y", "x,y"),
    ])
    def test_env_value_conversion(self, tmp_path, section, key, raw, expected):
        assert ConfigLoader(search_root=tmp_path)._convert_env_value(section, key, raw) == expected

    def test_string_booleans_and_numbers_are_coerced(self, tmp_path):
        overrides = {"CMDROUTE_DISPATCH_DEBUG": "Off", "CMDROUTE_APP_BACKUP_COUNT": "3"}
        with patch.dict(os.environ, overrides):
            config = ConfigLoader(search_root=tmp_path).load_config()

        assert config.dispatch.debug is False
        assert config.app.backup_count == 3


class TestValidateConfigFile:
    """validate_config_file helper."""

    def test_valid_file(self, tmp_path):
        path = write(tmp_path / "ok.yaml", "dispatch:\n  debug: true\n")

        assert validate_config_file(path) == (True, None)

    def test_invalid_file(self, tmp_path):
        path = write(tmp_path / "bad.yaml", "shell:\n  dispatcher: no-colon\n")

        is_valid, message = validate_config_file(path)

        assert is_valid is False
        assert "dispatcher" in message
