"""
Configuration loading system for cmdroute.

This module handles loading, merging, and validating configuration from
YAML files, a ``.env`` file, and environment variables.
"""

import os
from pathlib import Path
from typing import Optional, Dict, Any, Union, get_args, get_origin

import yaml
from pydantic import BaseModel, ValidationError
from dotenv import load_dotenv

from .models import CmdRouteConfig
from ..utils.error_handling import ConfigurationError, handle_configuration_operation

ENV_PREFIX = "CMDROUTE_"


def _accepts_list(annotation: Any) -> bool:
    """True for ``list``/``List[...]`` annotations, including inside ``Optional``."""
    if annotation is list or get_origin(annotation) is list:
        return True
    if get_origin(annotation) is Union:
        return any(_accepts_list(arg) for arg in get_args(annotation))
    return False


class ConfigLoader:
    """
    Configuration loader that supports multiple sources and validation.

    Loading priority (highest to lowest):
    1. Environment variables (CMDROUTE_<SECTION>_<KEY>)
    2. Explicitly specified config file
    3. Environment-specific config (e.g., configs/development.yaml)
    4. Default configuration file
    5. Built-in defaults (from Pydantic models)
    """

    def __init__(self, search_root: Optional[Union[str, Path]] = None):
        """Initialize the configuration loader.

        Args:
            search_root: Directory searched for config files and ``.env`` (defaults to cwd)
        """
        self._config: Optional[CmdRouteConfig] = None
        self._config_path: Optional[Path] = None
        self._root = Path(search_root) if search_root is not None else Path(".")

        env_file = self._root / ".env"
        if env_file.exists():
            load_dotenv(env_file)

    @property
    def config_path(self) -> Optional[Path]:
        """Path of the explicitly requested config file, if any."""
        return self._config_path

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> CmdRouteConfig:
        """
        Load configuration from multiple sources and validate it.

        Args:
            config_path: Optional path to a specific config file

        Returns:
            Validated CmdRouteConfig instance

        Raises:
            ConfigurationError: If configuration loading or validation fails
        """
        try:
            config_data: Dict[str, Any] = {}

            default_config_path = self._find_config("default")
            if default_config_path:
                config_data = self._deep_merge(config_data, self._load_yaml_file(default_config_path))

            env_name = self._detect_environment()
            env_config_path = self._find_config(env_name) if env_name else None
            if env_config_path and env_config_path != default_config_path:
                config_data = self._deep_merge(config_data, self._load_yaml_file(env_config_path))

            if config_path:
                cli_config_path = Path(config_path)
                if not cli_config_path.exists():
                    raise ConfigurationError(f"Specified config file not found: {config_path}")

                config_data = self._deep_merge(config_data, self._load_yaml_file(cli_config_path))
                self._config_path = cli_config_path

            config_data = self._apply_env_overrides(config_data)

            self._config = CmdRouteConfig(**config_data)
            return self._config

        except ValidationError as e:
            raise ConfigurationError(
                f"Configuration validation failed: {self._format_validation_error(e)}"
            ) from e
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {str(e)}") from e

    def get_config(self) -> CmdRouteConfig:
        """Get the current configuration, loading it if necessary."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def reload_config(self, config_path: Optional[Union[str, Path]] = None) -> CmdRouteConfig:
        """Reload configuration from sources."""
        self._config = None
        return self.load_config(config_path)

    def _detect_environment(self) -> Optional[str]:
        return os.getenv("CMDROUTE_ENV") or os.getenv("ENVIRONMENT")

    def _find_config(self, stem: str) -> Optional[Path]:
        """Find ``<stem>.yaml`` in the usual config directories."""
        for directory in ("configs", "config", "."):
            for suffix in (".yaml", ".yml"):
                path = self._root / directory / f"{stem}{suffix}"
                if path.exists():
                    return path
        return None

    @handle_configuration_operation("load_yaml_file")
    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Load and parse a YAML configuration file.

        Raises:
            ConfigurationError: If file cannot be read, parsed, or is not a mapping
        """
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {file_path} must contain a YAML object (dictionary)")

        return data

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply environment variable overrides to configuration.

        The first segment after the prefix names the section, the remainder the key:
        CMDROUTE_DISPATCH_LOG_EXECUTION=true overrides dispatch.log_execution.
        """
        result = config_data.copy()

        for env_key, env_value in os.environ.items():
            if not env_key.startswith(ENV_PREFIX) or env_key == "CMDROUTE_ENV":
                continue

            section, _, key = env_key[len(ENV_PREFIX):].lower().partition('_')
            if not section or not key:
                continue

            existing = result.get(section) or {}
            if not isinstance(existing, dict):
                continue
            section_data = dict(existing)
            section_data[key] = self._convert_env_value(section, key, env_value)
            result[section] = section_data

        return result

    def _convert_env_value(self, section: str, key: str, value: str) -> Any:
        """
        Shape an environment string for the field it overrides.

        List fields are split on commas; everything else stays a string and is
        coerced by pydantic against the field's declared type.
        """
        if self._is_list_field(section, key):
            return [item.strip() for item in value.split(',') if item.strip()]
        return value

    def _is_list_field(self, section: str, key: str) -> bool:
        section_field = CmdRouteConfig.model_fields.get(section)
        if section_field is None:
            return False

        section_model = section_field.annotation
        if not (isinstance(section_model, type) and issubclass(section_model, BaseModel)):
            return False

        field = section_model.model_fields.get(key)
        return field is not None and _accepts_list(field.annotation)

    def _format_validation_error(self, error: ValidationError) -> str:
        """Format a Pydantic validation error for user-friendly display."""
        messages = []
        for err in error.errors():
            location = " -> ".join(str(loc) for loc in err['loc'])
            message = err['msg']
            value = err.get('input', 'N/A')
            messages.append(f"  {location}: {message} (got: {value})")

        return "Validation errors:\n" + "\n".join(messages)


_config_loader = ConfigLoader()


def load_config(config_path: Optional[Union[str, Path]] = None) -> CmdRouteConfig:
    """
    Load configuration from multiple sources.

    Raises:
        ConfigurationError: If configuration loading fails
    """
    return _config_loader.load_config(config_path)


def get_config() -> CmdRouteConfig:
    """Get the current configuration, loading it if necessary."""
    return _config_loader.get_config()


def reload_config(config_path: Optional[Union[str, Path]] = None) -> CmdRouteConfig:
    """Reload configuration from sources."""
    return _config_loader.reload_config(config_path)


def validate_config_file(config_path: Union[str, Path]) -> tuple[bool, Optional[str]]:
    """
    Validate a configuration file without loading it globally.

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        ConfigLoader().load_config(config_path)
        return True, None
    except ConfigurationError as e:
        return False, str(e)
