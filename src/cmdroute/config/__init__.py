"""
cmdroute configuration system

    from cmdroute.config import load_config

    config = load_config("configs/production.yaml")
    print(config.dispatch.permission_prefix)
    print(config.shell.dispatcher)
"""

from .loader import (
    ConfigLoader,
    load_config,
    get_config,
    reload_config,
    validate_config_file,
)

from .models import (
    CmdRouteConfig,
    AppConfig,
    DispatchSettings,
    ShellConfig,
    LogLevel,
)

from ..utils.error_handling import ConfigurationError

__all__ = [
    # Main functions
    "ConfigLoader",
    "get_config",
    "load_config",
    "reload_config",
    "validate_config_file",

    # Exception
    "ConfigurationError",

    # Configuration models
    "CmdRouteConfig",
    "AppConfig",
    "DispatchSettings",
    "ShellConfig",
    "LogLevel",
]
