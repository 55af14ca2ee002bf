"""
Pydantic models for cmdroute configuration validation.

Every setting the dispatcher or the bundled shell host reads lives here and is
passed explicitly at construction time; nothing is stored in module globals.
"""

from typing import List, Optional
from pathlib import Path
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AppConfig(BaseModel):
    """Application-level configuration settings."""

    name: str = Field(default="cmdroute", min_length=1, description="Application display name")
    version: str = Field(default="0.1.0", min_length=1, description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    verbose_logging: bool = Field(default=False, description="Enable verbose debug logging")

    log_file: Optional[str] = Field(default=None, description="Rotating JSON log file, disabled when unset")
    max_log_size_mb: int = Field(default=10, ge=1, le=1000, description="Maximum log file size")
    backup_count: int = Field(default=5, ge=1, le=100, description="Number of backup log files")

    @field_validator('log_file')
    @classmethod
    def expand_path(cls, v):
        """Expand user home directory in paths."""
        if v is None:
            return v
        return str(Path(v).expanduser())


class DispatchSettings(BaseModel):
    """Settings consulted by a Dispatcher and its instrumentation bridge."""

    debug: bool = Field(default=False, description="Report full diagnostics for handler failures")
    log_execution: bool = Field(default=False, description="Log every command execution")
    log_performance: bool = Field(default=False, description="Log execution time (needs log_execution)")
    permission_prefix: str = Field(
        default="",
        description="Prepended to every handler permission key before asking the invoker"
    )


class ShellConfig(BaseModel):
    """Settings for the bundled interactive shell host."""

    prompt: str = Field(default="> ", description="Prompt shown by the interactive shell")
    dispatcher: str = Field(
        default="cmdroute.demo:create_dispatcher",
        description="Import path 'module:attribute' of a Dispatcher or a factory returning one"
    )
    declared_commands: Optional[List[str]] = Field(
        default=None,
        description="Root names the host knows about; unset accepts every root name"
    )
    invoker_name: str = Field(default="CONSOLE", min_length=1, description="Name reported for the shell invoker")

    @field_validator('dispatcher')
    @classmethod
    def validate_import_path(cls, v):
        """Require the 'module:attribute' form."""
        module_name, sep, attribute = v.partition(':')
        if not sep or not module_name or not attribute:
            raise ValueError("dispatcher must look like 'package.module:attribute'")
        return v

    @field_validator('declared_commands')
    @classmethod
    def lowercase_commands(cls, v):
        if v is None:
            return v
        return [name.lower() for name in v]


class CmdRouteConfig(BaseModel):
    """Main configuration model."""

    model_config = ConfigDict(extra="allow", validate_assignment=True)

    app: AppConfig = Field(default_factory=AppConfig)
    dispatch: DispatchSettings = Field(default_factory=DispatchSettings)
    shell: ShellConfig = Field(default_factory=ShellConfig)
