"""
Unified error handling utilities for cmdroute.

This module defines the package exception hierarchy plus the decorator and
validation helpers used to keep error reporting consistent.
"""

import functools
import logging
from typing import Any, Callable, Optional, Type, Dict

from ..utils.logging import get_logger


class CommandApiError(Exception):
    """Base exception for all cmdroute errors."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(CommandApiError):
    """Configuration-related error (bad config files, empty root name at activation)."""
    pass


class RegistrationError(CommandApiError):
    """A handler could not be added to a dispatcher."""
    pass


class HandlerExecutionError(CommandApiError):
    """A handler or the root fallback raised while executing."""

    def __init__(
        self,
        message: str,
        handler_name: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.handler_name = handler_name

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "handler_name": self.handler_name,
            "details": self.details,
        }


def handle_configuration_operation(operation_name: str, logger: Optional[logging.Logger] = None):
    """
    Decorator to standardize configuration operation error handling.

    Args:
        operation_name: Human-readable name of the operation
        logger: Optional logger instance (defaults to an operation-specific logger)
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            _logger = logger or get_logger(f"cmdroute.config.{operation_name}")

            try:
                _logger.debug(f"Starting {operation_name}")
                result = func(*args, **kwargs)
                _logger.debug(f"{operation_name} completed successfully")
                return result

            except ConfigurationError:
                raise

            except (FileNotFoundError, PermissionError) as e:
                _logger.error(f"{operation_name} failed - file access error: {e}")
                raise ConfigurationError(
                    f"{operation_name} failed: {e}",
                    details={"error_type": "file_access", "original_error": str(e)}
                ) from e

            except (ValueError, TypeError) as e:
                _logger.error(f"{operation_name} failed - validation error: {e}")
                raise ConfigurationError(
                    f"{operation_name} failed: {e}",
                    details={"error_type": "validation", "original_error": str(e)}
                ) from e

            except Exception as e:
                _logger.error(f"{operation_name} failed - unexpected error: {e}", exc_info=True)
                raise ConfigurationError(
                    f"{operation_name} failed: {e}",
                    details={"error_type": "unexpected", "original_error": str(e)}
                ) from e

        return wrapper

    return decorator


def validate_input(
    data: Any,
    field_name: str,
    expected_type: Type = None,
    required: bool = True,
    validator: Optional[Callable] = None,
    error_class: Type[CommandApiError] = RegistrationError
) -> Any:
    """
    Standardized input validation utility.

    Args:
        data: The data to validate
        field_name: Name of the field being validated
        expected_type: Expected type of the data
        required: Whether the field is required
        validator: Optional custom validator function
        error_class: Exception type raised on failure

    Returns:
        The validated data (or the validator's return value)

    Raises:
        CommandApiError: If validation fails
    """
    if required and data is None:
        raise error_class(f"{field_name} is required")

    if data is not None and expected_type and not isinstance(data, expected_type):
        raise error_class(
            f"{field_name} must be of type {expected_type.__name__}, got {type(data).__name__}"
        )

    if validator:
        try:
            return validator(data)
        except Exception as e:
            raise error_class(f"{field_name} validation failed: {e}") from e

    return data
