"""
cmdroute utilities

Logging setup and the shared exception hierarchy used throughout cmdroute.
"""

from .logging import (
    setup_logging,
    get_logger,
    performance_timer,
)

from .error_handling import (
    CommandApiError,
    ConfigurationError,
    RegistrationError,
    HandlerExecutionError,
    handle_configuration_operation,
    validate_input,
)

__all__ = [
    # Logging utilities
    "setup_logging",
    "get_logger",
    "performance_timer",

    # Error handling utilities
    "CommandApiError",
    "ConfigurationError",
    "RegistrationError",
    "HandlerExecutionError",
    "handle_configuration_operation",
    "validate_input",
]
