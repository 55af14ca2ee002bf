"""
Shared types for command dispatch.
"""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
from enum import Enum

if TYPE_CHECKING:
    from .handler import SubCommand
    from ..utils.error_handling import HandlerExecutionError


USAGE_TEMPLATE = "usage: {root} <subcommand>"
NO_PERMISSION_MESSAGE = "You do not have permission to execute this command!"
CONSOLE_REJECTED_MESSAGE = "This command cannot be executed from console!"
EXECUTION_FAILED_MESSAGE = "An internal error occurred while executing this command."
DEFAULT_DISABLED_MESSAGE = "This command is currently disabled."


class RouteOutcome(Enum):
    """Where a single invocation ended up."""

    ROOT_FALLBACK = "root_fallback"
    DISABLED = "disabled"
    UNAUTHORIZED = "unauthorized"
    CONTEXT_REJECTED = "context_rejected"
    DELEGATED = "delegated"
    FAILED = "failed"


@dataclass
class DispatchResult:
    """Outcome of one dispatch call."""

    outcome: RouteOutcome
    handled: bool
    handler: Optional["SubCommand"] = None
    error: Optional["HandlerExecutionError"] = None
    elapsed_ms: float = 0.0

    def __bool__(self) -> bool:
        return self.handled
