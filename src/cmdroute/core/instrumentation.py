"""
Instrumentation bridge between a dispatcher and the outside world.

The dispatcher reports execution start/end, handler failures and a few
lifecycle messages here; formatting and storage belong to the implementation.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .invoker import Invoker
from ..config.models import DispatchSettings
from ..utils.logging import get_logger


class InstrumentationBridge(ABC):
    """Receiver for structured dispatch events."""

    @abstractmethod
    def on_execution_start(self, root_name: str, invoker: Invoker) -> None:
        pass

    @abstractmethod
    def on_execution_end(self, root_name: str, invoker: Invoker, elapsed_ms: float) -> None:
        pass

    @abstractmethod
    def on_error(self, root_name: str, invoker: Invoker, error: BaseException) -> None:
        pass

    @abstractmethod
    def log_if_debug(self, message: str) -> None:
        pass

    def log(self, message: str) -> None:
        """Informational lifecycle message (e.g. successful activation)."""
        pass

    def warning(self, message: str) -> None:
        """Non-fatal misconfiguration (e.g. unknown root name, duplicate alias)."""
        pass


class NullInstrumentation(InstrumentationBridge):
    """Bridge that drops every event."""

    def on_execution_start(self, root_name: str, invoker: Invoker) -> None:
        pass

    def on_execution_end(self, root_name: str, invoker: Invoker, elapsed_ms: float) -> None:
        pass

    def on_error(self, root_name: str, invoker: Invoker, error: BaseException) -> None:
        pass

    def log_if_debug(self, message: str) -> None:
        pass


class LoggingInstrumentation(InstrumentationBridge):
    """
    Bridge writing events to a standard library logger.

    Execution lines are only written when ``settings.log_execution`` is on, and
    timings only when ``settings.log_performance`` is on as well. Tracebacks for
    handler failures are attached in debug mode.
    """

    def __init__(self, settings: Optional[DispatchSettings] = None, logger: Optional[logging.Logger] = None):
        self.settings = settings or DispatchSettings()
        self.logger = logger or get_logger("cmdroute.dispatch")

    def on_execution_start(self, root_name: str, invoker: Invoker) -> None:
        self.log_if_debug(f"/{root_name} started by {invoker.name}")

    def on_execution_end(self, root_name: str, invoker: Invoker, elapsed_ms: float) -> None:
        if not self.settings.log_execution:
            return

        extra = {"root_name": root_name, "invoker": invoker.name, "invoker_kind": invoker.kind.value}
        self.logger.info(
            f"/{root_name} executed by {invoker.name} ({invoker.kind.value})",
            extra=extra
        )

        if self.settings.log_performance:
            self.logger.info(f"Execution time: {elapsed_ms:.0f} ms", extra={**extra, "elapsed_ms": elapsed_ms})

    def on_error(self, root_name: str, invoker: Invoker, error: BaseException) -> None:
        self.logger.error(
            f"Error executing command /{root_name} by {invoker.name}: {type(error).__name__}: {error}",
            exc_info=error if self.settings.debug else None
        )

    def log_if_debug(self, message: str) -> None:
        if self.settings.debug:
            self.logger.debug(f"[debug] {message}")

    def log(self, message: str) -> None:
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.logger.warning(message)


@dataclass
class InstrumentationEvent:
    """One recorded bridge call."""
    kind: str
    root_name: Optional[str] = None
    invoker: Optional[Invoker] = None
    payload: Any = None


@dataclass
class RecordingInstrumentation(InstrumentationBridge):
    """Bridge keeping every event in memory, useful for hosts that batch events and for tests."""

    events: List[InstrumentationEvent] = field(default_factory=list)

    def on_execution_start(self, root_name: str, invoker: Invoker) -> None:
        self.events.append(InstrumentationEvent("start", root_name, invoker))

    def on_execution_end(self, root_name: str, invoker: Invoker, elapsed_ms: float) -> None:
        self.events.append(InstrumentationEvent("end", root_name, invoker, elapsed_ms))

    def on_error(self, root_name: str, invoker: Invoker, error: BaseException) -> None:
        self.events.append(InstrumentationEvent("error", root_name, invoker, error))

    def log_if_debug(self, message: str) -> None:
        self.events.append(InstrumentationEvent("debug", payload=message))

    def log(self, message: str) -> None:
        self.events.append(InstrumentationEvent("info", payload=message))

    def warning(self, message: str) -> None:
        self.events.append(InstrumentationEvent("warning", payload=message))

    def of_kind(self, kind: str) -> List[InstrumentationEvent]:
        return [event for event in self.events if event.kind == kind]
