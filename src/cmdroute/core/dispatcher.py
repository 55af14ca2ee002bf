"""
Sub-command dispatcher for cmdroute.

A Dispatcher owns an ordered list of sub-commands under a single root name.
It resolves the first argument to a sub-command, runs the precondition chain
(enabled, permission, console context), executes it or falls back to the root
behaviour, and produces completion candidates for partially typed input.
"""

import time
from typing import Callable, List, Optional, Sequence, Tuple

from .completion import filter_prefix
from .handler import SubCommand
from .host import CommandHost
from .instrumentation import InstrumentationBridge, LoggingInstrumentation
from .invoker import Invoker
from .types import (
    CONSOLE_REJECTED_MESSAGE, EXECUTION_FAILED_MESSAGE, NO_PERMISSION_MESSAGE,
    USAGE_TEMPLATE, DispatchResult, RouteOutcome
)
from ..config.models import DispatchSettings
from ..utils.error_handling import ConfigurationError, HandlerExecutionError, validate_input

MainExecutor = Callable[[Invoker, Sequence[str]], bool]
MainCompleter = Callable[[Invoker, Sequence[str]], Optional[List[str]]]


def _require_name(handler: SubCommand) -> SubCommand:
    if not handler.name():
        raise ValueError("sub-command name cannot be empty")
    return handler


class Dispatcher:
    """
    Routes ``<root> <subcommand> [args...]`` invocations to sub-commands.

    Matching is exact and case-insensitive over names and aliases; when two
    sub-commands claim the same name the first one added wins. Register every
    sub-command before ``activate``: the table is treated as read-only afterwards.

    The root fallback (``on_command_main`` / ``on_tab_main``) runs when no
    argument is given or no sub-command matches. Override it by subclassing or by
    passing ``main_executor`` / ``main_completer``.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        settings: Optional[DispatchSettings] = None,
        instrumentation: Optional[InstrumentationBridge] = None,
        main_executor: Optional[MainExecutor] = None,
        main_completer: Optional[MainCompleter] = None
    ):
        self._name = name or ""
        self.settings = settings or DispatchSettings()
        self.instrumentation = instrumentation or LoggingInstrumentation(self.settings)
        self._main_executor = main_executor
        self._main_completer = main_completer
        self._subcommands: List[SubCommand] = []
        self._active = False

    # ---------------- Registration ----------------

    @property
    def root_name(self) -> str:
        return self._name

    @root_name.setter
    def root_name(self, value: str) -> None:
        self._name = value or ""

    def named(self, name: str) -> "Dispatcher":
        """Set the root name; returns self for chaining."""
        self.root_name = name
        return self

    @property
    def subcommands(self) -> Tuple[SubCommand, ...]:
        return tuple(self._subcommands)

    @property
    def is_active(self) -> bool:
        return self._active

    def add_subcommand(self, *handlers: SubCommand) -> "Dispatcher":
        """
        Append one or more sub-commands, keeping insertion order.

        Raises:
            RegistrationError: If an argument is not a named SubCommand
        """
        for handler in handlers:
            validate_input(handler, "subcommand", expected_type=SubCommand, validator=_require_name)

            if self._active:
                self.instrumentation.warning(
                    f"Sub-command '{handler.name()}' added to /{self._name} after activation"
                )

            for label in (handler.name(), *handler.aliases()):
                existing = self.resolve(label)
                if existing is not None:
                    self.instrumentation.warning(
                        f"'{label}' of sub-command '{handler.name()}' is already claimed by "
                        f"'{existing.name()}' in /{self._name}; the first registered wins"
                    )

            self._subcommands.append(handler)
            self.instrumentation.log_if_debug(f"Added sub-command '{handler.name()}' to /{self._name}")

        return self

    def resolve(self, selector: str) -> Optional[SubCommand]:
        """Return the first sub-command whose name or alias equals ``selector``."""
        for handler in self._subcommands:
            if handler.matches(selector):
                return handler
        return None

    def permission_key(self, handler: SubCommand) -> str:
        """Full permission key asked of the invoker for ``handler``."""
        return f"{self.settings.permission_prefix}{handler.permission()}"

    # ---------------- Activation ----------------

    def activate(self, host: CommandHost) -> bool:
        """
        Bind this dispatcher as the executor and completer of its root name.

        Returns:
            True if bound, False if the host does not declare the root name

        Raises:
            ConfigurationError: If the root name is empty
        """
        if not self._name:
            raise ConfigurationError(
                "Command name cannot be empty!",
                details={"error_type": "empty_root_name"}
            )

        if not host.has_command(self._name):
            self.instrumentation.warning(f"Command '{self._name}' is not declared by the host!")
            return False

        host.bind(self._name, self.dispatch, self.complete)
        self._active = True
        self.instrumentation.log(f"Registered command: {self._name}")
        return True

    # ---------------- Execution ----------------

    def dispatch(self, invoker: Invoker, args: Sequence[str]) -> bool:
        """Execute an invocation; True when it was handled (always, unless a handler says otherwise)."""
        return self.invoke(invoker, args).handled

    def invoke(self, invoker: Invoker, args: Sequence[str]) -> DispatchResult:
        """Execute an invocation and describe where it went."""
        self.instrumentation.on_execution_start(self._name, invoker)
        start = time.perf_counter()
        handler: Optional[SubCommand] = None

        try:
            handler = self.resolve(args[0]) if args else None
            result = self._route(invoker, args, handler)
        except Exception as e:
            result = self._handle_failure(invoker, handler, e)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self.instrumentation.on_execution_end(self._name, invoker, elapsed_ms)

        result.elapsed_ms = elapsed_ms
        return result

    def _route(self, invoker: Invoker, args: Sequence[str], handler: Optional[SubCommand]) -> DispatchResult:
        if handler is None:
            self.instrumentation.log_if_debug(f"/{self._name} {list(args)} -> root fallback")
            return DispatchResult(RouteOutcome.ROOT_FALLBACK, bool(self.on_command_main(invoker, args)))

        # Order matters: enabled, then permission, then console context
        if not handler.is_enabled():
            invoker.send_message(handler.disabled_message())
            return DispatchResult(RouteOutcome.DISABLED, True, handler)

        if handler.requires_permission() and not invoker.has_permission(self.permission_key(handler)):
            invoker.send_message(NO_PERMISSION_MESSAGE)
            return DispatchResult(RouteOutcome.UNAUTHORIZED, True, handler)

        if not handler.allow_console() and invoker.is_console_like():
            invoker.send_message(CONSOLE_REJECTED_MESSAGE)
            return DispatchResult(RouteOutcome.CONTEXT_REJECTED, True, handler)

        self.instrumentation.log_if_debug(f"/{self._name} -> {handler.name()}")
        return DispatchResult(RouteOutcome.DELEGATED, bool(handler.execute(invoker, args)), handler)

    def _handle_failure(self, invoker: Invoker, handler: Optional[SubCommand], error: Exception) -> DispatchResult:
        self.instrumentation.on_error(self._name, invoker, error)

        target = handler.name() if handler is not None else self._name
        wrapped = HandlerExecutionError(
            f"/{self._name} {target} failed: {error}",
            target,
            details={"error_type": type(error).__name__, "original_error": str(error)}
        )
        wrapped.__cause__ = error

        invoker.send_message(EXECUTION_FAILED_MESSAGE)
        if self.settings.debug:
            invoker.send_message(f"{type(error).__name__}: {error}")

        return DispatchResult(RouteOutcome.FAILED, True, handler, wrapped)

    # ---------------- Completion ----------------

    def complete(self, invoker: Invoker, args: Sequence[str]) -> List[str]:
        """
        Completion candidates for a partial invocation.

        With one argument: matching sub-command names followed by the root
        suggestions. With more: the matched sub-command's suggestions, or the root
        suggestions when nothing matches.
        """
        if not args:
            return []

        try:
            if len(args) == 1:
                names = filter_prefix([handler.name() for handler in self._subcommands], args[0])
                return names + self._main_suggestions(invoker, args)

            handler = self.resolve(args[0])
            if handler is None:
                return self._main_suggestions(invoker, args)

            suggestions = handler.complete(invoker, args)
            return [] if suggestions is None else list(suggestions)

        except Exception as e:
            self.instrumentation.on_error(self._name, invoker, e)
            return []

    def _main_suggestions(self, invoker: Invoker, args: Sequence[str]) -> List[str]:
        return list(self.on_tab_main(invoker, args) or [])

    # ---------------- Root fallback ----------------

    def on_command_main(self, invoker: Invoker, args: Sequence[str]) -> bool:
        """Runs when no sub-command is given or none matches; prints usage by default."""
        if self._main_executor is not None:
            return self._main_executor(invoker, args)
        invoker.send_message(USAGE_TEMPLATE.format(root=self._name))
        return True

    def on_tab_main(self, invoker: Invoker, args: Sequence[str]) -> List[str]:
        """Root-level suggestions, unrelated to registered sub-commands; none by default."""
        if self._main_completer is not None:
            return self._main_completer(invoker, args) or []
        return []

    def __repr__(self) -> str:
        names = ", ".join(handler.name() for handler in self._subcommands)
        return f"Dispatcher(root={self._name!r}, subcommands=[{names}])"
