"""
Sub-command contract for cmdroute.

A ``SubCommand`` is one named unit of logic registered under a dispatcher's
root name. Only ``name`` and ``execute`` are required; every other hook has a
default so implementations override just what they need.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List, Optional, Sequence, Set

from .invoker import Invoker
from .types import DEFAULT_DISABLED_MESSAGE

Executor = Callable[[Invoker, Sequence[str]], Any]
Completer = Callable[[Invoker, Sequence[str]], Optional[List[str]]]


class SubCommand(ABC):
    """
    Abstract base class for sub-commands.

    Precondition hooks (``is_enabled``, ``requires_permission``/``permission``,
    ``allow_console``) are read on every dispatch and never cached.
    """

    @abstractmethod
    def name(self) -> str:
        """Primary, non-empty name matched against the first argument."""
        pass

    def aliases(self) -> Set[str]:
        """Alternative names, matched case-insensitively like ``name``."""
        return set()

    def permission(self) -> str:
        """Permission key; only consulted when ``requires_permission`` is true."""
        return ""

    def requires_permission(self) -> bool:
        return False

    def is_enabled(self) -> bool:
        return True

    def disabled_message(self) -> str:
        """Shown verbatim to the invoker when the command is disabled."""
        return DEFAULT_DISABLED_MESSAGE

    def allow_console(self) -> bool:
        """Whether console-like invokers may run this command."""
        return False

    @abstractmethod
    def execute(self, invoker: Invoker, args: Sequence[str]) -> bool:
        """Run the command.

        Args:
            invoker: Who issued the command
            args: The full argument sequence, selector included

        Returns:
            True if the invocation was handled
        """
        pass

    def complete(self, invoker: Invoker, args: Sequence[str]) -> Optional[List[str]]:
        """Suggestions for the argument currently being typed.

        Returning None means "no opinion", which the dispatcher shows as no suggestions.
        """
        return None

    def matches(self, selector: str) -> bool:
        """True when ``selector`` equals the name or an alias, ignoring case."""
        wanted = selector.lower()
        if self.name().lower() == wanted:
            return True
        return any(alias.lower() == wanted for alias in self.aliases())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name()!r})"


class FunctionSubCommand(SubCommand):
    """Sub-command assembled from plain callables and flags."""

    def __init__(
        self,
        name: str,
        executor: Executor,
        *,
        aliases: Optional[Iterable[str]] = None,
        permission: str = "",
        requires_permission: Optional[bool] = None,
        enabled: bool = True,
        disabled_message: str = DEFAULT_DISABLED_MESSAGE,
        allow_console: bool = False,
        completer: Optional[Completer] = None
    ):
        self._name = name
        self._executor = executor
        self._aliases = set(aliases or ())
        self._permission = permission
        # A permission key on its own implies the check
        self._requires_permission = bool(permission) if requires_permission is None else requires_permission
        self.enabled = enabled
        self._disabled_message = disabled_message
        self._allow_console = allow_console
        self._completer = completer

    def name(self) -> str:
        return self._name

    def aliases(self) -> Set[str]:
        return set(self._aliases)

    def permission(self) -> str:
        return self._permission

    def requires_permission(self) -> bool:
        return self._requires_permission

    def is_enabled(self) -> bool:
        return self.enabled

    def disabled_message(self) -> str:
        return self._disabled_message

    def allow_console(self) -> bool:
        return self._allow_console

    def execute(self, invoker: Invoker, args: Sequence[str]) -> bool:
        result = self._executor(invoker, args)
        # Executors that return nothing have handled the invocation
        return True if result is None else bool(result)

    def complete(self, invoker: Invoker, args: Sequence[str]) -> Optional[List[str]]:
        if self._completer is None:
            return None
        return self._completer(invoker, args)

    def completer(self, func: Completer) -> Completer:
        """Decorator attaching a completion callable after construction."""
        self._completer = func
        return func


def subcommand(
    *,
    name: Optional[str] = None,
    aliases: Optional[Iterable[str]] = None,
    permission: str = "",
    requires_permission: Optional[bool] = None,
    enabled: bool = True,
    disabled_message: str = DEFAULT_DISABLED_MESSAGE,
    allow_console: bool = False,
    completer: Optional[Completer] = None
) -> Callable[[Executor], FunctionSubCommand]:
    """
    Decorator turning ``func(invoker, args)`` into a ``FunctionSubCommand``.

    The function name is converted from snake_case to kebab-case when ``name``
    is not provided.
    """

    def wrapper(func: Executor) -> FunctionSubCommand:
        return FunctionSubCommand(
            name=name or func.__name__.replace("_", "-"),
            executor=func,
            aliases=aliases,
            permission=permission,
            requires_permission=requires_permission,
            enabled=enabled,
            disabled_message=disabled_message,
            allow_console=allow_console,
            completer=completer,
        )

    return wrapper
