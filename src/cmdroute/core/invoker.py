"""
Invoker abstraction.

The dispatcher never looks inside an invoker: it only asks whether it holds a
permission, whether it is a console-like context, and hands it user-facing
messages. ``name`` and ``kind`` exist for log text only.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Iterable, List, Optional, Set


class InvokerKind(Enum):
    """Kind of actor issuing a command, supplied by the host adapter."""
    PLAYER = "player"
    CONSOLE = "console"
    REMOTE = "remote"
    AUTOMATION = "automation"
    UNKNOWN = "unknown"


class Invoker(ABC):
    """Identity behind a command invocation."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name used in log output."""
        pass

    @property
    def kind(self) -> InvokerKind:
        return InvokerKind.UNKNOWN

    @abstractmethod
    def has_permission(self, key: str) -> bool:
        """Ask the host's permission system whether ``key`` is granted."""
        pass

    @abstractmethod
    def is_console_like(self) -> bool:
        """True when the invocation comes from a console rather than an interactive actor."""
        pass

    @abstractmethod
    def send_message(self, message: str) -> None:
        """Deliver a user-visible message."""
        pass


class SimpleInvoker(Invoker):
    """
    In-process invoker backed by a permission set.

    Messages are appended to ``messages`` and, when given, forwarded to ``sink``.
    The console predicate follows ``kind`` unless ``console_like`` is passed.
    """

    def __init__(
        self,
        name: str,
        kind: InvokerKind = InvokerKind.PLAYER,
        permissions: Optional[Iterable[str]] = None,
        console_like: Optional[bool] = None,
        sink: Optional[Callable[[str], None]] = None
    ):
        self._name = name
        self._kind = kind
        self.permissions: Set[str] = set(permissions or ())
        self._console_like = console_like
        self._sink = sink
        self.messages: List[str] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def kind(self) -> InvokerKind:
        return self._kind

    def has_permission(self, key: str) -> bool:
        return key in self.permissions

    def grant(self, *keys: str) -> "SimpleInvoker":
        self.permissions.update(keys)
        return self

    def is_console_like(self) -> bool:
        if self._console_like is not None:
            return self._console_like
        return self._kind is InvokerKind.CONSOLE

    def send_message(self, message: str) -> None:
        self.messages.append(message)
        if self._sink is not None:
            self._sink(message)

    def __repr__(self) -> str:
        return f"SimpleInvoker(name={self._name!r}, kind={self._kind.value})"
