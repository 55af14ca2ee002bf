"""
Host command table.

A host owns the mapping from root command names to executors. Dispatchers bind
themselves into it through ``Dispatcher.activate``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set

from .completion import filter_prefix
from .invoker import Invoker
from ..utils.logging import get_logger

ExecuteBinding = Callable[[Invoker, Sequence[str]], bool]
CompleteBinding = Callable[[Invoker, Sequence[str]], List[str]]


class CommandHost(ABC):
    """Host-side registry that dispatchers bind into."""

    @abstractmethod
    def has_command(self, name: str) -> bool:
        """Whether the host declares a command called ``name``."""
        pass

    @abstractmethod
    def bind(self, name: str, executor: ExecuteBinding, completer: CompleteBinding) -> None:
        """Route execution and completion of ``name`` to the given callables."""
        pass


@dataclass
class CommandBinding:
    name: str
    executor: ExecuteBinding
    completer: CompleteBinding


class CommandTable(CommandHost):
    """
    In-process host keyed by lower-cased root name.

    ``declared`` plays the part of a host manifest: when given, only those names
    may be bound. ``None`` accepts every name.
    """

    def __init__(self, declared: Optional[Iterable[str]] = None):
        self.logger = get_logger(__name__)
        self._declared: Optional[Set[str]] = None if declared is None else {n.lower() for n in declared}
        self._bindings: Dict[str, CommandBinding] = {}

    def has_command(self, name: str) -> bool:
        if self._declared is None:
            return True
        return name.lower() in self._declared

    def bind(self, name: str, executor: ExecuteBinding, completer: CompleteBinding) -> None:
        key = name.lower()
        if key in self._bindings:
            self.logger.warning(f"Rebinding command '{name}'")
        self._bindings[key] = CommandBinding(name, executor, completer)

    def get(self, name: str) -> Optional[CommandBinding]:
        return self._bindings.get(name.lower())

    def bound_names(self) -> List[str]:
        return [binding.name for binding in self._bindings.values()]

    def execute(self, invoker: Invoker, name: str, args: Sequence[str]) -> Optional[bool]:
        """Run a bound command; None when ``name`` is not bound."""
        binding = self.get(name)
        if binding is None:
            return None
        return binding.executor(invoker, args)

    def complete(self, invoker: Invoker, name: str, args: Sequence[str]) -> List[str]:
        """Completions for a bound command's arguments; [] when ``name`` is not bound."""
        binding = self.get(name)
        if binding is None:
            return []
        return binding.completer(invoker, args)

    def complete_root(self, prefix: str) -> List[str]:
        """Bound root names matching a partially typed command name."""
        return filter_prefix(self.bound_names(), prefix)
