"""
cmdroute - sub-command dispatch for textual command hosts.

Routes ``<root> <subcommand> [args...]`` invocations to registered
sub-commands, enforcing enabled/permission/console checks, and produces
completion candidates for partially typed input.

Usage:
    from cmdroute import Dispatcher, CommandTable, SimpleInvoker, subcommand

    @subcommand(aliases=["g"], permission="give")
    def give(invoker, args):
        invoker.send_message(f"gave {args[1]}")

    dispatcher = Dispatcher("items").add_subcommand(give)
    dispatcher.activate(CommandTable())
    dispatcher.dispatch(SimpleInvoker("alice", permissions=["give"]), ["g", "apple"])
"""

__version__ = "0.1.0"

from .core import (
    Dispatcher,
    DispatchResult,
    RouteOutcome,
    SubCommand,
    FunctionSubCommand,
    subcommand,
    Invoker,
    InvokerKind,
    SimpleInvoker,
    InstrumentationBridge,
    LoggingInstrumentation,
    NullInstrumentation,
    RecordingInstrumentation,
    CommandHost,
    CommandTable,
    filter_prefix,
)
from .config import DispatchSettings
from .utils import (
    CommandApiError,
    ConfigurationError,
    RegistrationError,
    HandlerExecutionError,
)

__all__ = [
    "__version__",
    "Dispatcher",
    "DispatchResult",
    "RouteOutcome",
    "SubCommand",
    "FunctionSubCommand",
    "subcommand",
    "Invoker",
    "InvokerKind",
    "SimpleInvoker",
    "InstrumentationBridge",
    "LoggingInstrumentation",
    "NullInstrumentation",
    "RecordingInstrumentation",
    "CommandHost",
    "CommandTable",
    "filter_prefix",
    "DispatchSettings",
    "CommandApiError",
    "ConfigurationError",
    "RegistrationError",
    "HandlerExecutionError",
]
