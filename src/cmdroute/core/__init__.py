"""
Dispatch core for cmdroute.

Key Components:
- Dispatcher: routes a root command's arguments to sub-commands
- SubCommand: contract every sub-command implements
- Invoker: identity behind an invocation
- InstrumentationBridge: receiver for execution/error events
- CommandHost: host command table dispatchers bind into
- filter_prefix: case-insensitive completion filter
"""

from .completion import filter_prefix

from .types import (
    DispatchResult,
    RouteOutcome,
    USAGE_TEMPLATE,
    NO_PERMISSION_MESSAGE,
    CONSOLE_REJECTED_MESSAGE,
    EXECUTION_FAILED_MESSAGE,
    DEFAULT_DISABLED_MESSAGE,
)

from .invoker import (
    Invoker,
    InvokerKind,
    SimpleInvoker,
)

from .handler import (
    SubCommand,
    FunctionSubCommand,
    subcommand,
)

from .instrumentation import (
    InstrumentationBridge,
    InstrumentationEvent,
    LoggingInstrumentation,
    NullInstrumentation,
    RecordingInstrumentation,
)

from .host import (
    CommandHost,
    CommandTable,
    CommandBinding,
)

from .dispatcher import Dispatcher

__all__ = [
    "filter_prefix",

    # Results and messages
    "DispatchResult",
    "RouteOutcome",
    "USAGE_TEMPLATE",
    "NO_PERMISSION_MESSAGE",
    "CONSOLE_REJECTED_MESSAGE",
    "EXECUTION_FAILED_MESSAGE",
    "DEFAULT_DISABLED_MESSAGE",

    # Invokers
    "Invoker",
    "InvokerKind",
    "SimpleInvoker",

    # Sub-commands
    "SubCommand",
    "FunctionSubCommand",
    "subcommand",

    # Instrumentation
    "InstrumentationBridge",
    "InstrumentationEvent",
    "LoggingInstrumentation",
    "NullInstrumentation",
    "RecordingInstrumentation",

    # Hosts
    "CommandHost",
    "CommandTable",
    "CommandBinding",

    "Dispatcher",
]
