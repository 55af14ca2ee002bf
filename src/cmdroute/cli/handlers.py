"""
CLI command handlers for cmdroute.

Loads configuration and logging, builds the dispatcher named in the
configuration, binds it into a CommandTable and runs the selected mode.
"""

import importlib
import inspect
from typing import Optional

from rich.console import Console

from .shell import Shell
from ..config import load_config, CmdRouteConfig
from ..config.models import DispatchSettings
from ..core import CommandTable, Dispatcher, InvokerKind, LoggingInstrumentation, SimpleInvoker
from ..utils import ConfigurationError, get_logger, performance_timer, setup_logging


def handle_cli_command(args, console: Optional[Console] = None) -> int:
    """
    Handle CLI commands based on parsed arguments.

    Returns:
        int: Exit code (0 for success, non-zero for error)
    """
    console = console or Console()

    try:
        config = load_config(args.config)
        setup_logging(config, verbose=args.verbose)
        logger = get_logger(__name__)

        settings = dispatch_settings(config, debug=args.debug)
        dispatcher = load_dispatcher(args.dispatcher or config.shell.dispatcher, settings)

        table = CommandTable(config.shell.declared_commands)
        if not dispatcher.activate(table):
            console.print(f"Command '{dispatcher.root_name}' is not declared in shell.declared_commands", style="red")
            return 1
        logger.debug(f"Bound {dispatcher!r}")

        invoker = SimpleInvoker(
            args.name or config.shell.invoker_name,
            kind=InvokerKind.PLAYER if args.as_player else InvokerKind.CONSOLE,
            permissions=args.grant,
            sink=lambda message: console.print(message, markup=False, highlight=False),
        )
        shell = Shell(table, invoker, console=console, prompt=config.shell.prompt)

        if args.exec_line is not None:
            return _handle_exec(shell, args.exec_line)
        elif args.complete_line is not None:
            return _handle_complete(shell, args.complete_line, console)
        else:
            return shell.loop()

    except ConfigurationError as e:
        console.print(f"Configuration error: {e}", style="bold red", markup=False)
        return 1


def dispatch_settings(config: CmdRouteConfig, debug: bool = False) -> DispatchSettings:
    """Dispatch settings with the app-wide and command-line debug switches folded in."""
    return config.dispatch.model_copy(
        update={"debug": debug or config.app.debug or config.dispatch.debug}
    )


@performance_timer("dispatcher import")
def load_dispatcher(import_path: str, settings: DispatchSettings) -> Dispatcher:
    """
    Resolve ``module:attribute`` to a Dispatcher.

    The attribute may be a Dispatcher or a factory returning one. Factories get
    ``settings`` and ``instrumentation`` keyword arguments when their signature
    accepts them.

    Raises:
        ConfigurationError: If the path cannot be imported or yields no Dispatcher
    """
    module_name, _, attribute = import_path.partition(":")
    try:
        target = getattr(importlib.import_module(module_name), attribute)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(
            f"Cannot load dispatcher '{import_path}': {e}",
            details={"error_type": "import", "original_error": str(e)}
        ) from e

    if not isinstance(target, Dispatcher) and callable(target):
        available = {"settings": settings, "instrumentation": LoggingInstrumentation(settings)}
        params = inspect.signature(target).parameters
        target = target(**{key: value for key, value in available.items() if key in params})

    if not isinstance(target, Dispatcher):
        raise ConfigurationError(f"'{import_path}' did not produce a Dispatcher (got {type(target).__name__})")

    return target


def _handle_exec(shell: Shell, line: str) -> int:
    handled = shell.run_line(line)
    return 0 if handled else 1


def _handle_complete(shell: Shell, line: str, console: Console) -> int:
    for suggestion in shell.suggest(line):
        console.print(suggestion, markup=False, highlight=False)
    return 0
