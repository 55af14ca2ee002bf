"""
Command-line argument parser for cmdroute.
"""

import argparse

from .. import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cmdroute",
        description="cmdroute - run a sub-command dispatcher from a terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cmdroute                                     # Interactive shell over the demo 'econ' command
  cmdroute --exec "econ balance bob"           # Run one line and exit
  cmdroute --complete "econ pay "              # Print completions for a partial line
  cmdroute --as-player --name alice --grant pay --exec "econ pay bob 10"
  cmdroute --dispatcher myapp.commands:build   # Load another dispatcher
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"cmdroute {__version__}"
    )

    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to configuration file"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show handler failure details and debug events"
    )

    parser.add_argument(
        "--dispatcher",
        type=str,
        metavar="MODULE:ATTR",
        help="Dispatcher instance or factory to load (overrides shell.dispatcher)"
    )

    # Invoker identity
    parser.add_argument(
        "--name",
        type=str,
        metavar="NAME",
        help="Invoker name (defaults to shell.invoker_name)"
    )

    parser.add_argument(
        "--as-player",
        action="store_true",
        help="Invoke as an interactive player instead of the console"
    )

    parser.add_argument(
        "--grant",
        action="append",
        default=[],
        metavar="KEY",
        help="Grant a permission key to the invoker (repeatable)"
    )

    # Mode selection (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group()

    mode_group.add_argument(
        "--exec",
        dest="exec_line",
        type=str,
        metavar="LINE",
        help="Execute a single command line and exit"
    )

    mode_group.add_argument(
        "--complete",
        dest="complete_line",
        type=str,
        metavar="LINE",
        help="Print completion candidates for a partial line and exit"
    )

    return parser


def parse_args(args=None):
    """Parse command line arguments."""
    parser = create_parser()
    return parser.parse_args(args)
