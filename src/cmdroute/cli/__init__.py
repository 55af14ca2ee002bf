"""
CLI module for cmdroute.

Argument parsing, the handlers behind each mode, and the line-oriented shell host.
"""

from .commands import create_parser, parse_args
from .handlers import handle_cli_command, load_dispatcher
from .shell import Shell, split_line, split_partial

__all__ = [
    "create_parser",
    "parse_args",
    "handle_cli_command",
    "load_dispatcher",
    "Shell",
    "split_line",
    "split_partial",
]
