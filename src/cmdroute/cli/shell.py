"""
Line-oriented shell host.

Turns raw input lines into ``<root> [args...]`` calls against a CommandTable
and offers tab completion through readline when the platform has it.
"""

import shlex
from typing import List, Optional, Tuple

from rich.console import Console

from ..core import CommandTable, Invoker, filter_prefix
from ..utils.logging import get_logger

EXIT_WORDS = {"exit", "quit"}


def split_line(raw_input: str) -> List[str]:
    """Split a line shell-style, falling back to whitespace on malformed quotes."""
    try:
        return shlex.split(raw_input, posix=True)
    except ValueError:
        return raw_input.split()


def split_partial(raw_input: str) -> Tuple[List[str], str]:
    """
    Return (parts, current_prefix) for a partially typed line.

    Trailing whitespace appends an empty token, meaning a new argument has started.
    """
    if not raw_input:
        return [], ""

    parts = split_line(raw_input)
    if raw_input[-1].isspace():
        parts.append("")
    return parts, (parts[-1] if parts else "")


class Shell:
    """Runs lines and completions for a single invoker against a command table."""

    def __init__(self, table: CommandTable, invoker: Invoker, console: Optional[Console] = None, prompt: str = "> "):
        self.table = table
        self.invoker = invoker
        self.console = console or Console()
        self.prompt = prompt
        self.logger = get_logger(__name__)

    def run_line(self, line: str) -> Optional[bool]:
        """
        Execute one line.

        Returns:
            The command's handled flag, or None for blank lines and unknown roots
        """
        tokens = split_line(line.strip())
        if not tokens:
            return None

        root, *args = tokens
        handled = self.table.execute(self.invoker, root, args)
        if handled is None:
            self.console.print(f"Unknown command: {root}", style="red", markup=False, highlight=False)
        return handled

    def suggest(self, line: str) -> List[str]:
        """Completion candidates for the token being typed at the end of ``line``."""
        parts, prefix = split_partial(line.lstrip())
        if len(parts) <= 1:
            return self.table.complete_root(prefix)
        return self.table.complete(self.invoker, parts[0], parts[1:])

    def _install_completion(self) -> bool:
        try:
            import readline
        except ImportError:
            return False

        def _complete(text_fragment: str, state_index: int) -> Optional[str]:
            matches = filter_prefix(self.suggest(readline.get_line_buffer()), text_fragment)
            return matches[state_index] if state_index < len(matches) else None

        readline.set_completer_delims(" \t\n")
        readline.set_completer(_complete)
        readline.parse_and_bind("tab: complete")
        return True

    def loop(self) -> int:
        """Interactive read-eval loop; returns a process exit code."""
        if not self._install_completion():
            self.logger.debug("readline unavailable, tab completion disabled")

        names = ", ".join(self.table.bound_names()) or "none"
        self.console.print(f"Commands: {names}. Type 'exit' to quit.", style="dim", markup=False)

        while True:
            try:
                line = input(self.prompt)
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                break

            if line.strip().lower() in EXIT_WORDS:
                break
            self.run_line(line)

        return 0
