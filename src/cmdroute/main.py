"""
Main entry point for the cmdroute console script.
"""

import sys

from .cli import parse_args, handle_cli_command


def main(argv=None) -> int:
    """Parse arguments and run the selected CLI mode."""
    try:
        args = parse_args(argv)
        return handle_cli_command(args)
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
