#!/usr/bin/env python3
"""
cmdroute - run a sub-command dispatcher from a terminal.

Development entry point; the installed package provides the ``cmdroute`` script.
"""

import sys
from pathlib import Path

# Add src to path for development
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from cmdroute.main import main


if __name__ == "__main__":
    sys.exit(main())
