#!/usr/bin/env python3
"""
Run EduTube Planner from a source checkout without installing it.

An installed copy exposes the same entry point as the `edutube-planner` command.
"""

import sys
from pathlib import Path


def run_from_checkout():
    """Put src/ on the import path and start the planner."""
    sys.path.insert(0, str(Path(__file__).parent / "src"))

    from main import main

    main()


if __name__ == "__main__":
    run_from_checkout()
