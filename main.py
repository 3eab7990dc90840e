#!/usr/bin/env python3
"""rlsforecast -- CLI entry point.

Usage:
    python main.py --input data.csv --target y
    python main.py --input data.csv --target y --pi0 0.4 --horizon 3
    python main.py --help

Requirements:
    pip install -e .
"""

from __future__ import annotations

import sys

from rlsforecast.cli import main

if __name__ == "__main__":
    sys.exit(main())
