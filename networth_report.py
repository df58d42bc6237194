#!/usr/bin/env python3
"""Net-worth and cash-flow report generator.

Entry point script wrapping the package CLI for convenient execution.

Usage:
    python networth_report.py --accounts accounts.json --transactions transactions.json

For full documentation and options:
    python networth_report.py --help
"""

import sys
from pathlib import Path

# Add src to path for development installs
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from networth_reporter.cli import main

if __name__ == "__main__":
    sys.exit(main())
