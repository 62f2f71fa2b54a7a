#!/usr/bin/env python3
"""Transaction Analytics command-line entry point.

Wraps the package CLI for convenient execution from a source checkout.

Usage:
    python analyze_transactions.py --input ./extracted --output report.xlsx

For full documentation and options:
    python analyze_transactions.py --help
"""

import sys
from pathlib import Path

# Add src to path for running from a checkout without installing
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from transaction_analytics.cli import main

if __name__ == "__main__":
    sys.exit(main())
