"""
critscore CLI entry point.

Usage:
    python -m critscore.cli --config pike.yml signals.csv -
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
