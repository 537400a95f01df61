"""Main entry point for running matcalc_pkg as a module.

This allows running matcalc with:
    python -m matcalc_pkg
    python -m matcalc_pkg --health-check
    python -m matcalc_pkg -e "2+2"

This is equivalent to running:
    python -m matcalc_pkg.cli
    python matcalc.py
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
