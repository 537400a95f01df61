#!/usr/bin/env python3
"""
matcalc - Scalar and Matrix Expression Calculator

Main entry point for the matcalc calculator application.
This file serves as a thin wrapper that delegates all functionality
to the matcalc_pkg package.

Usage:
    python matcalc.py                         # Interactive REPL
    python matcalc.py -e "[1,2;3,4]^2"        # Evaluate expression
    python matcalc.py --plot "v=[1,2;3,4]"    # Plot vectors
    python matcalc.py --help                  # Show help
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entry point for matcalc.

    Delegates all functionality to the matcalc_pkg.cli module,
    which handles argument parsing, expression evaluation, and output formatting.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        from matcalc_pkg.cli import main_entry

        return main_entry(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 1
    except ImportError as e:
        print(f"Error: Failed to import matcalc_pkg: {e}")
        print("Please ensure all dependencies are installed: pip install -e .")
        return 1


if __name__ == "__main__":
    sys.exit(main())
