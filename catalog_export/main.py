"""CLI entry point for catalog exports.

Delegates to the cli module so the project supports
running via `python -m catalog_export.main`.
"""
import sys

from .cli import main as cli_main

if __name__ == "__main__":
    # Delegate to cli/main to support `python -m catalog_export.main`
    sys.exit(cli_main())
