"""Allow ``python -m siroc`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m siroc`` behaves identically to the ``siroc`` console
script.
"""

from __future__ import annotations

from siroc.cli.app import cli

if __name__ == "__main__":
    cli()
