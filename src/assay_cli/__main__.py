"""Allow ``python -m assay_cli`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m assay_cli`` behaves identically to the ``assay``
console script.
"""

from __future__ import annotations

from assay_cli.cli.app import cli

if __name__ == "__main__":
    cli()
