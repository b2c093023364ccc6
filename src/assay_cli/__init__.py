"""assay-cli — command-line client for the Assay document library.

Authenticates with an API key, keeps its secret half in the OS keychain,
and queries documents and themes over the Assay HTTP API.
"""

from assay_cli.version import __version__

__all__: list[str] = ["__version__"]
