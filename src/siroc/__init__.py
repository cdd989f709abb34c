"""siroc — zero-config build tooling for JavaScript and TypeScript packages.

The Python package is the command-line shell: manifest loading, command
registration, argument parsing and timed dispatch to command handlers.
"""

from siroc.version import __version__

__all__: list[str] = ["__version__"]
