"""CLI layer — argument parsing, timed dispatch, and error boundary.

This package is the outermost layer of the application.  It may import
from ``core``, ``infra``, and ``commands``; ``core`` and ``infra`` never
import from ``cli``.
"""
