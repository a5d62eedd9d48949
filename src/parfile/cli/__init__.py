"""Command line tools for parameter files.

Checks, queries, normalizes, and exports parameter files without running a
simulation driver.
"""

__all__ = ["main"]
