"""
gsdgraph.exceptions - Exceptions raised by gsdgraph.

Document parsers never raise for missing or malformed documents; they
report problems through the ``error`` field of their result. Exceptions
are reserved for problems the caller has to fix, such as a broken
configuration file.
"""

from __future__ import annotations

from pathlib import Path


class GsdGraphError(Exception):
    """Base class for gsdgraph errors."""


class ConfigError(GsdGraphError):
    """A configuration file could not be read or parsed."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
