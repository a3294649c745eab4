"""
Error types raised by the worker core.

All errors inherit from ClustercodeError for easy catching. The underlying
OSError, if any, is always chained as __cause__.
"""

from pathlib import Path
from typing import Optional


class ClustercodeError(Exception):
    """Base exception for all worker core failures."""
    pass


class ScanReadError(ClustercodeError):
    """Raised when the input root or a priority lane cannot be listed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


class OutputWriteError(ClustercodeError):
    """Raised when a cleanup stage fails to create a directory or move a file."""

    def __init__(self, path: Path, reason: str, source: Optional[Path] = None):
        self.path = path
        self.source = source
        self.reason = reason
        if source is not None:
            super().__init__(f"Cannot move {source} to {path}: {reason}")
        else:
            super().__init__(f"Cannot write {path}: {reason}")


class MalformedCandidatePathError(ClustercodeError, ValueError):
    """Raised when a candidate path has no room for a lane prefix."""

    def __init__(self, relative_path: Path):
        self.relative_path = relative_path
        super().__init__(
            f"Candidate path must contain a lane directory and a file name: {relative_path}"
        )
