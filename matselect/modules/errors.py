"""Exception types raised by the analytics engine and its loaders.

Degenerate data (constant properties, too few paired samples, zero-variance
columns) is never raised: each algorithm recovers locally with a documented
fallback value. Only caller mistakes and missing inputs surface here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


class InputPreconditionError(ValueError):
    """Raised when a computation is invoked with inputs it cannot work with."""

    def __init__(self, message: str, *, issues: Iterable[str] | None = None) -> None:
        self.issues = tuple(issues or [])
        super().__init__(message)


class InvalidCatalogError(ValueError):
    """Raised when a catalog dataset does not match the expected schema."""

    def __init__(self, message: str, *, issues: Iterable[str] | None = None) -> None:
        self.issues = tuple(issues or [])
        super().__init__(message)


class MissingDatasetError(FileNotFoundError):
    """Raised when a required dataset file is missing from disk."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"Required dataset not found: {self.path}")


__all__ = [
    "InputPreconditionError",
    "InvalidCatalogError",
    "MissingDatasetError",
]
