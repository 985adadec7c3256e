"""Strata exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each failure class maps to one way a ledger read can go wrong.
"""

from __future__ import annotations


class StrataError(Exception):
    """Base exception for all Strata failures."""


class StrataConfigError(StrataError):
    """Raised for invalid runtime or partition configuration."""


class StrataNotFoundError(StrataError):
    """Raised when an object, directory, or ledger is absent from the store."""


class StrataCorruptDataError(StrataError):
    """Raised when a batch object fails decompression or decoding."""


class StrataRangeError(StrataError):
    """Raised for sequences outside a batch or unparsable ledger file names."""


class StrataCancelledError(StrataError):
    """Raised when a caller cancels a pending listing or fetch."""


class StrataStoreError(StrataError):
    """Raised for object-store transport failures."""


class StrataDependencyError(StrataError):
    """Raised when an optional runtime dependency is missing."""


def with_context(error: StrataError, context: str) -> StrataError:
    """Return an error of the same class with ``context`` prefixed.

    Callers raise the result ``from error`` so the cause chain is kept.
    """
    return type(error)(f"{context}: {error}")
