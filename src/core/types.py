"""Shared typed models.

This module defines immutable data models used by the key mapper,
the batch reader, and the ledger backend to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.constants import (
    DEFAULT_FILE_SUFFIX,
    DEFAULT_FILES_PER_PARTITION,
    DEFAULT_LEDGERS_PER_FILE,
    MAX_LEDGER_SEQUENCE,
)
from core.errors import StrataConfigError, StrataRangeError


@dataclass(frozen=True)
class PartitionConfig:
    """Object layout of one exporter deployment.

    Attributes:
        ledgers_per_file: Consecutive ledgers stored in one batch object.
        files_per_partition: Batch objects grouped under one directory.
        file_suffix: Suffix appended to every batch object name.
    """

    ledgers_per_file: int = DEFAULT_LEDGERS_PER_FILE
    files_per_partition: int = DEFAULT_FILES_PER_PARTITION
    file_suffix: str = DEFAULT_FILE_SUFFIX

    @property
    def partition_size(self) -> int:
        """Number of ledgers covered by one partition directory."""
        return self.ledgers_per_file * self.files_per_partition

    def validate(self) -> "PartitionConfig":
        """Check layout invariants and return self.

        Raises:
            StrataConfigError: If any value is out of range.
        """
        if self.ledgers_per_file < 1:
            raise StrataConfigError(
                f"Invalid ledgers per file ({self.ledgers_per_file}): must be at least 1"
            )
        if self.files_per_partition < 1:
            raise StrataConfigError(
                f"Invalid files per partition ({self.files_per_partition}): must be at least 1"
            )
        if not self.file_suffix:
            raise StrataConfigError("Invalid file suffix: must not be empty")
        return self


@dataclass(frozen=True)
class LedgerBatch:
    """Decoded contents of one batch object.

    Attributes:
        start_sequence: Sequence of the first record.
        records: Ordered opaque ledger-close payloads.
    """

    start_sequence: int
    records: tuple[Any, ...]

    @property
    def end_sequence(self) -> int:
        """Sequence of the last record in the batch."""
        return self.start_sequence + len(self.records) - 1

    def contains(self, sequence: int) -> bool:
        """Return whether a sequence falls inside this batch."""
        return self.start_sequence <= sequence < self.start_sequence + len(self.records)


@dataclass(frozen=True)
class LedgerRange:
    """Range of ledgers a consumer intends to read.

    Attributes:
        from_sequence: First ledger of the range.
        to_sequence: Last ledger when bounded, otherwise 0.
        bounded: False for an open-ended, continuously growing range.
    """

    from_sequence: int
    to_sequence: int
    bounded: bool

    @classmethod
    def bounded_range(cls, from_sequence: int, to_sequence: int) -> "LedgerRange":
        """Build a closed range ``[from_sequence, to_sequence]``."""
        return cls(from_sequence=from_sequence, to_sequence=to_sequence, bounded=True)

    @classmethod
    def unbounded_range(cls, from_sequence: int) -> "LedgerRange":
        """Build an open-ended range starting at ``from_sequence``."""
        return cls(from_sequence=from_sequence, to_sequence=0, bounded=False)

    def __str__(self) -> str:
        if self.bounded:
            return f"[{self.from_sequence},{self.to_sequence}]"
        return f"[{self.from_sequence},latest)"


def validate_sequence(sequence: int) -> int:
    """Check that a ledger sequence fits in an unsigned 32-bit integer.

    Raises:
        StrataRangeError: If the value is negative or too large.
    """
    if sequence < 0 or sequence > MAX_LEDGER_SEQUENCE:
        raise StrataRangeError(
            f"Invalid ledger sequence {sequence}: expected 0..{MAX_LEDGER_SEQUENCE}"
        )
    return sequence
