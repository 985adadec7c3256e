"""Object key derivation for exported ledger batches.

This module maps a ledger sequence onto the object key the exporter
wrote it under. Keys are pure functions of sequence and layout.
"""

from __future__ import annotations

from core.constants import (
    DEFAULT_FILE_SUFFIX,
    OBJECT_PATH_SEPARATOR,
    PARTITION_BOUND_SEPARATOR,
)
from core.types import PartitionConfig, validate_sequence


def compute_object_key(
    sequence: int,
    ledgers_per_file: int,
    files_per_partition: int,
    file_suffix: str = DEFAULT_FILE_SUFFIX,
) -> str:
    """Compute the object key holding a ledger.

    Args:
        sequence: Ledger sequence number.
        ledgers_per_file: Ledgers stored in each batch object.
        files_per_partition: Batch objects grouped under one directory.
        file_suffix: Suffix appended to the file name.

    Returns:
        Key such as ``"0-63999/5.xdr.gz"`` or ``"64-127.xdr.gz"``.

    Raises:
        StrataConfigError: If the layout values are below 1.
        StrataRangeError: If the sequence is not a uint32.
    """
    partition = PartitionConfig(
        ledgers_per_file=ledgers_per_file,
        files_per_partition=files_per_partition,
        file_suffix=file_suffix,
    ).validate()
    validate_sequence(sequence)
    object_key = ""
    if files_per_partition > 1:
        partition_start = (sequence // partition.partition_size) * partition.partition_size
        partition_end = partition_start + partition.partition_size - 1
        object_key = (
            f"{partition_start}{PARTITION_BOUND_SEPARATOR}{partition_end}{OBJECT_PATH_SEPARATOR}"
        )

    file_start = (sequence // ledgers_per_file) * ledgers_per_file
    file_end = file_start + ledgers_per_file - 1
    object_key += str(file_start)
    if file_start != file_end:
        object_key += f"{PARTITION_BOUND_SEPARATOR}{file_end}"
    return object_key + file_suffix


def object_key_for(sequence: int, partition: PartitionConfig) -> str:
    """Compute the object key for a ledger under a deployment layout."""
    return compute_object_key(
        sequence,
        partition.ledgers_per_file,
        partition.files_per_partition,
        partition.file_suffix,
    )
