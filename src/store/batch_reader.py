"""Batch object fetch, decompression, and indexing.

This module turns one object key into a decoded ledger batch and picks
single ledgers out of it. Streams are closed on every exit path.
"""

from __future__ import annotations

from contextlib import closing
import gzip
from typing import Any
import zlib

from core.cancellation import CancelToken, check_cancelled
from core.errors import (
    StrataCorruptDataError,
    StrataError,
    StrataRangeError,
    StrataStoreError,
    with_context,
)
from core.types import LedgerBatch
from store.datastore import DataStore
from store.xdr_codec import BatchDecoder


def read_ledger_batch(
    data_store: DataStore,
    object_key: str,
    decoder: BatchDecoder,
    cancel: CancelToken | None = None,
) -> LedgerBatch:
    """Fetch and decode one batch object.

    Args:
        data_store: Store holding the exported objects.
        object_key: Root-relative key of the batch.
        decoder: Decoder for the decompressed payload.
        cancel: Optional cancellation token.

    Returns:
        Decoded batch.

    Raises:
        StrataNotFoundError: If the object is missing.
        StrataStoreError: If reading the object stream fails.
        StrataCorruptDataError: If gzip framing or decoding fails.
        StrataCancelledError: If cancelled before the payload is read.
    """
    check_cancelled(cancel, f"fetching {object_key}")
    payload = _read_decompressed(data_store, object_key, cancel)
    check_cancelled(cancel, f"decoding {object_key}")
    try:
        return decoder.decode(payload)
    except StrataError as error:
        raise with_context(error, f"failed unmarshalling file {object_key}") from error
    except Exception as error:
        raise StrataCorruptDataError(
            f"failed unmarshalling file {object_key}: {error}"
        ) from error


def select_ledger(batch: LedgerBatch, sequence: int, object_key: str) -> Any:
    """Return the record for a sequence from its batch.

    Raises:
        StrataRangeError: If the sequence lies outside the batch.
    """
    if not batch.contains(sequence):
        raise StrataRangeError(
            f"ledger {sequence} is outside batch {object_key} covering "
            f"{batch.start_sequence}-{batch.end_sequence} ({len(batch.records)} records)"
        )
    return batch.records[sequence - batch.start_sequence]


def _read_decompressed(
    data_store: DataStore,
    object_key: str,
    cancel: CancelToken | None,
) -> bytes:
    with closing(data_store.get_file(object_key, cancel)) as raw_stream:
        try:
            compressed = raw_stream.read()
        except OSError as error:
            raise StrataStoreError(f"failed reading file {object_key}: {error}") from error
    try:
        return gzip.decompress(compressed)
    except (OSError, EOFError, zlib.error) as error:
        raise StrataCorruptDataError(
            f"failed decompressing file {object_key}: {error}"
        ) from error
