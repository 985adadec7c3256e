"""Unit tests for batch fetch and decode."""

from __future__ import annotations

import gzip
import io
from typing import BinaryIO

import pytest

from core.cancellation import CancelToken
from core.errors import (
    StrataCancelledError,
    StrataCorruptDataError,
    StrataNotFoundError,
    StrataRangeError,
    StrataStoreError,
)
from core.types import LedgerBatch
from store.batch_reader import read_ledger_batch, select_ledger
from store.memory_datastore import InMemoryDataStore
from tests.ledger_fixtures import JsonBatchDecoder, gzip_batch


class _TrackingStore(InMemoryDataStore):
    """Memory store that remembers every stream it hands out."""

    def __init__(self) -> None:
        super().__init__()
        self.streams: list[io.BytesIO] = []

    def get_file(self, key: str, cancel: CancelToken | None = None) -> BinaryIO:
        stream = super().get_file(key, cancel)
        self.streams.append(stream)
        return stream


def test_read_ledger_batch_decodes_payload() -> None:
    """A well-formed object should decode into its batch."""
    store = InMemoryDataStore()
    store.put("10-11.xdr.gz", gzip_batch(10, ["a", "b"]))

    batch = read_ledger_batch(store, "10-11.xdr.gz", JsonBatchDecoder())

    assert batch == LedgerBatch(start_sequence=10, records=("a", "b"))


def test_read_ledger_batch_raises_for_missing_object() -> None:
    """Missing objects should surface as not found."""
    with pytest.raises(StrataNotFoundError):
        read_ledger_batch(InMemoryDataStore(), "5.xdr.gz", JsonBatchDecoder())


def test_read_ledger_batch_rejects_invalid_gzip_and_closes_stream() -> None:
    """Bad gzip framing should be corrupt data and still release the stream."""
    store = _TrackingStore()
    store.put("5.xdr.gz", b"definitely not gzip")

    with pytest.raises(StrataCorruptDataError):
        read_ledger_batch(store, "5.xdr.gz", JsonBatchDecoder())

    assert store.streams[0].closed


class _FailingStream(io.BytesIO):
    """Stream whose read fails like a dropped connection."""

    def read(self, size: int | None = -1) -> bytes:
        raise ConnectionResetError("connection reset by peer")


class _FailingReadStore(InMemoryDataStore):
    """Memory store whose objects cannot be read back."""

    def __init__(self) -> None:
        super().__init__()
        self.streams: list[io.BytesIO] = []

    def get_file(self, key: str, cancel: CancelToken | None = None) -> BinaryIO:
        super().get_file(key, cancel).close()
        stream = _FailingStream()
        self.streams.append(stream)
        return stream


def test_read_ledger_batch_maps_transport_errors_to_store_errors() -> None:
    """A failed read should be a store error, not corrupt data, and close the stream."""
    store = _FailingReadStore()
    store.put("5.xdr.gz", gzip_batch(5, ["a"]))

    with pytest.raises(StrataStoreError, match="5.xdr.gz"):
        read_ledger_batch(store, "5.xdr.gz", JsonBatchDecoder())

    assert store.streams[-1].closed


def test_read_ledger_batch_rejects_truncated_gzip() -> None:
    """A truncated gzip member should be corrupt data."""
    store = InMemoryDataStore()
    store.put("5.xdr.gz", gzip_batch(5, ["a"])[:-12])

    with pytest.raises(StrataCorruptDataError):
        read_ledger_batch(store, "5.xdr.gz", JsonBatchDecoder())


def test_read_ledger_batch_rejects_undecodable_payload_and_closes_stream() -> None:
    """Decoder failures should be corrupt data and release the stream."""
    store = _TrackingStore()
    store.put("5.xdr.gz", gzip.compress(b"{not json"))

    with pytest.raises(StrataCorruptDataError, match="5.xdr.gz"):
        read_ledger_batch(store, "5.xdr.gz", JsonBatchDecoder())

    assert store.streams[0].closed


def test_read_ledger_batch_closes_stream_on_success() -> None:
    """The raw stream should be closed after a successful read."""
    store = _TrackingStore()
    store.put("5.xdr.gz", gzip_batch(5, ["a"]))

    read_ledger_batch(store, "5.xdr.gz", JsonBatchDecoder())

    assert store.streams[0].closed


def test_read_ledger_batch_honours_cancellation() -> None:
    """A cancelled token should stop the fetch before it starts."""
    store = _TrackingStore()
    store.put("5.xdr.gz", gzip_batch(5, ["a"]))
    cancel = CancelToken()
    cancel.cancel()

    with pytest.raises(StrataCancelledError):
        read_ledger_batch(store, "5.xdr.gz", JsonBatchDecoder(), cancel)

    assert store.streams == []


def test_select_ledger_indexes_from_batch_start() -> None:
    """Records should be addressed relative to the batch start."""
    batch = LedgerBatch(start_sequence=64, records=("r64", "r65", "r66"))

    assert select_ledger(batch, 66, "64-66.xdr.gz") == "r66"


@pytest.mark.parametrize("sequence", [63, 67, 1000])
def test_select_ledger_rejects_sequences_outside_batch(sequence: int) -> None:
    """Sequences before or after the batch should raise a range error."""
    batch = LedgerBatch(start_sequence=64, records=("r64", "r65", "r66"))

    with pytest.raises(StrataRangeError):
        select_ledger(batch, sequence, "64-66.xdr.gz")
