"""Unit tests for XDR batch decoding."""

from __future__ import annotations

import gzip

import pytest

from core.errors import StrataCorruptDataError
from core.types import LedgerBatch
from store.batch_reader import read_ledger_batch
from store.memory_datastore import InMemoryDataStore
from store.xdr_codec import XdrBatchDecoder

xdr = pytest.importorskip("stellar_sdk.xdr")


def test_xdr_decoder_reads_batch_header() -> None:
    """An empty XDR batch should decode with its start sequence."""
    batch = xdr.LedgerCloseMetaBatch(
        start_sequence=xdr.Uint32(64000),
        end_sequence=xdr.Uint32(63999),
        ledger_close_metas=[],
    )

    decoded = XdrBatchDecoder().decode(batch.to_xdr_bytes())

    assert decoded == LedgerBatch(start_sequence=64000, records=())


def test_xdr_decoder_failures_surface_as_corrupt_data() -> None:
    """Truncated XDR inside valid gzip should be corrupt data."""
    store = InMemoryDataStore()
    store.put("5.xdr.gz", gzip.compress(b"\x00\x01"))

    with pytest.raises(StrataCorruptDataError, match="5.xdr.gz"):
        read_ledger_batch(store, "5.xdr.gz", XdrBatchDecoder())
