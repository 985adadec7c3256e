"""Batch payload decoding.

This module defines the decoder contract the batch reader depends on
and the XDR decoder for ``LedgerCloseMetaBatch`` payloads.
"""

from __future__ import annotations

from typing import Any, Protocol

from core.errors import StrataCorruptDataError, StrataDependencyError
from core.types import LedgerBatch


class BatchDecoder(Protocol):
    """Turns a decompressed batch object into a ledger batch."""

    def decode(self, payload: bytes) -> LedgerBatch:
        """Decode raw bytes; raise on malformed input."""
        ...


class XdrBatchDecoder:
    """Decoder for XDR ``LedgerCloseMetaBatch`` objects via stellar-sdk."""

    def __init__(self) -> None:
        self._batch_type = _load_batch_type()

    def decode(self, payload: bytes) -> LedgerBatch:
        """Decode an XDR batch.

        Args:
            payload: Decompressed object bytes.

        Returns:
            Batch whose records are ``LedgerCloseMeta`` XDR objects.

        Raises:
            StrataCorruptDataError: If the declared end sequence disagrees
                with the number of records.
        """
        xdr_batch = self._batch_type.from_xdr_bytes(payload)
        start_sequence = xdr_batch.start_sequence.uint32
        end_sequence = xdr_batch.end_sequence.uint32
        records = tuple(xdr_batch.ledger_close_metas)
        if records and end_sequence != start_sequence + len(records) - 1:
            raise StrataCorruptDataError(
                f"batch declares ledgers {start_sequence}-{end_sequence} "
                f"but holds {len(records)} records"
            )
        return LedgerBatch(start_sequence=start_sequence, records=records)

    @staticmethod
    def render_record(record: Any) -> str:
        """Return a ledger-close record as base64 XDR."""
        return str(record.to_xdr())


def _load_batch_type() -> Any:
    """Import the XDR batch type.

    Raises:
        StrataDependencyError: If stellar-sdk is missing.
    """
    try:
        from stellar_sdk.xdr import LedgerCloseMetaBatch
    except ImportError as error:
        raise StrataDependencyError(
            "XDR decoding requires stellar-sdk, but it is not installed. "
            "Install stellar-sdk to decode ledger batches."
        ) from error
    return LedgerCloseMetaBatch
