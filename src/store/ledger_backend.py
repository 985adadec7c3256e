"""Ledger backend over exported batch objects.

This module reads single ledgers, checks ranges, and reports the latest
available ledger for a bucket written by the ledger exporter.
"""

from __future__ import annotations

from typing import Any

from core.cancellation import CancelToken
from core.config import StrataConfig
from core.errors import StrataError, StrataRangeError, with_context
from core.logging_config import get_logger
from core.types import LedgerBatch, LedgerRange, PartitionConfig, validate_sequence
from store.batch_cache import BatchCache
from store.batch_reader import read_ledger_batch, select_ledger
from store.datastore import DataStore, create_data_store
from store.latest_ledger import find_latest_ledger_sequence
from store.object_keys import object_key_for
from store.xdr_codec import BatchDecoder, XdrBatchDecoder

_LOGGER = get_logger(__name__)


class LedgerBackend:
    """Read-only ledger source backed by an object store.

    The backend holds no mutable state apart from the optional batch
    cache, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        data_store: DataStore,
        decoder: BatchDecoder,
        partition: PartitionConfig | None = None,
        batch_cache_size: int = 0,
    ) -> None:
        """Initialize the backend.

        Args:
            data_store: Store holding the exported objects.
            decoder: Decoder for decompressed batch payloads.
            partition: Object layout of the deployment.
            batch_cache_size: Decoded batches kept in memory, 0 disables.

        Raises:
            StrataConfigError: If the layout is invalid.
        """
        self._data_store = data_store
        self._decoder = decoder
        self._partition = (partition or PartitionConfig()).validate()
        self._cache = BatchCache(batch_cache_size) if batch_cache_size > 0 else None

    @classmethod
    def from_config(
        cls,
        config: StrataConfig,
        decoder: BatchDecoder | None = None,
    ) -> "LedgerBackend":
        """Build a backend for the configured storage URL.

        Args:
            config: Runtime configuration.
            decoder: Optional decoder, XDR when omitted.

        Returns:
            Backend bound to the resolved data store.
        """
        partition = config.partition
        batch_decoder = decoder or XdrBatchDecoder()
        data_store = create_data_store(config.storage_url, config)
        return cls(
            data_store,
            batch_decoder,
            partition=partition,
            batch_cache_size=config.batch_cache_size,
        )

    @property
    def partition(self) -> PartitionConfig:
        """Object layout used to derive keys."""
        return self._partition

    def get_latest_ledger_sequence(self, cancel: CancelToken | None = None) -> int:
        """Return the most recent ledger sequence in the store.

        Raises:
            StrataError: If listing or file name parsing fails.
        """
        return find_latest_ledger_sequence(
            self._data_store,
            self._partition.file_suffix,
            cancel,
        )

    def get_ledger(self, sequence: int, cancel: CancelToken | None = None) -> Any:
        """Return the ledger-close record for a sequence.

        Args:
            sequence: Ledger sequence number.
            cancel: Optional cancellation token.

        Returns:
            Opaque record produced by the decoder.

        Raises:
            StrataConfigError: If the object key cannot be derived.
            StrataNotFoundError: If the batch object is missing.
            StrataCorruptDataError: If the batch cannot be decoded.
            StrataRangeError: If the batch does not hold the sequence.
            StrataCancelledError: If cancelled while fetching.
        """
        try:
            validate_sequence(sequence)
            object_key = object_key_for(sequence, self._partition)
        except StrataError as error:
            raise with_context(error, f"failed to get object key for ledger {sequence}") from error
        batch = self._load_batch(object_key, cancel)
        record = select_ledger(batch, sequence, object_key)
        _LOGGER.debug("ledger_fetched", ledger_sequence=sequence, object_key=object_key)
        return record

    def prepare_range(self, ledger_range: LedgerRange, cancel: CancelToken | None = None) -> None:
        """Check that the boundary ledgers of a range exist.

        Only ``from`` is fetched for unbounded ranges. Payloads are discarded.

        Raises:
            StrataRangeError: If a bounded range ends before it starts.
            StrataError: The first boundary failure, with its boundary named.
        """
        if ledger_range.bounded and ledger_range.from_sequence > ledger_range.to_sequence:
            raise StrataRangeError(f"invalid ledger range {ledger_range}: from is after to")
        try:
            self.get_ledger(ledger_range.from_sequence, cancel)
        except StrataError as error:
            raise with_context(
                error, f"error getting ledger {ledger_range.from_sequence}"
            ) from error
        if ledger_range.bounded:
            try:
                self.get_ledger(ledger_range.to_sequence, cancel)
            except StrataError as error:
                raise with_context(
                    error, f"error getting ending ledger {ledger_range.to_sequence}"
                ) from error
        _LOGGER.info("range_prepared", ledger_range=str(ledger_range))

    def is_prepared(self, ledger_range: LedgerRange) -> bool:
        """Return True; objects already reside in the store."""
        return True

    def close(self) -> None:
        """Release the data store."""
        self._data_store.close()

    def __enter__(self) -> "LedgerBackend":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _load_batch(self, object_key: str, cancel: CancelToken | None) -> LedgerBatch:
        if self._cache is not None:
            cached = self._cache.get(object_key)
            if cached is not None:
                _LOGGER.debug("batch_cache_hit", object_key=object_key)
                return cached
        try:
            batch = read_ledger_batch(self._data_store, object_key, self._decoder, cancel)
        except StrataError as error:
            raise with_context(error, f"failed getting file {object_key}") from error
        if self._cache is not None:
            self._cache.put(object_key, batch)
        return batch
