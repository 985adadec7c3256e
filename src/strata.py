"""Public SDK surface for Strata.

This module provides a stable import path for ledger readers.
It re-exports the backend, its collaborators, and typed models.
"""

from __future__ import annotations

from core.cancellation import CancelToken
from core.config import StrataConfig
from core.errors import (
    StrataCancelledError,
    StrataConfigError,
    StrataCorruptDataError,
    StrataError,
    StrataNotFoundError,
    StrataRangeError,
)
from core.types import LedgerBatch, LedgerRange, PartitionConfig
from store.datastore import DataStore, create_data_store
from store.ledger_backend import LedgerBackend
from store.object_keys import compute_object_key
from store.xdr_codec import BatchDecoder, XdrBatchDecoder

__all__ = [
    "BatchDecoder",
    "CancelToken",
    "DataStore",
    "LedgerBackend",
    "LedgerBatch",
    "LedgerRange",
    "PartitionConfig",
    "StrataCancelledError",
    "StrataConfig",
    "StrataConfigError",
    "StrataCorruptDataError",
    "StrataError",
    "StrataNotFoundError",
    "StrataRangeError",
    "XdrBatchDecoder",
    "compute_object_key",
    "create_data_store",
]
