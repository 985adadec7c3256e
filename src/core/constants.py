"""Core constants used across Strata modules.

This module centralizes deployment defaults and naming literals.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_FILE_SUFFIX = ".xdr.gz"
DEFAULT_LEDGERS_PER_FILE = 1
DEFAULT_FILES_PER_PARTITION = 64000
DEFAULT_BATCH_CACHE_SIZE = 0
MAX_LEDGER_SEQUENCE = 2**32 - 1
PARTITION_BOUND_SEPARATOR = "-"
OBJECT_PATH_SEPARATOR = "/"
S3_URI_SCHEME = "s3://"
FILE_URI_SCHEME = "file://"
