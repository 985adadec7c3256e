"""Runtime configuration model for Strata.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_BATCH_CACHE_SIZE,
    DEFAULT_FILE_SUFFIX,
    DEFAULT_FILES_PER_PARTITION,
    DEFAULT_LEDGERS_PER_FILE,
)
from core.errors import StrataConfigError
from core.types import PartitionConfig


@dataclass(frozen=True)
class StrataConfig:
    """Validated runtime configuration.

    Attributes:
        storage_url: Location of the exported ledger objects.
        ledgers_per_file: Ledgers stored in each batch object.
        files_per_partition: Batch objects per partition directory.
        file_suffix: Batch object name suffix.
        s3_region: Optional AWS region for S3 operations.
        s3_profile: Optional AWS profile for boto3 session initialization.
        s3_endpoint_url: Optional endpoint for S3-compatible stores.
        batch_cache_size: Decoded batches kept in memory, 0 disables caching.
    """

    storage_url: str | None
    ledgers_per_file: int = DEFAULT_LEDGERS_PER_FILE
    files_per_partition: int = DEFAULT_FILES_PER_PARTITION
    file_suffix: str = DEFAULT_FILE_SUFFIX
    s3_region: str | None = None
    s3_profile: str | None = None
    s3_endpoint_url: str | None = None
    batch_cache_size: int = DEFAULT_BATCH_CACHE_SIZE

    @property
    def partition(self) -> PartitionConfig:
        """Validated object layout for this deployment."""
        return PartitionConfig(
            ledgers_per_file=self.ledgers_per_file,
            files_per_partition=self.files_per_partition,
            file_suffix=self.file_suffix,
        ).validate()

    @classmethod
    def from_env(cls) -> "StrataConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            StrataConfigError: If environment values are invalid.
        """
        batch_cache_size = _parse_int_env("STRATA_BATCH_CACHE_SIZE", DEFAULT_BATCH_CACHE_SIZE)
        if batch_cache_size < 0:
            raise StrataConfigError(
                f"Invalid STRATA_BATCH_CACHE_SIZE value: expected >= 0, got {batch_cache_size}."
            )
        return cls(
            storage_url=os.getenv("STRATA_STORAGE_URL"),
            ledgers_per_file=_parse_int_env("STRATA_LEDGERS_PER_FILE", DEFAULT_LEDGERS_PER_FILE),
            files_per_partition=_parse_int_env(
                "STRATA_FILES_PER_PARTITION", DEFAULT_FILES_PER_PARTITION
            ),
            file_suffix=os.getenv("STRATA_FILE_SUFFIX", DEFAULT_FILE_SUFFIX),
            s3_region=os.getenv("STRATA_S3_REGION"),
            s3_profile=os.getenv("STRATA_S3_PROFILE"),
            s3_endpoint_url=os.getenv("STRATA_S3_ENDPOINT_URL"),
            batch_cache_size=batch_cache_size,
        )


def _parse_int_env(name: str, default: int) -> int:
    """Parse an integer environment value.

    Args:
        name: Environment variable name.
        default: Value used when the variable is unset.

    Returns:
        Parsed integer.

    Raises:
        StrataConfigError: If value cannot be parsed into int.
    """
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError as error:
        raise StrataConfigError(
            f"Invalid {name} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {name} to a numeric value."
        ) from error
