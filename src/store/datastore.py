"""Object-store contract used by the ledger reader.

This module defines the narrow listing and fetch interface the reader
depends on, and resolves storage URLs into concrete implementations.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Protocol

from core.cancellation import CancelToken
from core.config import StrataConfig
from core.constants import FILE_URI_SCHEME, S3_URI_SCHEME
from core.errors import StrataConfigError, StrataDependencyError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class DataStore(Protocol):
    """Read-only view of exported ledger objects.

    Directory names are full paths without a trailing slash. File names
    are full paths ``"<directory>/<name>"``. Keys passed to ``get_file``
    are relative to the store root.
    """

    def list_directory_names(self, cancel: CancelToken | None = None) -> list[str]:
        """List partition directories under the store root."""
        ...

    def list_file_names(self, directory: str, cancel: CancelToken | None = None) -> list[str]:
        """List object names inside one directory."""
        ...

    def get_file(self, key: str, cancel: CancelToken | None = None) -> BinaryIO:
        """Open a readable stream for one object; the caller closes it."""
        ...

    def close(self) -> None:
        """Release client resources."""
        ...


def create_data_store(storage_url: str | None, config: StrataConfig) -> DataStore:
    """Resolve a storage URL into a data store.

    Args:
        storage_url: ``s3://bucket/prefix``, ``file://path`` or a plain
            local directory path.
        config: Runtime config with optional S3 session settings.

    Returns:
        Data store bound to the location.

    Raises:
        StrataConfigError: If no storage URL is configured.
        StrataDependencyError: If boto3 is missing for an S3 URL.
    """
    if not storage_url:
        raise StrataConfigError(
            "No storage URL configured. Set STRATA_STORAGE_URL or pass --storage-url."
        )
    if storage_url.startswith(S3_URI_SCHEME):
        try:
            from store.s3_datastore import S3DataStore
        except ImportError as error:
            raise StrataDependencyError(
                "S3 storage requires boto3, but it is not installed. "
                "Install boto3 to read ledgers from s3:// locations."
            ) from error
        data_store: DataStore = S3DataStore.from_uri(storage_url, config)
    else:
        from store.local_datastore import LocalDataStore

        local_path = Path(storage_url.removeprefix(FILE_URI_SCHEME)).expanduser()
        data_store = LocalDataStore(local_path)
    _LOGGER.info("data_store_created", storage_url=storage_url, kind=type(data_store).__name__)
    return data_store
