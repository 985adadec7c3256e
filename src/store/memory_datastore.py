"""In-memory data store for tests and local experiments.

Storage URLs never resolve to this store; callers build and fill it
directly, then hand it to a ledger backend.
"""

from __future__ import annotations

import io
from typing import BinaryIO

from core.cancellation import CancelToken, check_cancelled
from core.constants import OBJECT_PATH_SEPARATOR
from core.errors import StrataNotFoundError


class InMemoryDataStore:
    """Dictionary-backed object store.

    Objects are listed in insertion order, which lets callers control the
    traversal order seen by the latest-ledger scan.
    """

    def __init__(self, prefix: str = "") -> None:
        self._prefix = prefix.strip(OBJECT_PATH_SEPARATOR)
        self._objects: dict[str, bytes] = {}

    def put(self, key: str, payload: bytes) -> None:
        """Store an object under a root-relative key."""
        self._objects[key] = payload

    def list_directory_names(self, cancel: CancelToken | None = None) -> list[str]:
        """List top-level directories in first-seen order, prefixed."""
        check_cancelled(cancel, "listing directories")
        directories: list[str] = []
        for key in self._objects:
            directory, separator, _ = key.partition(OBJECT_PATH_SEPARATOR)
            full_name = self._full_name(directory)
            if separator and full_name not in directories:
                directories.append(full_name)
        return directories

    def list_file_names(self, directory: str, cancel: CancelToken | None = None) -> list[str]:
        """List full object names under a directory."""
        check_cancelled(cancel, f"listing files in {directory}")
        directory_prefix = directory.rstrip(OBJECT_PATH_SEPARATOR) + OBJECT_PATH_SEPARATOR
        return [
            full_name
            for full_name in (self._full_name(key) for key in self._objects)
            if full_name.startswith(directory_prefix)
        ]

    def get_file(self, key: str, cancel: CancelToken | None = None) -> BinaryIO:
        """Open a stream over a stored object.

        Raises:
            StrataNotFoundError: If no object exists for the key.
        """
        check_cancelled(cancel, f"fetching {key}")
        if key not in self._objects:
            raise StrataNotFoundError(f"object {key} not found in memory store")
        return io.BytesIO(self._objects[key])

    def close(self) -> None:
        """Nothing to release; objects stay available to other holders."""

    def _full_name(self, key: str) -> str:
        if not self._prefix:
            return key
        return f"{self._prefix}{OBJECT_PATH_SEPARATOR}{key}"
