"""Filesystem data store over a directory tree laid out like the bucket."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from core.cancellation import CancelToken, check_cancelled
from core.errors import StrataNotFoundError, StrataStoreError


class LocalDataStore:
    """Data store reading exported objects from a local directory."""

    def __init__(self, root: Path) -> None:
        """Initialize the store.

        Args:
            root: Directory that plays the role of the bucket prefix.
        """
        self._root = root

    def list_directory_names(self, cancel: CancelToken | None = None) -> list[str]:
        """List partition directories as ``<root>/<name>`` paths.

        Raises:
            StrataNotFoundError: If the root directory is missing.
        """
        if not self._root.is_dir():
            raise StrataNotFoundError(f"storage root {self._root} does not exist")
        directories: list[str] = []
        for entry in sorted(self._root.iterdir()):
            check_cancelled(cancel, f"listing directories in {self._root}")
            if entry.is_dir():
                directories.append(entry.as_posix())
        return directories

    def list_file_names(self, directory: str, cancel: CancelToken | None = None) -> list[str]:
        """List files of a directory as ``<directory>/<name>`` paths.

        Raises:
            StrataNotFoundError: If the directory is missing.
        """
        directory_path = Path(directory)
        if not directory_path.is_dir():
            raise StrataNotFoundError(f"directory {directory} does not exist")
        file_names: list[str] = []
        for entry in sorted(directory_path.iterdir()):
            check_cancelled(cancel, f"listing files in {directory}")
            if entry.is_file():
                file_names.append(f"{directory.rstrip('/')}/{entry.name}")
        return file_names

    def get_file(self, key: str, cancel: CancelToken | None = None) -> BinaryIO:
        """Open an object for reading.

        Raises:
            StrataNotFoundError: If no file exists for the key.
            StrataStoreError: If the file cannot be opened.
        """
        check_cancelled(cancel, f"fetching {key}")
        object_path = self._root / key
        if not object_path.is_file():
            raise StrataNotFoundError(f"object {key} not found under {self._root}")
        try:
            return object_path.open("rb")
        except OSError as error:
            raise StrataStoreError(f"Failed to open {object_path}: {error}") from error

    def close(self) -> None:
        """Nothing to release for local files."""
