"""Latest available ledger discovery.

This module scans partition directory listings, then the file listing of
the newest partition, to find the highest exported ledger sequence.
Malformed directory names are skipped; malformed file names fail the scan.
"""

from __future__ import annotations

from typing import Iterable

from core.cancellation import CancelToken, check_cancelled
from core.constants import (
    DEFAULT_FILE_SUFFIX,
    MAX_LEDGER_SEQUENCE,
    OBJECT_PATH_SEPARATOR,
    PARTITION_BOUND_SEPARATOR,
)
from core.errors import StrataError, StrataNotFoundError, StrataRangeError, with_context
from core.logging_config import get_logger
from store.datastore import DataStore

_LOGGER = get_logger(__name__)


def find_latest_ledger_sequence(
    data_store: DataStore,
    file_suffix: str = DEFAULT_FILE_SUFFIX,
    cancel: CancelToken | None = None,
) -> int:
    """Return the most recent ledger sequence present in the store.

    Args:
        data_store: Store holding partition directories.
        file_suffix: Batch object name suffix.
        cancel: Optional cancellation token.

    Returns:
        Highest ledger sequence found in the newest partition.

    Raises:
        StrataNotFoundError: If no partition or no file exists.
        StrataRangeError: If a file name in the newest partition is unparsable.
        StrataCancelledError: If cancelled during a listing.
    """
    check_cancelled(cancel, "listing directories")
    try:
        directories = data_store.list_directory_names(cancel)
    except StrataError as error:
        raise with_context(error, "failed getting list of directory names") from error
    check_cancelled(cancel, "listing directories")

    latest_directory = find_latest_directory(directories)

    try:
        file_names = data_store.list_file_names(latest_directory, cancel)
    except StrataError as error:
        raise with_context(error, f"failed getting filenames in dir {latest_directory}") from error
    check_cancelled(cancel, f"listing files in {latest_directory}")

    latest_sequence = find_latest_file_sequence(file_names, latest_directory, file_suffix)
    _LOGGER.info(
        "latest_ledger_found",
        directory=latest_directory,
        file_count=len(file_names),
        ledger_sequence=latest_sequence,
    )
    return latest_sequence


def find_latest_directory(directory_names: Iterable[str]) -> str:
    """Pick the partition directory with the highest end ledger.

    Each name must end in a ``<start>-<end>`` segment, for example
    ``ledgers/pubnet/64000-127999``. Other names are skipped. Ties keep
    the first directory seen.

    Raises:
        StrataNotFoundError: If no name is a well-formed partition.
    """
    latest_directory: str | None = None
    largest_end = -1
    for directory in directory_names:
        bounds = _parse_partition_bounds(directory)
        if bounds is None:
            _LOGGER.warning("partition_directory_skipped", directory=directory)
            continue
        if bounds[1] > largest_end:
            latest_directory = directory
            largest_end = bounds[1]
    if latest_directory is None:
        raise StrataNotFoundError(
            "failed getting latest directory: no partition directory named <start>-<end>"
        )
    return latest_directory


def find_latest_file_sequence(
    file_names: Iterable[str],
    directory: str,
    file_suffix: str = DEFAULT_FILE_SUFFIX,
) -> int:
    """Return the highest ledger sequence among a directory's files.

    Raises:
        StrataRangeError: If any file name does not parse.
        StrataNotFoundError: If the directory holds no files.
    """
    latest_sequence: int | None = None
    for file_name in file_names:
        sequence = parse_file_sequence(file_name, directory, file_suffix)
        if latest_sequence is None or sequence > latest_sequence:
            latest_sequence = sequence
    if latest_sequence is None:
        raise StrataNotFoundError(f"no ledger files found in dir {directory}")
    return latest_sequence


def parse_file_sequence(
    file_name: str,
    directory: str,
    file_suffix: str = DEFAULT_FILE_SUFFIX,
) -> int:
    """Parse the last ledger sequence held by a batch object name.

    ``<directory>/5.xdr.gz`` yields 5 and ``<directory>/0-9.xdr.gz`` yields 9.

    Raises:
        StrataRangeError: If the name is not ``N`` or ``N-M`` after trimming,
            or the sequence does not fit in uint32.
    """
    trimmed = file_name.removesuffix(file_suffix)
    trimmed = trimmed.removeprefix(directory.rstrip(OBJECT_PATH_SEPARATOR) + OBJECT_PATH_SEPARATOR)
    parts = trimmed.split(PARTITION_BOUND_SEPARATOR)
    if len(parts) > 2 or not all(_is_decimal(part) for part in parts):
        raise StrataRangeError(f"failed converting filename to ledger sequence: {file_name}")
    sequence = int(parts[-1])
    if sequence > MAX_LEDGER_SEQUENCE:
        raise StrataRangeError(f"ledger sequence in filename {file_name} exceeds uint32")
    return sequence


def _parse_partition_bounds(directory: str) -> tuple[int, int] | None:
    last_segment = directory.rstrip(OBJECT_PATH_SEPARATOR).rsplit(OBJECT_PATH_SEPARATOR, 1)[-1]
    parts = last_segment.split(PARTITION_BOUND_SEPARATOR)
    if len(parts) != 2 or not all(_is_decimal(part) for part in parts):
        return None
    return int(parts[0]), int(parts[1])


def _is_decimal(text: str) -> bool:
    return text.isascii() and text.isdigit()
