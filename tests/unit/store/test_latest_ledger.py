"""Unit tests for latest ledger discovery."""

from __future__ import annotations

import pytest

from core.cancellation import CancelToken
from core.errors import StrataCancelledError, StrataNotFoundError, StrataRangeError
from store.latest_ledger import (
    find_latest_directory,
    find_latest_file_sequence,
    find_latest_ledger_sequence,
    parse_file_sequence,
)
from store.memory_datastore import InMemoryDataStore


def test_find_latest_directory_skips_malformed_names() -> None:
    """Malformed directory names should be ignored, not fail the scan."""
    directories = ["ledgers/net/0-63999", "ledgers/net/64000-127999", "bad-dir"]

    assert find_latest_directory(directories) == "ledgers/net/64000-127999"


def test_find_latest_directory_keeps_first_on_tie() -> None:
    """Equal end values should keep the first directory encountered."""
    directories = ["a/0-63999", "b/0-63999"]

    assert find_latest_directory(directories) == "a/0-63999"


def test_find_latest_directory_ignores_listing_order() -> None:
    """The highest end should win regardless of position."""
    directories = ["x/128000-191999", "x/0-63999", "x/64000-127999"]

    assert find_latest_directory(directories) == "x/128000-191999"


@pytest.mark.parametrize(
    "name",
    ["ledgers/net/1-2-3", "ledgers/net/abc-10", "ledgers/net/10-", "ledgers/net/63999"],
)
def test_find_latest_directory_skips_non_numeric_segments(name: str) -> None:
    """Only ``<digits>-<digits>`` trailing segments should count."""
    assert find_latest_directory([name, "ledgers/net/0-9"]) == "ledgers/net/0-9"


def test_find_latest_directory_accepts_zero_end_partition() -> None:
    """A well-formed ``0-0`` partition should still be selectable."""
    assert find_latest_directory(["net/0-0"]) == "net/0-0"


def test_find_latest_directory_raises_without_partitions() -> None:
    """No well-formed directory should surface as not found."""
    with pytest.raises(StrataNotFoundError):
        find_latest_directory(["bad-dir", "other"])


def test_parse_file_sequence_strips_directory_and_suffix() -> None:
    """File names should parse to the ledger they hold."""
    sequence = parse_file_sequence("net/0-63999/42.xdr.gz", "net/0-63999")

    assert sequence == 42


def test_parse_file_sequence_uses_end_of_multi_ledger_file() -> None:
    """Multi-ledger file names should report their last ledger."""
    assert parse_file_sequence("net/0-639/64-127.xdr.gz", "net/0-639") == 127


@pytest.mark.parametrize(
    "file_name",
    ["net/0-9/latest.xdr.gz", "net/0-9/1-2-3.xdr.gz", "net/0-9/4294967296.xdr.gz"],
)
def test_parse_file_sequence_rejects_unparsable_names(file_name: str) -> None:
    """Unparsable or oversized names should raise a range error."""
    with pytest.raises(StrataRangeError):
        parse_file_sequence(file_name, "net/0-9")


def test_find_latest_file_sequence_returns_maximum() -> None:
    """The highest parsed sequence should be returned."""
    names = ["d/0-9/3.xdr.gz", "d/0-9/9.xdr.gz", "d/0-9/4.xdr.gz"]

    assert find_latest_file_sequence(names, "d/0-9") == 9


def test_find_latest_file_sequence_fails_on_one_bad_name() -> None:
    """A single unparsable file should fail the whole lookup."""
    names = ["d/0-9/3.xdr.gz", "d/0-9/manifest.json"]

    with pytest.raises(StrataRangeError):
        find_latest_file_sequence(names, "d/0-9")


def test_find_latest_file_sequence_raises_for_empty_directory() -> None:
    """An empty partition should surface as not found."""
    with pytest.raises(StrataNotFoundError):
        find_latest_file_sequence([], "d/0-9")


def test_find_latest_ledger_sequence_scans_newest_partition() -> None:
    """The full scan should read files only from the newest partition."""
    store = InMemoryDataStore(prefix="ledgers/net")
    store.put("0-63999/63999.xdr.gz", b"")
    store.put("64000-127999/64000.xdr.gz", b"")
    store.put("64000-127999/64007.xdr.gz", b"")

    assert find_latest_ledger_sequence(store) == 64007


def test_find_latest_ledger_sequence_honours_cancellation() -> None:
    """A cancelled token should abort before any listing."""
    store = InMemoryDataStore()
    store.put("0-9/1.xdr.gz", b"")
    cancel = CancelToken()
    cancel.cancel()

    with pytest.raises(StrataCancelledError):
        find_latest_ledger_sequence(store, cancel=cancel)


def test_find_latest_ledger_sequence_wraps_file_name_errors() -> None:
    """Parse failures should keep their class through the full scan."""
    store = InMemoryDataStore()
    store.put("0-9/not-a-ledger.xdr.gz", b"")

    with pytest.raises(StrataRangeError, match="not-a-ledger"):
        find_latest_ledger_sequence(store)
