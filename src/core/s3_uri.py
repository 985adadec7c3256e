"""S3 URI parsing helpers.

This module centralizes S3 URI parsing for the object-store layer.
It keeps storage URL validation consistent across the codebase.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.constants import OBJECT_PATH_SEPARATOR, S3_URI_SCHEME
from core.errors import StrataConfigError


@dataclass(frozen=True)
class S3Location:
    """Parsed S3 location model.

    Attributes:
        bucket: Bucket name.
        prefix: Key prefix without leading or trailing slash, possibly empty.
    """

    bucket: str
    prefix: str

    def join(self, key: str) -> str:
        """Return the full object key for a key relative to the prefix."""
        if not self.prefix:
            return key
        return f"{self.prefix}{OBJECT_PATH_SEPARATOR}{key}"


def parse_s3_uri(uri: str) -> S3Location:
    """Parse and validate an S3 URI.

    Args:
        uri: URI in format ``s3://bucket`` or ``s3://bucket/prefix``.

    Returns:
        Parsed bucket and prefix pair.

    Raises:
        StrataConfigError: If the URI has no scheme or bucket.
    """
    if not uri.startswith(S3_URI_SCHEME):
        _raise_uri_error(uri)
    stripped_uri = uri.removeprefix(S3_URI_SCHEME).strip(OBJECT_PATH_SEPARATOR)
    bucket, _, prefix = stripped_uri.partition(OBJECT_PATH_SEPARATOR)
    if not bucket:
        _raise_uri_error(uri)
    return S3Location(bucket=bucket, prefix=prefix.strip(OBJECT_PATH_SEPARATOR))


def _raise_uri_error(uri: str) -> None:
    """Raise an invalid storage URI error.

    Args:
        uri: Invalid URI value.

    Raises:
        StrataConfigError: Always.
    """
    raise StrataConfigError(
        f"Invalid S3 URI '{uri}': expected s3://bucket[/prefix]. "
        "Provide at least a bucket name."
    )
