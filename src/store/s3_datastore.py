"""S3 data store for exported ledger objects.

This module encapsulates boto3 client creation, paginated listings,
and streaming object fetches behind the data store contract.
"""

from __future__ import annotations

from typing import Any, BinaryIO, cast

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from core.cancellation import CancelToken, check_cancelled
from core.config import StrataConfig
from core.constants import OBJECT_PATH_SEPARATOR
from core.errors import StrataNotFoundError, StrataStoreError
from core.s3_uri import S3Location, parse_s3_uri

_MISSING_OBJECT_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class S3DataStore:
    """Data store reading a bucket prefix through boto3."""

    def __init__(self, s3_client: Any, location: S3Location) -> None:
        """Initialize the store.

        Args:
            s3_client: Boto3 S3 client.
            location: Bucket and prefix holding the exported ledgers.
        """
        self._client = s3_client
        self._location = location

    @classmethod
    def from_uri(cls, storage_url: str, config: StrataConfig) -> "S3DataStore":
        """Build a store for an ``s3://`` URL using config session settings."""
        location = parse_s3_uri(storage_url)
        return cls(create_s3_client(config), location)

    def list_directory_names(self, cancel: CancelToken | None = None) -> list[str]:
        """List common prefixes directly under the store prefix.

        Raises:
            StrataStoreError: If the listing request fails.
            StrataCancelledError: If cancelled between pages.
        """
        prefix = _as_directory_prefix(self._location.prefix)
        directories: list[str] = []
        for page in self._paginate(prefix, cancel):
            for common_prefix in page.get("CommonPrefixes", []):
                directories.append(common_prefix["Prefix"].rstrip(OBJECT_PATH_SEPARATOR))
        return directories

    def list_file_names(self, directory: str, cancel: CancelToken | None = None) -> list[str]:
        """List object keys inside a directory prefix.

        Raises:
            StrataStoreError: If the listing request fails.
            StrataCancelledError: If cancelled between pages.
        """
        prefix = _as_directory_prefix(directory)
        keys: list[str] = []
        for page in self._paginate(prefix, cancel):
            for obj in page.get("Contents", []):
                keys.append(obj["Key"])
        return keys

    def get_file(self, key: str, cancel: CancelToken | None = None) -> BinaryIO:
        """Start a streaming download of one object.

        Raises:
            StrataNotFoundError: If the object does not exist.
            StrataStoreError: If the request fails for another reason.
        """
        check_cancelled(cancel, f"fetching {key}")
        object_key = self._location.join(key)
        try:
            response = self._client.get_object(Bucket=self._location.bucket, Key=object_key)
        except ClientError as error:
            code = str(error.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_OBJECT_CODES:
                raise StrataNotFoundError(
                    f"object s3://{self._location.bucket}/{object_key} does not exist"
                ) from error
            raise _store_error(f"fetch s3://{self._location.bucket}/{object_key}", error) from error
        except BotoCoreError as error:
            raise _store_error(f"fetch s3://{self._location.bucket}/{object_key}", error) from error
        body = _S3ObjectStream(response["Body"], f"s3://{self._location.bucket}/{object_key}")
        if cancel is not None and cancel.cancelled:
            body.close()
            check_cancelled(cancel, f"fetching {key}")
        return cast(BinaryIO, body)

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._client.close()

    def _paginate(
        self,
        prefix: str,
        cancel: CancelToken | None,
    ) -> list[dict[str, Any]]:
        """Collect ``list_objects_v2`` pages, checking cancellation per page."""
        paginator = self._client.get_paginator("list_objects_v2")
        request = {
            "Bucket": self._location.bucket,
            "Prefix": prefix,
            "Delimiter": OBJECT_PATH_SEPARATOR,
        }
        pages: list[dict[str, Any]] = []
        try:
            check_cancelled(cancel, f"listing {prefix or 'bucket root'}")
            for page in paginator.paginate(**request):
                check_cancelled(cancel, f"listing {prefix or 'bucket root'}")
                pages.append(page)
        except (BotoCoreError, ClientError) as error:
            raise _store_error(f"list s3://{self._location.bucket}/{prefix}", error) from error
        return pages


class _S3ObjectStream:
    """Object body whose transport failures surface as store errors."""

    def __init__(self, body: Any, object_uri: str) -> None:
        self._body = body
        self._object_uri = object_uri

    def read(self, amt: int | None = None) -> bytes:
        """Read from the streaming body.

        Raises:
            StrataStoreError: If the connection fails mid-read.
        """
        try:
            return self._body.read(amt)
        except (BotoCoreError, OSError) as error:
            raise _store_error(f"read {self._object_uri}", error) from error

    def close(self) -> None:
        """Release the HTTP connection held by the body."""
        self._body.close()

def create_s3_client(config: StrataConfig) -> Any:
    """Create boto3 S3 client.

    Args:
        config: Runtime config with optional session settings.

    Returns:
        Boto3 S3 client.
    """
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    if config.s3_endpoint_url:
        return session.client("s3", endpoint_url=config.s3_endpoint_url)
    return session.client("s3")


def _as_directory_prefix(prefix: str) -> str:
    stripped = prefix.strip(OBJECT_PATH_SEPARATOR)
    if not stripped:
        return ""
    return stripped + OBJECT_PATH_SEPARATOR


def _store_error(operation: str, error: Exception) -> StrataStoreError:
    return StrataStoreError(
        f"Failed to {operation}: {error}. Check AWS credentials and bucket access."
    )
