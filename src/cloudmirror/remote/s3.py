"""S3 implementation of the remote store, using boto3."""

import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cloudmirror.exceptions import NotFoundError, RemoteError
from cloudmirror.remote.base import ListPage, RemoteObject, RemoteStore

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class S3RemoteStore(RemoteStore):
    """Remote store backed by an S3 (or S3-compatible) bucket.

    Args:
        client: A boto3 S3 client. If None, one is created from the ambient
            AWS configuration (environment, shared config files, instance role).

    Examples:
        >>> store = S3RemoteStore()
        >>> page = store.list_page("my-bucket", "data/")
    """

    def __init__(self, client: Optional[Any] = None):
        self._client = client if client is not None else boto3.client("s3")

    def get_object(self, bucket: str, key: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
            return response["Body"].read()
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise NotFoundError(f"s3://{bucket}/{key} does not exist") from e
            raise RemoteError(f"Failed to get s3://{bucket}/{key}: {e}") from e
        except BotoCoreError as e:
            raise RemoteError(f"Failed to get s3://{bucket}/{key}: {e}") from e

    def put_object(self, bucket: str, key: str, data: bytes) -> None:
        try:
            self._client.put_object(Bucket=bucket, Key=key, Body=data)
        except (ClientError, BotoCoreError) as e:
            raise RemoteError(f"Failed to put s3://{bucket}/{key}: {e}") from e

    def list_page(
        self,
        bucket: str,
        prefix: str,
        delimiter: str = "/",
        continuation_token: Optional[str] = None,
    ) -> ListPage:
        kwargs = {"Bucket": bucket, "Prefix": prefix, "Delimiter": delimiter}
        if continuation_token:
            kwargs["ContinuationToken"] = continuation_token

        try:
            response = self._client.list_objects_v2(**kwargs)
        except (ClientError, BotoCoreError) as e:
            raise RemoteError(
                f"Failed to list s3://{bucket}/{prefix}: {e}"
            ) from e

        objects = [
            RemoteObject(key=entry["Key"], size=int(entry.get("Size", 0)))
            for entry in response.get("Contents", [])
            if entry.get("Key")
        ]
        common_prefixes = [
            entry["Prefix"]
            for entry in response.get("CommonPrefixes", [])
            if entry.get("Prefix")
        ]

        next_token = None
        if response.get("IsTruncated"):
            next_token = response.get("NextContinuationToken")
            if not next_token:
                raise RemoteError(
                    f"Listing of s3://{bucket}/{prefix} is truncated "
                    "but has no continuation token"
                )

        logger.debug(
            f"Listed s3://{bucket}/{prefix}: {len(objects)} objects, "
            f"{len(common_prefixes)} prefixes, more={next_token is not None}"
        )
        return ListPage(
            objects=objects, common_prefixes=common_prefixes, next_token=next_token
        )
