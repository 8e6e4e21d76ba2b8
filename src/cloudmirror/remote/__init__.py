"""Remote object store collaborators.

The mirror calls the remote namespace only through ``RemoteStore``. Two
implementations are provided: ``S3RemoteStore`` (boto3) and
``CloudFilesRemoteStore`` (cloudfiles).
"""

from typing import TYPE_CHECKING

from cloudmirror.remote.base import ListPage, RemoteObject, RemoteStore
from cloudmirror.remote.cloudfiles_store import CloudFilesRemoteStore
from cloudmirror.remote.s3 import S3RemoteStore

if TYPE_CHECKING:
    from cloudmirror.config import MountConfig


def store_for(config: "MountConfig") -> RemoteStore:
    """Return the remote store for a configuration.

    A ``RemoteStore`` client is used as-is, any other client is treated as a
    boto3 S3 client, and no client means an S3 client from the environment.
    """
    if isinstance(config.client, RemoteStore):
        return config.client
    return S3RemoteStore(config.client)


__all__ = [
    "RemoteStore",
    "RemoteObject",
    "ListPage",
    "S3RemoteStore",
    "CloudFilesRemoteStore",
    "store_for",
]
