"""cloudmirror: Address objects in a remote bucket as files on local disk."""

__version__ = "0.1.0"

from cloudmirror.config import DEFAULT_MOUNT_ROOT, MountConfig
from cloudmirror.exceptions import (
    InvalidPathError,
    MirrorError,
    MirrorIOError,
    NotFoundError,
    RemoteError,
    WalkDepthExceededError,
)
from cloudmirror.mirror import CacheEntry, Mirror
from cloudmirror.remote import (
    CloudFilesRemoteStore,
    ListPage,
    RemoteObject,
    RemoteStore,
    S3RemoteStore,
)
from cloudmirror.walker import TreeWalker, WalkEntry

__all__ = [
    "Mirror",
    "MountConfig",
    "TreeWalker",
    "CacheEntry",
    "WalkEntry",
    "RemoteStore",
    "RemoteObject",
    "ListPage",
    "S3RemoteStore",
    "CloudFilesRemoteStore",
    "MirrorError",
    "InvalidPathError",
    "NotFoundError",
    "MirrorIOError",
    "RemoteError",
    "WalkDepthExceededError",
    "DEFAULT_MOUNT_ROOT",
    "__version__",
]
