"""Local mirror of a remote bucket.

Remote objects are addressed by key and handed back as ordinary local files
under ``mount_root / bucket``. The filesystem itself is the cache: there is
no index or metadata file, and whether a key is cached is simply whether its
local file exists.
"""

import errno
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from cloudmirror.config import MountConfig
from cloudmirror.exceptions import MirrorIOError, RemoteError
from cloudmirror.paths import normalize_key, resolve
from cloudmirror.policy import should_fetch
from cloudmirror.remote import RemoteStore, store_for
from cloudmirror.walker import TreeWalker, WalkEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Where a remote key lives locally, computed fresh on every call."""

    remote_key: str
    local_path: Path
    exists_locally: bool


class Mirror:
    """Opens and writes remote objects through a local file mirror.

    Args:
        config: Mount configuration
        store: Remote store; defaults to the store for ``config``

    Examples:
        >>> config = MountConfig("my-bucket").with_mount_root("data/")
        >>> mirror = Mirror(config)
        >>> with mirror.open("reports/2020/summary.csv") as f:
        ...     content = f.read()
    """

    def __init__(self, config: MountConfig, store: Optional[RemoteStore] = None):
        self.config = config
        self.store = store if store is not None else store_for(config)

    def entry(self, remote_key: str) -> CacheEntry:
        """Return the cache entry for ``remote_key``.

        Parent directories of the local path are created if missing.

        Raises:
            InvalidPathError: If the key is illegal or escapes the mount root
            MirrorIOError: If parent directories cannot be created
        """
        key = normalize_key(remote_key)
        local_path = resolve(self.config.local_root, key)
        return CacheEntry(
            remote_key=key, local_path=local_path, exists_locally=local_path.exists()
        )

    def open(self, remote_key: str) -> BinaryIO:
        """Open a remote object for reading, downloading it if needed.

        The object is downloaded when no local copy exists or when
        ``force_download`` is set; otherwise the local copy is used as-is,
        even if the remote object has since changed.

        Args:
            remote_key: Key of the object, including filename

        Returns:
            Binary file object positioned at the start; the caller closes it

        Raises:
            InvalidPathError: If the key is illegal
            NotFoundError: If the object does not exist remotely. No local
                file is created, but parent directories made while resolving
                the local path are left in place.
            RemoteError: If the remote store fails
            MirrorIOError: If the local copy cannot be written or opened
        """
        entry = self.entry(remote_key)

        if should_fetch(entry.exists_locally, self.config.force_download):
            logger.info(
                f"Downloading {self.config.bucket}/{entry.remote_key} "
                f"to {entry.local_path}"
            )
            data = self.store.get_object(self.config.bucket, entry.remote_key)
            self._write_local(entry.local_path, data)
        else:
            logger.debug(f"Cache hit for {entry.remote_key} at {entry.local_path}")

        return self._open_local(entry.local_path)

    def write(self, remote_key: str, data: Union[bytes, bytearray, memoryview]) -> BinaryIO:
        """Write ``data`` locally, then upload it as ``remote_key``.

        The local file is replaced first. If the upload then fails, the local
        file keeps the new data and no longer matches the remote object; it is
        not rolled back.

        Args:
            remote_key: Key to store the data under, including filename
            data: Bytes to store

        Returns:
            Binary file object for the written local file

        Raises:
            InvalidPathError: If the key is illegal
            MirrorIOError: If the local write fails. Nothing is uploaded.
            RemoteError: If the upload fails
        """
        entry = self.entry(remote_key)
        data = bytes(data)

        self._write_local(entry.local_path, data)

        try:
            self.store.put_object(self.config.bucket, entry.remote_key, data)
        except RemoteError:
            logger.warning(
                f"Upload of {self.config.bucket}/{entry.remote_key} failed; "
                f"{entry.local_path} now differs from the remote object"
            )
            raise
        logger.info(
            f"Uploaded {len(data)} bytes to {self.config.bucket}/{entry.remote_key}"
        )

        return self._open_local(entry.local_path)

    def walk(self, prefix: str = "") -> List[WalkEntry]:
        """List every file and folder under ``prefix``. See ``TreeWalker.walk``."""
        return TreeWalker(self.config, self.store).walk(prefix)

    @staticmethod
    def _write_local(local_path: Path, data: bytes) -> None:
        """Replace ``local_path`` with ``data`` via a temp file and rename."""
        try:
            fd, temp_name = tempfile.mkstemp(
                dir=local_path.parent, prefix=f".{local_path.name}.", suffix=".part"
            )
        except OSError as e:
            raise MirrorIOError(f"Cannot write to {local_path.parent}: {e}") from e

        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(temp_path, local_path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            if e.errno == errno.ENOSPC:
                raise MirrorIOError(f"Disk full while writing {local_path}") from e
            logger.error(f"OS error writing {local_path}: {e}")
            raise MirrorIOError(f"Cannot write {local_path}: {e}") from e

    @staticmethod
    def _open_local(local_path: Path) -> BinaryIO:
        try:
            return open(local_path, "rb")
        except OSError as e:
            raise MirrorIOError(f"Cannot open {local_path}: {e}") from e
