"""Recursive listing of the remote namespace."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Set

from cloudmirror.config import MountConfig
from cloudmirror.exceptions import RemoteError, WalkDepthExceededError
from cloudmirror.remote import RemoteStore, store_for

logger = logging.getLogger(__name__)

DELIMITER = "/"
DEFAULT_MAX_DEPTH = 100


@dataclass(frozen=True)
class WalkEntry:
    """A file or folder found in the remote namespace.

    Attributes:
        path: Remote key (folders end in ``/``)
        folder: Whether the entry is a folder
        size: Object size in bytes; folders are 0
    """

    path: str
    folder: bool
    size: int = 0


class TreeWalker:
    """Enumerates every file and folder under a remote prefix.

    Folders do not exist in an object store; they are reconstructed from the
    common prefixes of delimiter-based listings and from zero-byte marker
    objects whose key ends in ``/``. Each folder is listed in turn, so the
    result covers the whole subtree, not just one level.

    Entries keep the remote listing order within a page, and each folder's
    entry comes immediately before its own contents (depth first).

    Args:
        config: Mount configuration naming the bucket
        store: Remote store to list; defaults to the store for ``config``
        max_depth: Deepest folder nesting followed before giving up

    Examples:
        >>> walker = TreeWalker(MountConfig("my-bucket"))
        >>> for entry in walker.walk("data/"):
        ...     print(entry.path, entry.folder)
    """

    def __init__(
        self,
        config: MountConfig,
        store: Optional[RemoteStore] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.config = config
        self.store = store if store is not None else store_for(config)
        self.max_depth = max_depth

    def walk(self, prefix: str = "") -> List[WalkEntry]:
        """Return every entry under ``prefix``; use ``""`` for the whole bucket.

        Leading separators are stripped, as they are for keys.

        The listing is collected in full before returning. If any page request
        fails the error is raised and nothing is returned.

        Raises:
            RemoteError: If a listing request fails or pagination is malformed
            WalkDepthExceededError: If folders nest deeper than ``max_depth``
        """
        prefix = prefix.replace("\\", DELIMITER).lstrip(DELIMITER)
        entries: List[WalkEntry] = []
        self._list_prefix(prefix, 0, entries, set())

        logger.info(
            f"Walked {self.config.bucket}/{prefix}: {len(entries)} entries"
        )
        return entries

    def _list_prefix(
        self,
        prefix: str,
        depth: int,
        entries: List[WalkEntry],
        seen_folders: Set[str],
    ) -> None:
        token = None
        seen_tokens = set()

        while True:
            page = self.store.list_page(
                self.config.bucket, prefix, DELIMITER, token
            )

            for obj in page.objects:
                if obj.key == prefix:
                    # Marker object for the folder being listed
                    continue
                if obj.key.endswith(DELIMITER):
                    self._descend(obj.key, depth, entries, seen_folders)
                    continue
                entries.append(WalkEntry(path=obj.key, folder=False, size=obj.size))

            for sub_prefix in page.common_prefixes:
                if sub_prefix != prefix:
                    self._descend(sub_prefix, depth, entries, seen_folders)

            if page.next_token is None:
                break
            if page.next_token in seen_tokens:
                raise RemoteError(
                    f"Listing of {self.config.bucket}/{prefix} repeated "
                    f"continuation token {page.next_token!r}"
                )
            seen_tokens.add(page.next_token)
            token = page.next_token

    def _descend(
        self,
        folder: str,
        depth: int,
        entries: List[WalkEntry],
        seen_folders: Set[str],
    ) -> None:
        if folder in seen_folders:
            return
        if depth + 1 > self.max_depth:
            raise WalkDepthExceededError(
                f"Folder {folder!r} is nested more than {self.max_depth} levels deep"
            )

        seen_folders.add(folder)
        entries.append(WalkEntry(path=folder, folder=True))
        logger.debug(f"Descending into {self.config.bucket}/{folder}")
        self._list_prefix(folder, depth + 1, entries, seen_folders)
