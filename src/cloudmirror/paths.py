"""Mapping of remote keys onto local cache paths."""

import logging
from pathlib import Path
from typing import Union

from cloudmirror.exceptions import InvalidPathError, MirrorIOError

logger = logging.getLogger(__name__)


def normalize_key(remote_key: str) -> str:
    """Normalize a remote key to its canonical ``/``-separated form.

    Backslashes are treated as separators and leading separators are
    stripped. Empty, ``.`` and ``..`` segments are rejected so that two
    distinct keys can never share a local path.

    Args:
        remote_key: Key as given by the caller

    Returns:
        Canonical key used both remotely and locally

    Raises:
        InvalidPathError: If the key is empty or has an illegal segment

    Examples:
        >>> normalize_key("/data\\\\2020/file.csv")
        'data/2020/file.csv'
    """
    if not isinstance(remote_key, str):
        raise InvalidPathError(f"Remote key must be a string, got {type(remote_key)}")
    if "\x00" in remote_key:
        raise InvalidPathError(f"Remote key contains a NUL byte: {remote_key!r}")

    key = remote_key.replace("\\", "/").lstrip("/")
    if not key:
        raise InvalidPathError(f"Remote key is empty: {remote_key!r}")

    for segment in key.split("/"):
        if segment in ("", ".", ".."):
            raise InvalidPathError(
                f"Illegal segment {segment!r} in remote key {remote_key!r}"
            )
    return key


def resolve(mount_root: Union[str, Path], remote_key: str) -> Path:
    """Resolve the local path for a remote key, creating parent directories.

    The same ``(mount_root, remote_key)`` always yields the same path, and the
    path always lies under ``mount_root``.

    Args:
        mount_root: Root directory of the local mirror
        remote_key: Key of the object in the remote store

    Returns:
        Local file path for the key

    Raises:
        InvalidPathError: If the key is illegal or escapes ``mount_root``
        MirrorIOError: If parent directories cannot be created
    """
    key = normalize_key(remote_key)
    root = Path(mount_root)
    local_path = root.joinpath(*key.split("/"))

    # Catches escapes through symlinks already present under the root
    if not local_path.resolve().is_relative_to(root.resolve()):
        raise InvalidPathError(
            f"Remote key {remote_key!r} resolves outside mount root {root}"
        )

    try:
        local_path.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        raise MirrorIOError(
            f"Cannot create directory {local_path.parent}: {e}"
        ) from e
    except OSError as e:
        logger.error(f"OS error creating directory {local_path.parent}: {e}")
        raise MirrorIOError(f"Cannot create directory {local_path.parent}: {e}") from e

    return local_path
