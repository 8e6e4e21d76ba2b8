"""Cache policy: decide whether a local copy can be reused."""


def should_fetch(local_path_exists: bool, force_download: bool) -> bool:
    """Return True if the object must be fetched from the remote store.

    A local copy is reused only when it exists and ``force_download`` is off.
    Its contents are not inspected: an empty file still counts as present,
    and a copy that has gone stale remotely is not detected.

    Args:
        local_path_exists: Whether a file is already at the local path
        force_download: Whether re-fetching is forced by configuration

    Returns:
        True to fetch from remote, False to reuse the local file

    Examples:
        >>> should_fetch(local_path_exists=True, force_download=False)
        False
        >>> should_fetch(local_path_exists=True, force_download=True)
        True
    """
    return force_download or not local_path_exists
