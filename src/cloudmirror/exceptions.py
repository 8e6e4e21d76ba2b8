"""Exceptions raised by cloudmirror operations."""


class MirrorError(Exception):
    """Base exception for mirror-related errors."""

    pass


class InvalidPathError(MirrorError):
    """Raised when a remote key would map outside the mount root."""

    pass


class NotFoundError(MirrorError):
    """Raised when the requested remote object does not exist."""

    pass


class MirrorIOError(MirrorError):
    """Raised when the local filesystem cannot be read or written."""

    pass


class RemoteError(MirrorError):
    """Raised when the remote store reports a failure.

    Covers authentication, network, throttling and malformed pagination.
    Nothing is retried at this layer.
    """

    pass


class WalkDepthExceededError(RemoteError):
    """Raised when a tree walk descends deeper than the configured ceiling."""

    pass
