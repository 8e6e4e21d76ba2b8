"""Remote store interface.

The mirror only ever talks to the remote namespace through this interface:
whole-object get and put, and one page of a delimiter-based listing at a
time. Authentication, transport, retries and timeouts belong to the
implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class RemoteObject:
    """An object key returned by a listing."""

    key: str
    size: int = 0


@dataclass(frozen=True)
class ListPage:
    """One page of a delimiter-based listing.

    Attributes:
        objects: Objects directly under the listed prefix, in remote order
        common_prefixes: Immediate sub-"directories", each ending in the delimiter
        next_token: Continuation token, or None when this is the last page
    """

    objects: List[RemoteObject] = field(default_factory=list)
    common_prefixes: List[str] = field(default_factory=list)
    next_token: Optional[str] = None


class RemoteStore(ABC):
    """Abstract base class for remote object stores.

    Implementations must raise ``NotFoundError`` from ``get_object`` for a
    missing key and ``RemoteError`` for every other remote failure.
    """

    @abstractmethod
    def get_object(self, bucket: str, key: str) -> bytes:
        """Return the full body of ``key``."""
        pass

    @abstractmethod
    def put_object(self, bucket: str, key: str, data: bytes) -> None:
        """Upload ``data`` as ``key``, replacing any existing object."""
        pass

    @abstractmethod
    def list_page(
        self,
        bucket: str,
        prefix: str,
        delimiter: str = "/",
        continuation_token: Optional[str] = None,
    ) -> ListPage:
        """Return one page of keys and common prefixes under ``prefix``."""
        pass
