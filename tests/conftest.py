"""Shared fixtures: an in-memory remote store with S3-style listings."""

from typing import Dict, List, Optional

import pytest

from cloudmirror.config import MountConfig
from cloudmirror.exceptions import NotFoundError, RemoteError
from cloudmirror.mirror import Mirror
from cloudmirror.remote import ListPage, RemoteObject, RemoteStore


class FakeRemoteStore(RemoteStore):
    """In-memory remote store.

    Listings follow S3 semantics: keys and common prefixes are merged in
    lexicographic order and split into pages of ``page_size`` items.
    """

    def __init__(self, objects: Optional[Dict[str, bytes]] = None, page_size: int = 1000):
        self.objects: Dict[str, bytes] = dict(objects or {})
        self.page_size = page_size
        self.get_calls: List[str] = []
        self.put_calls: List[str] = []
        self.list_calls: List[tuple] = []
        self.fail_put = False
        self.fail_list_prefix: Optional[str] = None

    def get_object(self, bucket: str, key: str) -> bytes:
        self.get_calls.append(key)
        if key not in self.objects:
            raise NotFoundError(f"{bucket}/{key} does not exist")
        return self.objects[key]

    def put_object(self, bucket: str, key: str, data: bytes) -> None:
        self.put_calls.append(key)
        if self.fail_put:
            raise RemoteError("simulated upload failure")
        self.objects[key] = bytes(data)

    def list_page(self, bucket, prefix, delimiter="/", continuation_token=None):
        self.list_calls.append((prefix, continuation_token))
        if prefix == self.fail_list_prefix:
            raise RemoteError(f"simulated listing failure for {prefix!r}")

        items = []
        seen_prefixes = set()
        for key in sorted(self.objects):
            if not key.startswith(prefix):
                continue
            rest = key[len(prefix):]
            if delimiter in rest:
                common = prefix + rest.split(delimiter)[0] + delimiter
                if common not in seen_prefixes:
                    seen_prefixes.add(common)
                    items.append(("prefix", common))
            else:
                items.append(("object", key))

        start = int(continuation_token) if continuation_token else 0
        chunk = items[start:start + self.page_size]
        end = start + len(chunk)

        return ListPage(
            objects=[
                RemoteObject(key=value, size=len(self.objects[value]))
                for kind, value in chunk
                if kind == "object"
            ],
            common_prefixes=[value for kind, value in chunk if kind == "prefix"],
            next_token=str(end) if end < len(items) else None,
        )


@pytest.fixture
def store():
    """Create an empty in-memory remote store."""
    return FakeRemoteStore()


@pytest.fixture
def mount_root(tmp_path):
    """Create a temporary mount root."""
    return tmp_path / "mount"


@pytest.fixture
def config(mount_root, store):
    """Create a mount configuration backed by the fake store."""
    return MountConfig(bucket="test-bucket", mount_root=mount_root, client=store)


@pytest.fixture
def mirror(config, store):
    """Create a mirror over the fake store."""
    return Mirror(config, store)
