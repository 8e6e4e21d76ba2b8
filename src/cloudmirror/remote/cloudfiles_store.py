"""Remote store backed by cloudfiles (gs://, s3://, file://, ...)."""

import logging
from typing import Optional

from cloudfiles import CloudFiles

from cloudmirror.exceptions import NotFoundError, RemoteError
from cloudmirror.remote.base import ListPage, RemoteObject, RemoteStore

logger = logging.getLogger(__name__)


class CloudFilesRemoteStore(RemoteStore):
    """Remote store for any protocol cloudfiles understands.

    Buckets are addressed relative to ``base_url``: with ``"gs://"`` the bucket
    ``data`` is ``gs://data``; with ``"file:///srv/buckets"`` it is the
    directory ``/srv/buckets/data``.

    cloudfiles paginates internally, so every listing is returned as a single
    page. Directories are reported by cloudfiles as names ending in ``/``.
    File sizes are not part of the listing and are looked up with one
    ``CloudFiles.size`` call per page.

    Examples:
        >>> store = CloudFilesRemoteStore("gs://")
        >>> data = store.get_object("my-bucket", "path/to/file.csv")
    """

    def __init__(self, base_url: str = "gs://"):
        self.base_url = base_url

    def _cloudpath(self, bucket: str) -> str:
        if self.base_url.endswith("://"):
            return f"{self.base_url}{bucket}"
        return f"{self.base_url.rstrip('/')}/{bucket}"

    def _cloudfiles(self, bucket: str) -> CloudFiles:
        return CloudFiles(self._cloudpath(bucket))

    def get_object(self, bucket: str, key: str) -> bytes:
        try:
            content = self._cloudfiles(bucket).get(key)
        except Exception as e:
            raise RemoteError(
                f"Failed to get {self._cloudpath(bucket)}/{key}: {e}"
            ) from e

        if content is None:
            raise NotFoundError(f"{self._cloudpath(bucket)}/{key} does not exist")
        return content

    def put_object(self, bucket: str, key: str, data: bytes) -> None:
        try:
            self._cloudfiles(bucket).put(key, data)
        except Exception as e:
            raise RemoteError(
                f"Failed to put {self._cloudpath(bucket)}/{key}: {e}"
            ) from e

    def list_page(
        self,
        bucket: str,
        prefix: str,
        delimiter: str = "/",
        continuation_token: Optional[str] = None,
    ) -> ListPage:
        if delimiter != "/":
            raise ValueError("cloudfiles listings only support the '/' delimiter")

        try:
            cf = self._cloudfiles(bucket)
            names = list(cf.list(prefix=prefix, flat=True))
            file_names = [name for name in names if not name.endswith("/")]
            sizes = cf.size(file_names) if file_names else {}
        except Exception as e:
            raise RemoteError(
                f"Failed to list {self._cloudpath(bucket)}/{prefix}: {e}"
            ) from e

        objects = []
        common_prefixes = []
        for name in names:
            if name.endswith("/"):
                common_prefixes.append(name)
            else:
                objects.append(RemoteObject(key=name, size=int(sizes.get(name) or 0)))

        logger.debug(
            f"Listed {self._cloudpath(bucket)}/{prefix}: {len(objects)} objects, "
            f"{len(common_prefixes)} prefixes"
        )
        return ListPage(objects=objects, common_prefixes=common_prefixes)
