"""Mount configuration."""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional, Union

import orjson

DEFAULT_MOUNT_ROOT = "target/temp"

_TRUE_VALUES = ("1", "true", "yes")


@dataclass(frozen=True)
class MountConfig:
    """Configuration for mirroring one bucket onto local disk.

    Objects from ``bucket`` are mirrored under ``mount_root / bucket`` with
    their folder structure retained. A new config is needed for each bucket.

    Attributes:
        bucket: Name of the remote bucket
        mount_root: Local directory under which buckets are mirrored
        force_download: If True, always re-fetch from the remote store. If
            False, whatever is found on disk at the local path is used as-is;
            no staleness check is made, so callers that need fresh data must
            ask for it.
        client: Optional pre-built client. Either a ``RemoteStore`` or a boto3
            S3 client; if None an S3 client is created from the environment.
    """

    bucket: str
    mount_root: Path = Path(DEFAULT_MOUNT_ROOT)
    force_download: bool = False
    client: Optional[Any] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if not self.bucket:
            raise ValueError("bucket must be a non-empty string")
        # Used as a single directory name under mount_root
        if "/" in self.bucket or "\\" in self.bucket or self.bucket in (".", ".."):
            raise ValueError(f"Invalid bucket name: {self.bucket!r}")
        if self.mount_root is None:
            mount_root = Path(DEFAULT_MOUNT_ROOT)
        else:
            mount_root = Path(self.mount_root).expanduser()
        object.__setattr__(self, "mount_root", mount_root)

    @property
    def local_root(self) -> Path:
        """Directory holding this bucket's mirrored files."""
        return self.mount_root / self.bucket

    def with_mount_root(self, mount_root: Union[str, Path]) -> "MountConfig":
        """Return a copy mirroring under ``mount_root``."""
        return replace(self, mount_root=Path(mount_root))

    def with_force_download(self, force_download: bool) -> "MountConfig":
        """Return a copy with ``force_download`` set."""
        return replace(self, force_download=force_download)

    def with_client(self, client: Any) -> "MountConfig":
        """Return a copy using ``client`` for remote calls."""
        return replace(self, client=client)

    @classmethod
    def from_env(cls, bucket: Optional[str] = None) -> "MountConfig":
        """Create configuration from environment variables.

        Environment variables:
            CLOUDMIRROR_BUCKET: Bucket name (ignored if ``bucket`` is given)
            CLOUDMIRROR_MOUNT_ROOT: Local mount root
            CLOUDMIRROR_FORCE_DOWNLOAD: Always re-fetch (true/false)

        Returns:
            MountConfig instance

        Raises:
            ValueError: If no bucket is given or set in the environment
        """
        bucket = bucket or os.getenv("CLOUDMIRROR_BUCKET")
        if not bucket:
            raise ValueError(
                "No bucket given and CLOUDMIRROR_BUCKET is not set"
            )

        mount_root = os.getenv("CLOUDMIRROR_MOUNT_ROOT") or DEFAULT_MOUNT_ROOT
        force = os.getenv("CLOUDMIRROR_FORCE_DOWNLOAD", "").lower() in _TRUE_VALUES

        return cls(bucket=bucket, mount_root=Path(mount_root), force_download=force)

    @classmethod
    def load(cls, config_path: Union[str, Path]) -> "MountConfig":
        """Load configuration from a JSON file.

        Args:
            config_path: Path to config file

        Returns:
            MountConfig instance
        """
        with open(config_path, "rb") as f:
            data = orjson.loads(f.read())

        return cls(
            bucket=data.get("bucket", ""),
            mount_root=Path(data.get("mount_root") or DEFAULT_MOUNT_ROOT),
            force_download=bool(data.get("force_download", False)),
        )

    def save(self, config_path: Union[str, Path]) -> None:
        """Save configuration to a JSON file. The client is not persisted."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "bucket": self.bucket,
            "mount_root": str(self.mount_root),
            "force_download": self.force_download,
        }

        with open(config_path, "wb") as f:
            f.write(orjson.dumps(data, option=orjson.OPT_INDENT_2))
