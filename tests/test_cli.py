"""Tests for the cloudmirror CLI."""

import orjson
import pytest
from click.testing import CliRunner

from cloudmirror.cli.main import cli


@pytest.fixture
def runner():
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture
def cli_store(monkeypatch, store):
    """Route every CLI command to the fake store."""
    monkeypatch.setattr("cloudmirror.cli.main.store_for", lambda config: store)
    return store


def invoke(runner, mount_root, *args):
    return runner.invoke(
        cli, ["--bucket", "test-bucket", "--mount-root", str(mount_root), *args]
    )


class TestLs:
    """Test the ls command."""

    def test_ls_table(self, runner, cli_store, mount_root):
        """Test listing as a table."""
        cli_store.objects.update({"a/1.txt": b"1", "b/3.txt": b"333"})

        result = invoke(runner, mount_root, "ls")

        assert result.exit_code == 0
        assert "Objects (4)" in result.output
        assert "a/1.txt" in result.output
        assert "b/3.txt" in result.output

    def test_ls_json(self, runner, cli_store, mount_root):
        """Test listing as JSON lines."""
        cli_store.objects.update({"a/1.txt": b"1"})

        result = invoke(runner, mount_root, "ls", "--json")

        assert result.exit_code == 0
        lines = [orjson.loads(line) for line in result.output.splitlines()]
        assert lines == [
            {"path": "a/", "folder": True, "size": 0},
            {"path": "a/1.txt", "folder": False, "size": 1},
        ]

    def test_ls_empty(self, runner, cli_store, mount_root):
        """Test listing an empty bucket."""
        result = invoke(runner, mount_root, "ls")

        assert result.exit_code == 0
        assert "No objects found" in result.output

    def test_ls_failure(self, runner, cli_store, mount_root):
        """Test that listing errors exit with status 1."""
        cli_store.fail_list_prefix = ""

        result = invoke(runner, mount_root, "ls")

        assert result.exit_code == 1
        assert "Error" in result.output


class TestGetPut:
    """Test the get and put commands."""

    def test_get_prints_local_path(self, runner, cli_store, mount_root):
        """Test that get mirrors the object and prints its path."""
        cli_store.objects["data/file.csv"] = b"a,b"

        result = invoke(runner, mount_root, "get", "data/file.csv")

        assert result.exit_code == 0
        local_path = mount_root / "test-bucket" / "data" / "file.csv"
        assert result.output.strip() == str(local_path)
        assert local_path.read_bytes() == b"a,b"

    def test_get_to_output_file(self, runner, cli_store, mount_root, tmp_path):
        """Test copying an object to a file."""
        cli_store.objects["k.bin"] = b"\x01\x02"
        output = tmp_path / "copy.bin"

        result = invoke(runner, mount_root, "get", "k.bin", "--output", str(output))

        assert result.exit_code == 0
        assert output.read_bytes() == b"\x01\x02"

    def test_get_missing(self, runner, cli_store, mount_root):
        """Test that a missing object exits with status 1."""
        result = invoke(runner, mount_root, "get", "missing/key.csv")

        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_put_uploads_file(self, runner, cli_store, mount_root, tmp_path):
        """Test that put uploads and mirrors a local file."""
        source = tmp_path / "manifest.txt"
        source.write_bytes(b"manifest")

        result = invoke(runner, mount_root, "put", "manifest.txt", str(source))

        assert result.exit_code == 0
        assert "Uploaded 8 bytes" in result.output
        assert cli_store.objects["manifest.txt"] == b"manifest"
        assert (mount_root / "test-bucket" / "manifest.txt").read_bytes() == b"manifest"


class TestPath:
    """Test the path command."""

    def test_path_not_cached(self, runner, cli_store, mount_root):
        """Test reporting an uncached key."""
        result = invoke(runner, mount_root, "path", "a/b.txt")

        assert result.exit_code == 0
        assert str(mount_root / "test-bucket" / "a" / "b.txt") in result.output
        assert "not cached" in result.output

    def test_path_invalid_key(self, runner, cli_store, mount_root):
        """Test that escaping keys are reported as errors."""
        result = invoke(runner, mount_root, "path", "../x.txt")

        assert result.exit_code == 1
        assert "Error" in result.output


class TestBucketOption:
    """Test bucket resolution."""

    def test_missing_bucket(self, runner, cli_store, monkeypatch, mount_root):
        """Test that a bucket is required."""
        monkeypatch.delenv("CLOUDMIRROR_BUCKET", raising=False)

        result = runner.invoke(cli, ["--mount-root", str(mount_root), "ls"])

        assert result.exit_code != 0
        assert "No bucket given" in result.output

    def test_bucket_from_environment(self, runner, cli_store, monkeypatch, mount_root):
        """Test that CLOUDMIRROR_BUCKET is used when no option is given."""
        monkeypatch.setenv("CLOUDMIRROR_BUCKET", "env-bucket")
        cli_store.objects["k.txt"] = b"x"

        result = runner.invoke(cli, ["--mount-root", str(mount_root), "get", "k.txt"])

        assert result.exit_code == 0
        assert (mount_root / "env-bucket" / "k.txt").exists()
