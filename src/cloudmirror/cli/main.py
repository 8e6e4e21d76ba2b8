"""Main CLI entry point for cloudmirror.

Provides commands to list, fetch and upload objects through the local mirror.
"""

import dataclasses
import logging
import os
import sys
from pathlib import Path

import click
import orjson
from rich.console import Console
from rich.table import Table

from cloudmirror.config import DEFAULT_MOUNT_ROOT, MountConfig
from cloudmirror.exceptions import MirrorError
from cloudmirror.mirror import Mirror
from cloudmirror.remote import CloudFilesRemoteStore, store_for

# Global console for Rich output
console = Console()


def get_mirror(ctx: click.Context) -> Mirror:
    """Build a Mirror from the CLI context.

    The bucket comes from --bucket/-b, then the CLOUDMIRROR_BUCKET environment
    variable.

    Raises:
        click.ClickException: If no bucket is configured
    """
    obj = ctx.obj
    bucket = obj.get("bucket") or os.environ.get("CLOUDMIRROR_BUCKET")
    if not bucket:
        raise click.ClickException(
            "No bucket given. Use --bucket/-b or set CLOUDMIRROR_BUCKET."
        )

    config = MountConfig(
        bucket=bucket,
        mount_root=Path(obj.get("mount_root") or DEFAULT_MOUNT_ROOT),
        force_download=obj.get("force", False),
    )
    if obj.get("cloudfiles_url"):
        config = config.with_client(CloudFilesRemoteStore(obj["cloudfiles_url"]))

    return Mirror(config, store_for(config))


@click.group()
@click.option("--bucket", "-b", help="Bucket to mirror (default: CLOUDMIRROR_BUCKET)")
@click.option(
    "--mount-root",
    "-m",
    type=click.Path(file_okay=False),
    envvar="CLOUDMIRROR_MOUNT_ROOT",
    help=f"Local mount root (default: {DEFAULT_MOUNT_ROOT})",
)
@click.option("--force", is_flag=True, help="Always re-download objects")
@click.option(
    "--cloudfiles-url",
    help="Use cloudfiles instead of S3, e.g. gs:// or file:///srv/buckets",
)
@click.option("--verbose", "-v", is_flag=True, help="Log remote and cache activity")
@click.pass_context
def cli(ctx, bucket, mount_root, force, cloudfiles_url, verbose):
    """cloudmirror - Work with a remote bucket through a local file mirror."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["bucket"] = bucket
    ctx.obj["mount_root"] = mount_root
    ctx.obj["force"] = force
    ctx.obj["cloudfiles_url"] = cloudfiles_url


@cli.command("ls")
@click.argument("prefix", default="")
@click.option("--json", "as_json", is_flag=True, help="Print one JSON object per entry")
@click.pass_context
def ls(ctx, prefix, as_json):
    """List every file and folder under PREFIX.

    Example:
        cloudmirror -b my-bucket ls reports/
    """
    try:
        entries = get_mirror(ctx).walk(prefix)

        if as_json:
            for entry in entries:
                click.echo(orjson.dumps(dataclasses.asdict(entry)).decode())
            return

        if not entries:
            console.print("[yellow]No objects found[/yellow]")
            return

        table = Table(title=f"Objects ({len(entries)})")
        table.add_column("Type", style="magenta")
        table.add_column("Size", justify="right", style="green")
        table.add_column("Path", style="cyan", overflow="fold")
        for entry in entries:
            table.add_row(
                "dir" if entry.folder else "file",
                "" if entry.folder else str(entry.size),
                entry.path,
            )
        console.print(table)

    except MirrorError as e:
        console.print(f"[red]✗[/red] Error: {e}", style="red")
        sys.exit(1)


@cli.command("get")
@click.argument("key")
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False), help="Copy the object to FILE"
)
@click.pass_context
def get(ctx, key, output):
    """Mirror KEY locally and print its local path.

    Example:
        cloudmirror -b my-bucket get reports/2020/summary.csv
    """
    try:
        with get_mirror(ctx).open(key) as f:
            if output:
                Path(output).write_bytes(f.read())
                console.print(f"[green]✓[/green] Saved {key} to {output}")
            else:
                click.echo(str(f.name))

    except (MirrorError, OSError) as e:
        console.print(f"[red]✗[/red] Error: {e}", style="red")
        sys.exit(1)


@cli.command("put")
@click.argument("key")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def put(ctx, key, file):
    """Upload FILE as KEY, keeping a copy in the local mirror.

    Example:
        cloudmirror -b my-bucket put manifest.txt data/manifest.txt
    """
    try:
        data = Path(file).read_bytes()
        with get_mirror(ctx).write(key, data):
            pass
        console.print(f"[green]✓[/green] Uploaded {len(data)} bytes to {key}")

    except (MirrorError, OSError) as e:
        console.print(f"[red]✗[/red] Error: {e}", style="red")
        sys.exit(1)


@cli.command("path")
@click.argument("key")
@click.pass_context
def path(ctx, key):
    """Print the local path for KEY and whether it is cached."""
    try:
        entry = get_mirror(ctx).entry(key)
        click.echo(str(entry.local_path))
        if entry.exists_locally:
            console.print("[green]cached[/green]")
        else:
            console.print("[yellow]not cached[/yellow]")

    except MirrorError as e:
        console.print(f"[red]✗[/red] Error: {e}", style="red")
        sys.exit(1)


if __name__ == "__main__":
    cli()
