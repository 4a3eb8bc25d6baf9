"""CLI cache commands."""

import sys
from pathlib import Path

import click

from vrs.cache.store import TranscodeCache
from vrs.cli import load_cli_config
from vrs.cli.exit_codes import ExitCode
from vrs.core.errors import CacheIOError


def _open_cache(ctx: click.Context) -> tuple[TranscodeCache, float]:
    config = load_cli_config(ctx)
    try:
        return TranscodeCache(config.cache.root), config.cache.max_age_hours
    except CacheIOError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.OPERATION_FAILED)


@click.group("cache")
def cache_group() -> None:
    """Manage cached transcode outputs."""


@cache_group.command("cleanup")
@click.option(
    "--max-age-hours",
    type=click.FloatRange(min=0),
    default=None,
    help="Delete entries at least this old (default: cache.max_age_hours). 0 removes all.",
)
@click.pass_context
def cleanup_command(ctx: click.Context, max_age_hours: float | None) -> None:
    """Delete old cached outputs."""
    cache, default_age = _open_cache(ctx)
    age = default_age if max_age_hours is None else max_age_hours

    result = cache.cleanup(age)
    click.echo(f"Removed {len(result.removed)} file(s) from {cache.root}")
    for error in result.errors:
        click.echo(f"  skipped: {error}", err=True)
    if result.errors:
        sys.exit(ExitCode.OPERATION_FAILED)


@cache_group.command("path")
@click.argument("source", type=click.Path(path_type=Path), required=False)
@click.pass_context
def path_command(ctx: click.Context, source: Path | None) -> None:
    """Print the cache root, or where SOURCE's output is cached."""
    cache, _ = _open_cache(ctx)
    if source is None:
        click.echo(str(cache.root))
        return

    output = cache.resolve(source.resolve())
    click.echo(str(output))
    if not output.is_file():
        click.echo("(not cached)", err=True)
