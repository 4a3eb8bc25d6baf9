"""CLI transcode command."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from vrs.cache.store import TranscodeCache
from vrs.cli import load_cli_config
from vrs.cli.exit_codes import ExitCode
from vrs.core.errors import CacheIOError, JobCancelledError, SpawnError, TranscodeFailure
from vrs.jobs.models import Job
from vrs.server.app import build_job_manager
from vrs.transcode.presets import BALANCED, preset_names
from vrs.transcode.types import TranscodeOptions

logger = logging.getLogger(__name__)

# How often the wait loop wakes to print progress
_POLL_SECONDS = 2.0


def _wait_with_progress(job: Job, quiet: bool) -> Path:
    """Block until the job ends, echoing ffmpeg's position to stderr."""
    while True:
        try:
            return job.result(timeout=_POLL_SECONDS)
        except TimeoutError:
            if quiet or job.progress is None:
                continue
            position = job.progress.out_time_seconds or 0.0
            speed = job.progress.speed or "?"
            click.echo(f"\r  {position:8.1f}s encoded ({speed})", nl=False, err=True)


@click.command("transcode")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output_file", type=click.Path(dir_okay=False, path_type=Path), required=False)
@click.option(
    "--preset-name",
    type=click.Choice(preset_names()),
    default=BALANCED,
    show_default=True,
    help="Quality preset.",
)
@click.option("--remux", is_flag=True, help="Copy all streams into MP4 without probing.")
@click.option("--force-encode", is_flag=True, help="Re-encode even copyable streams.")
@click.option("--max-width", type=click.IntRange(min=1), default=None, help="Scale down to this width.")
@click.option("--x264-preset", "x264_preset", default=None, help="x264 speed preset.")
@click.option("--crf", type=click.IntRange(0, 51), default=None, help="x264 CRF (0-51).")
@click.option("--audio-bitrate", default=None, help="AAC bitrate, e.g. 128k.")
@click.option("--allow-hevc-copy", is_flag=True, help="Copy HEVC video instead of encoding.")
@click.option("--quiet", "-q", is_flag=True, help="Do not print progress.")
@click.pass_context
def transcode_command(
    ctx: click.Context,
    input_file: Path,
    output_file: Path | None,
    preset_name: str,
    remux: bool,
    force_encode: bool,
    max_width: int | None,
    x264_preset: str | None,
    crf: int | None,
    audio_bitrate: str | None,
    allow_hevc_copy: bool,
    quiet: bool,
) -> None:
    """Convert INPUT_FILE to a browser-playable MP4 and wait for it.

    OUTPUT_FILE defaults to the input's location in the transcode cache.
    Ctrl+C cancels the job and removes the partial output.

    \b
    Examples:
        vrs transcode movie.mkv                    # balanced, into the cache
        vrs transcode movie.mkv out.mp4 --remux    # container change only
        vrs transcode movie.mkv --preset-name quick-stream
    """
    config = load_cli_config(ctx)
    source = input_file.resolve()

    if output_file is None:
        try:
            output_file = TranscodeCache(config.cache.root).resolve(source)
        except CacheIOError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(ExitCode.OPERATION_FAILED)

    try:
        overrides = TranscodeOptions(
            force_encode=force_encode,
            max_width=max_width,
            preset=x264_preset,
            crf=crf,
            audio_bitrate=audio_bitrate,
            allow_hevc_copy=allow_hevc_copy,
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.INVALID_ARGUMENTS)

    manager = build_job_manager(config)
    try:
        if remux:
            job = manager.fast_remux(source, output_file)
        else:
            job = manager.transcode_with_preset(source, output_file, preset_name, overrides)
    except SpawnError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.TOOL_NOT_AVAILABLE)

    click.echo(f"{job.plan.describe()} ({job.plan.reason})", err=True)

    try:
        output = _wait_with_progress(job, quiet)
    except KeyboardInterrupt:
        manager.cancel(job.id)
        click.echo("\nCancelled.", err=True)
        sys.exit(ExitCode.INTERRUPTED)
    except TranscodeFailure as e:
        click.echo(f"\nError: ffmpeg exited with code {e.returncode}", err=True)
        if e.diagnostics:
            click.echo(e.diagnostics, err=True)
        sys.exit(ExitCode.OPERATION_FAILED)
    except JobCancelledError:
        click.echo("\nCancelled.", err=True)
        sys.exit(ExitCode.CANCELLED)

    if not quiet:
        click.echo("", err=True)
    click.echo(str(output))
