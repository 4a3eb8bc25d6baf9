"""CLI probe and plan commands."""

import logging
import sys
from pathlib import Path

import click

from vrs.cli import load_cli_config
from vrs.cli.exit_codes import ExitCode
from vrs.core.errors import ProbeError
from vrs.introspector import FFprobeInspector, classify_copyability
from vrs.introspector.formatters import format_human, format_json
from vrs.transcode.planner import TranscodePlanner
from vrs.transcode.types import TranscodeOptions
from vrs.transcode.utils import estimate_transcode_minutes, needs_transcoding

logger = logging.getLogger(__name__)


@click.command("probe")
@click.argument("file", type=click.Path(path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output JSON.")
@click.option(
    "--allow-hevc-copy",
    is_flag=True,
    default=False,
    help="Report HEVC video as copyable.",
)
@click.pass_context
def probe_command(
    ctx: click.Context, file: Path, as_json: bool, allow_hevc_copy: bool
) -> None:
    """Show a file's streams and whether they can be copied into MP4.

    FILE is the path to the media file to probe.
    """
    if not file.exists():
        click.echo(f"Error: File not found: {file}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)

    config = load_cli_config(ctx)
    inspector = FFprobeInspector(
        config.tools.ffprobe, timeout=config.transcode.probe_timeout
    )

    try:
        info = inspector.probe(file)
    except ProbeError as e:
        click.echo(f"Error: Could not probe file: {file}", err=True)
        click.echo(f"Reason: {e}", err=True)
        if e.diagnostics:
            click.echo(e.diagnostics, err=True)
        sys.exit(ExitCode.PROBE_FAILED)

    options = TranscodeOptions(
        allow_hevc_copy=allow_hevc_copy or config.transcode.allow_hevc_copy
    )
    capability = classify_copyability(info, options)

    if as_json:
        click.echo(format_json(file, info, capability))
    else:
        click.echo(format_human(file, info, capability))


@click.command("plan")
@click.argument("file", type=click.Path(path_type=Path))
@click.option("--force-encode", is_flag=True, help="Re-encode even copyable streams.")
@click.option("--max-width", type=click.IntRange(min=1), default=None, help="Scale down to this width.")
@click.option("--allow-hevc-copy", is_flag=True, help="Treat HEVC video as copyable.")
@click.pass_context
def plan_command(
    ctx: click.Context,
    file: Path,
    force_encode: bool,
    max_width: int | None,
    allow_hevc_copy: bool,
) -> None:
    """Show how FILE would be processed, without running ffmpeg."""
    if not file.exists():
        click.echo(f"Error: File not found: {file}", err=True)
        sys.exit(ExitCode.TARGET_NOT_FOUND)

    config = load_cli_config(ctx)
    planner = TranscodePlanner(
        FFprobeInspector(config.tools.ffprobe, timeout=config.transcode.probe_timeout),
        config.transcode,
    )
    options = TranscodeOptions(
        force_encode=force_encode,
        max_width=max_width,
        allow_hevc_copy=allow_hevc_copy,
    )
    plan = planner.plan(file, options)

    click.echo(f"File: {file}")
    click.echo(f"Plan: {plan.kind.value}")
    click.echo(f"  video: {plan.video}")
    click.echo(f"  audio: {plan.audio}")
    click.echo(f"Reason: {plan.reason}")
    if needs_transcoding(file):
        click.echo("Container: not browser-playable as-is")
    if not plan.copies_video:
        minutes = estimate_transcode_minutes(
            file.stat().st_size, max_width or 1920
        )
        click.echo(f"Estimated encode time: ~{minutes} min")
