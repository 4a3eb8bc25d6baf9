"""Transcode planning.

Chooses the cheapest processing path that yields a browser-playable MP4:
fast remux, selective stream copy, or full transcode.
"""

from __future__ import annotations

import logging
from pathlib import Path

from vrs.config.models import TranscodeDefaults
from vrs.core.errors import ProbeError
from vrs.introspector.capability import classify_copyability
from vrs.introspector.interface import StreamInspector
from vrs.introspector.types import CopyCapability
from vrs.transcode.types import (
    COPY,
    AudioAction,
    AudioEncodeParams,
    PlanKind,
    TranscodeOptions,
    TranscodePlan,
    VideoAction,
    VideoEncodeParams,
)

logger = logging.getLogger(__name__)


def video_encode_params(
    options: TranscodeOptions, defaults: TranscodeDefaults
) -> VideoEncodeParams:
    """Resolve video encode settings from options, falling back to defaults."""
    return VideoEncodeParams(
        preset=options.preset or defaults.preset,
        crf=options.crf if options.crf is not None else defaults.crf,
        max_width=options.max_width,
    )


def audio_encode_params(
    options: TranscodeOptions, defaults: TranscodeDefaults
) -> AudioEncodeParams:
    """Resolve audio encode settings from options, falling back to defaults."""
    return AudioEncodeParams(bitrate=options.audio_bitrate or defaults.audio_bitrate)


def full_transcode_plan(
    options: TranscodeOptions | None = None,
    defaults: TranscodeDefaults | None = None,
    reason: str = "full transcode",
) -> TranscodePlan:
    """Plan that re-encodes both streams."""
    options = options or TranscodeOptions()
    defaults = defaults or TranscodeDefaults()
    return TranscodePlan(
        kind=PlanKind.FULL_TRANSCODE,
        video=video_encode_params(options, defaults),
        audio=audio_encode_params(options, defaults),
        reason=reason,
    )


def decide_plan(
    capability: CopyCapability,
    options: TranscodeOptions | None = None,
    defaults: TranscodeDefaults | None = None,
) -> TranscodePlan:
    """Apply the decision table to a copy capability.

    - Both streams copyable, no forced encode, no scaling: fast remux.
    - Video is copied when copyable, not forced and not scaled; otherwise
      it is encoded to H.264.
    - Audio is copied when copyable and not forced; otherwise AAC.
    - Both encoded is a full transcode, anything else a selective copy.

    Pure: same inputs always give the same plan.
    """
    options = options or TranscodeOptions()
    defaults = defaults or TranscodeDefaults()
    forced = options.force_encode
    scaling = options.max_width is not None

    if capability.all_copyable and not forced and not scaling:
        return TranscodePlan.fast_remux()

    video: VideoAction
    if capability.video_copyable and not forced and not scaling:
        video = COPY
    else:
        video = video_encode_params(options, defaults)

    audio: AudioAction
    if capability.audio_copyable and not forced:
        audio = COPY
    else:
        audio = audio_encode_params(options, defaults)

    if isinstance(video, VideoEncodeParams) and isinstance(audio, AudioEncodeParams):
        if forced:
            reason = "re-encode forced"
        elif capability.video_copyable and scaling:
            reason = "scaling requested and audio incompatible"
        else:
            reason = "no stream copyable"
        return TranscodePlan(PlanKind.FULL_TRANSCODE, video, audio, reason)

    copied = "video" if video is COPY else "audio"
    return TranscodePlan(
        PlanKind.SELECTIVE_COPY, video, audio, f"copying {copied} only"
    )


class TranscodePlanner:
    """Probes an input and decides its TranscodePlan."""

    def __init__(
        self,
        inspector: StreamInspector,
        defaults: TranscodeDefaults | None = None,
    ) -> None:
        self._inspector = inspector
        self._defaults = defaults or TranscodeDefaults()

    @property
    def defaults(self) -> TranscodeDefaults:
        return self._defaults

    def default_options(self) -> TranscodeOptions:
        """Options carrying the configured HEVC policy and nothing else."""
        return TranscodeOptions(allow_hevc_copy=self._defaults.allow_hevc_copy)

    def plan(
        self, input_path: Path, options: TranscodeOptions | None = None
    ) -> TranscodePlan:
        """Probe the input and decide how to process it.

        A probe failure does not propagate: the input is planned as a full
        transcode so playback can still be attempted.

        Args:
            input_path: Source media file.
            options: Per-call overrides.

        Returns:
            The decided TranscodePlan.
        """
        options = self.default_options().merged_with(options or TranscodeOptions())

        try:
            info = self._inspector.probe(input_path)
        except ProbeError as e:
            logger.warning(
                "Probe failed for %s, falling back to full transcode: %s",
                input_path,
                e,
                extra={"diagnostics": e.diagnostics} if e.diagnostics else None,
            )
            return full_transcode_plan(
                options, self._defaults, reason="probe failed; full transcode"
            )

        capability = classify_copyability(info, options)
        plan = decide_plan(capability, options, self._defaults)
        logger.info(
            "Planned %s for %s (%s)",
            plan.kind.value,
            input_path.name,
            plan.reason,
            extra={
                "video_copyable": capability.video_copyable,
                "audio_copyable": capability.audio_copyable,
            },
        )
        return plan
