"""Named quality presets.

Presets are option bundles, not separate code paths: each resolves to a
TranscodeOptions that goes through the regular planner.
"""

from __future__ import annotations

from vrs.transcode.types import TranscodeOptions

QUICK_STREAM = "quick-stream"
HIGH_QUALITY = "high-quality"
BALANCED = "balanced"

QUALITY_PRESETS: dict[str, TranscodeOptions] = {
    # Scale down to 1080p and trade quality for encode speed
    QUICK_STREAM: TranscodeOptions(max_width=1920, crf=28, preset="ultrafast"),
    # Download/archival quality
    HIGH_QUALITY: TranscodeOptions(crf=20, preset="slow"),
    # Used by the smart entry point
    BALANCED: TranscodeOptions(preset="fast"),
}


def get_preset(name: str) -> TranscodeOptions:
    """Look up a preset by name.

    Raises:
        ValueError: If the name is not a known preset.
    """
    try:
        return QUALITY_PRESETS[name]
    except KeyError:
        known = ", ".join(sorted(QUALITY_PRESETS))
        raise ValueError(f"Unknown quality preset '{name}' (known: {known})") from None


def preset_names() -> list[str]:
    return sorted(QUALITY_PRESETS)
