"""Request models for the JSON API."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vrs.core.codecs import X264_PRESETS
from vrs.transcode.types import TranscodeOptions

TranscodeMode = Literal["smart", "remux", "transcode", "quick", "high-quality"]

_BITRATE_RE = r"^\d+(\.\d+)?[kKmM]?$"


class TranscodeRequest(BaseModel):
    """Body of POST /api/jobs."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str = Field(min_length=1)
    """File path relative to the media root."""

    mode: TranscodeMode = "smart"
    force_encode: bool = False
    max_width: int | None = Field(default=None, gt=0)
    preset: str | None = None
    crf: int | None = Field(default=None, ge=0, le=51)
    audio_bitrate: str | None = Field(default=None, pattern=_BITRATE_RE)
    allow_hevc_copy: bool = False

    refresh: bool = False
    """Start a new job even when a cached output already exists."""

    @field_validator("preset")
    @classmethod
    def validate_preset(cls, v: str | None) -> str | None:
        if v is not None and v not in X264_PRESETS:
            raise ValueError(
                f"Invalid preset '{v}'. Must be one of: {', '.join(X264_PRESETS)}"
            )
        return v

    def to_options(self) -> TranscodeOptions:
        return TranscodeOptions(
            force_encode=self.force_encode,
            max_width=self.max_width,
            preset=self.preset,
            crf=self.crf,
            audio_bitrate=self.audio_bitrate,
            allow_hevc_copy=self.allow_hevc_copy,
        )


class CacheCleanupRequest(BaseModel):
    """Optional body of POST /api/cache/cleanup."""

    model_config = ConfigDict(extra="forbid")

    max_age_hours: float | None = Field(default=None, ge=0)
