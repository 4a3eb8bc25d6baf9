"""Introspector module for Video Range Server.

- StreamInspector: Protocol defining the probing interface
- FFprobeInspector: Production implementation using ffprobe
- StubInspector: In-memory implementation for testing
- classify_copyability: Pure stream-copy eligibility check
"""

from vrs.introspector.capability import classify_copyability, is_video_copyable
from vrs.introspector.ffprobe import FFprobeInspector
from vrs.introspector.interface import ProbeError, StreamInspector
from vrs.introspector.parsers import parse_ffprobe_output
from vrs.introspector.stub import StubInspector
from vrs.introspector.types import (
    CodecType,
    CopyCapability,
    MediaStreamInfo,
    StreamDescriptor,
)

__all__ = [
    "CodecType",
    "CopyCapability",
    "FFprobeInspector",
    "MediaStreamInfo",
    "ProbeError",
    "StreamDescriptor",
    "StreamInspector",
    "StubInspector",
    "classify_copyability",
    "is_video_copyable",
    "parse_ffprobe_output",
]
