"""Byte-range serving primitives.

Independent of transcoding: needs only a path and its size.
"""

from vrs.streaming.mime import content_type_for
from vrs.streaming.ranges import (
    FullFile,
    RangeWindow,
    chunk_size_for,
    resolve_range,
)
from vrs.streaming.reader import aiter_file_range, iter_file_range

__all__ = [
    "FullFile",
    "RangeWindow",
    "aiter_file_range",
    "chunk_size_for",
    "content_type_for",
    "iter_file_range",
    "resolve_range",
]
