"""Chunked reads of a byte window."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterator
from pathlib import Path
from typing import BinaryIO


def _read_window(fh: BinaryIO, remaining: int, chunk_size: int) -> Iterator[bytes]:
    while remaining > 0:
        data = fh.read(min(chunk_size, remaining))
        if not data:
            # File shrank underneath us
            return
        remaining -= len(data)
        yield data


def iter_file_range(path: Path, start: int, end: int, chunk_size: int) -> Iterator[bytes]:
    """Yield bytes start..end (inclusive) of a file, chunk_size at a time.

    Memory use is bounded by chunk_size regardless of the window length.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if end < start:
        return
    with path.open("rb") as fh:
        fh.seek(start)
        yield from _read_window(fh, end - start + 1, chunk_size)


async def aiter_file_range(
    path: Path, start: int, end: int, chunk_size: int
) -> AsyncIterator[bytes]:
    """Async variant of iter_file_range.

    Each blocking read runs in the default executor, so a slow disk or a
    slow client never stalls the event loop.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if end < start:
        return

    fh = await asyncio.to_thread(path.open, "rb")
    try:
        await asyncio.to_thread(fh.seek, start)
        remaining = end - start + 1
        while remaining > 0:
            data = await asyncio.to_thread(fh.read, min(chunk_size, remaining))
            if not data:
                return
            remaining -= len(data)
            yield data
    finally:
        await asyncio.to_thread(fh.close)
