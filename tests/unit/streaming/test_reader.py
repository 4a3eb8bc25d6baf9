"""Tests for chunked window reads."""

from pathlib import Path

import pytest

from vrs.streaming.mime import content_type_for
from vrs.streaming.reader import aiter_file_range, iter_file_range

DATA = bytes(range(256)) * 4


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    path = tmp_path / "data.bin"
    path.write_bytes(DATA)
    return path


class TestIterFileRange:
    def test_reads_exact_window(self, data_file: Path) -> None:
        chunks = list(iter_file_range(data_file, 10, 109, chunk_size=32))
        assert b"".join(chunks) == DATA[10:110]
        assert [len(c) for c in chunks] == [32, 32, 32, 4]

    def test_whole_file(self, data_file: Path) -> None:
        assert b"".join(iter_file_range(data_file, 0, len(DATA) - 1, 4096)) == DATA

    def test_empty_window(self, data_file: Path) -> None:
        assert list(iter_file_range(data_file, 5, 4, 32)) == []

    def test_window_past_eof_stops(self, data_file: Path) -> None:
        data = b"".join(iter_file_range(data_file, len(DATA) - 3, len(DATA) + 100, 64))
        assert data == DATA[-3:]

    def test_invalid_chunk_size(self, data_file: Path) -> None:
        with pytest.raises(ValueError):
            list(iter_file_range(data_file, 0, 10, 0))


class TestAiterFileRange:
    @pytest.mark.asyncio
    async def test_reads_exact_window(self, data_file: Path) -> None:
        chunks = [c async for c in aiter_file_range(data_file, 100, 355, 100)]
        assert b"".join(chunks) == DATA[100:356]
        assert [len(c) for c in chunks] == [100, 100, 56]

    @pytest.mark.asyncio
    async def test_empty_window(self, data_file: Path) -> None:
        assert [c async for c in aiter_file_range(data_file, 1, 0, 16)] == []

    @pytest.mark.asyncio
    async def test_invalid_chunk_size(self, data_file: Path) -> None:
        with pytest.raises(ValueError):
            async for _ in aiter_file_range(data_file, 0, 10, -1):
                pass


class TestMime:
    def test_known_types(self) -> None:
        assert content_type_for(Path("a.MP4")) == "video/mp4"
        assert content_type_for(Path("a.mkv")) == "video/x-matroska"

    def test_unknown_type(self) -> None:
        assert content_type_for(Path("notes.txt")) == "application/octet-stream"
