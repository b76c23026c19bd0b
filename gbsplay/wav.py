"""WAV file output plugin."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Callable, Optional

from .plugout import Endian, OutputPlugin, PluginError
from .util import write_packed_at

__all__ = ["WavPlugin"]

_HEADER_LEN = 44
_FMT_SUBCHUNK_LENGTH = 16
_PCM = 1
_CHANNELS = 2
_BITS_PER_SAMPLE = 16


class WavPlugin(OutputPlugin):
    """Writes one 16 bit stereo little endian WAV file per subsong."""

    name = "wav"
    description = "WAV file writer"

    def __init__(self, path_for: Callable[[int], "str | Path"]) -> None:
        self._path_for = path_for
        self._file: Optional[BinaryIO] = None
        self._sample_rate = 0

    def open(self, endian: Endian, rate: int, buffer_bytes: int) -> tuple[Endian, int]:
        self._sample_rate = rate
        return Endian.LITTLE, buffer_bytes

    def _write_header(self, stream: BinaryIO) -> None:
        filesize = stream.tell()
        if filesize < 0 or filesize > 0xFFFFFFFF:
            raise PluginError(f"WAV file size {filesize} out of range")
        byte_rate = self._sample_rate * _CHANNELS * _BITS_PER_SAMPLE // 8
        block_align = _CHANNELS * _BITS_PER_SAMPLE // 8
        write_packed_at(
            stream,
            0,
            "<{RIFF}d{WAVE}<{fmt }dwwddww{data}d",
            filesize - 8,
            _FMT_SUBCHUNK_LENGTH,
            _PCM,
            _CHANNELS,
            self._sample_rate,
            byte_rate,
            block_align,
            _BITS_PER_SAMPLE,
            filesize - _HEADER_LEN,
        )

    def _close_file(self) -> None:
        stream = self._file
        assert stream is not None
        try:
            self._write_header(stream)
        finally:
            self._file = None
            stream.close()

    def skip(self, subsong: int) -> None:
        if self._file is not None:
            self._close_file()
        try:
            stream = open(self._path_for(subsong), "wb")
        except OSError as exc:
            raise PluginError(f"Can't open output file: {exc}") from exc
        stream.write(bytes(_HEADER_LEN))
        self._file = stream

    def write(self, data: bytes) -> int:
        if self._file is None:
            raise PluginError("no WAV file is open")
        self._file.write(data)
        return len(data)

    def close(self) -> None:
        if self._file is not None:
            self._close_file()