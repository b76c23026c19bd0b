"""VGM output plugin recording sound register writes."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Callable, Optional

from .plugout import Endian, OutputPlugin, PluginError
from .util import write_packed, write_packed_at

__all__ = ["VgmPlugin"]

VGM_FILE_VERSION = 0x161
VGM_DMG_CLOCK = 0x400000
VGM_WAITSAMPLES_MAX = 0xFFFF
VGM_TICKS_PER_SECOND = 44100

VGM_OFS_NUMSAMPLES = 0x18
VGM_OFS_DATA_START = 0x34
VGM_OFS_DMG_CLOCK = 0x80
VGM_HDR_LEN = 0x84

VGM_CMD_WAITSAMPLES = 0x61
VGM_CMD_WAITSAMPLES_SHORT = 0x70
VGM_CMD_END = 0x66
VGM_CMD_DMGWRITE = 0xB3

VGM_DATA_START_REL = VGM_HDR_LEN - VGM_OFS_DATA_START


class VgmPlugin(OutputPlugin):
    """Writes one VGM file per subsong from the IO register writes."""

    name = "vgm"
    description = "VGM file writer"

    def __init__(self, path_for: Callable[[int], "str | Path"]) -> None:
        self._path_for = path_for
        self._file: Optional[BinaryIO] = None
        self._samples_total = 0.0
        self._samples_prev = 0.0
        self._sample_diff_acc = 0.0

    def open(self, endian: Endian, rate: int, buffer_bytes: int) -> tuple[Endian, int]:
        return endian, buffer_bytes

    def _finalize(self, stream: BinaryIO) -> None:
        # A second of delay at the end lets sounds finish, then the end marker.
        write_packed(stream, "<bwb", VGM_CMD_WAITSAMPLES, VGM_TICKS_PER_SECOND, VGM_CMD_END)
        eof_offset = stream.tell() - 4
        write_packed_at(stream, 0, "<{Vgm }dd", eof_offset, VGM_FILE_VERSION)
        write_packed_at(stream, VGM_OFS_DMG_CLOCK, "<d", VGM_DMG_CLOCK)
        write_packed_at(stream, VGM_OFS_DATA_START, "<d", VGM_DATA_START_REL)
        write_packed_at(stream, VGM_OFS_NUMSAMPLES, "<d", int(self._samples_total))

    def _open_file(self, subsong: int) -> None:
        try:
            stream = open(self._path_for(subsong), "wb")
        except OSError as exc:
            raise PluginError(f"Can't open output file: {exc}") from exc
        stream.write(bytes(VGM_HDR_LEN))
        self._file = stream
        self._sample_diff_acc = 0.0
        self._samples_prev = 0.0

    def _close_file(self) -> None:
        stream = self._file
        assert stream is not None
        try:
            self._finalize(stream)
        finally:
            self._file = None
            stream.close()

    def skip(self, subsong: int) -> None:
        if self._file is not None:
            self._close_file()
        self._open_file(subsong)

    def io(self, cycles: int, addr: int, value: int) -> None:
        stream = self._file
        if stream is None:
            raise PluginError("no VGM file is open")

        # VGM counts time in 44100 Hz samples; keep the fractional part.
        self._samples_total = cycles * VGM_TICKS_PER_SECOND / VGM_DMG_CLOCK
        self._sample_diff_acc += self._samples_total - self._samples_prev
        wait = int(self._sample_diff_acc)
        self._sample_diff_acc -= wait

        while wait > 0:
            if wait < 17:
                stream.write(bytes((VGM_CMD_WAITSAMPLES_SHORT | (wait - 1),)))
            else:
                write_packed(stream, "<bw", VGM_CMD_WAITSAMPLES, min(wait, VGM_WAITSAMPLES_MAX))
            wait -= VGM_WAITSAMPLES_MAX

        if addr >= 0xFF10:
            write_packed(stream, "<bbb", VGM_CMD_DMGWRITE, (addr - 0xFF10) & 0xFF, value)

        self._samples_prev = self._samples_total

    def close(self) -> None:
        if self._file is not None:
            self._close_file()