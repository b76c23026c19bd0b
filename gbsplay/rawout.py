"""Output plugin writing raw sample data to standard output."""

from __future__ import annotations

import sys
from typing import BinaryIO, Optional

from .plugout import Endian, OutputPlugin

__all__ = ["StdoutPlugin"]


class StdoutPlugin(OutputPlugin):
    """Writes rendered samples unchanged to a binary stream."""

    name = "stdout"
    description = "STDOUT file writer"
    uses_stdout = True

    def __init__(self, stream: Optional[BinaryIO] = None) -> None:
        self._stream = stream

    @property
    def _out(self) -> BinaryIO:
        return self._stream if self._stream is not None else sys.stdout.buffer

    def open(self, endian: Endian, rate: int, buffer_bytes: int) -> tuple[Endian, int]:
        return endian, buffer_bytes

    def write(self, data: bytes) -> int:
        written = self._out.write(data)
        return len(data) if written is None else written

    def close(self) -> None:
        self._out.flush()