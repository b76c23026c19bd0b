"""Output plugin that dumps IO register writes as text."""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from .plugout import Endian, OutputPlugin

__all__ = ["IoDumperPlugin"]

_CYCLE_MASK = (1 << 64) - 1


class IoDumperPlugin(OutputPlugin):
    """Writes one line per IO write: cycle delta, address and value in hex."""

    name = "iodumper"
    description = "STDOUT io dumper"
    uses_stdout = True

    def __init__(self, stream: Optional[TextIO] = None, log: Optional[TextIO] = None) -> None:
        self._stream = stream
        self._log = log
        self._cycles_prev = 0

    @property
    def _out(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    @property
    def _err(self) -> TextIO:
        return self._log if self._log is not None else sys.stderr

    def open(self, endian: Endian, rate: int, buffer_bytes: int) -> tuple[Endian, int]:
        return endian, buffer_bytes

    def skip(self, subsong: int) -> None:
        self._cycles_prev = 0
        self._out.write(f"\nsubsong {subsong}\n")
        self._err.write(f"dumping subsong {subsong}\n")

    def io(self, cycles: int, addr: int, value: int) -> None:
        diff = (cycles - self._cycles_prev) & _CYCLE_MASK
        self._out.write(f"{diff:08x} {addr:04x}={value:02x}\n")
        self._cycles_prev = cycles

    def close(self) -> None:
        self._out.flush()