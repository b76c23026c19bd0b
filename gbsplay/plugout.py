"""Output plugin interface and the player's shared enumerations."""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass
from typing import Sequence

__all__ = [
    "GBS_LEN_SHIFT",
    "GBS_LEN_DIV",
    "Endian",
    "LoopMode",
    "FilterType",
    "ChannelStatus",
    "PluginError",
    "OutputPlugin",
    "native_endian",
]

GBS_LEN_SHIFT = 10
GBS_LEN_DIV = 1 << GBS_LEN_SHIFT


class Endian(enum.IntEnum):
    """Sample byte order requested from or chosen by a plugin."""

    BIG = 0
    LITTLE = 1
    AUTOSELECT = 2


class LoopMode(enum.IntEnum):
    """Loop mode when playing multiple subsongs."""

    OFF = 0
    RANGE = 1
    SINGLE = 2


class FilterType(enum.IntEnum):
    """High-pass filter emulating a hardware variant."""

    OFF = 0
    DMG = 1
    CGB = 2


@dataclass
class ChannelStatus:
    """Current state of one of the four sound channels."""

    mute: bool = False
    vol: int = 0
    div_tc: int = 0
    playing: bool = False


class PluginError(Exception):
    """Raised when an output plugin cannot open or write its output."""


def native_endian() -> Endian:
    """Return the byte order of the running machine."""
    return Endian.LITTLE if sys.byteorder == "little" else Endian.BIG


_HOOKS = ("open", "skip", "pause", "io", "step", "write", "close")


class OutputPlugin:
    """Base class for output plugins.

    Every hook does nothing by default; subclasses override the ones they
    need and :meth:`provides` reports which those are.
    """

    name: str = ""
    description: str = ""
    uses_stdout: bool = False

    def provides(self, hook: str) -> bool:
        """Return whether this plugin overrides the named hook."""
        if hook not in _HOOKS:
            raise ValueError(f"unknown plugin hook {hook!r}")
        return getattr(type(self), hook) is not getattr(OutputPlugin, hook)

    def open(self, endian: Endian, rate: int, buffer_bytes: int) -> tuple[Endian, int]:
        """Open the output; return the endian and buffer size actually used."""
        return endian, buffer_bytes

    def skip(self, subsong: int) -> None:
        """Prepare for the given subsong to start."""

    def pause(self, paused: bool) -> None:
        """Pause or resume output."""

    def io(self, cycles: int, addr: int, value: int) -> None:
        """Observe a write of ``value`` to IO address ``addr``."""

    def step(self, cycles: int, channels: Sequence[ChannelStatus]) -> None:
        """Observe the channel status after an emulation step."""

    def write(self, data: bytes) -> int:
        """Write rendered sample data; return the number of bytes accepted."""
        return 0

    def close(self) -> None:
        """Finish output on player exit."""