"""MIDI output plugin that follows the sound register writes."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

from .midifile import MidiTrackWriter
from .plugout import ChannelStatus, Endian, OutputPlugin, PluginError
from .util import note_from_divider

__all__ = ["MidiPlugin"]

_VOLUME_REGS = (0xFF12, 0xFF17)
_FREQ_LOW_REGS = (0xFF13, 0xFF18, 0xFF1D)
_FREQ_HIGH_REGS = (0xFF14, 0xFF19, 0xFF1E)


def _channel(addr: int) -> int:
    return (addr - 0xFF10) // 5


def _in_range(note: int) -> bool:
    return 0 <= note < 0x80


def _pan_for(bits: int) -> int:
    if bits == 0x10:
        return 0
    if bits == 0x01:
        return 127
    return 64


class MidiPlugin(OutputPlugin):
    """Writes each subsong as a MIDI file derived from IO register writes."""

    name = "midi"
    description = "MIDI file writer"

    def __init__(self, path_for: Callable[[int], "str | Path"]) -> None:
        self.writer = MidiTrackWriter(path_for)
        self._div = [0] * 4
        self._volume = [0] * 4
        self._running = [False] * 4
        self._master = [False] * 4

    def _note(self, chan: int) -> int:
        return note_from_divider(2048 - self._div[chan]) + 21

    def open(self, endian: Endian, rate: int, buffer_bytes: int) -> tuple[Endian, int]:
        return endian, buffer_bytes

    def skip(self, subsong: int) -> None:
        self.writer.skip(subsong)

    def _retrigger(self, cycles: int, chan: int, new_note: int) -> None:
        self.writer.note_off(cycles, chan)
        if _in_range(new_note):
            self.writer.note_on(cycles, chan, new_note, self._volume[chan])

    def io(self, cycles: int, addr: int, value: int) -> None:
        w = self.writer
        if w.closed:
            raise PluginError("no MIDI file is open")

        if addr in _VOLUME_REGS:
            chan = _channel(addr)
            self._volume[chan] = 8 * (value >> 4)
            self._master[chan] = (value & 0xF8) != 0
            if not self._master[chan] and self._running[chan]:
                # DAC turned off, disable channel
                w.note_off(cycles, chan)
                self._running[chan] = False
            if self._volume[chan]:
                if self._running[chan] and not w.notes[chan]:
                    new_note = self._note(chan)
                    if _in_range(new_note):
                        w.note_on(cycles, chan, new_note, self._volume[chan])
            else:
                w.note_off(cycles, chan)

        elif addr in _FREQ_LOW_REGS:
            chan = _channel(addr)
            self._div[chan] = (self._div[chan] & 0xFF00) | value
            if self._running[chan]:
                new_note = self._note(chan)
                if new_note != w.notes[chan]:
                    self._retrigger(cycles, chan, new_note)

        elif addr in _FREQ_HIGH_REGS:
            chan = _channel(addr)
            self._div[chan] = (self._div[chan] & 0x00FF) | ((value & 7) << 8)
            new_note = self._note(chan)
            if value & 0x80:
                w.note_off(cycles, chan)
                if _in_range(new_note) and self._master[chan]:
                    w.note_on(cycles, chan, new_note, self._volume[chan])
                    self._running[chan] = True
            elif self._running[chan] and new_note != w.notes[chan]:
                self._retrigger(cycles, chan, new_note)

        elif addr == 0xFF1A:
            self._master[2] = (value & 0x80) == 0x80
            if not self._master[2] and self._running[2]:
                w.note_off(cycles, 2)
                self._running[2] = False

        elif addr == 0xFF1C:
            self._volume[2] = 32 * ((4 - (value >> 5)) & 3)
            if self._volume[2]:
                if self._running[2] and not w.notes[2]:
                    new_note = self._note(2)
                    if _in_range(new_note):
                        w.note_on(cycles, 2, new_note, self._volume[2])
            else:
                w.note_off(cycles, 2)

        elif addr == 0xFF25:
            for chan in range(4):
                w.pan(cycles, chan, _pan_for((value >> chan) & 0x11))

        elif addr == 0xFF26:
            if not value & 0x80:
                for chan in range(4):
                    self._div[chan] = 0
                    self._volume[chan] = 0
                    self._running[chan] = False
                    self._master[chan] = True
                    w.note_off(cycles, chan)

    def step(self, cycles: int, channels: Sequence[ChannelStatus]) -> None:
        self.writer.update_mute(channels)

    def close(self) -> None:
        self.writer.close()