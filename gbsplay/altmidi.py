"""Alternative MIDI output plugin driven by the inferred channel status."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Sequence

from .midifile import MidiTrackWriter
from .plugout import ChannelStatus, Endian, OutputPlugin, PluginError
from .util import note_from_divider

__all__ = ["AltMidiPlugin"]


def _note_for(div: int) -> Optional[int]:
    try:
        note = note_from_divider(div) + 21
    except ValueError:
        return None
    return note if 0 <= note < 0x80 else None


def _pan_for(bits: int) -> int:
    if bits == 0x10:
        return 0
    if bits == 0x01:
        return 127
    return 64


class AltMidiPlugin(OutputPlugin):
    """Writes each subsong as a MIDI file from the per-step channel status."""

    name = "altmidi"
    description = "alternative MIDI file writer"

    def __init__(self, path_for: Callable[[int], "str | Path"]) -> None:
        self.writer = MidiTrackWriter(path_for)
        self._volume = [0] * 4
        self._playing = [False] * 4

    def open(self, endian: Endian, rate: int, buffer_bytes: int) -> tuple[Endian, int]:
        return endian, buffer_bytes

    def skip(self, subsong: int) -> None:
        self.writer.skip(subsong)

    def step(self, cycles: int, channels: Sequence[ChannelStatus]) -> None:
        w = self.writer
        w.update_mute(channels)
        for c, ch in enumerate(channels[:3]):
            if self._playing[c]:
                if ch.playing:
                    div_note = _note_for(ch.div_tc)
                    raw = div_note if div_note is not None else -1
                    if raw != w.notes[c]:
                        w.note_off(cycles, c)
                        if div_note is not None:
                            w.note_on(cycles, c, div_note, self._volume[c])
                else:
                    w.note_off(cycles, c)
                    self._playing[c] = False
            elif ch.playing:
                new_note = _note_for(ch.div_tc)
                if new_note is None:
                    continue
                w.note_on(cycles, c, new_note, self._volume[c])
                self._playing[c] = True

    def io(self, cycles: int, addr: int, value: int) -> None:
        w = self.writer
        if w.closed:
            raise PluginError("no MIDI file is open")

        if addr in (0xFF12, 0xFF17):
            self._volume[(addr - 0xFF10) // 5] = 8 * (value >> 4)
        elif addr in (0xFF14, 0xFF19, 0xFF1E):
            if value & 0x80:
                chan = (addr - 0xFF10) // 5
                w.note_off(cycles, chan)
                self._playing[chan] = False
        elif addr == 0xFF1C:
            self._volume[2] = 32 * ((4 - (value >> 5)) & 3)
        elif addr == 0xFF25:
            for chan in range(4):
                w.pan(cycles, chan, _pan_for((value >> chan) & 0x11))

    def close(self) -> None:
        self.writer.close()