"""Standard MIDI file writer shared by the MIDI output plugins."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Callable, Optional, Sequence

from .plugout import ChannelStatus, PluginError
from .util import write_packed, write_packed_at

__all__ = ["encode_varlen", "MidiTrackWriter"]

_TRACK_LENGTH_OFFSET = 18
_TRACK_START_OFFSET = 22
_TIMESTAMP_SHIFT = 14
_END_OF_TRACK = bytes((0xFF, 0x2F, 0x00))
_CHANNELS = 4


def encode_varlen(value: int) -> bytes:
    """Encode a delta time as a MIDI variable-length quantity.

    Values are big endian seven-bit groups; the highest allowed value is
    0x0fffffff.  Zero-valued upper groups are left out.
    """
    if value < 0:
        raise ValueError(f"variable length value must not be negative, got {value}")
    out = bytearray()
    for shift in (21, 14, 7):
        group = (value >> shift) & 0x7F
        if group:
            out.append(group | 0x80)
    out.append(value & 0x7F)
    return bytes(out)


class MidiTrackWriter:
    """Writes one single-track MIDI file per subsong.

    ``path_for`` maps a subsong number to the path of its output file.
    ``notes`` holds the note currently sounding on each channel, 0 for none.
    """

    def __init__(self, path_for: Callable[[int], "str | Path"]) -> None:
        self._path_for = path_for
        self._file: Optional[BinaryIO] = None
        self._cycles_prev = 0
        self._mute = [False] * _CHANNELS
        self.notes = [0] * _CHANNELS

    @property
    def closed(self) -> bool:
        """Whether no track file is currently open."""
        return self._file is None

    def update_mute(self, channels: Sequence[ChannelStatus]) -> None:
        """Copy the mute flags of the four channels."""
        for chan in range(_CHANNELS):
            self._mute[chan] = bool(channels[chan].mute)

    def _write_event(self, cycles: int, data: bytes) -> None:
        if self._file is None:
            raise PluginError("no MIDI file is open")
        delta = (cycles - self._cycles_prev) >> _TIMESTAMP_SHIFT
        self._file.write(encode_varlen(delta))
        self._file.write(data)
        # Advance only by what the timestamp resolution covers so the
        # discarded low bits do not accumulate into drift.
        self._cycles_prev += delta << _TIMESTAMP_SHIFT

    def note_on(self, cycles: int, channel: int, note: int, velocity: int) -> None:
        """Start ``note`` on ``channel`` unless the channel is muted."""
        if self._mute[channel]:
            return
        event = bytes(((0x90 | channel) & 0xFF, note & 0xFF, velocity & 0xFF))
        self._write_event(cycles, event)
        self.notes[channel] = note

    def note_off(self, cycles: int, channel: int) -> None:
        """Stop the note sounding on ``channel``, if any."""
        current = self.notes[channel]
        if not current:
            return
        event = bytes(((0x80 | channel) & 0xFF, current & 0xFF, 0))
        self._write_event(cycles, event)
        self.notes[channel] = 0

    def pan(self, cycles: int, channel: int, pan: int) -> None:
        """Set the pan position of ``channel`` unless it is muted."""
        if self._mute[channel]:
            return
        event = bytes(((0xB0 | channel) & 0xFF, 0x0A, pan & 0xFF))
        self._write_event(cycles, event)

    def _open_track(self, subsong: int) -> None:
        stream = open(self._path_for(subsong), "wb")
        try:
            write_packed(stream, ">{MThd}dwww", 6, 0, 1, 124)
            write_packed(stream, ">{MTrk}d", 0)
        except BaseException:
            stream.close()
            raise
        self._file = stream

    def _close_track(self) -> None:
        stream = self._file
        assert stream is not None
        try:
            self._write_event(self._cycles_prev, _END_OF_TRACK)
            end = stream.tell()
            if end < 0 or end > 0xFFFFFFFF:
                raise PluginError(f"MIDI track end offset {end} out of range")
            write_packed_at(stream, _TRACK_LENGTH_OFFSET, ">d", end - _TRACK_START_OFFSET)
        finally:
            self._file = None
            stream.close()

    def skip(self, subsong: int) -> None:
        """Finish the current track, if any, and start a file for ``subsong``."""
        if not self.closed:
            self._close_track()
        self._cycles_prev = 0
        self.notes = [0] * _CHANNELS
        self._open_track(subsong)

    def close(self) -> None:
        """Stop all sounding notes and finish the open track."""
        if self.closed:
            return
        for chan in range(_CHANNELS):
            self.note_off(self._cycles_prev + 1, chan)
        self._close_track()