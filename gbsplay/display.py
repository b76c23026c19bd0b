"""Text helpers for the terminal status display."""

from __future__ import annotations

from typing import Callable

from .plugout import ChannelStatus, LoopMode
from .util import note_from_divider

__all__ = [
    "MAXOCTAVE",
    "note_table",
    "get_note",
    "note_string",
    "volume_string",
    "reverse_volume",
    "loop_mode_string",
    "format_registers",
]

MAXOCTAVE = 9

_VOLS = " -=#%"


def _note_name(index: int) -> str:
    n = index % 12
    n += (n > 2) + (n > 7)
    letter = chr(ord("A") + (n >> 1))
    sharp = "#" if n & 1 else "-"
    return f"{letter}{sharp}{index // 12}"


_NOTES = tuple(_note_name(i) for i in range(MAXOCTAVE * 12))


def _volume_bar(level: int) -> str:
    chars = []
    remaining = level
    for _ in range(4):
        if remaining >= 4:
            chars.append(_VOLS[4])
            remaining -= 4
        else:
            chars.append(_VOLS[remaining])
            remaining = 0
    return "".join(chars)


_VOLUMES = tuple(_volume_bar(k) for k in range(16))


def note_table() -> list[str]:
    """Return the three-character names of all displayable notes."""
    return list(_NOTES)


def get_note(div: int) -> int:
    """Return the note table index for a channel frequency divider."""
    n = 0
    if div > 0:
        try:
            n = note_from_divider(div)
        except ValueError:
            n = 0
    if n < 0:
        n = 0
    elif n >= MAXOCTAVE * 12:
        n = MAXOCTAVE - 1
    return n


def note_string(channel: ChannelStatus, index: int) -> str:
    """Return the note display for channel number ``index``."""
    if channel.mute:
        return "-M-"
    if channel.vol == 0:
        return "---"
    if index == 3:
        return "nse"
    return _NOTES[get_note(channel.div_tc)]


def volume_string(volume: int) -> str:
    """Return a four-character bar for a volume, clamped to 0..15."""
    return _VOLUMES[max(0, min(15, volume))]


def reverse_volume(text: str) -> str:
    """Return the first four characters of ``text`` in reverse order."""
    return text[:4][::-1]


def loop_mode_string(mode: int) -> str:
    """Return the status suffix describing the loop mode."""
    try:
        mode = LoopMode(mode)
    except ValueError:
        return ""
    if mode is LoopMode.RANGE:
        return " [loop range]"
    if mode is LoopMode.SINGLE:
        return " [loop single]"
    return ""


def format_registers(peek: Callable[[int], int]) -> str:
    """Return the sound register dump, reading registers through ``peek``."""
    parts = []
    for i in range(5 * 4):
        if i % 5 == 0:
            parts.append(f"CH{i // 5 + 1}:")
        parts.append(f" {peek(0xFF10 + i):02x}")
        if i % 5 == 4:
            parts.append("\n")
    parts.append("MISC:")
    for reg in range(0x24, 0x27):
        parts.append(f" {peek(0xFF00 + reg):02x}")
    parts.append("\nWAVE: ")
    for i in range(16):
        parts.append(f"{peek(0xFF30 + i):02x}")
    parts.append("\n" + "\033[A" * 6)
    return "".join(parts)