"""Byte packing, random helpers and note arithmetic shared across the player."""

from __future__ import annotations

import math
import random
import sys
from typing import BinaryIO, Iterable

__all__ = [
    "pack",
    "write_packed",
    "write_packed_at",
    "rand_below",
    "shuffle",
    "note_from_divider",
]

_FIELD_SIZES = {"b": 1, "w": 2, "d": 4, "q": 8}

_LN2 = 0.69314718055994530941
_MAGIC = 5.78135971352465960412
_FREQ_BASE = 262144


def _pack_fields(fmt: str, args: Iterable[int]) -> bytes:
    little_endian = sys.byteorder == "little"
    verbatim = False
    values = iter(args)
    out = bytearray()

    for char in fmt:
        if verbatim and char != "}":
            out += char.encode("latin-1")
            continue
        if char == "{":
            verbatim = True
        elif char == "}":
            verbatim = False
        elif char == "=":
            little_endian = sys.byteorder == "little"
        elif char == "<":
            little_endian = True
        elif char == ">":
            little_endian = False
        elif char in _FIELD_SIZES:
            size = _FIELD_SIZES[char]
            try:
                value = next(values)
            except StopIteration:
                raise ValueError(
                    f"not enough values for format {fmt!r}"
                ) from None
            masked = int(value) & ((1 << (8 * size)) - 1)
            out += masked.to_bytes(size, "little" if little_endian else "big")

    leftover = sum(1 for _ in values)
    if leftover:
        raise ValueError(f"{leftover} unused value(s) for format {fmt!r}")
    return bytes(out)


def pack(fmt: str, *args: int) -> bytes:
    """Pack integers into bytes according to ``fmt``.

    Format characters: ``<`` little endian, ``>`` big endian, ``=`` native
    endian, ``{``/``}`` enclose verbatim text, ``b``/``w``/``d``/``q`` are
    8/16/32/64 bit fields.  Values are truncated to the field width and any
    other character is ignored.
    """
    return _pack_fields(fmt, args)


def write_packed(stream: BinaryIO, fmt: str, *args: int) -> int:
    """Pack ``args`` and write them to ``stream``; return the byte count written."""
    data = pack(fmt, *args)
    written = stream.write(data)
    return len(data) if written is None else written


def write_packed_at(stream: BinaryIO, offset: int, fmt: str, *args: int) -> int:
    """Seek ``stream`` to ``offset`` and write packed data there."""
    data = pack(fmt, *args)
    stream.seek(offset)
    written = stream.write(data)
    return len(data) if written is None else written


def rand_below(limit: int, rng: random.Random) -> int:
    """Return a random integer from ``[0, limit)`` drawn from ``rng``."""
    return int(limit * rng.random())


def shuffle(items: list, rng: random.Random) -> None:
    """Shuffle ``items`` in place.

    Each position swaps with a strictly earlier one, so every element ends
    up away from where it started.
    """
    for i in range(len(items) - 1, 0, -1):
        j = rand_below(i, rng)
        items[i], items[j] = items[j], items[i]


def note_from_divider(div: int) -> int:
    """Return the semitone number for a sound channel frequency divider."""
    if div <= 0:
        raise ValueError(f"divider must be positive, got {div}")
    freq = _FREQ_BASE // div
    if freq <= 0:
        raise ValueError(f"divider {div} is too large to give a frequency")
    return int((math.log(freq) / _LN2 - _MAGIC) * 12 + 0.2)