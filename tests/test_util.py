import io
import random
import sys

import pytest

from gbsplay.util import (
    note_from_divider,
    pack,
    rand_below,
    shuffle,
    write_packed,
    write_packed_at,
)


def test_pack_source_case():
    want = bytes([0x20, 1, 2, 0, 3, 0, 0, 0, 4, 0, 0, 0, 0, 0, 0, 0,
                  0x31, 1, 0, 2, 0, 0, 0, 3, 0, 0, 0, 0, 0, 0, 0, 4])
    got = pack("{ }<bwdq{1}>bwdq", 1, 2, 3, 4, 1, 2, 3, 4)
    assert got == want
    assert len(got) == len(want)


def test_pack_little_and_big_endian_dword():
    assert pack("<d", 0x01020304) == b"\x04\x03\x02\x01"
    assert pack(">d", 0x01020304) == b"\x01\x02\x03\x04"


def test_pack_native_endian():
    assert pack("=w", 1) == (1).to_bytes(2, sys.byteorder)


def test_pack_truncates_values():
    assert pack("<b", 0x1FF) == b"\xff"
    assert pack("<w", -1) == b"\xff\xff"


def test_pack_ignores_unknown_characters():
    assert pack("<xbz", 7) == b"\x07"


def test_pack_verbatim_keeps_control_characters():
    assert pack("{<>bw}") == b"<>bw"


def test_pack_missing_value_raises():
    with pytest.raises(ValueError):
        pack("bw", 1)


def test_pack_extra_value_raises():
    with pytest.raises(ValueError):
        pack("b", 1, 2)


def test_write_packed_returns_count_and_writes():
    stream = io.BytesIO()
    count = write_packed(stream, ">{MThd}d", 6)
    assert count == 8
    assert stream.getvalue() == b"MThd\x00\x00\x00\x06"


def test_write_packed_at_overwrites_in_place():
    stream = io.BytesIO(bytes(8))
    stream.seek(0, io.SEEK_END)
    count = write_packed_at(stream, 2, ">w", 0x1234)
    assert count == 2
    assert stream.getvalue() == b"\x00\x00\x12\x34\x00\x00\x00\x00"


def test_rand_below_stays_in_range():
    rng = random.Random(42)
    draws = [rand_below(9, rng) for _ in range(1000)]
    assert min(draws) >= 0
    assert max(draws) < 9


def test_rand_below_zero_limit():
    assert rand_below(0, random.Random(1)) == 0


def test_shuffle_is_permutation_without_fixed_points():
    items = list(range(1, 10))
    shuffle(items, random.Random(0))
    assert sorted(items) == list(range(1, 10))
    assert all(value != position + 1 for position, value in enumerate(items))


def test_shuffle_is_reproducible_with_same_seed():
    first = list(range(20))
    second = list(range(20))
    shuffle(first, random.Random(7))
    shuffle(second, random.Random(7))
    assert first == second


def test_shuffle_short_lists_unchanged():
    empty: list = []
    single = [5]
    shuffle(empty, random.Random(3))
    shuffle(single, random.Random(3))
    assert empty == []
    assert single == [5]


def test_note_drops_an_octave_when_divider_doubles():
    assert note_from_divider(64) - note_from_divider(128) == 12


def test_note_is_non_increasing_in_divider():
    notes = [note_from_divider(div) for div in range(1, 2049)]
    assert all(a >= b for a, b in zip(notes, notes[1:]))


@pytest.mark.parametrize("div", [0, -5, 262145])
def test_note_rejects_invalid_dividers(div):
    with pytest.raises(ValueError):
        note_from_divider(div)