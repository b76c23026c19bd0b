import pytest

from gbsplay.display import (
    MAXOCTAVE,
    format_registers,
    get_note,
    loop_mode_string,
    note_string,
    note_table,
    reverse_volume,
    volume_string,
)
from gbsplay.plugout import ChannelStatus, LoopMode

_WEIGHTS = {" ": 0, "-": 1, "=": 2, "#": 3, "%": 4}


def test_note_table_shape():
    table = note_table()
    assert len(table) == MAXOCTAVE * 12
    for i, name in enumerate(table):
        assert len(name) == 3
        assert name[0] in "ABCDEFG"
        assert name[1] in "-#"
        assert name[2] == str(i // 12)


def test_note_table_octaves_have_distinct_names():
    table = note_table()
    for octave in range(MAXOCTAVE):
        names = {n[:2] for n in table[octave * 12:(octave + 1) * 12]}
        assert len(names) == 12


def test_note_table_first_entries():
    table = note_table()
    assert table[0] == "A-0"
    assert table[3] == "C-0"


def test_get_note_non_positive_divider():
    assert get_note(0) == 0
    assert get_note(-7) == 0


def test_get_note_too_large_divider_gives_zero():
    assert get_note(1 << 20) == 0


def test_get_note_clamps_high_notes():
    assert get_note(1) == MAXOCTAVE - 1


@pytest.mark.parametrize("div", [2, 16, 100, 512, 1024, 2048, 5000])
def test_get_note_in_table_range(div):
    assert 0 <= get_note(div) < MAXOCTAVE * 12


def test_note_string_cases():
    assert note_string(ChannelStatus(mute=True, vol=5, div_tc=100), 0) == "-M-"
    assert note_string(ChannelStatus(vol=0, div_tc=100), 1) == "---"
    assert note_string(ChannelStatus(vol=5, div_tc=100), 3) == "nse"
    assert note_string(ChannelStatus(vol=5, div_tc=100), 2) == note_table()[get_note(100)]


@pytest.mark.parametrize("level", range(16))
def test_volume_string_weights(level):
    bar = volume_string(level)
    assert len(bar) == 4
    assert sum(_WEIGHTS[c] for c in bar) == level


def test_volume_string_clamps():
    assert volume_string(-3) == volume_string(0)
    assert volume_string(99) == volume_string(15)


def test_reverse_volume():
    assert reverse_volume("%-  ") == "  -%"
    assert reverse_volume(reverse_volume(volume_string(9))) == volume_string(9)


def test_loop_mode_string():
    assert loop_mode_string(LoopMode.OFF) == ""
    assert loop_mode_string(LoopMode.RANGE) == " [loop range]"
    assert loop_mode_string(LoopMode.SINGLE) == " [loop single]"
    assert loop_mode_string(42) == ""


def test_format_registers():
    seen = []

    def peek(addr):
        seen.append(addr)
        return addr & 0xFF

    text = format_registers(peek)
    assert text.startswith("CH1: 10 11 12 13 14\nCH2: 15 16 17 18 19\n")
    assert "CH4: 1f 20 21 22 23\n" in text
    assert "MISC: 24 25 26\n" in text
    assert "WAVE: 303132333435363738393a3b3c3d3e3f\n" in text
    assert text.endswith("\033[A" * 6)
    assert len(seen) == 20 + 3 + 16