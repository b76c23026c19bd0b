import pytest

from gbsplay.altmidi import AltMidiPlugin
from gbsplay.plugout import ChannelStatus, PluginError
from gbsplay.util import note_from_divider, pack


@pytest.fixture
def plugin(tmp_path):
    p = AltMidiPlugin(lambda subsong: tmp_path / f"alt-{subsong}.mid")
    p.skip(0)
    return p


def _status(playing=False, div_tc=0, mute=False):
    return [ChannelStatus(mute=mute, playing=playing, div_tc=div_tc)] + [
        ChannelStatus() for _ in range(3)
    ]


def test_identity():
    p = AltMidiPlugin(lambda s: f"unused-{s}.mid")
    assert p.name == "altmidi"
    assert p.provides("step")
    assert not p.provides("write")


def test_playing_channel_starts_note(plugin, tmp_path):
    plugin.io(0, 0xFF12, 0xF0)
    plugin.step(0, _status(playing=True, div_tc=1024))
    expected = note_from_divider(1024) + 21
    assert plugin.writer.notes[0] == expected
    plugin.close()
    data = (tmp_path / "alt-0.mid").read_bytes()
    assert bytes((0x90, expected, 120)) in data


def test_stopping_channel_ends_note(plugin):
    plugin.step(0, _status(playing=True, div_tc=1024))
    plugin.step(0, _status(playing=False, div_tc=1024))
    assert plugin.writer.notes[0] == 0


def test_pitch_change_retriggers(plugin):
    plugin.step(0, _status(playing=True, div_tc=1024))
    plugin.step(0, _status(playing=True, div_tc=512))
    assert plugin.writer.notes[0] == note_from_divider(512) + 21


def test_out_of_range_note_skipped(plugin):
    plugin.step(0, _status(playing=True, div_tc=262144))
    assert plugin.writer.notes[0] == 0
    plugin.step(0, _status(playing=True, div_tc=0))
    assert plugin.writer.notes[0] == 0


def test_trigger_register_stops_note(plugin):
    plugin.step(0, _status(playing=True, div_tc=1024))
    plugin.io(0, 0xFF14, 0x80)
    assert plugin.writer.notes[0] == 0


def test_muted_channel_silent(plugin):
    plugin.step(0, _status(playing=True, div_tc=1024, mute=True))
    assert plugin.writer.notes[0] == 0


def test_pan_register(plugin, tmp_path):
    plugin.io(0, 0xFF25, 0x10)
    plugin.close()
    data = (tmp_path / "alt-0.mid").read_bytes()
    assert pack("bbb", 0xB0, 0x0A, 0x00) in data
    assert pack("bbb", 0xB3, 0x0A, 0x40) in data


def test_io_without_file_raises(tmp_path):
    p = AltMidiPlugin(lambda s: tmp_path / "x.mid")
    with pytest.raises(PluginError):
        p.io(0, 0xFF25, 0x00)