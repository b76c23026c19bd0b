import struct

import pytest

from gbsplay.plugout import Endian, PluginError
from gbsplay.util import pack
from gbsplay.wav import WavPlugin


@pytest.fixture
def plugin(tmp_path):
    return WavPlugin(lambda s: tmp_path / f"song{s}.wav")


def test_open_forces_little_endian(plugin):
    assert plugin.open(Endian.BIG, 44100, 4096) == (Endian.LITTLE, 4096)


def test_header_and_data(plugin, tmp_path):
    plugin.open(Endian.AUTOSELECT, 44100, 4096)
    plugin.skip(0)
    assert plugin.write(b"\x01\x02\x03\x04") == 4
    plugin.close()
    data = (tmp_path / "song0.wav").read_bytes()
    assert len(data) == 48
    assert data[0:4] == b"RIFF"
    assert struct.unpack_from("<I", data, 4)[0] == len(data) - 8
    assert data[8:16] == b"WAVEfmt "
    fields = struct.unpack_from("<IHHIIHH", data, 16)
    assert fields == (16, 1, 2, 44100, 176400, 4, 16)
    assert data[36:40] == b"data"
    assert struct.unpack_from("<I", data, 40)[0] == 4
    assert data[44:] == b"\x01\x02\x03\x04"


def test_empty_file_is_header_only(plugin, tmp_path):
    assert plugin.open(Endian.LITTLE, 22050, 4096) == (Endian.LITTLE, 4096)
    plugin.skip(2)
    plugin.close()
    data = (tmp_path / "song2.wav").read_bytes()
    assert len(data) == 44
    assert data[40:44] == pack("<d", 0)
    assert data[24:28] == pack("<d", 22050)


def test_skip_closes_previous(plugin, tmp_path):
    plugin.open(Endian.LITTLE, 44100, 4096)
    plugin.skip(0)
    assert plugin.write(b"ab") == 2
    plugin.skip(1)
    assert plugin.write(b"cdef") == 4
    plugin.close()
    first = (tmp_path / "song0.wav").read_bytes()
    second = (tmp_path / "song1.wav").read_bytes()
    assert first[44:] == b"ab"
    assert second[44:] == b"cdef"
    assert first[40:44] == pack("<d", 2)
    assert second[40:44] == pack("<d", 4)


def test_write_without_file_raises(plugin):
    with pytest.raises(PluginError):
        plugin.write(b"\x00\x00")