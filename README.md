# gbsplay

Building blocks for Game Boy sound (GBS) music tools: output plugins that turn
sound-register writes, channel status and rendered samples into MIDI, VGM, WAV
or raw streams; memory bank mappers for GBS, GBR and GB images; and the player
logic that parses options and decides which subsong plays next.

The package has no dependencies beyond the standard library.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Modules

- `gbsplay.util` – `pack(fmt, *args)`, `write_packed(stream, fmt, *args)` and
  `write_packed_at(stream, offset, fmt, *args)` encode integers with a small
  format language: `<` little endian, `>` big endian, `=` native, `{...}`
  verbatim text, `b`/`w`/`d`/`q` for 8/16/32/64-bit fields (values are
  truncated to the field width). A `ValueError` is raised when the number of
  values does not match the format. `rand_below(limit, rng)` and
  `shuffle(items, rng)` draw from a `random.Random` you supply; `shuffle`
  always swaps each position with a strictly earlier one.
  `note_from_divider(div)` turns a channel frequency divider into a semitone
  number and raises `ValueError` for dividers that give no frequency.
- `gbsplay.plugout` – the `OutputPlugin` base class with the hooks `open`,
  `skip`, `pause`, `io`, `step`, `write` and `close` (all no-ops by default;
  `provides(hook)` says which ones a plugin overrides), `PluginError`, the
  enumerations `Endian`, `LoopMode` and `FilterType`, the `ChannelStatus`
  dataclass and `native_endian()`.
- `gbsplay.midifile` – `encode_varlen(value)` and `MidiTrackWriter`, which
  writes one single-track MIDI file per subsong (`skip`, `note_on`,
  `note_off`, `pan`, `update_mute`, `close`).
- Output plugins, each an `OutputPlugin`:
  - `gbsplay.midi.MidiPlugin` (`"midi"`) – MIDI notes derived from sound
    register writes.
  - `gbsplay.altmidi.AltMidiPlugin` (`"altmidi"`) – MIDI notes derived from
    the per-step channel status.
  - `gbsplay.vgm.VgmPlugin` (`"vgm"`) – a VGM register log per subsong.
  - `gbsplay.wav.WavPlugin` (`"wav"`) – 16-bit stereo little-endian WAV files.
  - `gbsplay.iodumper.IoDumperPlugin` (`"iodumper"`) – one text line per IO
    write: cycle delta, address and value in hex.
  - `gbsplay.rawout.StdoutPlugin` (`"stdout"`) – raw sample data written to a
    binary stream (standard output by default).

  The file writers take a `path_for(subsong)` callable giving the output path
  for each subsong; a new file is started on every `skip`.
- `gbsplay.registry` – `PluginRegistry` (`select(name)`, `listing()`, `names`,
  iteration) and `default_registry(path_template)`, which holds all built-in
  plugins. An unknown name raises `UnknownPluginError`.
- `gbsplay.mapper` – `MemoryMap` (a 64 KiB space of 256-byte pages; unmapped
  reads give 0xff), `Bank`, `Mapper` and the factories `gbs_mapper`,
  `gbr_mapper` and `gb_mapper`. `gb_mapper` handles ROM-only, MBC1 and MBC3
  cartridges and raises `UnsupportedCartridgeError` for other types.
- `gbsplay.display` – status line helpers: `note_table()`, `get_note(div)`,
  `note_string(channel, index)`, `volume_string(volume)`,
  `reverse_volume(text)`, `loop_mode_string(mode)` and
  `format_registers(peek)`.
- `gbsplay.impulsegen` – `gen_impulsetab(w_shift, n_shift, cutoff)` computes
  the band-limited impulse table used for sound synthesis,
  `format_impulse_header(table, w_shift, n_shift)` renders it as a C header,
  and `main()` prints the default table.
- `gbsplay.player` – `parse_args(argv)` returns a `PlayerOptions` (raising
  `UsageError` on bad arguments), `usage_text`, `SubsongNavigator` for linear,
  shuffle and random play orders (shuffled playlists are reproducible from the
  seed), and helpers `update_displaytime`, `filename_only`, `endian_str`,
  `parse_filter`, `swap_endian` and `sanitize_range`.

## Examples

Packing a header field:

```python
from gbsplay.util import pack

pack("<{RIFF}d", 36)   # b"RIFF$\x00\x00\x00"
```

Selecting a plugin and writing a WAV file:

```python
from gbsplay.plugout import Endian
from gbsplay.registry import default_registry

registry = default_registry("gbsplay-{subsong}.{ext}")
print(registry.listing())

wav = registry.select("wav")
endian, buffer_bytes = wav.open(Endian.AUTOSELECT, 44100, 8192)  # Endian.LITTLE
wav.skip(0)                    # starts gbsplay-1.wav
wav.write(bytes(4 * 44100))    # one second of silence
wav.close()                    # fills in the header
```

Parsing a command line:

```python
from gbsplay.player import parse_args

options = parse_args(["-o", "vgm", "-z", "song.gbs", "2"])
options.output_plugin   # "vgm"
options.subsong_start   # 1 (0-based)
```

## Command

Generate the impulse table as a C header:

```
gbsplay-gen-impulse > impulse.h
```

## What this package does not do

- It does not read GBS files and does not emulate the Game Boy CPU or sound
  hardware, so it cannot render music by itself. The plugins expect a caller
  to feed them register writes, channel status and sample data.
- It has no output to a sound device; audio goes only to files or a byte
  stream.
- It has no interactive player command. `parse_args` and `SubsongNavigator`
  provide the option handling and subsong order, but nothing drives playback,
  reads keyboard input or reads the configuration files listed with `-c`.