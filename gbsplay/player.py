"""Player logic shared by the front ends: options, playlists and time display."""

from __future__ import annotations

import enum
import getopt
import random
import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .plugout import Endian, FilterType, LoopMode, native_endian
from .util import rand_below, shuffle

__all__ = [
    "GBHW_CLOCK",
    "DEFAULT_REFRESH_DELAY",
    "DEFAULT_PLUGIN",
    "PlayMode",
    "DisplayTime",
    "PlayerOptions",
    "SubsongNavigator",
    "UsageError",
    "update_displaytime",
    "filename_only",
    "endian_str",
    "parse_filter",
    "swap_endian",
    "sanitize_range",
    "usage_text",
    "parse_args",
]

GBHW_CLOCK = 4194304
DEFAULT_REFRESH_DELAY = 33
DEFAULT_PLUGIN = "stdout"

_SHORTOPTS = "1234c:E:f:g:hH:lLo:qr:R:t:T:vVzZ"
_FILTERS = {
    "off": FilterType.OFF,
    "dmg": FilterType.DMG,
    "cgb": FilterType.CGB,
}
_MAX_RESHUFFLES = 10000
_LONG_RE = re.compile(r"\s*([+-]?\d+)")


class PlayMode(enum.IntEnum):
    """Order in which subsongs are played."""

    LINEAR = 1
    RANDOM = 2
    SHUFFLE = 3


class UsageError(Exception):
    """Raised for invalid command line arguments."""


@dataclass
class DisplayTime:
    """Played and total time of the current subsong in minutes and seconds."""

    played_min: int
    played_sec: int
    total_min: int
    total_sec: int


@dataclass
class PlayerOptions:
    """Settings taken from the command line, with the player's defaults.

    ``subsong_start`` and ``subsong_stop`` are 0-based; -1 means unset.
    ``action`` is ``"help"`` or ``"version"`` when such an option was given.
    """

    endian: Endian = Endian.AUTOSELECT
    fadeout: int = 3
    filter_type: str = "dmg"
    loop_mode: LoopMode = LoopMode.OFF
    output_plugin: str = DEFAULT_PLUGIN
    rate: int = 44100
    refresh_delay: int = DEFAULT_REFRESH_DELAY
    silence_timeout: int = 2
    subsong_gap: int = 2
    subsong_timeout: int = 2 * 60
    verbosity: int = 3
    playmode: PlayMode = PlayMode.LINEAR
    mute_channels: list[bool] = field(default_factory=lambda: [False] * 4)
    config_files: list[str] = field(default_factory=list)
    filename: Optional[str] = None
    subsong_start: int = -1
    subsong_stop: int = -1
    action: Optional[str] = None


def update_displaytime(ticks: int, subsong_len: int) -> DisplayTime:
    """Convert elapsed cycles and a subsong length (1024 per second) to a display time.

    A subsong without a known length shows a total of 99:99.
    """
    played = ticks // GBHW_CLOCK
    total = subsong_len // 1024
    if total:
        total_min, total_sec = divmod(total, 60)
    else:
        total_min, total_sec = 99, 99
    played_min, played_sec = divmod(played, 60)
    return DisplayTime(played_min, played_sec, total_min, total_sec)


def filename_only(path: str) -> str:
    """Return the part of ``path`` after its last slash."""
    return path.rsplit("/", 1)[-1]


def endian_str(endian: int) -> str:
    """Return the name of an endian setting as shown in the usage text."""
    names = {
        Endian.BIG: "big",
        Endian.LITTLE: "little",
        Endian.AUTOSELECT: "default",
    }
    return names.get(endian, "invalid")


def parse_filter(name: str) -> FilterType:
    """Return the filter type called ``name``, ignoring case."""
    try:
        return _FILTERS[name.lower()]
    except KeyError:
        raise ValueError(f'Invalid filter type "{name}"') from None


def swap_endian(data: bytes) -> bytes:
    """Swap the bytes of every 16 bit sample; a trailing odd byte is kept."""
    out = bytearray(data)
    n = len(out) - len(out) % 2
    out[0:n:2], out[1:n:2] = out[1:n:2], out[0:n:2]
    return bytes(out)


def sanitize_range(start: int, stop: int, songs: int) -> tuple[int, int]:
    """Clamp 0-based start and stop subsongs to what the file offers."""
    if start < -1:
        start = 0
    elif start >= songs:
        start = songs - 1
    if stop < 0 or stop >= songs:
        stop = -1
    return start, stop


def usage_text(myname: str, options: PlayerOptions) -> str:
    """Return the help text, showing the current settings as defaults."""
    return (
        f"Usage: {myname} [option(s)] <gbs-file> [start_at_subsong [stop_at_subsong] ]\n"
        "\n"
        "Available options are:\n"
        f"  -E        endian, b == big, l == little, n == native ({endian_str(options.endian)})\n"
        f"  -f        set fadeout ({options.fadeout} seconds)\n"
        f"  -g        set subsong gap ({options.subsong_gap} seconds)\n"
        "  -h        display this help and exit\n"
        f"  -H        set output high-pass type ({options.filter_type})\n"
        "  -l        set loop mode to range\n"
        "  -L        set loop mode to single\n"
        f"  -o        select output plugin ({options.output_plugin})\n"
        "            'list' shows available plugins\n"
        "  -q        reduce verbosity\n"
        f"  -r        set samplerate ({options.rate}Hz)\n"
        f"  -R        set refresh delay ({options.refresh_delay} milliseconds)\n"
        f"  -t        set subsong timeout ({options.subsong_timeout} seconds)\n"
        f"  -T        set silence timeout ({options.silence_timeout} seconds)\n"
        "  -v        increase verbosity\n"
        "  -V        print version and exit\n"
        "  -z        play subsongs in shuffle mode\n"
        "  -Z        play subsongs in random mode (repetitions possible)\n"
        "  -1 to -4  mute a channel on startup\n"
    )


def _scan_long(text: str, current: int) -> int:
    match = _LONG_RE.match(text)
    return int(match.group(1)) if match else current


def _parse_endian(text: str) -> Endian:
    choice = text.lower()
    if choice == "b":
        return Endian.BIG
    if choice == "l":
        return Endian.LITTLE
    if choice == "n":
        return native_endian()
    raise UsageError(f'"{text}" is not a valid endian.')


def parse_args(argv: Sequence[str]) -> PlayerOptions:
    """Parse command line arguments (without the program name).

    Processing stops at ``-h`` or ``-V``, which set ``action``.
    """
    options = PlayerOptions()
    try:
        opts, args = getopt.gnu_getopt(list(argv), _SHORTOPTS)
    except getopt.GetoptError as exc:
        raise UsageError(str(exc)) from exc

    for opt, arg in opts:
        flag = opt[1]
        if flag in "1234":
            idx = int(flag) - 1
            options.mute_channels[idx] = not options.mute_channels[idx]
        elif flag == "c":
            options.config_files.append(arg)
        elif flag == "E":
            options.endian = _parse_endian(arg)
        elif flag == "f":
            options.fadeout = _scan_long(arg, options.fadeout)
        elif flag == "g":
            options.subsong_gap = _scan_long(arg, options.subsong_gap)
        elif flag == "h":
            options.action = "help"
            return options
        elif flag == "H":
            options.filter_type = arg
        elif flag == "l":
            options.loop_mode = LoopMode.RANGE
        elif flag == "L":
            options.loop_mode = LoopMode.SINGLE
        elif flag == "o":
            options.output_plugin = arg
        elif flag == "q":
            options.verbosity -= 1
        elif flag == "r":
            options.rate = _scan_long(arg, options.rate)
        elif flag == "R":
            options.refresh_delay = _scan_long(arg, options.refresh_delay)
        elif flag == "t":
            options.subsong_timeout = _scan_long(arg, options.subsong_timeout)
        elif flag == "T":
            options.silence_timeout = _scan_long(arg, options.silence_timeout)
        elif flag == "v":
            options.verbosity += 1
        elif flag == "V":
            options.action = "version"
            return options
        elif flag == "z":
            options.playmode = PlayMode.SHUFFLE
        elif flag == "Z":
            options.playmode = PlayMode.RANDOM

    if not args:
        if options.output_plugin == "list":
            return options
        raise UsageError("missing gbs-file")

    options.filename = args[0]
    if len(args) >= 2:
        options.subsong_start = _scan_long(args[1], -1) - 1
    if len(args) >= 3:
        options.subsong_stop = _scan_long(args[2], -1) - 1
    return options


class SubsongNavigator:
    """Chooses the subsong to play next according to the play mode.

    ``next_subsong`` and ``prev_subsong`` return the raw choice: in linear
    mode it may lie one past either end, and the caller wraps it.
    Shuffled playlists are reproducible from ``seed``.
    """

    def __init__(self, songs: int, playmode: PlayMode = PlayMode.LINEAR, seed: int = 0) -> None:
        if songs < 1:
            raise ValueError(f"need at least one subsong, got {songs}")
        self.songs = songs
        self.playmode = PlayMode(playmode)
        self.seed = seed
        self._rng = random.Random(seed)
        self.index = 0
        self.playlist = self._setup_playlist() if self.playmode is PlayMode.SHUFFLE else []

    def _setup_playlist(self) -> list[int]:
        playlist = list(range(self.songs))
        shuffle(playlist, random.Random(self.seed))
        return playlist

    def next_subsong(self, current: int) -> int:
        """Return the subsong to play after ``current``."""
        if self.playmode is PlayMode.RANDOM:
            return rand_below(self.songs, self._rng)
        if self.playmode is PlayMode.SHUFFLE:
            self.index += 1
            if self.index >= self.songs:
                self.seed += 1
                self.playlist = self._setup_playlist()
                self.index = 0
            return self.playlist[self.index]
        return current + 1

    def prev_subsong(self, current: int) -> int:
        """Return the subsong played before ``current``."""
        if self.playmode is PlayMode.RANDOM:
            return rand_below(self.songs, self._rng)
        if self.playmode is PlayMode.SHUFFLE:
            self.index -= 1
            if self.index < 0:
                self.seed -= 1
                self.playlist = self._setup_playlist()
                self.index = self.songs - 1
            return self.playlist[self.index]
        return current - 1

    def start_subsong(self, requested: int, defaultsong: int) -> int:
        """Return the first subsong to play; ``requested`` is -1 when unset.

        ``defaultsong`` is the 1-based default subsong of the file.
        """
        if self.playmode is PlayMode.RANDOM:
            return self.next_subsong(requested) if requested == -1 else requested
        if self.playmode is PlayMode.SHUFFLE:
            self.playlist = self._setup_playlist()
            self.index = 0
            if requested == -1:
                return self.playlist[0]
            if not 0 <= requested < self.songs:
                raise ValueError(f"subsong {requested} out of range")
            # Reseed rather than rotate so the playlist stays reproducible.
            for _ in range(_MAX_RESHUFFLES):
                if self.playlist[0] == requested:
                    return requested
                self.seed += 1
                self.playlist = self._setup_playlist()
            raise ValueError(f"no shuffled playlist starts with subsong {requested}")
        return defaultsong - 1 if requested == -1 else requested