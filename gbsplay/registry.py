"""Registry of the available output plugins."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Sequence

from .altmidi import AltMidiPlugin
from .iodumper import IoDumperPlugin
from .midi import MidiPlugin
from .plugout import OutputPlugin
from .rawout import StdoutPlugin
from .vgm import VgmPlugin
from .wav import WavPlugin

__all__ = ["UnknownPluginError", "PluginRegistry", "default_registry"]

DEFAULT_PATH_TEMPLATE = "gbsplay-{subsong}.{ext}"


class UnknownPluginError(LookupError):
    """Raised when no plugin has the requested name."""


class PluginRegistry:
    """Output plugins in order of preference."""

    def __init__(self, plugins: Sequence[OutputPlugin]) -> None:
        self._plugins = list(plugins)

    def __iter__(self) -> Iterator[OutputPlugin]:
        return iter(self._plugins)

    def __len__(self) -> int:
        return len(self._plugins)

    @property
    def names(self) -> list[str]:
        """Plugin names in order of preference."""
        return [plugin.name for plugin in self._plugins]

    def select(self, name: str) -> OutputPlugin:
        """Return the first plugin called ``name``."""
        for plugin in self._plugins:
            if plugin.name == name:
                return plugin
        raise UnknownPluginError(f'"{name}" is not a known output plugin.')

    def listing(self) -> str:
        """Return the text listing the available plugins."""
        text = "Available output plugins:\n\n"
        if not self._plugins:
            return text + "No output plugins available.\n\n"
        lines = "".join(f"{p.name:<8} - {p.description}\n" for p in self._plugins)
        return text + lines + "\n"


def _path_maker(template: str, ext: str):
    def path_for(subsong: int) -> Path:
        return Path(template.format(subsong=subsong + 1, ext=ext))

    return path_for


def default_registry(path_template: str = DEFAULT_PATH_TEMPLATE) -> PluginRegistry:
    """Build the registry of built-in plugins.

    File writers name their files from ``path_template``, whose ``{subsong}``
    field receives the 1-based subsong number and ``{ext}`` the file extension.
    """
    return PluginRegistry(
        [
            StdoutPlugin(),
            MidiPlugin(_path_maker(path_template, "mid")),
            AltMidiPlugin(_path_maker(path_template, "mid")),
            IoDumperPlugin(),
            VgmPlugin(_path_maker(path_template, "vgm")),
            WavPlugin(_path_maker(path_template, "wav")),
        ]
    )