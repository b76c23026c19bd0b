"""Game Boy sound toolkit: output plugins, MIDI/VGM/WAV writers, bank mappers and player logic."""

__version__ = "0.1.0"