"""Cartridge mappers, joypad controllers and the audio processing unit for a NES emulator."""

__version__ = "0.1.0"

__all__ = [
    "apu",
    "cartridge",
    "channels",
    "controller",
    "mappers",
    "mmc1",
    "mmc3",
    "simple_mappers",
]