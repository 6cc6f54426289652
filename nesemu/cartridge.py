"""Cartridge memory, mirroring modes and the interface every mapper implements."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass

KB = 0x400
CHR_RAM_SIZE = 0x2000
PRG_RAM_SIZE = 0x2000


class Mirroring(enum.Enum):
    """Nametable mirroring arrangement selected by the cartridge."""

    VERTICAL = enum.auto()
    HORIZONTAL = enum.auto()
    SINGLE_SCREEN_LOWER = enum.auto()
    SINGLE_SCREEN_UPPER = enum.auto()


class ChrMem:
    """Pattern table memory: read-only ROM when data is given, else 8 KB of RAM."""

    def __init__(self, rom_data: bytes | None = None) -> None:
        if rom_data is None:
            self.data: bytes | bytearray = bytearray(CHR_RAM_SIZE)
            self.writable = True
        else:
            self.data = bytes(rom_data)
            self.writable = False

    def read(self, addr: int) -> int:
        """Return the byte at ``addr``; raises IndexError when out of range."""
        if addr < 0:
            raise IndexError(f"CHR address {addr} out of range")
        return self.data[addr]

    def write(self, addr: int, value: int) -> None:
        """Store ``value`` at ``addr`` if this is RAM; writes to ROM are ignored."""
        if not self.writable:
            return
        if addr < 0:
            raise IndexError(f"CHR address {addr} out of range")
        self.data[addr] = value & 0xFF


class CartMemory:
    """The PRG ROM, PRG RAM and CHR memory held on a cartridge."""

    def __init__(self, prg_rom: bytes, chr_rom: bytes | None, has_prg_ram: bool) -> None:
        # PRG RAM is always provided: some games write to $6000-$7FFF and
        # misbehave without it even though their header claims none.
        self.has_prg_ram = has_prg_ram
        self.prg_ram: bytearray | None = bytearray(PRG_RAM_SIZE)
        self.prg_rom = bytes(prg_rom)
        self.chr_mem = ChrMem(chr_rom)


@dataclass
class RomConfig:
    """What a ROM header and body describe: mapper number, mirroring and memory."""

    ines_mapper_id: int
    ines_mirroring: Mirroring
    data: CartMemory


class Cartridge(ABC):
    """Interface for a cartridge mapper as seen by the CPU and PPU buses."""

    def read_prg_ram(self, addr: int) -> int | None:
        """Read from $6000-$7FFF; None when the cartridge drives nothing there."""
        return None

    def write_prg_ram(self, addr: int, byte: int) -> None:
        """Write to $6000-$7FFF."""

    @abstractmethod
    def read_prg_rom(self, addr: int) -> int:
        """Read from $8000-$FFFF."""

    def write_prg_rom(self, addr: int, byte: int) -> None:
        """Write to $8000-$FFFF, usually a mapper register."""

    @abstractmethod
    def read_chr(self, addr: int) -> int:
        """Read from the PPU pattern tables at $0000-$1FFF."""

    def write_chr(self, addr: int, byte: int) -> None:
        """Write to the PPU pattern tables."""

    def asserting_irq(self) -> bool:
        """Whether the cartridge is pulling the CPU IRQ line."""
        return False

    def cpu_tick(self) -> None:
        """Advance mapper state by one CPU cycle."""

    def ppu_tick(self, addr_bus: int) -> None:
        """Advance mapper state by one PPU cycle, observing the PPU address bus."""

    @abstractmethod
    def mirroring(self) -> Mirroring:
        """The nametable mirroring currently selected."""