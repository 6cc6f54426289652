"""Mappers without IRQs or serial registers: NROM, UxROM, CNROM and AxROM."""

from __future__ import annotations

from .cartridge import Cartridge, Mirroring, RomConfig


def _check_prg_addr(addr: int) -> None:
    if not 0x8000 <= addr <= 0xFFFF:
        raise ValueError(f"address {addr:#06x} is outside PRG ROM space")


class CartridgeM0(Cartridge):
    """iNES mapper 0 (NROM-128 and NROM-256)."""

    def __init__(self, rom_config: RomConfig) -> None:
        self._memory = rom_config.data
        self._mirroring = rom_config.ines_mirroring

    def read_prg_rom(self, addr: int) -> int:
        # NROM-128 is 16 KB mirrored twice, NROM-256 is 32 KB.
        prg_rom = self._memory.prg_rom
        return prg_rom[addr % len(prg_rom)]

    def read_chr(self, addr: int) -> int:
        return self._memory.chr_mem.read(addr)

    def write_chr(self, addr: int, byte: int) -> None:
        # Not part of NROM, but homebrew uses this mapper with CHR RAM.
        self._memory.chr_mem.write(addr, byte)

    def mirroring(self) -> Mirroring:
        return self._mirroring


class CartridgeM2(Cartridge):
    """iNES mapper 2 (UxROM): switchable 16 KB bank at $8000, last bank fixed at $C000."""

    def __init__(self, rom_config: RomConfig) -> None:
        self._memory = rom_config.data
        self._mirroring = rom_config.ines_mirroring
        self._bank_select = 0

    def read_prg_rom(self, addr: int) -> int:
        _check_prg_addr(addr)
        prg_rom = self._memory.prg_rom
        if addr <= 0xBFFF:
            return prg_rom[self._bank_select * 0x4000 + (addr - 0x8000)]
        return prg_rom[len(prg_rom) - 0x4000 + (addr - 0xC000)]

    def write_prg_rom(self, addr: int, byte: int) -> None:
        self._bank_select = byte & 0xFF

    def read_chr(self, addr: int) -> int:
        return self._memory.chr_mem.read(addr)

    def write_chr(self, addr: int, byte: int) -> None:
        self._memory.chr_mem.write(addr, byte)

    def mirroring(self) -> Mirroring:
        return self._mirroring


class CartridgeM3(Cartridge):
    """iNES mapper 3 (CNROM): fixed PRG ROM, switchable 8 KB CHR bank."""

    def __init__(self, rom_config: RomConfig) -> None:
        self._memory = rom_config.data
        self._mirroring = rom_config.ines_mirroring
        self._bank_select = 0

    def read_prg_rom(self, addr: int) -> int:
        prg_rom = self._memory.prg_rom
        return prg_rom[addr % len(prg_rom)]

    def write_prg_rom(self, addr: int, byte: int) -> None:
        self._bank_select = byte & 0b0000_0011

    def read_chr(self, addr: int) -> int:
        return self._memory.chr_mem.read(self._bank_select * 0x2000 + addr)

    def mirroring(self) -> Mirroring:
        return self._mirroring


class CartridgeM7(Cartridge):
    """iNES mapper 7 (AxROM): switchable 32 KB PRG bank and single-screen mirroring."""

    def __init__(self, rom_config: RomConfig) -> None:
        self._memory = rom_config.data
        self._mirroring = Mirroring.SINGLE_SCREEN_LOWER
        self._bank_select = 0

    def read_prg_rom(self, addr: int) -> int:
        _check_prg_addr(addr)
        return self._memory.prg_rom[self._bank_select * 0x8000 + (addr - 0x8000)]

    def write_prg_rom(self, addr: int, byte: int) -> None:
        self._bank_select = byte & 0b0000_0111
        self._mirroring = (
            Mirroring.SINGLE_SCREEN_UPPER
            if byte & 0b0001_0000
            else Mirroring.SINGLE_SCREEN_LOWER
        )

    def read_chr(self, addr: int) -> int:
        return self._memory.chr_mem.read(addr)

    def write_chr(self, addr: int, byte: int) -> None:
        self._memory.chr_mem.write(addr, byte)

    def mirroring(self) -> Mirroring:
        return self._mirroring