"""iNES mapper 1 (MMC1): serially loaded bank and control registers."""

from __future__ import annotations

from .cartridge import KB, Cartridge, Mirroring, RomConfig

_MIRRORING_BY_BITS = {
    0: Mirroring.SINGLE_SCREEN_LOWER,
    1: Mirroring.SINGLE_SCREEN_UPPER,
    2: Mirroring.VERTICAL,
    3: Mirroring.HORIZONTAL,
}


class CartridgeM1(Cartridge):
    """MMC1 cartridge with optional PRG RAM and switchable PRG/CHR banks."""

    def __init__(self, rom_config: RomConfig) -> None:
        self._memory = rom_config.data
        self._mirroring = Mirroring.VERTICAL
        self._chr_bank_0 = 0
        self._chr_bank_1 = 0
        self._prg_bank = 0
        self._prg_bank_mode = 3
        self._chr_bank_mode = 0
        self._shift_register = 0
        self._write_counter = 0
        self._consecutive_write_counter = 0

    def _chr_addr(self, addr: int) -> int:
        if self._chr_bank_mode == 0:
            return (self._chr_bank_0 & 0b11110) * 8 * KB + addr
        if 0x0000 <= addr <= 0x0FFF:
            return self._chr_bank_0 * 4 * KB + addr
        if 0x1000 <= addr <= 0x1FFF:
            return self._chr_bank_1 * 4 * KB + (addr - 0x1000)
        raise ValueError(f"address {addr:#06x} is outside CHR space")

    def read_prg_ram(self, addr: int) -> int | None:
        ram = self._memory.prg_ram
        offset = addr - 0x6000
        if ram is None or not 0 <= offset < len(ram):
            return None
        return ram[offset]

    def write_prg_ram(self, addr: int, byte: int) -> None:
        ram = self._memory.prg_ram
        if ram is None:
            return
        offset = addr - 0x6000
        if offset < 0:
            raise IndexError(f"address {addr:#06x} is outside PRG RAM")
        ram[offset] = byte & 0xFF

    def read_prg_rom(self, addr: int) -> int:
        if not 0x8000 <= addr <= 0xFFFF:
            raise ValueError(f"address {addr:#06x} is outside PRG ROM space")
        prg_rom = self._memory.prg_rom
        if self._prg_bank_mode in (0, 1):
            return prg_rom[(self._prg_bank & 0b11110) * 32 * KB + (addr - 0x8000)]
        if self._prg_bank_mode == 2:
            if addr <= 0xBFFF:
                return prg_rom[addr - 0x8000]
            return prg_rom[self._prg_bank * 16 * KB + (addr - 0xC000)]
        if addr <= 0xBFFF:
            return prg_rom[self._prg_bank * 16 * KB + (addr - 0x8000)]
        return prg_rom[len(prg_rom) - 16 * KB + (addr - 0xC000)]

    def write_prg_rom(self, addr: int, byte: int) -> None:
        if byte & 0b1000_0000:
            self._shift_register = 0
            self._write_counter = 0
            self._prg_bank_mode = 3
            return
        # Writes on consecutive CPU cycles are ignored.
        if self._consecutive_write_counter != 0:
            return
        self._consecutive_write_counter = 2

        self._shift_register = (self._shift_register >> 1) | ((byte & 1) << 4)
        self._write_counter += 1
        if self._write_counter != 5:
            return

        value = self._shift_register
        if 0x8000 <= addr <= 0x9FFF:
            self._mirroring = _MIRRORING_BY_BITS[value & 0b00011]
            self._prg_bank_mode = (value & 0b01100) >> 2
            self._chr_bank_mode = (value & 0b10000) >> 4
        elif 0xA000 <= addr <= 0xBFFF:
            self._chr_bank_0 = value
        elif 0xC000 <= addr <= 0xDFFF:
            self._chr_bank_1 = value
        elif 0xE000 <= addr <= 0xFFFF:
            self._prg_bank = value & 0b01111
        else:
            raise ValueError(f"address {addr:#06x} is outside PRG ROM space")
        self._shift_register = 0
        self._write_counter = 0

    def read_chr(self, addr: int) -> int:
        return self._memory.chr_mem.read(self._chr_addr(addr))

    def write_chr(self, addr: int, byte: int) -> None:
        self._memory.chr_mem.write(addr, byte)

    def mirroring(self) -> Mirroring:
        return self._mirroring

    def cpu_tick(self) -> None:
        self._consecutive_write_counter = max(0, self._consecutive_write_counter - 1)