"""iNES mapper 4 (MMC3): 8 KB PRG banks, 1/2 KB CHR banks and a scanline IRQ."""

from __future__ import annotations

from .cartridge import KB, Cartridge, Mirroring, RomConfig

_A12_MASK = 1 << 12
_A12_FILTER_CYCLES = 16


class CartridgeM4(Cartridge):
    """MMC3 cartridge with bank switching and an A12-clocked scanline counter."""

    def __init__(self, rom_config: RomConfig) -> None:
        self._memory = rom_config.data
        self._bank_index = 0
        self._prg_bank_0_or_2 = 0
        self._prg_bank_1 = 0
        self._chr_2kb_banks = [0, 0]
        self._chr_1kb_banks = [0, 0, 0, 0]
        self._prg_fixed_bank_select = False
        self._chr_bank_size_select = False
        self._mirroring = Mirroring.VERTICAL
        self._scanline_counter_init = 0
        self._scanline_counter_curr = 0
        self._last_a12_value = False
        self._scanline_counter_reset_flag = False
        self._irq_enable = False
        self._interrupt_request = False
        self._a12_filtering_counter = 0

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
        prg_rom = self._memory.prg_rom
        second_last = len(prg_rom) - 16 * KB
        if 0xA000 <= addr <= 0xBFFF:
            offset = self._prg_bank_1 * 8 * KB + (addr - 0xA000)
        elif 0xE000 <= addr <= 0xFFFF:
            offset = len(prg_rom) - 8 * KB + (addr - 0xE000)
        elif 0x8000 <= addr <= 0x9FFF:
            if self._prg_fixed_bank_select:
                offset = second_last + (addr - 0x8000)
            else:
                offset = self._prg_bank_0_or_2 * 8 * KB + (addr - 0x8000)
        elif 0xC000 <= addr <= 0xDFFF:
            if self._prg_fixed_bank_select:
                offset = self._prg_bank_0_or_2 * 8 * KB + (addr - 0xC000)
            else:
                offset = second_last + (addr - 0xC000)
        else:
            raise ValueError(f"address {addr:#06x} is outside PRG ROM space")
        return prg_rom[offset]

    def write_prg_rom(self, addr: int, byte: int) -> None:
        even = addr % 2 == 0
        if 0x8000 <= addr <= 0x9FFF:
            if even:
                self._bank_index = byte & 0b0000_0111
                self._prg_fixed_bank_select = bool(byte & 0b0100_0000)
                self._chr_bank_size_select = bool(byte & 0b1000_0000)
            else:
                self._write_bank_register(byte & 0xFF)
        elif 0xA000 <= addr <= 0xBFFF:
            # Odd addresses hold PRG RAM write protection, which is not emulated.
            if even:
                self._mirroring = Mirroring.HORIZONTAL if byte & 1 else Mirroring.VERTICAL
        elif 0xC000 <= addr <= 0xDFFF:
            if even:
                self._scanline_counter_init = byte & 0xFF
            else:
                self._scanline_counter_reset_flag = True
        elif 0xE000 <= addr <= 0xFFFF:
            if even:
                self._irq_enable = False
                self._interrupt_request = False
            else:
                self._irq_enable = True
        else:
            raise ValueError(f"address {addr:#06x} is outside PRG ROM space")

    def _write_bank_register(self, value: int) -> None:
        index = self._bank_index
        if index in (0, 1):
            self._chr_2kb_banks[index] = value & 0b1111_1110
        elif index in (2, 3, 4, 5):
            self._chr_1kb_banks[index - 2] = value
        elif index == 6:
            self._prg_bank_0_or_2 = value & 0b0011_1111
        else:
            self._prg_bank_1 = value & 0b0011_1111

    def _chr_addr(self, addr: int) -> int:
        if not 0x0000 <= addr <= 0x1FFF:
            raise ValueError(f"address {addr:#06x} is outside CHR space")
        if self._chr_bank_size_select:
            if addr < 0x1000:
                slot, base = divmod(addr, 0x400)
                return self._chr_1kb_banks[slot] * KB + base
            slot, base = divmod(addr - 0x1000, 0x800)
            return self._chr_2kb_banks[slot] * KB + base
        if addr < 0x1000:
            slot, base = divmod(addr, 0x800)
            return self._chr_2kb_banks[slot] * KB + base
        slot, base = divmod(addr - 0x1000, 0x400)
        return self._chr_1kb_banks[slot] * KB + base

    def read_chr(self, addr: int) -> int:
        return self._memory.chr_mem.read(self._chr_addr(addr))

    def asserting_irq(self) -> bool:
        return self._interrupt_request

    def ppu_tick(self, addr_bus: int) -> None:
        self._a12_filtering_counter = max(0, self._a12_filtering_counter - 1)
        new_a12_value = bool(addr_bus & _A12_MASK)

        # A rising edge on A12 marks the switch from background to sprite fetches.
        if not self._last_a12_value and new_a12_value:
            # Edges within 16 PPU cycles of the previous one are filtered out.
            if self._a12_filtering_counter == 0:
                if self._scanline_counter_curr == 0 or self._scanline_counter_reset_flag:
                    self._scanline_counter_curr = self._scanline_counter_init
                    self._scanline_counter_reset_flag = False
                else:
                    self._scanline_counter_curr -= 1
                    if self._irq_enable and self._scanline_counter_curr == 0:
                        self._interrupt_request = True
            self._a12_filtering_counter = _A12_FILTER_CYCLES
        self._last_a12_value = new_a12_value

    def mirroring(self) -> Mirroring:
        return self._mirroring