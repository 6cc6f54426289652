import pytest

from nesemu.cartridge import CartMemory, Mirroring, RomConfig
from nesemu.simple_mappers import CartridgeM0, CartridgeM2, CartridgeM3, CartridgeM7


def _banked(count, size):
    return b"".join(bytes([index]) * size for index in range(count))


def _config(prg_rom, chr_rom=None, mirroring=Mirroring.HORIZONTAL, mapper=0):
    return RomConfig(mapper, mirroring, CartMemory(prg_rom, chr_rom, False))


def test_m0_nrom128_mirrors_16kb():
    prg = bytes(range(256)) * 64
    cart = CartridgeM0(_config(prg))
    for offset in (0x0000, 0x0005, 0x3FFF):
        assert cart.read_prg_rom(0x8000 + offset) == cart.read_prg_rom(0xC000 + offset)
    assert cart.read_prg_rom(0x8005) == prg[5]


def test_m0_nrom256_not_mirrored():
    prg = _banked(2, 0x4000)
    cart = CartridgeM0(_config(prg))
    assert cart.read_prg_rom(0x8000) == 0
    assert cart.read_prg_rom(0xC000) == 1


def test_m0_uses_header_mirroring_and_chr_ram():
    cart = CartridgeM0(_config(_banked(1, 0x4000), mirroring=Mirroring.VERTICAL))
    assert cart.mirroring() is Mirroring.VERTICAL
    cart.write_chr(0x1234, 0x56)
    assert cart.read_chr(0x1234) == 0x56


def test_m0_chr_rom_is_read_only():
    chr_rom = bytes([9]) * 0x2000
    cart = CartridgeM0(_config(_banked(1, 0x4000), chr_rom))
    cart.write_chr(0, 1)
    assert cart.read_chr(0) == 9


def test_m2_bank_switching():
    cart = CartridgeM2(_config(_banked(4, 0x4000)))
    assert cart.read_prg_rom(0x8000) == 0
    assert cart.read_prg_rom(0xC000) == 3
    cart.write_prg_rom(0x8000, 2)
    assert cart.read_prg_rom(0xBFFF) == 2
    assert cart.read_prg_rom(0xFFFF) == 3


def test_m2_rejects_address_outside_prg():
    cart = CartridgeM2(_config(_banked(2, 0x4000)))
    with pytest.raises(ValueError):
        cart.read_prg_rom(0x6000)


def test_m2_mirroring_and_chr_ram():
    cart = CartridgeM2(_config(_banked(2, 0x4000), mirroring=Mirroring.VERTICAL))
    assert cart.mirroring() is Mirroring.VERTICAL
    cart.write_chr(0x10, 0x20)
    assert cart.read_chr(0x10) == 0x20


def test_m3_chr_bank_select_masks_two_bits():
    chr_rom = _banked(4, 0x2000)
    cart = CartridgeM3(_config(_banked(2, 0x4000), chr_rom))
    assert cart.read_chr(0x0000) == 0
    cart.write_prg_rom(0x8000, 0b1110)
    assert cart.read_chr(0x1FFF) == 2
    cart.write_prg_rom(0x8000, 3)
    assert cart.read_chr(0x0000) == 3


def test_m3_prg_mirrors_and_chr_writes_ignored():
    prg = _banked(1, 0x4000)
    cart = CartridgeM3(_config(prg, mirroring=Mirroring.VERTICAL))
    assert cart.read_prg_rom(0x8000) == cart.read_prg_rom(0xC000)
    cart.write_chr(0x10, 0xAA)
    assert cart.read_chr(0x10) == 0
    assert cart.mirroring() is Mirroring.VERTICAL


def test_m7_starts_single_screen_lower():
    cart = CartridgeM7(_config(_banked(8, 0x8000), mirroring=Mirroring.VERTICAL))
    assert cart.mirroring() is Mirroring.SINGLE_SCREEN_LOWER
    assert cart.read_prg_rom(0x8000) == 0


def test_m7_bank_and_mirroring_select():
    cart = CartridgeM7(_config(_banked(8, 0x8000)))
    cart.write_prg_rom(0x8000, 0b0001_0011)
    assert cart.read_prg_rom(0xFFFF) == 3
    assert cart.mirroring() is Mirroring.SINGLE_SCREEN_UPPER
    cart.write_prg_rom(0x8000, 0b0000_0101)
    assert cart.read_prg_rom(0x8000) == 5
    assert cart.mirroring() is Mirroring.SINGLE_SCREEN_LOWER


def test_m7_rejects_low_address():
    cart = CartridgeM7(_config(_banked(1, 0x8000)))
    with pytest.raises(ValueError):
        cart.read_prg_rom(0x7FFF)