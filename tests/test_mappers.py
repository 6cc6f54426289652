import pytest

from nesemu.cartridge import CartMemory, Mirroring, RomConfig
from nesemu.mappers import UnsupportedMapperError, create_cartridge
from nesemu.mmc1 import CartridgeM1
from nesemu.mmc3 import CartridgeM4
from nesemu.simple_mappers import CartridgeM0, CartridgeM2, CartridgeM3, CartridgeM7

PRG_ROM = bytes((i * 7 + 3) & 0xFF for i in range(0x8000))


def _config(mapper_id, mirroring=Mirroring.HORIZONTAL):
    return RomConfig(mapper_id, mirroring, CartMemory(PRG_ROM, None, False))


@pytest.mark.parametrize(
    "mapper_id, cls",
    [
        (0, CartridgeM0),
        (1, CartridgeM1),
        (2, CartridgeM2),
        (3, CartridgeM3),
        (4, CartridgeM4),
        (7, CartridgeM7),
    ],
)
def test_supported_mappers_read_reset_vector_region(mapper_id, cls):
    cart = create_cartridge(_config(mapper_id))
    assert isinstance(cart, cls)
    assert cart.read_prg_rom(0x8000) == PRG_ROM[0]
    assert cart.read_prg_rom(0xFFFF) == PRG_ROM[-1]


@pytest.mark.parametrize("mapper_id", [0, 2, 3])
def test_header_mirroring_is_used(mapper_id):
    cart = create_cartridge(_config(mapper_id, Mirroring.HORIZONTAL))
    assert cart.mirroring() is Mirroring.HORIZONTAL


def test_mmc1_ignores_header_mirroring():
    cart = create_cartridge(_config(1, Mirroring.HORIZONTAL))
    assert cart.mirroring() is Mirroring.VERTICAL


def test_axrom_starts_single_screen_lower():
    cart = create_cartridge(_config(7, Mirroring.VERTICAL))
    assert cart.mirroring() is Mirroring.SINGLE_SCREEN_LOWER


@pytest.mark.parametrize("mapper_id", [5, 9, 255])
def test_unsupported_mapper_raises(mapper_id):
    with pytest.raises(UnsupportedMapperError) as excinfo:
        create_cartridge(_config(mapper_id))
    assert excinfo.value.mapper_id == mapper_id
    assert str(mapper_id) in str(excinfo.value)


def test_unsupported_mapper_is_not_implemented_error():
    with pytest.raises(NotImplementedError):
        create_cartridge(_config(6))