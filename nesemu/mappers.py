"""Choosing the mapper implementation for a ROM."""

from __future__ import annotations

from .cartridge import Cartridge, RomConfig
from .mmc1 import CartridgeM1
from .mmc3 import CartridgeM4
from .simple_mappers import CartridgeM0, CartridgeM2, CartridgeM3, CartridgeM7

_MAPPERS: dict[int, type[Cartridge]] = {
    0: CartridgeM0,
    1: CartridgeM1,
    2: CartridgeM2,
    3: CartridgeM3,
    4: CartridgeM4,
    7: CartridgeM7,
}


class UnsupportedMapperError(NotImplementedError):
    """Raised when a ROM uses an iNES mapper that is not implemented."""

    def __init__(self, mapper_id: int) -> None:
        super().__init__(f"Mapper {mapper_id} not implemented")
        self.mapper_id = mapper_id


def create_cartridge(rom_config: RomConfig) -> Cartridge:
    """Build the cartridge for ``rom_config`` according to its iNES mapper number."""
    try:
        mapper = _MAPPERS[rom_config.ines_mapper_id]
    except KeyError:
        raise UnsupportedMapperError(rom_config.ines_mapper_id) from None
    return mapper(rom_config)