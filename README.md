# nesemu

Building blocks for a Nintendo Entertainment System emulator, in pure Python
with no third-party dependencies: cartridge mappers, the standard joypad and
the audio processing unit (APU).

## Modules

- `nesemu.cartridge`
  - `Mirroring`: `VERTICAL`, `HORIZONTAL`, `SINGLE_SCREEN_LOWER`,
    `SINGLE_SCREEN_UPPER`.
  - `ChrMem(rom_data=None)`: CHR ROM when data is given, otherwise 8 KB of
    CHR RAM. Writes to ROM are ignored.
  - `CartMemory(prg_rom, chr_rom, has_prg_ram)`: PRG ROM, CHR memory and
    8 KB of PRG RAM. PRG RAM is always allocated, whatever `has_prg_ram` says.
  - `RomConfig(ines_mapper_id, ines_mirroring, data)`.
  - `Cartridge`: abstract base with `read_prg_ram`, `write_prg_ram`,
    `read_prg_rom`, `write_prg_rom`, `read_chr`, `write_chr`,
    `asserting_irq`, `cpu_tick`, `ppu_tick` and `mirroring`.
- `nesemu.simple_mappers`: `CartridgeM0` (NROM), `CartridgeM2` (UxROM),
  `CartridgeM3` (CNROM), `CartridgeM7` (AxROM).
- `nesemu.mmc1`: `CartridgeM1` (MMC1). Registers are loaded serially, five
  writes per register; a write with bit 7 set resets the shift register, and
  writes made before `cpu_tick` has been called twice since the last accepted
  write are ignored.
- `nesemu.mmc3`: `CartridgeM4` (MMC3), with 8 KB PRG banks, 1 KB/2 KB CHR
  banks and the scanline counter clocked by rising edges of PPU address line
  A12 seen through `ppu_tick(addr_bus)`. The IRQ it raises is reported by
  `asserting_irq()`.
- `nesemu.mappers`: `create_cartridge(rom_config)` builds the cartridge for
  iNES mappers 0, 1, 2, 3, 4 and 7 and raises `UnsupportedMapperError`
  (a `NotImplementedError`, with the id in `mapper_id`) for any other.
- `nesemu.controller`: `NesButtonState` (which buttons are held),
  `NesButton` (an `IntFlag` of the report bits) and `Controller`, the joypad
  shift register as read through `$4016`/`$4017`.
- `nesemu.channels`: the `Square`, `Triangle`, `Noise` and `Sample` (DMC)
  channel registers and their lookup tables.
- `nesemu.apu`: `Apu` with `step(cpu_cycles, read_memory)`,
  `clock_frame_sequencer()`, `read_status(open_bus)` (`$4015`),
  `write_status(val)`, `write_channel(addr, val)` (`$4000`-`$4013`),
  `asserting_irq()` and the mixer `get_sample(stereo_pan)`, which returns a
  `(left, right)` pair and raises `ValueError` unless `stereo_pan` lies in
  `[0, 1]`. The per-channel levels are given by `square_channel_output`,
  `triangle_channel_output`, `noise_channel_output` and
  `sample_channel_output`. The noise channel draws from `Apu.rng`, a
  `random.Random` that can be replaced with a seeded one for repeatable
  output.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Examples

Building a cartridge and reading the reset vector:

```python
from nesemu.cartridge import CartMemory, Mirroring, RomConfig
from nesemu.mappers import create_cartridge

prg = bytes(0x8000)
config = RomConfig(
    ines_mapper_id=0,
    ines_mirroring=Mirroring.VERTICAL,
    data=CartMemory(prg, None, False),
)
cart = create_cartridge(config)
reset_vector = cart.read_prg_rom(0xFFFC) | (cart.read_prg_rom(0xFFFD) << 8)
```

Controller input:

```python
from nesemu.controller import Controller, NesButtonState

pad = Controller()
pad.update_button_state(NesButtonState(a=True, start=True))
pad.write_to_data_latch(1)
pad.write_to_data_latch(0)
bits = [pad.shift_out_button_state() for _ in range(8)]
```

Audio, stepped once per CPU cycle:

```python
from nesemu.apu import Apu

apu = Apu()
apu.write_status(0b0000_0001)           # enable pulse 1
apu.write_channel(0x4000, 0b1011_1111)  # duty, constant volume 15
for cycle in range(1000):
    apu.step(cycle, lambda addr: 0)
left, right = apu.get_sample(0.0)
```

## What it does not do

This package has no CPU and no PPU, so it cannot run a game on its own. It
does not parse iNES files: a `RomConfig` has to be built from ROM data by the
caller. There is no frame loop, no rewind, no video or audio output, no
keyboard or gamepad handling, no saved settings, and no command to start.
`Apu.step` needs the caller to pass the CPU cycle count and a function that
reads memory for sample fetches.