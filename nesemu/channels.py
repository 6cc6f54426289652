"""APU sound channel registers and the lookup tables they index."""

from __future__ import annotations

from dataclasses import dataclass

_H = True
_L = False

SQUARE_SEQUENCES: tuple[tuple[bool, ...], ...] = (
    (_L, _H, _L, _L, _L, _L, _L, _L),  # 12.5% duty
    (_L, _H, _H, _L, _L, _L, _L, _L),  # 25.0% duty
    (_L, _H, _H, _H, _H, _L, _L, _L),  # 50.0% duty
    (_H, _L, _L, _H, _H, _H, _H, _H),  # 75.0% duty
)

TRIANGLE_SEQUENCE: tuple[int, ...] = (
    0xF, 0xE, 0xD, 0xC, 0xB, 0xA, 0x9, 0x8, 0x7, 0x6, 0x5, 0x4, 0x3, 0x2, 0x1, 0x0,
    0x0, 0x1, 0x2, 0x3, 0x4, 0x5, 0x6, 0x7, 0x8, 0x9, 0xA, 0xB, 0xC, 0xD, 0xE, 0xF,
)

LENGTH_TABLE: tuple[int, ...] = (
    0x0A, 0xFE, 0x14, 0x02, 0x28, 0x04, 0x50, 0x06, 0xA0, 0x08, 0x3C, 0x0A, 0x0E, 0x0C, 0x1A, 0x0E,
    0x0C, 0x10, 0x18, 0x12, 0x30, 0x14, 0x60, 0x16, 0xC0, 0x18, 0x48, 0x1A, 0x10, 0x1C, 0x20, 0x1E,
)

NOISE_PERIOD_TABLE: tuple[int, ...] = (
    0x004, 0x008, 0x010, 0x020, 0x040, 0x060, 0x080, 0x0A0,
    0x0CA, 0x0FE, 0x17C, 0x1FC, 0x2FA, 0x3F8, 0x7F2, 0xFE4,
)

SAMPLE_RATE_TABLE: tuple[int, ...] = (
    428, 380, 340, 320, 286, 254, 226, 214, 190, 160, 142, 128, 106, 84, 72, 54,
)

_TIMER_HIGH_MASK = 0b111_0000_0000
_TIMER_LOW_MASK = 0b000_1111_1111


def _length_for(byte: int) -> int:
    return LENGTH_TABLE[(byte & 0b1111_1000) >> 3]


@dataclass
class Square:
    """A pulse channel ($4000-$4003 or $4004-$4007)."""

    enabled: bool = False
    length_counter_mute_signal: bool = False
    sequencer_stage: int = 0
    timer_init_value: int = 0
    timer_curr_value: int = 0
    duty_cycle: int = 0
    length_counter: int = 0
    constant_volume: bool = False
    envelope_loop_and_length_counter_halt: bool = False
    envelope_start_flag: bool = False
    volume_and_envelope_period: int = 0
    envelope_counter_curr_value: int = 0
    envelope_decay_level: int = 0
    envelope_output: int = 0
    sweep_enabled: bool = False
    sweep_counter_init_value: int = 0
    sweep_counter_curr_value: int = 0
    sweep_mute_signal: bool = False
    sweep_negate: bool = False
    sweep_shift_amount: int = 0
    sweep_reload_flag: bool = False
    sequencer_output: bool = False

    def set_reg1_from_byte(self, byte: int) -> None:
        """Duty cycle, envelope loop / length halt, constant volume, volume."""
        byte &= 0xFF
        self.duty_cycle = byte >> 6
        self.envelope_loop_and_length_counter_halt = bool(byte & 0b0010_0000)
        self.constant_volume = bool(byte & 0b0001_0000)
        self.volume_and_envelope_period = byte & 0b0000_1111

    def set_reg2_from_byte(self, byte: int) -> None:
        """Sweep unit: enable, period, negate and shift."""
        self.sweep_enabled = bool(byte & 0b1000_0000)
        self.sweep_counter_init_value = (byte & 0b0111_0000) >> 4
        self.sweep_negate = bool(byte & 0b0000_1000)
        self.sweep_shift_amount = byte & 0b0000_0111

    def set_reg3_from_byte(self, byte: int) -> None:
        """Low eight bits of the timer period."""
        self.timer_init_value = (self.timer_init_value & _TIMER_HIGH_MASK) | (byte & 0xFF)

    def set_reg4_from_byte(self, byte: int) -> None:
        """Length counter load and high three timer bits; restarts the envelope."""
        self.timer_init_value = (self.timer_init_value & _TIMER_LOW_MASK) | ((byte & 0b111) << 8)
        self.length_counter = _length_for(byte)
        self.envelope_start_flag = True


@dataclass
class Triangle:
    """The triangle channel ($4008-$400B)."""

    enabled: bool = False
    sequencer_stage: int = 0
    sequencer_output: int = 0
    timer_init_value: int = 0
    timer_curr_value: int = 0
    length_counter: int = 0
    length_counter_halt_and_linear_counter_control: bool = False
    length_counter_mute_signal: bool = False
    linear_counter_reload_flag: bool = False
    linear_counter_init_value: int = 0
    linear_counter_curr_value: int = 0
    linear_counter_mute_signal: bool = False

    def set_reg1_from_byte(self, byte: int) -> None:
        """Control flag and linear counter reload value."""
        self.length_counter_halt_and_linear_counter_control = bool(byte & 0b1000_0000)
        self.linear_counter_init_value = byte & 0b0111_1111

    def set_reg2_from_byte(self, byte: int) -> None:
        """Low eight bits of the timer period."""
        self.timer_init_value = (self.timer_init_value & _TIMER_HIGH_MASK) | (byte & 0xFF)

    def set_reg3_from_byte(self, byte: int) -> None:
        """Length counter load and high timer bits; flags a linear counter reload."""
        self.timer_init_value = (self.timer_init_value & _TIMER_LOW_MASK) | ((byte & 0b111) << 8)
        self.length_counter = _length_for(byte)
        self.linear_counter_reload_flag = True


@dataclass
class Noise:
    """The noise channel ($400C-$400F)."""

    enabled: bool = False
    envelope_loop_and_length_counter_halt: bool = False
    constant_volume: bool = False
    length_counter: int = 0
    length_counter_mute_signal: bool = False
    envelope_start_flag: bool = False
    envelope_decay_level: int = 0
    envelope_counter_curr_value: int = 0
    volume_and_envelope_period: int = 0
    sequencer_output: bool = False
    envelope_output: int = 0
    mode: bool = False
    timer_init_value: int = 0
    timer_curr_value: int = 0

    def set_reg1_from_byte(self, byte: int) -> None:
        """Envelope loop / length halt, constant volume, volume."""
        self.envelope_loop_and_length_counter_halt = bool(byte & 0b0010_0000)
        self.constant_volume = bool(byte & 0b0001_0000)
        self.volume_and_envelope_period = byte & 0b0000_1111

    def set_reg2_from_byte(self, byte: int) -> None:
        """Mode flag and timer period index."""
        # The mode flag is recorded but has no effect on the generated noise.
        self.mode = bool(byte & 0b1000_0000)
        self.timer_init_value = NOISE_PERIOD_TABLE[byte & 0b0000_1111]

    def set_reg3_from_byte(self, byte: int) -> None:
        """Length counter load; restarts the envelope."""
        self.length_counter = _length_for(byte)
        self.envelope_start_flag = True


@dataclass
class Sample:
    """The delta modulation channel ($4010-$4013)."""

    enabled: bool = False
    irq_enabled: bool = False
    loop_sample: bool = False
    init_timer_value: int = 0
    curr_timer_value: int = 0
    sample_buffer: int = 0
    buffer_bits_remaining: int = 0
    sample_length: int = 0
    remaining_sample_bytes: int = 0
    init_sample_addr: int = 0
    curr_sample_addr: int = 0
    mute_signal: bool = False
    output: int = 0
    interrupt_request: bool = False

    def set_reg1_from_byte(self, byte: int) -> None:
        """IRQ enable, loop flag and rate index; disabling IRQs clears a pending one."""
        self.irq_enabled = bool(byte & 0b1000_0000)
        if not self.irq_enabled:
            self.interrupt_request = False
        self.loop_sample = bool(byte & 0b0100_0000)
        self.init_timer_value = SAMPLE_RATE_TABLE[byte & 0b0000_1111]

    def set_reg2_from_byte(self, byte: int) -> None:
        """Direct 7-bit load of the output level."""
        self.output = byte & 0b0111_1111

    def set_reg3_from_byte(self, byte: int) -> None:
        """Sample address: $C000 + byte * 64."""
        self.init_sample_addr = 0xC000 + (byte & 0xFF) * 64

    def set_reg4_from_byte(self, byte: int) -> None:
        """Sample length: byte * 16 + 1 bytes."""
        self.sample_length = (byte & 0xFF) * 16 + 1