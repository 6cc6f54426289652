"""The audio processing unit: channel clocking, frame sequencer, status and mixing."""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass, field

from .channels import SQUARE_SEQUENCES, TRIANGLE_SEQUENCE, Noise, Sample, Square, Triangle

# Frame sequencer steps, counted in APU cycles (every other CPU cycle).
_STEP_1 = 3729
_STEP_2 = 7457
_STEP_3 = 11186
_STEP_4 = 14915
_STEP_5 = 18641

_MAX_TIMER_PERIOD = 0b111_1111_1111
_MIN_AUDIBLE_PERIOD = 8

_PULSE_1_REG_1 = 0x4000
_PULSE_1_REG_2 = 0x4001
_PULSE_1_REG_3 = 0x4002
_PULSE_1_REG_4 = 0x4003
_PULSE_2_REG_1 = 0x4004
_PULSE_2_REG_2 = 0x4005
_PULSE_2_REG_3 = 0x4006
_PULSE_2_REG_4 = 0x4007
_TRIANGLE_REG_1 = 0x4008
_TRIANGLE_REG_2 = 0x400A
_TRIANGLE_REG_3 = 0x400B
_NOISE_REG_1 = 0x400C
_NOISE_REG_2 = 0x400E
_NOISE_REG_3 = 0x400F
_SAMPLE_REG_1 = 0x4010
_SAMPLE_REG_2 = 0x4011
_SAMPLE_REG_3 = 0x4012
_SAMPLE_REG_4 = 0x4013

MemoryReader = Callable[[int], int]


def square_channel_output(sqw: Square) -> float:
    """The current level of a pulse channel, 0 when any mute condition holds."""
    if (
        not sqw.sweep_mute_signal
        and sqw.sequencer_output
        and not sqw.length_counter_mute_signal
        and sqw.enabled
        and sqw.timer_init_value >= _MIN_AUDIBLE_PERIOD
    ):
        return float(sqw.envelope_output)
    return 0.0


def triangle_channel_output(tri: Triangle) -> float:
    """The current level of the triangle channel.

    The sequencer is held rather than zeroed when the channel is silenced,
    which avoids pops at the cost of a constant offset in the mix.
    """
    return float(tri.sequencer_output)


def noise_channel_output(noise: Noise) -> float:
    """The current level of the noise channel."""
    if noise.sequencer_output and not noise.length_counter_mute_signal and noise.enabled:
        return float(noise.envelope_output)
    return 0.0


def sample_channel_output(sample: Sample) -> float:
    """The current level of the delta modulation channel."""
    return float(sample.output) if sample.enabled else 0.0


def _clock_pulse_timer(sqw: Square) -> None:
    if sqw.timer_curr_value == 0:
        sqw.timer_curr_value = sqw.timer_init_value
        sqw.sequencer_stage = (sqw.sequencer_stage + 1) % 8
        sqw.sequencer_output = SQUARE_SEQUENCES[sqw.duty_cycle][sqw.sequencer_stage]
    else:
        sqw.timer_curr_value -= 1


def _clock_triangle_timer(tri: Triangle) -> None:
    if tri.timer_curr_value == 0:
        tri.timer_curr_value = tri.timer_init_value
        # Very short periods are used by games to silence the channel; holding the
        # sequencer there keeps the output steady instead of producing a pop.
        if (
            tri.linear_counter_curr_value > 0
            and tri.length_counter > 0
            and tri.timer_init_value > 3
            and tri.enabled
        ):
            tri.sequencer_stage = (tri.sequencer_stage + 1) % 32
        tri.sequencer_output = TRIANGLE_SEQUENCE[tri.sequencer_stage]
    else:
        tri.timer_curr_value -= 1


def _clock_noise_timer(noise: Noise, rng: random.Random) -> None:
    if noise.timer_curr_value == 0:
        noise.timer_curr_value = noise.timer_init_value
        noise.sequencer_output = bool(rng.getrandbits(1))
    else:
        noise.timer_curr_value -= 1


def _clock_triangle_linear_counter(tri: Triangle) -> None:
    if tri.linear_counter_reload_flag:
        tri.linear_counter_curr_value = tri.linear_counter_init_value
    elif tri.linear_counter_curr_value > 0:
        tri.linear_counter_curr_value -= 1
    # The reload flag is only cleared when the control flag is clear.
    if not tri.length_counter_halt_and_linear_counter_control:
        tri.linear_counter_reload_flag = False
    tri.linear_counter_mute_signal = tri.linear_counter_curr_value == 0


def _clock_triangle_length_counter(tri: Triangle) -> None:
    if not tri.length_counter_halt_and_linear_counter_control:
        tri.length_counter = max(0, tri.length_counter - 1)
    tri.length_counter_mute_signal = tri.length_counter == 0


def _clock_square_envelope(sqw: Square) -> None:
    if sqw.envelope_start_flag:
        sqw.envelope_start_flag = False
        sqw.envelope_decay_level = 15
        sqw.envelope_counter_curr_value = sqw.volume_and_envelope_period
    elif sqw.envelope_counter_curr_value == 0:
        sqw.envelope_counter_curr_value = sqw.volume_and_envelope_period
        if sqw.envelope_decay_level == 0 and sqw.envelope_loop_and_length_counter_halt:
            sqw.envelope_decay_level = 15
        else:
            sqw.envelope_decay_level = max(0, sqw.envelope_decay_level - 1)
    else:
        sqw.envelope_counter_curr_value -= 1

    sqw.envelope_output = (
        sqw.volume_and_envelope_period if sqw.constant_volume else sqw.envelope_decay_level
    )


def _clock_noise_envelope(noise: Noise) -> None:
    if noise.envelope_start_flag:
        noise.envelope_start_flag = False
        noise.envelope_decay_level = 15
        noise.envelope_counter_curr_value = noise.volume_and_envelope_period
    elif noise.envelope_counter_curr_value == 0:
        noise.envelope_counter_curr_value = noise.volume_and_envelope_period
        if noise.envelope_decay_level == 0:
            if noise.envelope_loop_and_length_counter_halt:
                noise.envelope_decay_level = 15
        else:
            noise.envelope_decay_level -= 1
    else:
        noise.envelope_counter_curr_value -= 1

    noise.envelope_output = (
        noise.volume_and_envelope_period if noise.constant_volume else noise.envelope_decay_level
    )


def _clock_noise_length_counter(noise: Noise) -> None:
    if not noise.envelope_loop_and_length_counter_halt:
        noise.length_counter = max(0, noise.length_counter - 1)
    noise.length_counter_mute_signal = noise.length_counter == 0


def _clock_square_length_counter(sqw: Square) -> None:
    if not sqw.envelope_loop_and_length_counter_halt:
        sqw.length_counter = max(0, sqw.length_counter - 1)
    sqw.length_counter_mute_signal = sqw.length_counter == 0


def _clock_square_sweep(sqw: Square, twos_complement: bool) -> None:
    change = sqw.timer_init_value >> sqw.sweep_shift_amount
    target = (sqw.timer_init_value + change) & 0xFFFF
    sqw.sweep_mute_signal = target > _MAX_TIMER_PERIOD

    if sqw.sweep_counter_curr_value == 0 and sqw.sweep_enabled and not sqw.sweep_mute_signal:
        if sqw.sweep_negate:
            change = -change
            # Pulse 1 negates with ones' complement, one lower than pulse 2.
            if not twos_complement:
                change -= 1
        sqw.timer_init_value = (sqw.timer_init_value + change) & 0xFFFF

    sqw.sweep_mute_signal |= sqw.timer_init_value < _MIN_AUDIBLE_PERIOD

    if sqw.sweep_counter_curr_value == 0 or sqw.sweep_reload_flag:
        sqw.sweep_counter_curr_value = sqw.sweep_counter_init_value
        sqw.sweep_reload_flag = False
    else:
        sqw.sweep_counter_curr_value = max(0, sqw.sweep_counter_curr_value - 1)


@dataclass
class Apu:
    """The five sound channels and the frame sequencer that drives them."""

    frame_sequencer_mode_1: bool = False
    frame_sequencer_counter: int = 0
    frame_sequencer_interrupt_inhibit: bool = True
    square1: Square = field(default_factory=Square)
    square2: Square = field(default_factory=Square)
    triangle: Triangle = field(default_factory=Triangle)
    noise: Noise = field(default_factory=Noise)
    sample: Sample = field(default_factory=Sample)
    total_sample_count: int = 0
    interrupt_request: bool = False
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    def asserting_irq(self) -> bool:
        """Whether the frame sequencer or the sample channel requests an IRQ."""
        return self.interrupt_request or self.sample.interrupt_request

    def get_sample(self, stereo_pan: float) -> tuple[float, float]:
        """Mix the channels into a (left, right) pair; ``stereo_pan`` must lie in [0, 1]."""
        if not 0.0 <= stereo_pan <= 1.0:
            raise ValueError(f"stereo pan {stereo_pan} outside [0, 1]")
        sq1 = square_channel_output(self.square1)
        sq2 = square_channel_output(self.square2)
        tri = triangle_channel_output(self.triangle)
        noise = noise_channel_output(self.noise) * 0.5  # noise is mixed too loud otherwise
        dmc = sample_channel_output(self.sample)

        epsilon = 0.00001
        pos_bias = 1.0 + stereo_pan
        neg_bias = 1.0 - stereo_pan
        pulse1_out = 95.88 / ((8128.0 / (pos_bias * sq1 + neg_bias * sq2 + epsilon)) + 100.0)
        pulse2_out = 95.88 / ((8128.0 / (pos_bias * sq2 + neg_bias * sq1 + epsilon)) + 100.0)
        other_out = 159.79 / (
            (1.0 / ((tri / 8227.0) + (noise / 12241.0) + (dmc / 22638.0) + epsilon)) + 100.0
        )
        return pulse1_out + other_out, pulse2_out + other_out

    def step(self, cpu_cycles: int, read_memory: MemoryReader) -> None:
        """Advance the APU by one CPU cycle; ``read_memory`` serves sample fetches."""
        if cpu_cycles % 2 == 0:
            self.clock_frame_sequencer()
            _clock_pulse_timer(self.square1)
            _clock_pulse_timer(self.square2)
            _clock_noise_timer(self.noise, self.rng)
        _clock_triangle_timer(self.triangle)
        self._clock_sample_timer(read_memory)

    def clock_frame_sequencer(self) -> None:
        """Advance the frame sequencer by one APU cycle."""
        counter = self.frame_sequencer_counter
        if counter in (_STEP_1, _STEP_3):
            self._clock_envelopes_and_linear_counter()
        elif counter == _STEP_2:
            self._clock_envelopes_and_linear_counter()
            self._clock_sweeps_and_length_counters()
        elif counter == _STEP_4:
            if not self.frame_sequencer_mode_1:
                if not self.frame_sequencer_interrupt_inhibit:
                    self.interrupt_request = True
                self.frame_sequencer_counter = 0
        elif counter == _STEP_5:
            self._clock_envelopes_and_linear_counter()
            self._clock_sweeps_and_length_counters()
            self.frame_sequencer_counter = 0
        self.frame_sequencer_counter += 1

    def read_status(self, open_bus: int) -> int:
        """Read $4015; clears the frame interrupt flag."""
        result = (
            min(self.square1.length_counter, 1)
            | (min(self.square2.length_counter, 1) << 1)
            | (min(self.triangle.length_counter, 1) << 2)
            | (min(self.noise.length_counter, 1) << 3)
            | (min(self.sample.remaining_sample_bytes, 1) << 4)
            | (open_bus & 0b0010_0000)
            | (int(self.interrupt_request) << 6)
            | (int(self.sample.interrupt_request) << 7)
        )
        self.interrupt_request = False
        return result

    def write_status(self, val: int) -> None:
        """Write $4015: enable or disable each channel."""
        self.sample.interrupt_request = False

        self.square1.enabled = bool(val & 0b1)
        self.square2.enabled = bool(val & 0b10)
        self.triangle.enabled = bool(val & 0b100)
        self.noise.enabled = bool(val & 0b1000)
        self.sample.enabled = bool(val & 0b10000)

        for channel in (self.square1, self.square2, self.triangle, self.noise):
            if not channel.enabled:
                channel.length_counter = 0
        if self.sample.enabled:
            self.sample.remaining_sample_bytes = self.sample.sample_length
            self.sample.curr_sample_addr = self.sample.init_sample_addr
        else:
            self.sample.remaining_sample_bytes = 0

    def write_channel(self, addr: int, val: int) -> None:
        """Write a channel register in $4000-$4013; other addresses are ignored."""
        handler = {
            _PULSE_1_REG_1: self.square1.set_reg1_from_byte,
            _PULSE_1_REG_2: self.square1.set_reg2_from_byte,
            _PULSE_1_REG_3: self.square1.set_reg3_from_byte,
            _PULSE_1_REG_4: self.square1.set_reg4_from_byte,
            _PULSE_2_REG_1: self.square2.set_reg1_from_byte,
            _PULSE_2_REG_2: self.square2.set_reg2_from_byte,
            _PULSE_2_REG_3: self.square2.set_reg3_from_byte,
            _PULSE_2_REG_4: self.square2.set_reg4_from_byte,
            _TRIANGLE_REG_1: self.triangle.set_reg1_from_byte,
            _TRIANGLE_REG_2: self.triangle.set_reg2_from_byte,
            _TRIANGLE_REG_3: self.triangle.set_reg3_from_byte,
            _NOISE_REG_1: self.noise.set_reg1_from_byte,
            _NOISE_REG_2: self.noise.set_reg2_from_byte,
            _NOISE_REG_3: self.noise.set_reg3_from_byte,
            _SAMPLE_REG_1: self.sample.set_reg1_from_byte,
            _SAMPLE_REG_2: self.sample.set_reg2_from_byte,
            _SAMPLE_REG_3: self.sample.set_reg3_from_byte,
            _SAMPLE_REG_4: self.sample.set_reg4_from_byte,
        }.get(addr)
        if handler is not None:
            handler(val)

    def _clock_envelopes_and_linear_counter(self) -> None:
        _clock_square_envelope(self.square1)
        _clock_square_envelope(self.square2)
        _clock_noise_envelope(self.noise)
        _clock_triangle_linear_counter(self.triangle)

    def _clock_sweeps_and_length_counters(self) -> None:
        _clock_square_length_counter(self.square1)
        _clock_square_length_counter(self.square2)
        _clock_square_sweep(self.square1, twos_complement=False)
        _clock_square_sweep(self.square2, twos_complement=True)
        _clock_triangle_length_counter(self.triangle)
        _clock_noise_length_counter(self.noise)

    def _clock_sample_timer(self, read_memory: MemoryReader) -> None:
        dmc = self.sample
        if dmc.curr_timer_value != 0:
            dmc.curr_timer_value -= 1
            return
        dmc.curr_timer_value = dmc.init_timer_value

        if dmc.buffer_bits_remaining == 0 and dmc.remaining_sample_bytes > 0 and dmc.enabled:
            dmc.sample_buffer = read_memory(dmc.curr_sample_addr) & 0xFF
            dmc.buffer_bits_remaining = 8
            # The sample address wraps from $FFFF back to $C000.
            dmc.curr_sample_addr = (dmc.curr_sample_addr + 1) & 0xFFFF
            if dmc.curr_sample_addr == 0:
                dmc.curr_sample_addr = 0xC000

            dmc.remaining_sample_bytes -= 1
            if dmc.remaining_sample_bytes == 0:
                if dmc.loop_sample:
                    dmc.curr_sample_addr = dmc.init_sample_addr
                    dmc.remaining_sample_bytes = dmc.sample_length
                elif dmc.irq_enabled:
                    dmc.interrupt_request = True

        delta = 2 if dmc.sample_buffer & 1 else -2
        dmc.output = max(0, min(0x7F, dmc.output + delta))
        dmc.sample_buffer >>= 1
        if dmc.buffer_bits_remaining > 0:
            dmc.buffer_bits_remaining -= 1