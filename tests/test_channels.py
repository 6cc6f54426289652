import pytest

from nesemu.channels import (
    LENGTH_TABLE,
    NOISE_PERIOD_TABLE,
    SAMPLE_RATE_TABLE,
    Noise,
    Sample,
    Square,
    Triangle,
)


@pytest.mark.parametrize("duty", range(4))
@pytest.mark.parametrize("halt", [False, True])
@pytest.mark.parametrize("const", [False, True])
@pytest.mark.parametrize("volume", [0, 7, 15])
def test_square_reg1_round_trip(duty, halt, const, volume):
    sq = Square()
    sq.set_reg1_from_byte((duty << 6) | (int(halt) << 5) | (int(const) << 4) | volume)
    assert sq.duty_cycle == duty
    assert sq.envelope_loop_and_length_counter_halt is halt
    assert sq.constant_volume is const
    assert sq.volume_and_envelope_period == volume


@pytest.mark.parametrize("enabled", [False, True])
@pytest.mark.parametrize("period", [0, 3, 7])
@pytest.mark.parametrize("negate", [False, True])
@pytest.mark.parametrize("shift", [0, 5, 7])
def test_square_reg2_round_trip(enabled, period, negate, shift):
    sq = Square()
    sq.set_reg2_from_byte((int(enabled) << 7) | (period << 4) | (int(negate) << 3) | shift)
    assert sq.sweep_enabled is enabled
    assert sq.sweep_counter_init_value == period
    assert sq.sweep_negate is negate
    assert sq.sweep_shift_amount == shift


def test_square_timer_split_across_registers():
    sq = Square()
    sq.set_reg3_from_byte(0x34)
    sq.set_reg4_from_byte(0x05)
    assert sq.timer_init_value & 0xFF == 0x34
    assert sq.timer_init_value >> 8 == 0x05


def test_square_reg3_keeps_high_bits():
    sq = Square()
    sq.set_reg4_from_byte(0x07)
    sq.set_reg3_from_byte(0x12)
    sq.set_reg3_from_byte(0xAB)
    assert sq.timer_init_value >> 8 == 0x07
    assert sq.timer_init_value & 0xFF == 0xAB


@pytest.mark.parametrize("index", range(32))
def test_square_reg4_loads_length_and_starts_envelope(index):
    sq = Square()
    sq.set_reg4_from_byte(index << 3)
    assert sq.length_counter == LENGTH_TABLE[index]
    assert sq.envelope_start_flag is True
    assert sq.timer_init_value >> 8 == 0


def test_triangle_registers():
    tri = Triangle()
    tri.set_reg1_from_byte(0x80 | 0x45)
    assert tri.length_counter_halt_and_linear_counter_control is True
    assert tri.linear_counter_init_value == 0x45
    tri.set_reg2_from_byte(0x9C)
    tri.set_reg3_from_byte((3 << 3) | 0x02)
    assert tri.timer_init_value & 0xFF == 0x9C
    assert tri.timer_init_value >> 8 == 0x02
    assert tri.length_counter == LENGTH_TABLE[3]
    assert tri.linear_counter_reload_flag is True


def test_triangle_control_clear():
    tri = Triangle()
    tri.set_reg1_from_byte(0x7F)
    assert tri.length_counter_halt_and_linear_counter_control is False
    assert tri.linear_counter_init_value == 0x7F


@pytest.mark.parametrize("index", range(16))
def test_noise_period_lookup(index):
    noise = Noise()
    noise.set_reg2_from_byte(0x80 | index)
    assert noise.mode is True
    assert noise.timer_init_value == NOISE_PERIOD_TABLE[index]


def test_noise_reg1_and_reg3():
    noise = Noise()
    noise.set_reg1_from_byte(0b0011_1010)
    assert noise.envelope_loop_and_length_counter_halt is True
    assert noise.constant_volume is True
    assert noise.volume_and_envelope_period == 0b1010
    noise.set_reg3_from_byte(5 << 3)
    assert noise.length_counter == LENGTH_TABLE[5]
    assert noise.envelope_start_flag is True


@pytest.mark.parametrize("index", range(16))
def test_sample_rate_lookup(index):
    sample = Sample()
    sample.set_reg1_from_byte(0xC0 | index)
    assert sample.irq_enabled is True
    assert sample.loop_sample is True
    assert sample.init_timer_value == SAMPLE_RATE_TABLE[index]


def test_sample_disabling_irq_clears_request():
    sample = Sample(interrupt_request=True)
    sample.set_reg1_from_byte(0x80)
    assert sample.interrupt_request is True
    sample.set_reg1_from_byte(0x00)
    assert sample.interrupt_request is False


def test_sample_output_is_seven_bits():
    sample = Sample()
    sample.set_reg2_from_byte(0xFF)
    assert sample.output == 0x7F
    sample.set_reg2_from_byte(0x25)
    assert sample.output == 0x25


def test_sample_address():
    sample = Sample()
    sample.set_reg3_from_byte(0)
    assert sample.init_sample_addr == 0xC000
    sample.set_reg3_from_byte(0xFF)
    assert sample.init_sample_addr == 0xFFC0


def test_sample_length_grows_by_sixteen_per_step():
    sample = Sample()
    sample.set_reg4_from_byte(0)
    assert sample.sample_length == 1
    lengths = []
    for value in (1, 2, 3):
        sample.set_reg4_from_byte(value)
        lengths.append(sample.sample_length)
    assert [b - a for a, b in zip([1] + lengths, lengths)] == [16, 16, 16]