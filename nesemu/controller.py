"""The standard NES joypad: button state latched into an 8-bit shift register."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class NesButton(enum.IntFlag):
    """A joypad button, valued by its bit in the controller's report byte."""

    A = 0b0000_0001
    B = 0b0000_0010
    SELECT = 0b0000_0100
    START = 0b0000_1000
    UP = 0b0001_0000
    DOWN = 0b0010_0000
    LEFT = 0b0100_0000
    RIGHT = 0b1000_0000


@dataclass
class NesButtonState:
    """Which joypad buttons are currently held."""

    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    b: bool = False
    a: bool = False
    start: bool = False
    select: bool = False

    def held(self) -> NesButton:
        """The held buttons combined into one flag value."""
        pairs = (
            (self.up, NesButton.UP),
            (self.down, NesButton.DOWN),
            (self.left, NesButton.LEFT),
            (self.right, NesButton.RIGHT),
            (self.b, NesButton.B),
            (self.a, NesButton.A),
            (self.start, NesButton.START),
            (self.select, NesButton.SELECT),
        )
        result = NesButton(0)
        for pressed, button in pairs:
            if pressed:
                result |= button
        return result


@dataclass
class Controller:
    """A joypad as seen from the CPU through $4016/$4017."""

    button_state: int = 0
    shift_register: int = 0
    sr_latch_pin: bool = False

    def shift_out_button_state(self) -> int:
        """Return the next report bit (0 or 1) and shift the register right."""
        bit = self.shift_register & 1
        self.shift_register >>= 1
        return bit

    def write_to_data_latch(self, val: int) -> None:
        """Drive the latch pin with bit 0 of ``val``.

        A falling edge copies the button state into the shift register.
        """
        new_pin = (val & 1) == 1
        if self.sr_latch_pin and not new_pin:
            self.shift_register = self.button_state
        self.sr_latch_pin = new_pin

    def update_button_state(self, pressed_buttons: NesButtonState) -> None:
        """Replace the held buttons with ``pressed_buttons``."""
        self.button_state = int(pressed_buttons.held())