"""Timers, divider, joypad and PPU stepping that run alongside the CPU."""

from __future__ import annotations

from enum import IntFlag
from typing import TYPE_CHECKING

from .io_registers import Io
from .ppu import PPU_CLOCK_RATE

if TYPE_CHECKING:
    from .memory_map import MemoryMap
    from .ppu import Ppu

CPU_CLOCK_RATE = 4_194_304
DIV_REGISTER_CLOCK_RATE = 16_384

# Input clock selected by the two low bits of TAC.
_TIMER_CLOCKS = (4096, 262_144, 65_536, 16_384)

_TIMER_INTERRUPT = 0x04
_JOYPAD_INTERRUPT = 0x10


class JoypadKeys(IntFlag):
    """Joypad buttons; the low nibble holds buttons, the high nibble directions."""

    NONE = 0x00

    BUTTON_A = 0x01
    BUTTON_B = 0x02
    SELECT = 0x04
    START = 0x08

    RIGHT = 0x10
    LEFT = 0x20
    UP = 0x40
    DOWN = 0x80

    def label(self) -> str:
        """Display name of a single key, or an empty string otherwise."""
        return _LABELS.get(int(self), "")


_LABELS = {
    int(JoypadKeys.BUTTON_A): "Button A",
    int(JoypadKeys.BUTTON_B): "Button B",
    int(JoypadKeys.SELECT): "Select",
    int(JoypadKeys.START): "Start",
    int(JoypadKeys.RIGHT): "Right",
    int(JoypadKeys.LEFT): "Left",
    int(JoypadKeys.UP): "Up",
    int(JoypadKeys.DOWN): "Down",
}


class Peripherals:
    """Everything that advances with the base clock besides the CPU.

    ``base_clock`` counts base clock cycles; each :meth:`update` runs one
    4-cycle step of joypad, timer, divider and PPU. While ``stopped`` is
    true (the CPU executed STOP) nothing advances.
    """

    def __init__(self, ppu: Ppu) -> None:
        self.ppu = ppu
        self.base_clock = 0
        self.joypad_keys = JoypadKeys.NONE
        self.stopped = False

    def update(self, memory_map: MemoryMap) -> None:
        """Advance joypad, timer, divider and PPU by one step."""
        if self.stopped:
            return

        self.update_joypad(memory_map)
        self.increment_tima(memory_map)

        if self.base_clock % (CPU_CLOCK_RATE // DIV_REGISTER_CLOCK_RATE) == 0:
            memory_map.increment_div()

        self.ppu.cycle(memory_map, (PPU_CLOCK_RATE * 4) // CPU_CLOCK_RATE)

    def sync(self, memory_map: MemoryMap) -> None:
        """Catch up with the CPU by one 4-cycle step; used as a memory sync hook."""
        self.base_clock += 4
        self.update(memory_map)

    def increment_tima(self, memory_map: MemoryMap) -> None:
        """Count TIMA at the rate TAC selects, reloading from TMA on overflow."""
        tac = memory_map.cpu_get_io(Io.TAC)
        timer_clock = _TIMER_CLOCKS[tac & 0x3]

        if tac & 0x4 == 0:
            return
        if self.base_clock % (CPU_CLOCK_RATE // timer_clock) != 0:
            return

        tima = memory_map.cpu_get_io(Io.TIMA)
        if tima < 0xFF:
            memory_map.cpu_set_io(Io.TIMA, tima + 1)
        else:
            # Overflow: reload from TMA and request a timer interrupt.
            memory_map.cpu_set_io(Io.TIMA, memory_map.cpu_get_io(Io.TMA))
            memory_map.cpu_set_io(Io.IF, memory_map.cpu_get_io(Io.IF) | _TIMER_INTERRUPT)

    def update_joypad(self, memory_map: MemoryMap) -> None:
        """Reflect the pressed keys in JOYP for the selected key group."""
        joyp = memory_map.cpu_get_io(Io.JOYP)
        pressed = int(self.joypad_keys)

        if joyp & 0x30 == 0x30:
            memory_map.cpu_set_io(Io.JOYP, 0xFF)
            return
        if joyp & 0x10:
            keys = ~pressed & 0xF
        elif joyp & 0x20:
            keys = ~(pressed >> 4) & 0xF
        else:
            return

        memory_map.cpu_set_io(Io.JOYP, (joyp & 0xF0) | keys)

        if keys != 0xF:
            memory_map.cpu_set_io(Io.IF, memory_map.cpu_get_io(Io.IF) | _JOYPAD_INTERRUPT)

    def update_joypad_keys(self, keys: JoypadKeys) -> None:
        """Set the keys that are currently held down."""
        self.joypad_keys = JoypadKeys(keys)