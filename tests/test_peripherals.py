import pytest

from pocketgb.io_registers import Io
from pocketgb.memory_map import MemoryMap
from pocketgb.peripherals import JoypadKeys, Peripherals
from pocketgb.ppu import Ppu


@pytest.fixture
def memory():
    return MemoryMap.after_boot()


@pytest.fixture
def peripherals():
    return Peripherals(Ppu())


@pytest.mark.parametrize(
    "key, label",
    [
        (JoypadKeys.BUTTON_A, "Button A"),
        (JoypadKeys.BUTTON_B, "Button B"),
        (JoypadKeys.SELECT, "Select"),
        (JoypadKeys.START, "Start"),
        (JoypadKeys.RIGHT, "Right"),
        (JoypadKeys.LEFT, "Left"),
        (JoypadKeys.UP, "Up"),
        (JoypadKeys.DOWN, "Down"),
    ],
)
def test_label_of_single_key(key, label):
    assert key.label() == label


def test_label_of_none_and_combination_is_empty():
    assert JoypadKeys.NONE.label() == ""
    assert (JoypadKeys.BUTTON_A | JoypadKeys.UP).label() == ""


def test_key_combination_contains_both_keys(memory, peripherals):
    combined = JoypadKeys.BUTTON_A | JoypadKeys.START
    assert JoypadKeys.BUTTON_A in combined
    assert JoypadKeys.START in combined
    assert JoypadKeys.UP not in combined
    memory.set_io(Io.JOYP, 0x10)
    peripherals.update_joypad_keys(combined)
    peripherals.update_joypad(memory)
    # Button A (bit 0) and Start (bit 3) read as pressed (low).
    assert memory.get_io(Io.JOYP) & 0xF == 0x6


def test_joypad_reset_when_no_group_selected(memory, peripherals):
    memory.set_io(Io.JOYP, 0x30)
    peripherals.update_joypad(memory)
    assert memory.get_io(Io.JOYP) == 0xFF


def test_joypad_buttons_group(memory, peripherals):
    memory.set_io(Io.JOYP, 0x10)
    memory.set_io(Io.IF, 0)
    peripherals.update_joypad_keys(JoypadKeys.BUTTON_A)
    peripherals.update_joypad(memory)
    joyp = memory.get_io(Io.JOYP)
    assert joyp & 0xF0 == 0x10
    assert joyp & int(JoypadKeys.BUTTON_A) == 0
    assert joyp & int(JoypadKeys.START) == int(JoypadKeys.START)
    assert memory.get_io(Io.IF) & 0x10 == 0x10


def test_joypad_direction_group(memory, peripherals):
    memory.set_io(Io.JOYP, 0x20)
    memory.set_io(Io.IF, 0)
    peripherals.update_joypad_keys(JoypadKeys.DOWN | JoypadKeys.BUTTON_A)
    peripherals.update_joypad(memory)
    joyp = memory.get_io(Io.JOYP)
    # DOWN is bit 3 of the direction nibble; BUTTON_A does not show here.
    assert joyp & 0x8 == 0
    assert joyp & 0x1 == 0x1
    assert memory.get_io(Io.IF) & 0x10 == 0x10


def test_joypad_no_keys_no_interrupt(memory, peripherals):
    memory.set_io(Io.JOYP, 0x10)
    memory.set_io(Io.IF, 0)
    peripherals.update_joypad(memory)
    assert memory.get_io(Io.JOYP) & 0xF == 0xF
    assert memory.get_io(Io.IF) & 0x10 == 0


def test_joypad_both_groups_selected_is_left_alone(memory, peripherals):
    memory.set_io(Io.JOYP, 0x00)
    peripherals.update_joypad_keys(JoypadKeys.START)
    peripherals.update_joypad(memory)
    assert memory.get_io(Io.JOYP) == 0x00


def test_tima_increments_on_timer_tick(memory, peripherals):
    memory.set_io(Io.TAC, 0x04)
    memory.set_io(Io.TIMA, 0x10)
    peripherals.base_clock = 0
    peripherals.increment_tima(memory)
    assert memory.get_io(Io.TIMA) == 0x11


def test_tima_waits_between_ticks(memory, peripherals):
    memory.set_io(Io.TAC, 0x04)
    memory.set_io(Io.TIMA, 0x10)
    peripherals.base_clock = 4
    peripherals.increment_tima(memory)
    assert memory.get_io(Io.TIMA) == 0x10


def test_tima_stopped_timer_does_not_count(memory, peripherals):
    memory.set_io(Io.TAC, 0x00)
    memory.set_io(Io.TIMA, 0x10)
    peripherals.base_clock = 0
    peripherals.increment_tima(memory)
    assert memory.get_io(Io.TIMA) == 0x10


def test_tima_overflow_reloads_and_interrupts(memory, peripherals):
    memory.set_io(Io.TAC, 0x05)
    memory.set_io(Io.TIMA, 0xFF)
    memory.set_io(Io.TMA, 0x42)
    memory.set_io(Io.IF, 0)
    peripherals.base_clock = 0
    peripherals.increment_tima(memory)
    assert memory.get_io(Io.TIMA) == 0x42
    assert memory.get_io(Io.IF) & 0x4 == 0x4


def test_update_increments_div_and_steps_ppu(memory, peripherals):
    before = memory.get_io(Io.DIV)
    peripherals.base_clock = 0
    peripherals.update(memory)
    assert memory.get_io(Io.DIV) == (before + 1) & 0xFF
    assert peripherals.ppu.clock_cycles == 4


def test_update_does_not_increment_div_off_period(memory, peripherals):
    before = memory.get_io(Io.DIV)
    peripherals.base_clock = 4
    peripherals.update(memory)
    assert memory.get_io(Io.DIV) == before


def test_stopped_peripherals_do_nothing(memory, peripherals):
    before = memory.get_io(Io.DIV)
    peripherals.stopped = True
    peripherals.update(memory)
    assert memory.get_io(Io.DIV) == before
    assert peripherals.ppu.clock_cycles == 0


def test_sync_advances_base_clock_and_updates(memory, peripherals):
    before = memory.get_io(Io.DIV)
    peripherals.base_clock = 252
    peripherals.sync(memory)
    assert peripherals.base_clock == 256
    assert memory.get_io(Io.DIV) == (before + 1) & 0xFF