import pytest

from pocketgb.keyboard_map import DEFAULT_BINDINGS, KeyboardMap
from pocketgb.peripherals import JoypadKeys


def test_default_single_key():
    keyboard = KeyboardMap()
    assert keyboard.update_keys(["Z"]) == JoypadKeys.BUTTON_A


def test_default_multiple_keys_combine():
    keyboard = KeyboardMap()
    result = keyboard.update_keys(["Z", "Up", "Return"])
    assert result == JoypadKeys.BUTTON_A | JoypadKeys.UP | JoypadKeys.START


def test_no_keys_and_unbound_keys_give_none():
    keyboard = KeyboardMap()
    assert keyboard.update_keys([]) == JoypadKeys.NONE
    assert keyboard.update_keys(["Q"]) == JoypadKeys.NONE


def test_pressed_keys_are_recorded():
    keyboard = KeyboardMap()
    keyboard.update_keys(iter(["X", "Left"]))
    assert keyboard.pressed_keys == ["X", "Left"]


def test_rebinding_uses_first_pressed_key():
    keyboard = KeyboardMap()
    keyboard.start_rebinding(0)
    assert keyboard.update_keys(["Q"]) == JoypadKeys.BUTTON_A
    assert keyboard.bindings[0] == (JoypadKeys.BUTTON_A, "Q")
    keyboard.cancel_rebinding()
    assert keyboard.update_keys(["Z"]) == JoypadKeys.NONE
    assert keyboard.update_keys(["Q"]) == JoypadKeys.BUTTON_A


def test_escape_is_never_bound():
    keyboard = KeyboardMap()
    keyboard.start_rebinding(1)
    keyboard.update_keys(["Escape"])
    assert keyboard.bindings[1] == DEFAULT_BINDINGS[1]


def test_cancelled_rebinding_leaves_bindings():
    keyboard = KeyboardMap()
    keyboard.start_rebinding(2)
    keyboard.cancel_rebinding()
    keyboard.update_keys(["Q"])
    assert keyboard.bindings == list(DEFAULT_BINDINGS)
    assert keyboard.changing_key_index is None


def test_reset_restores_defaults():
    keyboard = KeyboardMap()
    keyboard.start_rebinding(3)
    keyboard.update_keys(["Q"])
    keyboard.cancel_rebinding()
    keyboard.reset()
    assert keyboard.bindings == list(DEFAULT_BINDINGS)
    assert keyboard.update_keys(["Backspace"]) == JoypadKeys.SELECT


@pytest.mark.parametrize("index", [-1, 8])
def test_start_rebinding_out_of_range(index):
    keyboard = KeyboardMap()
    with pytest.raises(IndexError):
        keyboard.start_rebinding(index)


def test_every_joypad_key_has_a_default_binding():
    keyboard = KeyboardMap()
    all_keys = [key for _, key in DEFAULT_BINDINGS]
    combined = keyboard.update_keys(all_keys)
    for joypad_key, _ in DEFAULT_BINDINGS:
        assert joypad_key in combined