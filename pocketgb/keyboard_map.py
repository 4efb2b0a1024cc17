"""Mapping of keyboard keys to joypad keys, with rebinding."""

from __future__ import annotations

from collections.abc import Hashable, Iterable

from .peripherals import JoypadKeys

ESCAPE = "Escape"

DEFAULT_BINDINGS: tuple[tuple[JoypadKeys, Hashable], ...] = (
    (JoypadKeys.BUTTON_A, "Z"),
    (JoypadKeys.BUTTON_B, "X"),
    (JoypadKeys.START, "Return"),
    (JoypadKeys.SELECT, "Backspace"),
    (JoypadKeys.LEFT, "Left"),
    (JoypadKeys.RIGHT, "Right"),
    (JoypadKeys.DOWN, "Down"),
    (JoypadKeys.UP, "Up"),
)


class KeyboardMap:
    """Turns the set of pressed keyboard keys into joypad keys.

    While a binding is being changed (see :meth:`start_rebinding`), the first
    pressed key other than Escape is bound to that joypad key on each update
    until :meth:`cancel_rebinding` is called.
    """

    def __init__(self) -> None:
        self.bindings: list[tuple[JoypadKeys, Hashable]] = list(DEFAULT_BINDINGS)
        self.pressed_keys: list[Hashable] = []
        self.changing_key_index: int | None = None

    def update_keys(self, pressed_keys: Iterable[Hashable]) -> JoypadKeys:
        """Record the pressed keys and return the joypad keys they hold down."""
        self.pressed_keys = list(pressed_keys)

        index = self.changing_key_index
        if index is not None and self.pressed_keys:
            key = self.pressed_keys[0]
            if key != ESCAPE:
                self.bindings[index] = (self.bindings[index][0], key)

        joypad_keys = JoypadKeys.NONE
        for joypad_key, keyboard_key in self.bindings:
            if keyboard_key in self.pressed_keys:
                joypad_keys |= joypad_key
        return joypad_keys

    def reset(self) -> None:
        """Restore the default bindings."""
        self.bindings = list(DEFAULT_BINDINGS)

    def start_rebinding(self, index: int) -> None:
        """Wait for a key press to bind to the joypad key at ``index``."""
        if not 0 <= index < len(self.bindings):
            raise IndexError(f"binding index {index} out of range")
        self.changing_key_index = index

    def cancel_rebinding(self) -> None:
        self.changing_key_index = None