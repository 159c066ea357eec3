from __future__ import annotations

import pyray as rl

from .devices import Controller, Keyboard, trigger_from_signed_unit
from .key_codes import Key, KeyCode
from .pool import DevicePool

MAX_GAMEPADS = 4


def _rl_key_for_code(code: KeyCode) -> int:
    mapped = {
        KeyCode._1: rl.KeyboardKey.KEY_ONE,
        KeyCode._2: rl.KeyboardKey.KEY_TWO,
        KeyCode._3: rl.KeyboardKey.KEY_THREE,
        KeyCode._4: rl.KeyboardKey.KEY_FOUR,
        KeyCode._5: rl.KeyboardKey.KEY_FIVE,
        KeyCode._6: rl.KeyboardKey.KEY_SIX,
        KeyCode._7: rl.KeyboardKey.KEY_SEVEN,
        KeyCode._8: rl.KeyboardKey.KEY_EIGHT,
        KeyCode._9: rl.KeyboardKey.KEY_NINE,
        KeyCode._0: rl.KeyboardKey.KEY_ZERO,
        KeyCode.UP: rl.KeyboardKey.KEY_UP,
        KeyCode.DOWN: rl.KeyboardKey.KEY_DOWN,
        KeyCode.LEFT: rl.KeyboardKey.KEY_LEFT,
        KeyCode.RIGHT: rl.KeyboardKey.KEY_RIGHT,
        KeyCode.ENTER: rl.KeyboardKey.KEY_ENTER,
        KeyCode.TAB: rl.KeyboardKey.KEY_TAB,
        KeyCode.LEFT_BRACKET: rl.KeyboardKey.KEY_LEFT_BRACKET,
        KeyCode.RIGHT_BRACKET: rl.KeyboardKey.KEY_RIGHT_BRACKET,
        KeyCode.SLASH: rl.KeyboardKey.KEY_SLASH,
        KeyCode.BACKSLASH: rl.KeyboardKey.KEY_BACKSLASH,
        KeyCode.COMMA: rl.KeyboardKey.KEY_COMMA,
        KeyCode.PERIOD: rl.KeyboardKey.KEY_PERIOD,
        KeyCode.SEMICOLON: rl.KeyboardKey.KEY_SEMICOLON,
        KeyCode.QUOTE: rl.KeyboardKey.KEY_APOSTROPHE,
    }.get(code)
    if mapped is None:
        # Letters share their name with raylib's `KEY_<letter>` members.
        mapped = getattr(rl.KeyboardKey, f"KEY_{code.name}")
    return int(mapped)


def poll_keyboard() -> Keyboard:
    """Snapshot of every mapped key currently held.

    raylib reports keys by US-layout position only, so each key's scan code and
    key code are the same.
    """

    pressed: list[Key] = []
    for code in KeyCode:
        if rl.is_key_down(_rl_key_for_code(code)):
            pressed.append(Key(scan_code=code, key_code=code))
    return Keyboard(pressed=tuple(pressed))


def poll_gamepad(gamepad: int) -> Controller:
    button = rl.GamepadButton
    axis = rl.GamepadAxis

    def down(which: int) -> bool:
        return bool(rl.is_gamepad_button_down(gamepad, which))

    def axis_value(which: int) -> float:
        return float(rl.get_gamepad_axis_movement(gamepad, which))

    return Controller(
        a=down(button.GAMEPAD_BUTTON_RIGHT_FACE_DOWN),
        b=down(button.GAMEPAD_BUTTON_RIGHT_FACE_RIGHT),
        x=down(button.GAMEPAD_BUTTON_RIGHT_FACE_LEFT),
        y=down(button.GAMEPAD_BUTTON_RIGHT_FACE_UP),
        up=down(button.GAMEPAD_BUTTON_LEFT_FACE_UP),
        down=down(button.GAMEPAD_BUTTON_LEFT_FACE_DOWN),
        left=down(button.GAMEPAD_BUTTON_LEFT_FACE_LEFT),
        right=down(button.GAMEPAD_BUTTON_LEFT_FACE_RIGHT),
        start=down(button.GAMEPAD_BUTTON_MIDDLE_RIGHT),
        select=down(button.GAMEPAD_BUTTON_MIDDLE_LEFT),
        guide=down(button.GAMEPAD_BUTTON_MIDDLE),
        left_shoulder=down(button.GAMEPAD_BUTTON_LEFT_TRIGGER_1),
        right_shoulder=down(button.GAMEPAD_BUTTON_RIGHT_TRIGGER_1),
        left_stick=down(button.GAMEPAD_BUTTON_LEFT_THUMB),
        right_stick=down(button.GAMEPAD_BUTTON_RIGHT_THUMB),
        left_stick_x=axis_value(axis.GAMEPAD_AXIS_LEFT_X),
        left_stick_y=axis_value(axis.GAMEPAD_AXIS_LEFT_Y),
        right_stick_x=axis_value(axis.GAMEPAD_AXIS_RIGHT_X),
        right_stick_y=axis_value(axis.GAMEPAD_AXIS_RIGHT_Y),
        # raylib reports triggers in [-1, 1] with -1 released.
        left_trigger=trigger_from_signed_unit(axis_value(axis.GAMEPAD_AXIS_LEFT_TRIGGER)),
        right_trigger=trigger_from_signed_unit(axis_value(axis.GAMEPAD_AXIS_RIGHT_TRIGGER)),
    )


class RaylibInputPoller:
    """Builds the per-frame device pool from raylib's keyboard and gamepad state."""

    def __init__(self, *, include_keyboard: bool = True, max_gamepads: int = MAX_GAMEPADS) -> None:
        self.include_keyboard = bool(include_keyboard)
        self.max_gamepads = max(0, int(max_gamepads))

    def poll(self) -> DevicePool:
        pool = DevicePool()
        if self.include_keyboard:
            pool.add_input(poll_keyboard())
        for gamepad in range(self.max_gamepads):
            if not rl.is_gamepad_available(gamepad):
                continue
            pool.add_input(poll_gamepad(gamepad))
        return pool


__all__ = [
    "MAX_GAMEPADS",
    "RaylibInputPoller",
    "poll_gamepad",
    "poll_keyboard",
]
