from __future__ import annotations

from padmux.devices import Keyboard
from padmux.key_codes import Key, KeyCode


def test_key_down_replaces_entry_for_same_scan_code() -> None:
    keyboard = Keyboard().key_down(Key(scan_code=KeyCode.Q, key_code=KeyCode.Q))
    keyboard = keyboard.key_down(Key(scan_code=KeyCode.W, key_code=KeyCode.W))
    keyboard = keyboard.key_down(Key(scan_code=KeyCode.Q, key_code=KeyCode.A))

    assert keyboard.pressed == (
        Key(scan_code=KeyCode.W, key_code=KeyCode.W),
        Key(scan_code=KeyCode.Q, key_code=KeyCode.A),
    )
    assert keyboard.is_down_scan(KeyCode.Q)
    assert keyboard.is_down_key(KeyCode.A)
    assert not keyboard.is_down_key(KeyCode.Q)


def test_key_up_removes_by_scan_code() -> None:
    keyboard = Keyboard(pressed=(Key(scan_code=KeyCode.Z, key_code=KeyCode.W),))
    assert keyboard.key_up(KeyCode.W) == keyboard
    released = keyboard.key_up(KeyCode.Z)
    assert released.pressed == ()
    assert not released.is_down_scan(KeyCode.Z)


def test_key_down_returns_new_keyboard() -> None:
    keyboard = Keyboard()
    pressed = keyboard.key_down(Key(scan_code=KeyCode.ENTER, key_code=KeyCode.ENTER))
    assert keyboard.pressed == ()
    assert pressed.is_down_scan(KeyCode.ENTER)


def test_constructor_keeps_one_entry_per_scan_code() -> None:
    keyboard = Keyboard(
        pressed=(
            Key(scan_code=KeyCode.A, key_code=KeyCode.A),
            Key(scan_code=KeyCode.B, key_code=KeyCode.B),
            Key(scan_code=KeyCode.A, key_code=KeyCode.Q),
        )
    )
    assert keyboard.pressed == (
        Key(scan_code=KeyCode.B, key_code=KeyCode.B),
        Key(scan_code=KeyCode.A, key_code=KeyCode.Q),
    )


def test_from_scan_codes_uses_scan_code_as_key_code() -> None:
    keyboard = Keyboard.from_scan_codes(KeyCode.LEFT, KeyCode.SLASH)
    assert keyboard.is_down_key(KeyCode.LEFT)
    assert keyboard.is_down_scan(KeyCode.SLASH)
    assert not keyboard.is_down_scan(KeyCode.RIGHT)
