from __future__ import annotations

from enum import IntEnum

import msgspec


class KeyCode(IntEnum):
    """Keyboard codes shared by scan codes and key codes."""

    _1 = 0
    _2 = 1
    _3 = 2
    _4 = 3
    _5 = 4
    _6 = 5
    _7 = 6
    _8 = 7
    _9 = 8
    _0 = 9
    A = 10
    B = 11
    C = 12
    D = 13
    E = 14
    F = 15
    G = 16
    H = 17
    I = 18  # noqa: E741
    J = 19
    K = 20
    L = 21
    M = 22
    N = 23
    O = 24  # noqa: E741
    P = 25
    Q = 26
    R = 27
    S = 28
    T = 29
    U = 30
    V = 31
    W = 32
    X = 33
    Y = 34
    Z = 35
    UP = 36
    DOWN = 37
    LEFT = 38
    RIGHT = 39
    ENTER = 40
    TAB = 41
    LEFT_BRACKET = 42
    RIGHT_BRACKET = 43
    SLASH = 44
    BACKSLASH = 45
    COMMA = 46
    PERIOD = 47
    SEMICOLON = 48
    QUOTE = 49


_PUNCTUATION_NAMES = {
    KeyCode.UP: "Up",
    KeyCode.DOWN: "Down",
    KeyCode.LEFT: "Left",
    KeyCode.RIGHT: "Right",
    KeyCode.ENTER: "Enter",
    KeyCode.TAB: "Tab",
    KeyCode.LEFT_BRACKET: "[",
    KeyCode.RIGHT_BRACKET: "]",
    KeyCode.SLASH: "/",
    KeyCode.BACKSLASH: "\\",
    KeyCode.COMMA: ",",
    KeyCode.PERIOD: ".",
    KeyCode.SEMICOLON: ";",
    KeyCode.QUOTE: "'",
}


class Key(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    """A held key: `scan_code` ignores the keyboard layout, `key_code` follows it."""

    scan_code: KeyCode
    key_code: KeyCode


def key_code_name(code: int) -> str:
    code = int(code)
    try:
        member = KeyCode(code)
    except ValueError:
        return f"KEY_{code}"
    name = _PUNCTUATION_NAMES.get(member)
    if name is not None:
        return name
    # Digits are declared as `_1`.. to stay valid identifiers.
    return member.name.lstrip("_")


def key_code_from_value(value: object) -> KeyCode | None:
    if isinstance(value, KeyCode):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        try:
            return KeyCode(value)
        except ValueError:
            return None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if text.isdigit() and len(text) == 1:
        return KeyCode[f"_{text}"]
    member = KeyCode.__members__.get(text.upper())
    if member is not None:
        return member
    for code, label in _PUNCTUATION_NAMES.items():
        if label.lower() == text.lower():
            return code
    return None


__all__ = [
    "Key",
    "KeyCode",
    "key_code_from_value",
    "key_code_name",
]
