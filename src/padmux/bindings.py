from __future__ import annotations

from collections.abc import Iterable, Mapping

import msgspec

from .key_codes import KeyCode, key_code_from_value

NES_BUTTONS = ("a", "b", "up", "down", "left", "right", "start", "select")


class NesKeyBindings(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    """Scan codes that press each NES button when a keyboard stands in for a pad.

    Every button needs at least one scan code; a code may drive several buttons
    (J is both A and B in the default table).
    """

    a: tuple[KeyCode, ...]
    b: tuple[KeyCode, ...]
    up: tuple[KeyCode, ...]
    down: tuple[KeyCode, ...]
    left: tuple[KeyCode, ...]
    right: tuple[KeyCode, ...]
    start: tuple[KeyCode, ...]
    select: tuple[KeyCode, ...]

    def __post_init__(self) -> None:
        for button in NES_BUTTONS:
            if not getattr(self, button):
                raise ValueError(f"NES button {button!r} has no bound scan code")

    def codes_for(self, button: str) -> tuple[KeyCode, ...]:
        if button not in NES_BUTTONS:
            raise KeyError(button)
        return getattr(self, button)


DEFAULT_NES_KEY_BINDINGS = NesKeyBindings(
    a=(KeyCode.K, KeyCode.X, KeyCode.J),
    b=(KeyCode.J, KeyCode.Z, KeyCode.N),
    up=(KeyCode.W, KeyCode.UP, KeyCode.F),
    down=(KeyCode.S, KeyCode.DOWN),
    left=(KeyCode.A, KeyCode.LEFT, KeyCode.R),
    right=(KeyCode.D, KeyCode.RIGHT, KeyCode.T),
    start=(KeyCode.ENTER,),
    select=(KeyCode.TAB,),
)


def _parse_codes(button: str, raw: object) -> tuple[KeyCode, ...]:
    values: Iterable[object]
    if isinstance(raw, (str, int)):
        values = (raw,)
    elif isinstance(raw, Iterable):
        values = raw
    else:
        raise ValueError(f"NES button {button!r}: expected key names, got {raw!r}")

    out: list[KeyCode] = []
    for value in values:
        code = key_code_from_value(value)
        if code is None:
            raise ValueError(f"NES button {button!r}: unknown key {value!r}")
        if code not in out:
            out.append(code)
    return tuple(out)


def nes_key_bindings_from_mapping(
    overrides: Mapping[str, object],
    *,
    base: NesKeyBindings = DEFAULT_NES_KEY_BINDINGS,
) -> NesKeyBindings:
    """Build a binding table from `{"a": ["K", "X"], ...}`, keeping `base` for omitted buttons."""

    unknown = sorted(set(overrides) - set(NES_BUTTONS))
    if unknown:
        raise ValueError(f"unknown NES buttons: {', '.join(unknown)}")
    fields = {button: base.codes_for(button) for button in NES_BUTTONS}
    for button, raw in overrides.items():
        fields[button] = _parse_codes(button, raw)
    return NesKeyBindings(**fields)


__all__ = [
    "DEFAULT_NES_KEY_BINDINGS",
    "NES_BUTTONS",
    "NesKeyBindings",
    "nes_key_bindings_from_mapping",
]
