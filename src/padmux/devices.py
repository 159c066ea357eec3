from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum
import math
from typing import TypeAlias

import msgspec

from .bindings import DEFAULT_NES_KEY_BINDINGS, NesKeyBindings
from .key_codes import Key, KeyCode

STICK_DIGITAL_THRESHOLD = 0.5


class DeviceType(IntEnum):
    """Device shape a player asks for, or a device is asked to become."""

    NES = 0
    CONTROLLER = 1
    KEYBOARD = 2


def device_type_from_value(value: object) -> DeviceType | None:
    if isinstance(value, DeviceType):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        try:
            return DeviceType(value)
        except ValueError:
            return None
    if isinstance(value, str):
        return DeviceType.__members__.get(value.strip().upper())
    return None


class Nes(msgspec.Struct, frozen=True, tag_field="kind", tag="nes", forbid_unknown_fields=True):
    """NES style pad: a d-pad, two face buttons, start and select."""

    a: bool = False
    b: bool = False
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    start: bool = False
    select: bool = False

    def combine(self, other: Nes) -> Nes:
        return Nes(
            a=self.a or other.a,
            b=self.b or other.b,
            up=self.up or other.up,
            down=self.down or other.down,
            left=self.left or other.left,
            right=self.right or other.right,
            start=self.start or other.start,
            select=self.select or other.select,
        )


class Controller(msgspec.Struct, frozen=True, tag_field="kind", tag="controller", forbid_unknown_fields=True):
    """Dual-stick pad in the XBox 360 layout.

    Stick axes are in [-1, 1] with -1 meaning left/up; triggers are in [0, 1]
    with 1 fully pulled.
    """

    a: bool = False
    b: bool = False
    x: bool = False
    y: bool = False
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    start: bool = False
    select: bool = False
    guide: bool = False
    left_shoulder: bool = False
    right_shoulder: bool = False
    left_stick: bool = False
    right_stick: bool = False
    left_stick_x: float = 0.0
    left_stick_y: float = 0.0
    right_stick_x: float = 0.0
    right_stick_y: float = 0.0
    left_trigger: float = 0.0
    right_trigger: float = 0.0

    def to_nes(self) -> Nes:
        threshold = STICK_DIGITAL_THRESHOLD
        return Nes(
            a=self.a,
            b=self.b,
            up=self.up or self.left_stick_y < -threshold,
            down=self.down or self.left_stick_y >= threshold,
            left=self.left or self.left_stick_x < -threshold,
            right=self.right or self.left_stick_x >= threshold,
            start=self.start,
            select=self.select,
        )

    def combine(self, other: Controller) -> Controller:
        # Axes keep the larger value so a full deflection on either pad survives.
        return Controller(
            a=self.a or other.a,
            b=self.b or other.b,
            x=self.x or other.x,
            y=self.y or other.y,
            up=self.up or other.up,
            down=self.down or other.down,
            left=self.left or other.left,
            right=self.right or other.right,
            start=self.start or other.start,
            select=self.select or other.select,
            guide=self.guide or other.guide,
            left_shoulder=self.left_shoulder or other.left_shoulder,
            right_shoulder=self.right_shoulder or other.right_shoulder,
            left_stick=self.left_stick or other.left_stick,
            right_stick=self.right_stick or other.right_stick,
            left_stick_x=_max_axis(self.left_stick_x, other.left_stick_x),
            left_stick_y=_max_axis(self.left_stick_y, other.left_stick_y),
            right_stick_x=_max_axis(self.right_stick_x, other.right_stick_x),
            right_stick_y=_max_axis(self.right_stick_y, other.right_stick_y),
            left_trigger=_max_axis(self.left_trigger, other.left_trigger),
            right_trigger=_max_axis(self.right_trigger, other.right_trigger),
        )


def _max_axis(value: float, other: float) -> float:
    # A NaN reading loses to any real one on either side.
    if math.isnan(value):
        return other
    if math.isnan(other):
        return value
    return max(value, other)


def _dedupe_by_scan_code(keys: Iterable[Key]) -> tuple[Key, ...]:
    # Later entries win and move to the end, matching a re-press.
    out: list[Key] = []
    for key in keys:
        out = [held for held in out if held.scan_code != key.scan_code]
        out.append(key)
    return tuple(out)


class Keyboard(msgspec.Struct, frozen=True, tag_field="kind", tag="keyboard", forbid_unknown_fields=True):
    """Keys currently held, at most one entry per scan code."""

    pressed: tuple[Key, ...] = ()

    def __post_init__(self) -> None:
        pressed = _dedupe_by_scan_code(self.pressed)
        if pressed != self.pressed:
            msgspec.structs.force_setattr(self, "pressed", pressed)

    @classmethod
    def from_scan_codes(cls, *scan_codes: KeyCode) -> Keyboard:
        """Keyboard with each code held, using the scan code as the key code."""

        return cls(pressed=tuple(Key(scan_code=code, key_code=code) for code in scan_codes))

    def key_down(self, key: Key) -> Keyboard:
        return Keyboard(pressed=(*self.key_up(key.scan_code).pressed, key))

    def key_up(self, scan_code: KeyCode) -> Keyboard:
        return Keyboard(pressed=tuple(key for key in self.pressed if key.scan_code != scan_code))

    def is_down_scan(self, scan_code: KeyCode) -> bool:
        return any(key.scan_code == scan_code for key in self.pressed)

    def is_down_key(self, key_code: KeyCode) -> bool:
        return any(key.key_code == key_code for key in self.pressed)

    def to_nes(self, bindings: NesKeyBindings | None = None) -> Nes:
        table = DEFAULT_NES_KEY_BINDINGS if bindings is None else bindings

        def held(codes: tuple[KeyCode, ...]) -> bool:
            return any(self.is_down_scan(code) for code in codes)

        return Nes(
            a=held(table.a),
            b=held(table.b),
            up=held(table.up),
            down=held(table.down),
            left=held(table.left),
            right=held(table.right),
            start=held(table.start),
            select=held(table.select),
        )

    def combine(self, other: Keyboard) -> Keyboard:
        result = self
        for key in other.pressed:
            result = result.key_down(key)
        return result


Device: TypeAlias = Nes | Controller | Keyboard


def device_type_of(device: Device) -> DeviceType:
    match device:
        case Nes():
            return DeviceType.NES
        case Controller():
            return DeviceType.CONTROLLER
        case Keyboard():
            return DeviceType.KEYBOARD
    raise TypeError(f"not an input device: {device!r}")


def affinity(device: Device, device_type: DeviceType) -> int | None:
    """How well `device` stands in for `device_type`; lower is closer, None is impossible.

    A pad is a closer fit for an NES request than a keyboard is.
    """

    match device, device_type:
        case Nes(), DeviceType.NES:
            return 0
        case Controller(), DeviceType.CONTROLLER:
            return 0
        case Controller(), DeviceType.NES:
            return 1
        case Keyboard(), DeviceType.KEYBOARD:
            return 0
        case Keyboard(), DeviceType.NES:
            return 2
    return None


def convert(
    device: Device,
    device_type: DeviceType,
    *,
    bindings: NesKeyBindings | None = None,
) -> Device | None:
    """Project `device` into `device_type`, or None when `affinity` is None."""

    match device, device_type:
        case Nes(), DeviceType.NES:
            return device
        case Controller(), DeviceType.CONTROLLER:
            return device
        case Controller(), DeviceType.NES:
            return device.to_nes()
        case Keyboard(), DeviceType.KEYBOARD:
            return device
        case Keyboard(), DeviceType.NES:
            return device.to_nes(bindings)
    return None


def combine(device: Device, other: Device, *, bindings: NesKeyBindings | None = None) -> Device:
    """Merge `other` into `device`, keeping `device`'s shape.

    A mismatched `other` is converted first; if it cannot be, `device` is returned unchanged.
    """

    converted = convert(other, device_type_of(device), bindings=bindings)
    match device, converted:
        case Nes(), Nes():
            return device.combine(converted)
        case Controller(), Controller():
            return device.combine(converted)
        case Keyboard(), Keyboard():
            return device.combine(converted)
    return device


def controller_axis_from_raw(value: int) -> float:
    """Map a signed 16-bit stick reading onto [-1, 1]."""

    value = int(value)
    if value > 0:
        return min(1.0, value / 32767.0)
    return max(-1.0, value / 32768.0)


def trigger_from_signed_unit(value: float) -> float:
    """Map a trigger reported in [-1, 1] (released at -1) onto [0, 1]."""

    mapped = (float(value) + 1.0) * 0.5
    if mapped < 0.0:
        return 0.0
    if mapped > 1.0:
        return 1.0
    return mapped


__all__ = [
    "Controller",
    "Device",
    "DeviceType",
    "Keyboard",
    "Nes",
    "STICK_DIGITAL_THRESHOLD",
    "affinity",
    "combine",
    "controller_axis_from_raw",
    "convert",
    "device_type_from_value",
    "device_type_of",
    "trigger_from_signed_unit",
]
