from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .bindings import NesKeyBindings
from .devices import Device, DeviceType, affinity, combine, convert


@dataclass(slots=True)
class DevicePool:
    """Devices reported in one frame, kept in insertion order.

    Order only breaks ties during assignment; it never ranks device kinds.
    """

    devices: list[Device] = field(default_factory=list)

    @classmethod
    def of(cls, *devices: Device) -> DevicePool:
        return cls(devices=list(devices))

    def add_input(self, device: Device) -> None:
        self.devices.append(device)

    def extend(self, devices: Iterable[Device]) -> None:
        self.devices.extend(devices)

    def combined(self, other: DevicePool) -> DevicePool:
        return DevicePool(devices=[*self.devices, *other.devices])

    def __len__(self) -> int:
        return len(self.devices)

    def __iter__(self) -> Iterator[Device]:
        return iter(self.devices)

    def __bool__(self) -> bool:
        return bool(self.devices)

    def affinity(self, device_type: DeviceType) -> int | None:
        best: int | None = None
        for device in self.devices:
            score = affinity(device, device_type)
            if score is None:
                continue
            if best is None or score < best:
                best = score
        return best

    def convert(self, device_type: DeviceType, *, bindings: NesKeyBindings | None = None) -> Device | None:
        """Convert every member that can become `device_type` and fold them together in pool order."""

        result: Device | None = None
        for device in self.devices:
            converted = convert(device, device_type, bindings=bindings)
            if converted is None:
                continue
            result = converted if result is None else combine(result, converted, bindings=bindings)
        return result


__all__ = ["DevicePool"]
