from __future__ import annotations

from collections.abc import Sequence

from .bindings import NesKeyBindings
from .debug_log import AssignDropped, AssignPass, input_debug_log_enabled, record_input_event
from .devices import Device, DeviceType, affinity, combine, convert, device_type_of
from .pool import DevicePool


def _best_device_index(devices: Sequence[Device], device_type: DeviceType) -> int | None:
    # Only a strictly lower score replaces the current pick, so ties go to the earlier device.
    best_index: int | None = None
    best_score = 0
    for index, device in enumerate(devices):
        score = affinity(device, device_type)
        if score is None:
            continue
        if best_index is None or score < best_score:
            best_index = index
            best_score = score
    return best_index


def split(
    pool: DevicePool,
    players: Sequence[DeviceType],
    *,
    bindings: NesKeyBindings | None = None,
) -> tuple[list[Device | None], DevicePool]:
    """Give each player slot, in order, the closest matching device still unclaimed.

    Returns the converted device per slot (None when nothing fits) and the
    devices no slot claimed, in their original order.
    """

    remaining = list(pool.devices)
    found: list[Device | None] = []
    for device_type in players:
        index = _best_device_index(remaining, device_type)
        if index is None:
            found.append(None)
            continue
        winner = remaining.pop(index)
        found.append(convert(winner, device_type, bindings=bindings))
    return found, DevicePool(devices=remaining)


def get_input_arguments(
    pool: DevicePool,
    players: Sequence[DeviceType],
    *,
    bindings: NesKeyBindings | None = None,
) -> list[Device | None]:
    """Assign pool devices to player slots, folding surplus devices into filled slots.

    The first pass is a best-fit assignment. Each later pass splits whatever is
    left over again and merges the new matches into slots that already have a
    device; empty slots stay empty. Stops once a pass claims nothing, so it runs
    at most `len(pool)` extra passes. Devices no slot can take are dropped.
    """

    players = list(players)
    result, remaining = split(pool, players, bindings=bindings)
    _trace_pass(0, len(pool), remaining, result)

    pass_index = 0
    while True:
        new_result, new_remaining = split(remaining, players, bindings=bindings)
        if len(new_remaining) == len(remaining):
            break
        pass_index += 1
        for index, device in enumerate(new_result):
            current = result[index]
            if current is None or device is None:
                continue
            result[index] = combine(current, device, bindings=bindings)
        _trace_pass(pass_index, len(remaining), new_remaining, result)
        remaining = new_remaining

    if remaining and input_debug_log_enabled():
        record_input_event(AssignDropped(count=len(remaining)))
    return result


def _trace_pass(pass_index: int, before: int, remaining: DevicePool, slots: Sequence[Device | None]) -> None:
    if not input_debug_log_enabled():
        return
    record_input_event(
        AssignPass(
            pass_index=pass_index,
            claimed=before - len(remaining),
            remaining=len(remaining),
            slots=tuple(None if device is None else device_type_of(device) for device in slots),
        )
    )


__all__ = [
    "get_input_arguments",
    "split",
]
