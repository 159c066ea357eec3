from __future__ import annotations

from padmux import assign
from padmux.assign import get_input_arguments, split
from padmux.bindings import nes_key_bindings_from_mapping
from padmux.devices import Controller, DeviceType, Keyboard, Nes
from padmux.key_codes import KeyCode
from padmux.pool import DevicePool


def test_controller_fills_nes_slot() -> None:
    pool = DevicePool.of(Controller(a=True))
    assert get_input_arguments(pool, [DeviceType.NES]) == [Nes(a=True)]


def test_controller_beats_keyboard_and_keyboard_is_absorbed() -> None:
    pool = DevicePool.of(Controller(a=True), Keyboard())

    first, remaining = split(pool, [DeviceType.NES])
    assert first == [Nes(a=True)]
    assert list(remaining) == [Keyboard()]

    assert get_input_arguments(pool, [DeviceType.NES]) == [Nes(a=True)]


def test_empty_pool_leaves_every_slot_empty() -> None:
    assert get_input_arguments(DevicePool(), [DeviceType.CONTROLLER, DeviceType.CONTROLLER]) == [None, None]


def test_keyboard_scan_code_maps_to_nes_up() -> None:
    pool = DevicePool.of(Keyboard.from_scan_codes(KeyCode.UP))
    assert get_input_arguments(pool, [DeviceType.NES]) == [Nes(up=True)]


def test_incompatible_device_is_never_claimed() -> None:
    pool = DevicePool.of(Nes(a=True))
    result, remaining = split(pool, [DeviceType.KEYBOARD])
    assert result == [None]
    assert list(remaining) == [Nes(a=True)]
    assert get_input_arguments(pool, [DeviceType.KEYBOARD]) == [None]


def test_empty_request_list_is_a_no_op() -> None:
    pool = DevicePool.of(Nes(), Keyboard())
    result, remaining = split(pool, [])
    assert result == []
    assert list(remaining) == [Nes(), Keyboard()]
    assert get_input_arguments(pool, []) == []


def test_equal_affinity_picks_earlier_device() -> None:
    first = Controller(a=True)
    second = Controller(b=True)
    result, remaining = split(DevicePool.of(first, second), [DeviceType.CONTROLLER])
    assert result == [first]
    assert list(remaining) == [second]


def test_lower_affinity_later_device_wins() -> None:
    keyboard = Keyboard.from_scan_codes(KeyCode.ENTER)
    nes = Nes(b=True)
    result, remaining = split(DevicePool.of(keyboard, nes), [DeviceType.NES])
    assert result == [Nes(b=True)]
    assert list(remaining) == [keyboard]


def test_tie_break_is_by_insertion_order_not_device_kind() -> None:
    # A later exact-kind match does not displace an earlier device with an equal score.
    nes_a = Nes(a=True)
    nes_b = Nes(b=True)
    result, _ = split(DevicePool.of(nes_a, nes_b), [DeviceType.NES, DeviceType.NES])
    assert result == [nes_a, nes_b]


def test_each_slot_claims_a_distinct_device() -> None:
    pool = DevicePool.of(Controller(a=True), Keyboard.from_scan_codes(KeyCode.W), Controller(b=True))
    result, remaining = split(pool, [DeviceType.NES, DeviceType.NES, DeviceType.NES, DeviceType.NES])
    assert result == [Nes(a=True), Nes(b=True), Nes(up=True), None]
    assert len(remaining) == 0


def test_slots_are_filled_in_request_order() -> None:
    pool = DevicePool.of(Controller(a=True), Keyboard.from_scan_codes(KeyCode.Q))
    result = get_input_arguments(pool, [DeviceType.KEYBOARD, DeviceType.CONTROLLER])
    assert result == [Keyboard.from_scan_codes(KeyCode.Q), Controller(a=True)]


def test_surplus_devices_merge_into_filled_slot() -> None:
    pool = DevicePool.of(
        Controller(a=True, left_stick_x=-0.2),
        Controller(b=True, left_stick_x=0.7),
        Controller(start=True),
    )
    assert get_input_arguments(pool, [DeviceType.CONTROLLER]) == [
        Controller(a=True, b=True, start=True, left_stick_x=0.7)
    ]


def test_surplus_pass_skips_slots_that_were_empty() -> None:
    # Pass one: the controller takes the NES slot; nothing fits the keyboard slot.
    # Pass two: a second controller merges into the NES slot; the keyboard slot stays empty.
    pool = DevicePool.of(Controller(a=True), Controller(start=True))
    result = get_input_arguments(pool, [DeviceType.NES, DeviceType.KEYBOARD])
    assert result == [Nes(a=True, start=True), None]


def test_surplus_keeps_merging_across_mixed_kinds() -> None:
    pool = DevicePool.of(
        Keyboard.from_scan_codes(KeyCode.D),
        Nes(a=True),
        Controller(select=True),
        Keyboard.from_scan_codes(KeyCode.S),
    )
    # Pass one: Nes (0). Pass two: Controller (1). Then both keyboards, one per pass.
    assert get_input_arguments(pool, [DeviceType.NES]) == [Nes(a=True, select=True, right=True, down=True)]


def test_unassignable_surplus_is_dropped() -> None:
    pool = DevicePool.of(Controller(a=True), Nes(start=True), Keyboard.from_scan_codes(KeyCode.K))
    result = get_input_arguments(pool, [DeviceType.CONTROLLER])
    assert result == [Controller(a=True)]


def test_custom_bindings_are_used_by_every_pass() -> None:
    bindings = nes_key_bindings_from_mapping({"a": ["Q"]})
    pool = DevicePool.of(Controller(b=True), Keyboard.from_scan_codes(KeyCode.Q))
    assert get_input_arguments(pool, [DeviceType.NES], bindings=bindings) == [Nes(a=True, b=True)]
    assert get_input_arguments(pool, [DeviceType.NES]) == [Nes(b=True)]


def test_pool_is_not_mutated() -> None:
    devices = [Controller(a=True), Keyboard(), Nes()]
    pool = DevicePool(devices=list(devices))
    get_input_arguments(pool, [DeviceType.NES, DeviceType.CONTROLLER])
    assert pool.devices == devices


def test_split_passes_are_bounded_by_pool_size(monkeypatch) -> None:
    calls = {"count": 0}
    real_split = assign.split

    def _counting_split(pool, players, *, bindings=None):  # noqa: ANN001
        calls["count"] += 1
        return real_split(pool, players, bindings=bindings)

    monkeypatch.setattr(assign, "split", _counting_split)

    pool = DevicePool.of(*(Controller() for _ in range(6)))
    assign.get_input_arguments(pool, [DeviceType.CONTROLLER])
    # One best-fit pass, five absorbing passes, one pass that claims nothing.
    assert calls["count"] == 7
    assert calls["count"] <= len(pool) + 1
