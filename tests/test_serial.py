from __future__ import annotations

import msgspec
import pytest

from padmux import serial
from padmux.devices import Controller, DeviceType, Keyboard, Nes
from padmux.game_info import GameInfo
from padmux.key_codes import Key, KeyCode
from padmux.step_args import StepArguments, input_arguments_from_devices


def _sample_step() -> StepArguments:
    return StepArguments(
        input=input_arguments_from_devices(
            [
                Nes(a=True, up=True),
                None,
                Controller(y=True, left_stick_x=-0.5, right_trigger=1.0),
                Keyboard(pressed=(Key(scan_code=KeyCode.Q, key_code=KeyCode.A),)),
            ]
        )
    )


def test_step_arguments_survive_the_boundary() -> None:
    step = _sample_step()
    decoded = serial.decode_step_arguments(serial.encode(step))
    assert decoded == step
    player = decoded.input.player(3)
    assert player is not None
    keyboard = player.as_keyboard()
    assert keyboard is not None and keyboard.is_down_key(KeyCode.A)


def test_size_prefix_is_little_endian_u64() -> None:
    step = _sample_step()
    payload = serial.encode(step)
    blob = serial.encode_with_size(step)
    assert blob[: serial.SIZE_PREFIX_BYTES] == len(payload).to_bytes(8, "little")
    assert blob[serial.SIZE_PREFIX_BYTES :] == payload
    assert serial.decode_step_arguments_with_size(blob) == step


def test_sized_decode_ignores_bytes_after_payload() -> None:
    info = GameInfo.create("tetris", 60, 2, DeviceType.KEYBOARD)
    blob = serial.encode_with_size(info) + b"\xff\xff"
    assert serial.decode_game_info_with_size(blob) == info


def test_sized_decode_rejects_short_blobs() -> None:
    with pytest.raises(serial.SerialError, match="too short"):
        serial.decode_step_arguments_with_size(b"\x01\x00")
    blob = serial.encode_with_size(StepArguments())
    with pytest.raises(serial.SerialError, match="size prefix says"):
        serial.decode_step_arguments_with_size(blob[:-1])


def test_decode_rejects_unknown_device_kind() -> None:
    blob = msgspec.msgpack.encode({"input": {"players": [{"input": {"kind": "mouse"}}]}})
    with pytest.raises(serial.SerialError, match="invalid step arguments"):
        serial.decode_step_arguments(blob)


def test_decode_keeps_keyboard_scan_codes_unique() -> None:
    key = {"scan_code": int(KeyCode.W), "key_code": int(KeyCode.W)}
    relabelled = {"scan_code": int(KeyCode.W), "key_code": int(KeyCode.Z)}
    blob = msgspec.msgpack.encode(
        {"input": {"players": [{"input": {"kind": "keyboard", "pressed": [key, relabelled]}}]}}
    )
    decoded = serial.decode_step_arguments(blob)
    player = decoded.input.player(0)
    assert player is not None
    assert player.as_keyboard() == Keyboard(pressed=(Key(scan_code=KeyCode.W, key_code=KeyCode.Z),))
