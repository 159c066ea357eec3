"""Opaque byte encoding for values that cross a host/guest boundary.

Payloads are msgpack. The `*_with_size` helpers prefix the payload with its
length as a little-endian u64 so a reader holding only a pointer into shared
memory knows how much to read.
"""

from __future__ import annotations

from typing import Final

import msgspec

from .game_info import GameInfo
from .step_args import StepArguments

SIZE_PREFIX_BYTES: Final[int] = 8

_STEP_ARGUMENTS_DECODER = msgspec.msgpack.Decoder(type=StepArguments)
_GAME_INFO_DECODER = msgspec.msgpack.Decoder(type=GameInfo)
_ENCODER = msgspec.msgpack.Encoder()


class SerialError(ValueError):
    pass


def encode(value: StepArguments | GameInfo) -> bytes:
    return _ENCODER.encode(value)


def encode_with_size(value: StepArguments | GameInfo) -> bytes:
    payload = encode(value)
    return len(payload).to_bytes(SIZE_PREFIX_BYTES, "little") + payload


def _split_sized(blob: bytes) -> bytes:
    if len(blob) < SIZE_PREFIX_BYTES:
        raise SerialError(f"payload too short for size prefix ({len(blob)} bytes)")
    size = int.from_bytes(blob[:SIZE_PREFIX_BYTES], "little")
    payload = blob[SIZE_PREFIX_BYTES : SIZE_PREFIX_BYTES + size]
    if len(payload) != size:
        raise SerialError(f"size prefix says {size} bytes, got {len(payload)}")
    return payload


def decode_step_arguments(blob: bytes) -> StepArguments:
    try:
        return _STEP_ARGUMENTS_DECODER.decode(blob)
    except msgspec.DecodeError as exc:
        raise SerialError(f"invalid step arguments: {exc}") from exc


def decode_game_info(blob: bytes) -> GameInfo:
    try:
        return _GAME_INFO_DECODER.decode(blob)
    except msgspec.DecodeError as exc:
        raise SerialError(f"invalid game info: {exc}") from exc


def decode_step_arguments_with_size(blob: bytes) -> StepArguments:
    return decode_step_arguments(_split_sized(blob))


def decode_game_info_with_size(blob: bytes) -> GameInfo:
    return decode_game_info(_split_sized(blob))


__all__ = [
    "SIZE_PREFIX_BYTES",
    "SerialError",
    "decode_game_info",
    "decode_game_info_with_size",
    "decode_step_arguments",
    "decode_step_arguments_with_size",
    "encode",
    "encode_with_size",
]
