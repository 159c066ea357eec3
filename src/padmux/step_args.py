from __future__ import annotations

from collections.abc import Iterator, Sequence

import msgspec

from .assign import get_input_arguments
from .bindings import NesKeyBindings
from .devices import Controller, Device, DeviceType, Keyboard, Nes, device_type_of
from .game_info import GameInfo
from .pool import DevicePool


class PlayerInputArguments(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    """One player's device for this step.

    The typed accessors only answer for the exact shape the game asked for.
    """

    input: Device

    @property
    def device_type(self) -> DeviceType:
        return device_type_of(self.input)

    def as_nes(self) -> Nes | None:
        return self.input if isinstance(self.input, Nes) else None

    def as_controller(self) -> Controller | None:
        return self.input if isinstance(self.input, Controller) else None

    def as_keyboard(self) -> Keyboard | None:
        return self.input if isinstance(self.input, Keyboard) else None


class InputArguments(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    players: tuple[PlayerInputArguments | None, ...] = ()

    @property
    def player_count(self) -> int:
        return len(self.players)

    def player(self, index: int) -> PlayerInputArguments | None:
        """Input for player `index`, or None for an unassigned slot or an index out of range."""

        index = int(index)
        if index < 0 or index >= len(self.players):
            return None
        return self.players[index]

    def __len__(self) -> int:
        return len(self.players)

    def __iter__(self) -> Iterator[PlayerInputArguments | None]:
        return iter(self.players)


class StepArguments(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    """Everything a game's step callback receives."""

    input: InputArguments = msgspec.field(default_factory=InputArguments)


def input_arguments_from_devices(devices: Sequence[Device | None]) -> InputArguments:
    return InputArguments(
        players=tuple(None if device is None else PlayerInputArguments(input=device) for device in devices)
    )


def build_input_arguments(
    pool: DevicePool,
    players: Sequence[DeviceType],
    *,
    bindings: NesKeyBindings | None = None,
) -> InputArguments:
    return input_arguments_from_devices(get_input_arguments(pool, players, bindings=bindings))


def build_step_arguments(
    pool: DevicePool,
    info: GameInfo,
    *,
    bindings: NesKeyBindings | None = None,
) -> StepArguments:
    return StepArguments(input=build_input_arguments(pool, info.request_list(), bindings=bindings))


__all__ = [
    "InputArguments",
    "PlayerInputArguments",
    "StepArguments",
    "build_input_arguments",
    "build_step_arguments",
    "input_arguments_from_devices",
]
