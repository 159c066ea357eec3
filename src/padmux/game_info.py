from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from construct import (
    Array,
    Byte,
    Const,
    ConstError,
    ConstructError,
    Int32ul,
    PascalString,
    PrefixedArray,
    StreamError,
    Struct,
    Terminated,
    TerminatedError,
)
import msgspec

from .bindings import DEFAULT_NES_KEY_BINDINGS, NES_BUTTONS, NesKeyBindings
from .devices import DeviceType
from .key_codes import KeyCode

GAME_CFG_NAME: Final[str] = "game_info.cfg"
GAME_CFG_MAGIC: Final[bytes] = b"PMXCFG\x00"
GAME_CFG_VERSION: Final[int] = 1
NANOS_PER_SECOND: Final[int] = 1_000_000_000
DEFAULT_STEPS_PER_SECOND: Final[int] = 60
MAX_PLAYERS: Final[int] = 8

GAME_CFG_STRUCT = Struct(
    "magic" / Const(GAME_CFG_MAGIC),
    "version" / Int32ul,
    "name" / PascalString(Int32ul, "utf8"),
    "step_interval" / Int32ul,
    "players" / PrefixedArray(Byte, Byte),
    # One scan code list per NES button, in `NES_BUTTONS` order.
    "nes_bindings" / Array(len(NES_BUTTONS), PrefixedArray(Byte, Byte)),
    Terminated,
)


class GameConfigError(ValueError):
    pass


def steps_per_second_to_interval(steps: int) -> int:
    """Nanoseconds between two calls of the game's step callback."""

    steps = int(steps)
    if steps <= 0:
        raise ValueError(f"steps per second must be positive, got {steps}")
    return NANOS_PER_SECOND // steps


class GameInfo(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    """Static description of a game: its title, step rate and one device request per player."""

    name: str
    step_interval: int
    players: tuple[DeviceType, ...] = ()

    @classmethod
    def create(
        cls,
        name: str,
        steps_per_second: int,
        number_of_players: int,
        device_type: DeviceType,
    ) -> GameInfo:
        count = max(0, int(number_of_players))
        return cls(
            name=str(name),
            step_interval=steps_per_second_to_interval(steps_per_second),
            players=(DeviceType(device_type),) * count,
        )

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def steps_per_second(self) -> int:
        if self.step_interval <= 0:
            return 0
        return NANOS_PER_SECOND // self.step_interval

    def request_list(self) -> list[DeviceType]:
        return list(self.players)


def default_game_info() -> GameInfo:
    return GameInfo.create("untitled", DEFAULT_STEPS_PER_SECOND, 1, DeviceType.NES)


@dataclass(slots=True)
class GameConfig:
    path: Path
    info: GameInfo
    bindings: NesKeyBindings = DEFAULT_NES_KEY_BINDINGS

    def to_bytes(self) -> bytes:
        if len(self.info.players) > MAX_PLAYERS:
            raise GameConfigError(f"too many players: {len(self.info.players)} (max {MAX_PLAYERS})")
        return GAME_CFG_STRUCT.build(
            {
                "version": GAME_CFG_VERSION,
                "name": self.info.name,
                "step_interval": int(self.info.step_interval),
                "players": [int(device_type) for device_type in self.info.players],
                "nes_bindings": [
                    [int(code) for code in self.bindings.codes_for(button)] for button in NES_BUTTONS
                ],
            }
        )

    def save(self) -> None:
        self.path.write_bytes(self.to_bytes())


def _parse_device_types(path: Path, raw: Sequence[int]) -> tuple[DeviceType, ...]:
    out: list[DeviceType] = []
    for value in raw:
        try:
            out.append(DeviceType(int(value)))
        except ValueError as exc:
            raise GameConfigError(f"{path}: unknown device type {value}") from exc
    if len(out) > MAX_PLAYERS:
        raise GameConfigError(f"{path}: too many players: {len(out)} (max {MAX_PLAYERS})")
    return tuple(out)


def _parse_bindings(path: Path, raw: Sequence[Sequence[int]]) -> NesKeyBindings:
    fields: dict[str, tuple[KeyCode, ...]] = {}
    for button, codes in zip(NES_BUTTONS, raw):
        try:
            fields[button] = tuple(KeyCode(int(code)) for code in codes)
        except ValueError as exc:
            raise GameConfigError(f"{path}: unknown key code for NES button {button!r}") from exc
    try:
        return NesKeyBindings(**fields)
    except ValueError as exc:
        raise GameConfigError(f"{path}: {exc}") from exc


def parse_game_config(data: bytes, *, path: Path = Path("<memory>")) -> GameConfig:
    try:
        parsed = GAME_CFG_STRUCT.parse(data)
    except ConstError as exc:
        raise GameConfigError(f"{path}: invalid magic") from exc
    except StreamError as exc:
        raise GameConfigError(f"{path}: unexpected EOF") from exc
    except TerminatedError as exc:
        raise GameConfigError(f"{path}: trailing data") from exc
    except (ConstructError, UnicodeDecodeError) as exc:
        raise GameConfigError(f"{path}: {exc}") from exc

    version = int(parsed.version)
    if version != GAME_CFG_VERSION:
        raise GameConfigError(f"{path}: unsupported config version {version}")
    step_interval = int(parsed.step_interval)
    if step_interval <= 0:
        raise GameConfigError(f"{path}: step interval must be positive")
    info = GameInfo(
        name=str(parsed.name),
        step_interval=step_interval,
        players=_parse_device_types(path, parsed.players),
    )
    return GameConfig(path=path, info=info, bindings=_parse_bindings(path, parsed.nes_bindings))


def load_game_config(path: Path) -> GameConfig:
    return parse_game_config(path.read_bytes(), path=path)


def ensure_game_config(base_dir: Path) -> GameConfig:
    path = base_dir / GAME_CFG_NAME
    if path.exists():
        return load_game_config(path)
    base_dir.mkdir(parents=True, exist_ok=True)
    config = GameConfig(path=path, info=default_game_info())
    config.save()
    return config


__all__ = [
    "DEFAULT_STEPS_PER_SECOND",
    "GAME_CFG_NAME",
    "GameConfig",
    "GameConfigError",
    "GameInfo",
    "default_game_info",
    "ensure_game_config",
    "load_game_config",
    "parse_game_config",
    "steps_per_second_to_interval",
]
