from __future__ import annotations

from pathlib import Path

import msgspec
import typer

from .debug_log import close_input_debug_log, init_input_debug_log
from .devices import Controller, Device, DeviceType, Keyboard, Nes, affinity, device_type_from_value
from .game_info import (
    GAME_CFG_NAME,
    DEFAULT_STEPS_PER_SECOND,
    GameConfig,
    GameConfigError,
    GameInfo,
    ensure_game_config,
    load_game_config,
)
from .key_codes import key_code_name
from .pool import DevicePool
from .step_args import build_input_arguments


app = typer.Typer(add_completion=False)

_POOL_DECODER = msgspec.json.Decoder(type=list[Device])


def _parse_device_type(value: str) -> DeviceType:
    device_type = device_type_from_value(value)
    if device_type is None:
        choices = ", ".join(member.name.lower() for member in DeviceType)
        raise typer.BadParameter(f"unknown device type {value!r} (expected one of: {choices})")
    return device_type


def _held_buttons(device: Device) -> str:
    held = [
        field.name
        for field in msgspec.structs.fields(device)
        if isinstance(getattr(device, field.name), bool) and getattr(device, field.name)
    ]
    return ",".join(held) if held else "-"


def _describe_device(device: Device) -> str:
    match device:
        case Nes():
            return f"nes {_held_buttons(device)}"
        case Controller():
            return (
                f"controller {_held_buttons(device)} "
                f"ls=({device.left_stick_x:+.2f},{device.left_stick_y:+.2f}) "
                f"rs=({device.right_stick_x:+.2f},{device.right_stick_y:+.2f}) "
                f"lt={device.left_trigger:.2f} rt={device.right_trigger:.2f}"
            )
        case Keyboard():
            keys = [key_code_name(key.scan_code) for key in device.pressed]
            return "keyboard " + (",".join(keys) if keys else "-")
    return repr(device)


@app.command("assign")
def cmd_assign(
    pool_path: Path = typer.Argument(..., help="JSON array of devices, e.g. [{\"kind\": \"nes\", \"a\": true}]"),
    player: list[str] = typer.Option(..., "--player", "-p", help="requested device type per player, in order"),
    config_path: Path | None = typer.Option(None, "--config", help=f"read key bindings from a {GAME_CFG_NAME}"),
    debug_log: Path | None = typer.Option(None, "--debug-log", help="write an assignment trace under this directory"),
) -> None:
    """Assign a device pool to player slots and print the result."""

    players = [_parse_device_type(value) for value in player]
    try:
        devices = _POOL_DECODER.decode(pool_path.read_bytes())
    except OSError as exc:
        raise typer.BadParameter(f"cannot read {pool_path}: {exc}") from exc
    except msgspec.DecodeError as exc:
        raise typer.BadParameter(f"{pool_path}: {exc}") from exc

    bindings = None
    if config_path is not None:
        try:
            bindings = load_game_config(config_path).bindings
        except (OSError, GameConfigError) as exc:
            raise typer.BadParameter(str(exc)) from exc

    if debug_log is not None:
        log_path = init_input_debug_log(base_dir=debug_log, source="cli", player_count=len(players))
        typer.echo(f"debug log: {log_path}")
    try:
        result = build_input_arguments(DevicePool(devices=list(devices)), players, bindings=bindings)
    finally:
        if debug_log is not None:
            close_input_debug_log()

    for index, (device_type, slot) in enumerate(zip(players, result)):
        label = "none" if slot is None else _describe_device(slot.input)
        typer.echo(f"player {index + 1} [{device_type.name.lower()}]: {label}")


@app.command("table")
def cmd_table() -> None:
    """Print the affinity of each device kind for each requested type."""

    samples: list[Device] = [Nes(), Controller(), Keyboard()]
    header = "source".ljust(12) + "".join(member.name.lower().ljust(12) for member in DeviceType)
    typer.echo(header)
    for device in samples:
        row = type(device).__name__.lower().ljust(12)
        for device_type in DeviceType:
            score = affinity(device, device_type)
            row += ("-" if score is None else str(score)).ljust(12)
        typer.echo(row.rstrip())


@app.command("info")
def cmd_info(
    base_dir: Path = typer.Argument(..., help=f"directory holding {GAME_CFG_NAME}"),
    name: str | None = typer.Option(None, help="game title"),
    steps_per_second: int | None = typer.Option(None, help=f"step rate (default {DEFAULT_STEPS_PER_SECOND})"),
    players: int | None = typer.Option(None, help="number of players"),
    device: str | None = typer.Option(None, help="device type requested by every player"),
) -> None:
    """Create, update or show a game info config."""

    try:
        config = ensure_game_config(base_dir)
    except (OSError, GameConfigError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    if any(value is not None for value in (name, steps_per_second, players, device)):
        info = config.info
        current_type = info.players[0] if info.players else DeviceType.NES
        try:
            updated = GameInfo.create(
                name if name is not None else info.name,
                steps_per_second if steps_per_second is not None else info.steps_per_second,
                players if players is not None else info.player_count,
                _parse_device_type(device) if device is not None else current_type,
            )
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc
        config = GameConfig(path=config.path, info=updated, bindings=config.bindings)
        try:
            config.save()
        except GameConfigError as exc:
            raise typer.BadParameter(str(exc)) from exc

    info = config.info
    typer.echo(f"name: {info.name}")
    typer.echo(f"step interval: {info.step_interval} ns")
    typer.echo("players: " + (", ".join(member.name.lower() for member in info.players) or "-"))


def main(argv: list[str] | None = None) -> None:
    app(args=argv, prog_name="padmux")


if __name__ == "__main__":
    main()
