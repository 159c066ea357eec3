"""Opt-in assignment trace.

Off by default. Once `init_input_debug_log` opens a file, each event is
appended as one line: a UTC timestamp followed by the event as JSON.
"""

from __future__ import annotations

import datetime as dt
import os
from pathlib import Path
from threading import Lock
from typing import TypeAlias

import msgspec

from .devices import DeviceType


class TraceOpened(msgspec.Struct, frozen=True, tag_field="event", tag="init"):
    source: str
    player_count: int
    pid: int


class AssignPass(msgspec.Struct, frozen=True, tag_field="event", tag="assign_pass"):
    """One split over the leftover pool; `slots` is the device type each slot holds afterwards."""

    pass_index: int
    claimed: int
    remaining: int
    slots: tuple[DeviceType | None, ...] = ()


class AssignDropped(msgspec.Struct, frozen=True, tag_field="event", tag="assign_dropped"):
    count: int


InputTraceEvent: TypeAlias = TraceOpened | AssignPass | AssignDropped

_ENCODER = msgspec.json.Encoder()

_TRACE_LOCK = Lock()
_TRACE_PATH: Path | None = None


def input_debug_log_enabled() -> bool:
    return _TRACE_PATH is not None


def input_debug_log_path() -> Path | None:
    with _TRACE_LOCK:
        return _TRACE_PATH


def init_input_debug_log(*, base_dir: Path, source: str, player_count: int) -> Path:
    """Start tracing to a fresh file under `base_dir/logs/input/` and return its path."""

    stamp = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%dT%H%M%S.%fZ")
    pid = os.getpid()
    path = base_dir / "logs" / "input" / f"input-pid{pid}-{stamp}.log"
    path.parent.mkdir(parents=True, exist_ok=True)

    global _TRACE_PATH
    with _TRACE_LOCK:
        _TRACE_PATH = path
    record_input_event(
        TraceOpened(source=str(source).strip().lower() or "unknown", player_count=int(player_count), pid=pid)
    )
    return path


def record_input_event(event: InputTraceEvent) -> None:
    if _TRACE_PATH is None:
        return
    line = dt.datetime.now(dt.timezone.utc).isoformat(timespec="milliseconds").encode()
    line += b" " + _ENCODER.encode(event) + b"\n"
    with _TRACE_LOCK:
        # Re-read under the lock: a close may have landed since the check above.
        path = _TRACE_PATH
        if path is None:
            return
        with path.open("ab") as handle:
            handle.write(line)


def close_input_debug_log() -> None:
    global _TRACE_PATH
    with _TRACE_LOCK:
        _TRACE_PATH = None


__all__ = [
    "AssignDropped",
    "AssignPass",
    "InputTraceEvent",
    "TraceOpened",
    "close_input_debug_log",
    "init_input_debug_log",
    "input_debug_log_enabled",
    "input_debug_log_path",
    "record_input_event",
]
