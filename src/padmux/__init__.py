from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("padmux")
except PackageNotFoundError:  # pragma: no cover
    # Allow running from source (e.g. `PYTHONPATH=src`) without installed package metadata.
    __version__ = "0.0.0+dev"

__all__ = [
    "assign",
    "bindings",
    "cli",
    "debug_log",
    "devices",
    "game_info",
    "key_codes",
    "pool",
    "raylib_poll",
    "serial",
    "step_args",
]
