# mazerace/config.py
#!/usr/bin/env python3
"""
Settings for the maze race.

Resolution: defaults -> environment -> command line
    MAZERACE_GRID_SIZE / --size=      rows = cols
    MAZERACE_DENSITY   / --density=   obstacle density, percent
    MAZERACE_SPEED_MS  / --speed=     animation step delay, ms
"""

import logging
import os
import sys
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Optional, Sequence

from mazerace.core.types import InvalidConfiguration

logger = logging.getLogger(__name__)

MIN_GRID_SIZE = 5
MAX_GRID_SIZE = 50
MAX_SPEED_MS = 1000

ENV_VARS = {
    "grid_size": "MAZERACE_GRID_SIZE",
    "obstacle_density_percent": "MAZERACE_DENSITY",
    "animation_speed_ms": "MAZERACE_SPEED_MS",
}
CLI_FLAGS = {
    "grid_size": "--size=",
    "obstacle_density_percent": "--density=",
    "animation_speed_ms": "--speed=",
}

_BOUNDS = {
    "grid_size": (MIN_GRID_SIZE, MAX_GRID_SIZE),
    "obstacle_density_percent": (0, 100),
    "animation_speed_ms": (0, MAX_SPEED_MS),
}


@dataclass(frozen=True)
class Settings:
    grid_size: int = 15
    obstacle_density_percent: int = 25
    animation_speed_ms: int = 50
    run_both_pause_ms: int = 500
    path_delay_factor: float = 1.5

    @property
    def rows(self) -> int:
        return self.grid_size

    @property
    def cols(self) -> int:
        return self.grid_size

    def validate(self) -> "Settings":
        for name, (lo, hi) in _BOUNDS.items():
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool) or not lo <= v <= hi:
                logger.warning("rejected setting %s=%r, allowed [%d, %d]", name, v, lo, hi)
                raise InvalidConfiguration(f"{name} must be an integer in [{lo}, {hi}], got {v!r}")
        if self.run_both_pause_ms < 0 or self.path_delay_factor < 0:
            logger.warning("rejected negative pause or path delay factor")
            raise InvalidConfiguration("pause and path delay factor must be non-negative")
        return self

    def with_changes(self, **changes) -> "Settings":
        """Copy with bounded fields clamped into range (for +/- buttons); others pass through."""
        updated = dict(changes)
        for name, value in changes.items():
            if name in _BOUNDS:
                lo, hi = _BOUNDS[name]
                updated[name] = int(max(lo, min(hi, value)))
        return replace(self, **updated)


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        logger.warning("%s is not an integer: %r", name, raw)
        raise InvalidConfiguration(f"{name}: expected an integer, got {raw!r}") from None


def load_settings(env: Optional[Mapping[str, str]] = None,
                  argv: Optional[Sequence[str]] = None) -> Settings:
    env = os.environ if env is None else env
    argv = sys.argv[1:] if argv is None else argv

    values: Dict[str, int] = {}
    for field_name, var in ENV_VARS.items():
        if env.get(var):
            values[field_name] = _parse_int(var, env[var])
    for arg in argv:
        for field_name, flag in CLI_FLAGS.items():
            if arg.startswith(flag):
                values[field_name] = _parse_int(flag.rstrip("="), arg.split("=", 1)[1])
    return Settings(**values).validate()


def to_argv(settings: Settings) -> List[str]:
    return [f"{CLI_FLAGS[name]}{getattr(settings, name)}" for name in CLI_FLAGS]
