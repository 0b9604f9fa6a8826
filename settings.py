"""
settings.py — Application Settings
===================================
Defaults for the board, the animation and the web server.  Every field
can be overridden from the environment with a VISUALIZER_ prefix, e.g.

    VISUALIZER_GRID_COLUMNS=30 VISUALIZER_PORT=8000 python main.py
"""

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional, Tuple

ENV_PREFIX = "VISUALIZER_"

_TRUE = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # board
    grid_columns:      int   = 20
    grid_rows:         int   = 15
    start_x:           int   = 0
    start_y:           int   = 0

    # animation (milliseconds)
    interval_ms:       int   = 1000
    pulse_ms:          int   = 300
    path_gap_ms:       int   = 100

    # random example
    wall_probability:  float = 0.3
    random_seed:       Optional[int] = None

    # server
    host:              str   = "0.0.0.0"
    port:              int   = 5000
    debug:             bool  = False
    log_level:         str   = "INFO"

    # session registry
    max_sessions:      int   = 256
    session_idle_s:    int   = 1800

    @property
    def start(self) -> Tuple[int, int]:
        return (self.start_x, self.start_y)

    @property
    def default_end(self) -> Tuple[int, int]:
        return (self.grid_columns - 1, self.grid_rows - 1)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            values[f.name] = _coerce(f.name, f.default, raw)
        return cls(**values)


def _coerce(name: str, default, raw: str):
    try:
        if isinstance(default, bool):
            return raw.strip().lower() in _TRUE
        if isinstance(default, int):
            return int(raw)
        if isinstance(default, float):
            return float(raw)
        if default is None:
            return int(raw) if raw.strip() else None
    except ValueError as e:
        raise ValueError(f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}") from e
    return raw
