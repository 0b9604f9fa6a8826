"""
engine/
-------
Replay & session layer.

    from engine import Visualizer, AnimationScheduler, TimerQueue
"""

from engine.timers     import TimerQueue, TimerHandle, monotonic_ms
from engine.scheduler  import (
    AnimationScheduler, SchedulerState, SPEED_PRESETS, PULSE_MS, PATH_GAP_MS,
    MIN_INTERVAL_MS, MAX_INTERVAL_MS, clamp_interval,
)
from engine.recorder   import RunMetrics, record_run
from engine.visualizer import Visualizer
from engine.sessions   import SessionStore

__all__ = [
    "TimerQueue",
    "TimerHandle",
    "monotonic_ms",
    "AnimationScheduler",
    "SchedulerState",
    "SPEED_PRESETS",
    "PULSE_MS",
    "PATH_GAP_MS",
    "MIN_INTERVAL_MS",
    "MAX_INTERVAL_MS",
    "clamp_interval",
    "RunMetrics",
    "record_run",
    "Visualizer",
    "SessionStore",
]
