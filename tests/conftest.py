import random

import pytest

from engine import TimerQueue, Visualizer
from settings import Settings


class ManualClock:
    """Clock the tests move by hand (milliseconds)."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def timers(clock):
    return TimerQueue(clock)


@pytest.fixture
def small_settings():
    return Settings(grid_columns=3, grid_rows=3, interval_ms=10, pulse_ms=3, path_gap_ms=5)


@pytest.fixture
def visualizer(small_settings, timers):
    return Visualizer(small_settings, timers=timers, rng=random.Random(7))


def run_until_idle(viz, clock, step=1.0, limit=100000):
    """Advance the manual clock until the visualizer goes idle."""
    for _ in range(limit):
        if not viz.is_running:
            return
        clock.advance(step)
        viz.tick()
    raise AssertionError("visualization never completed")


@pytest.fixture
def play_out(clock):
    def _play(viz, step=1.0):
        run_until_idle(viz, clock, step)
    return _play
