"""Pytest configuration and fixtures."""

import time

import pytest

from engine import ManualTimer, Scheduler, VisualizerSession
from sink import Sink


class ManualTimerFactory:
    """Hands out ManualTimers and remembers them so a test can fire them."""

    def __init__(self):
        self.created = []

    def __call__(self, callback, delay_ms):
        timer = ManualTimer(callback, delay_ms)
        self.created.append(timer)
        return timer

    @property
    def last(self) -> ManualTimer:
        return self.created[-1]


@pytest.fixture
def timers():
    return ManualTimerFactory()


@pytest.fixture
def sink():
    """Sink holding the four-element example array."""
    return Sink([5, 3, 8, 1])


@pytest.fixture
def scheduler(sink, timers):
    return Scheduler(sink, timer_factory=timers)


@pytest.fixture
def session(timers):
    viz = VisualizerSession(size=10, timer_factory=timers, seed=7)
    yield viz
    viz.close()


@pytest.fixture
def wait_for_compile():
    """Block until a session has handed its compiled log to the scheduler."""

    def wait(viz, timeout: float = 5.0) -> None:
        deadline = time.monotonic() + timeout
        while viz.is_compiling():
            if time.monotonic() > deadline:
                raise AssertionError("compile did not finish in time")
            time.sleep(0.005)

    return wait
