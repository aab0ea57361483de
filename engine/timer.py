"""
timer.py — Playback Timers
===========================
The scheduler never sleeps; it is advanced by a timer calling its
`tick()`.  Two interchangeable timers share one small interface:

    start() / stop() / set_delay(ms) / is_running / delay_ms

  • IntervalTimer – a single daemon thread firing every `delay_ms`.
  • ManualTimer   – fires only when the host calls `fire()`.  For tests
                    and for hosts that already own an event loop.

Each scheduler creates its own timer; there is no shared global one.
"""

import threading
from typing import Callable, Optional


MIN_DELAY_MS = 1
MAX_DELAY_MS = 200


def clamp_delay(delay_ms: float) -> int:
    return int(max(MIN_DELAY_MS, min(MAX_DELAY_MS, delay_ms)))


class IntervalTimer:
    """
    Calls `callback()` every `delay_ms` on one background thread, so two
    callbacks from the same timer never overlap.

    `stop()` joins the thread (unless called from inside the callback),
    so once it returns nothing is left scheduled.
    """

    def __init__(self, callback: Callable[[], None], delay_ms: float):
        self._callback   = callback
        self._delay_ms   = clamp_delay(delay_ms)
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event,),
            name="playback-timer",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def set_delay(self, delay_ms: float) -> None:
        # read by the loop before every wait, so it applies from the next tick
        self._delay_ms = clamp_delay(delay_ms)

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._delay_ms / 1000.0):
            self._callback()


class ManualTimer:
    """Same interface as IntervalTimer; `fire()` stands in for the clock."""

    def __init__(self, callback: Callable[[], None], delay_ms: float):
        self._callback = callback
        self._delay_ms = clamp_delay(delay_ms)
        self._running  = False
        self.fired     = 0

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._running = True

    def stop(self) -> None:
        self._running = False

    def set_delay(self, delay_ms: float) -> None:
        self._delay_ms = clamp_delay(delay_ms)

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if not self._running:
                return
            self.fired += 1
            self._callback()
