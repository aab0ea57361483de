"""
scheduler.py — Operation Playback Engine
=========================================
The Scheduler replays a finished OperationLog against a Sink, one
operation per timer tick.  It is the only writer of the sink while a
run is playing; the renderer just reads snapshots.

State machine:
    IDLE       →  start()   →  PLAYING
    COMPLETED  →  start()   →  PLAYING
    PLAYING    →  pause()   →  PAUSED
    PAUSED     →  resume()  →  PLAYING
    PLAYING    →  (log exhausted on a tick) → COMPLETED
    any        →  stop()    →  IDLE

Invalid transitions (resume() when not paused, start() mid-run, …) are
no-ops that return False, so a double-click in the UI is harmless.

Pausing does not stop the timer: ticks keep arriving and are skipped.
Stopping halts the timer for real and leaves the sink exactly as it was
last mutated; resetting the array is the caller's job.

Threading:
  Every tick and every control call runs under one lock, so two
  operations are never applied at the same time.  Timers are stopped
  (and joined) *outside* the lock, and callbacks fire outside it too.
"""

import threading
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

import structlog

from algorithms.operation import OperationLog
from engine.timer import IntervalTimer, clamp_delay
from sink import Sink


logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class SchedulerState(Enum):
    IDLE      = "idle"
    PLAYING   = "playing"
    PAUSED    = "paused"
    COMPLETED = "completed"


# ---------------------------------------------------------------------------
# Delays (milliseconds between ticks)
# ---------------------------------------------------------------------------
DEFAULT_DELAY_MS = 80

SPEED_PRESETS = {
    "slow":   200,    # teaching mode
    "medium": 80,
    "fast":   20,
    "turbo":  2,
}

SPEED_SLIDER_MIN = 1
SPEED_SLIDER_MAX = 200


def speed_to_delay(slider_value: int) -> int:
    """
    Map the 1..200 speed slider onto a 2..200 ms delay.  Low slider values
    are fast; the UI draws the slider inverted so "right" means faster.
    """
    s = max(SPEED_SLIDER_MIN, min(SPEED_SLIDER_MAX, int(slider_value)))
    low, high = 2, 200
    return low + int((high - low) * (s - 1) / 199.0)


ProgressCallback = Callable[[int, int], None]
CompleteCallback = Callable[[int], None]


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------
class Scheduler:
    """
    Attributes:
        state      : Current SchedulerState.
        cursor     : Number of operations applied so far in this run.
        total      : Length of the current log.
        delay_ms   : Milliseconds between ticks.
    """

    def __init__(self, sink: Sink, timer_factory: Callable[..., Any] = IntervalTimer):
        self._sink          = sink
        self._timer_factory = timer_factory
        self._lock          = threading.Lock()

        self._log:    OperationLog = ()
        self._cursor: int          = 0
        self._timer:  Optional[Any] = None
        self._delay_ms: int        = DEFAULT_DELAY_MS

        self._on_progress: Optional[ProgressCallback] = None
        self._on_complete: Optional[CompleteCallback] = None

        self.state: SchedulerState = SchedulerState.IDLE

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(
        self,
        log: OperationLog,
        delay_ms: float = DEFAULT_DELAY_MS,
        on_progress: Optional[ProgressCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
    ) -> bool:
        """Begin replaying `log` from its first operation."""
        with self._lock:
            if self.state not in (SchedulerState.IDLE, SchedulerState.COMPLETED):
                logger.debug("invalid_transition", action="start", state=self.state.value)
                return False
            stale, self._timer = self._timer, None

            self._log         = tuple(log)
            self._cursor      = 0
            self._delay_ms    = clamp_delay(delay_ms)
            self._on_progress = on_progress
            self._on_complete = on_complete
            self._sink.reset_highlights()

            self._timer = self._timer_factory(self.tick, self._delay_ms)
            self.state  = SchedulerState.PLAYING
            timer = self._timer

        if stale is not None:
            stale.stop()
        timer.start()
        logger.info("playback_started", total=len(self._log), delay_ms=self._delay_ms)
        return True

    def stop(self) -> bool:
        """Halt the timer and return to IDLE.  The sink is left as is."""
        with self._lock:
            if self.state == SchedulerState.IDLE:
                logger.debug("invalid_transition", action="stop", state=self.state.value)
                return False
            timer, self._timer = self._timer, None
            self.state = SchedulerState.IDLE
            cursor = self._cursor

        if timer is not None:
            timer.stop()
        logger.info("playback_stopped", cursor=cursor, total=len(self._log))
        return True

    # ------------------------------------------------------------------
    # Pause / Resume
    # ------------------------------------------------------------------
    def pause(self) -> bool:
        with self._lock:
            if self.state != SchedulerState.PLAYING:
                logger.debug("invalid_transition", action="pause", state=self.state.value)
                return False
            self.state = SchedulerState.PAUSED
        return True

    def resume(self) -> bool:
        with self._lock:
            if self.state != SchedulerState.PAUSED:
                logger.debug("invalid_transition", action="resume", state=self.state.value)
                return False
            self.state = SchedulerState.PLAYING
        return True

    def toggle_pause(self) -> bool:
        if self.is_paused():
            return self.resume()
        return self.pause()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_delay(self, delay_ms: float) -> int:
        """Change the tick interval; applies from the next tick."""
        with self._lock:
            self._delay_ms = clamp_delay(delay_ms)
            if self._timer is not None:
                self._timer.set_delay(self._delay_ms)
            return self._delay_ms

    def set_speed(self, preset: str) -> int:
        return self.set_delay(SPEED_PRESETS.get(preset, DEFAULT_DELAY_MS))

    # ------------------------------------------------------------------
    # Tick  (called by the timer)
    # ------------------------------------------------------------------
    def tick(self) -> bool:
        """
        Apply the next operation if playing.  Returns True if one was
        applied.  The tick that finds the log exhausted completes the run.
        """
        with self._lock:
            if self.state != SchedulerState.PLAYING:
                return False
            applied, after = self._advance()
        after()
        return applied

    def step_once(self) -> bool:
        """Apply exactly one operation while paused (manual stepping)."""
        with self._lock:
            if self.state != SchedulerState.PAUSED:
                logger.debug("invalid_transition", action="step", state=self.state.value)
                return False
            applied, after = self._advance()
        after()
        return applied

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def total(self) -> int:
        return len(self._log)

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    def is_playing(self) -> bool:
        """True while a run is in progress, paused or not."""
        return self.state in (SchedulerState.PLAYING, SchedulerState.PAUSED)

    def is_paused(self) -> bool:
        return self.state == SchedulerState.PAUSED

    @property
    def is_finished(self) -> bool:
        return self.state == SchedulerState.COMPLETED

    def status_text(self) -> str:
        if self.state == SchedulerState.PLAYING:
            return "Playing"
        if self.state == SchedulerState.PAUSED:
            return "Paused"
        if self.state == SchedulerState.COMPLETED:
            return f"Completed ({self.total} ops)"
        return "Ready"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state":    self.state.value,
            "cursor":   self._cursor,
            "total":    self.total,
            "delay_ms": self._delay_ms,
            "status":   self.status_text(),
        }

    # ------------------------------------------------------------------
    # Internal  (lock held by caller)
    # ------------------------------------------------------------------
    def _advance(self) -> Tuple[bool, Callable[[], None]]:
        """Apply one op or complete the run; returns work to do after unlocking."""
        if self._cursor >= len(self._log):
            self.state = SchedulerState.COMPLETED
            timer, self._timer = self._timer, None
            played, on_complete = self._cursor, self._on_complete
            logger.info("playback_completed", operations=played)

            def finish() -> None:
                if timer is not None:
                    timer.stop()
                if on_complete is not None:
                    on_complete(played)

            return False, finish

        self._sink.apply(self._log[self._cursor])
        self._cursor += 1
        cursor, total, on_progress = self._cursor, len(self._log), self._on_progress

        def progress() -> None:
            if on_progress is not None:
                on_progress(cursor, total)

        return True, progress
