"""
session.py — One Visualizer Session
====================================
Glue between the pieces the UI talks to: one Sink (what is drawn), one
Scheduler (who mutates it) and one Recorder (who compiles logs in the
background).  A browser tab gets one of these.

Rules enforced here rather than in the core objects:
  - a new run cannot start while another is playing or compiling
  - the array cannot be regenerated or replaced while a run is active
  - a compile that finishes after the user hit Reset is discarded
"""

import threading
from concurrent.futures import Future
from typing import Any, Callable, Dict, Optional, Sequence, Union

import structlog

from algorithms import DEFAULT_ALGORITHM, get_algorithm, resolve_algorithm
from algorithms.errors import InvalidInput, PlaybackActive
from algorithms.radix import check_non_negative
from engine.recorder import CompiledRun, ComparisonResult, Recorder, compare_runs
from engine.scheduler import DEFAULT_DELAY_MS, Scheduler, SchedulerState, speed_to_delay
from engine.timer import IntervalTimer, clamp_delay
from sink import Sink


logger = structlog.get_logger()

MIN_ARRAY_SIZE     = 10
MAX_ARRAY_SIZE     = 300
DEFAULT_ARRAY_SIZE = 80


class VisualizerSession:
    """
    Attributes:
        sink         : The Sink the renderer reads.
        scheduler    : Playback state machine for this session.
        recorder     : Background compiler.
        algo_key     : Algorithm selected for the next run.
        show_numbers : Renderer flag, stored per session.
    """

    def __init__(
        self,
        size: int = DEFAULT_ARRAY_SIZE,
        delay_ms: float = DEFAULT_DELAY_MS,
        timer_factory: Callable[..., Any] = IntervalTimer,
        recorder: Optional[Recorder] = None,
        seed: Optional[int] = None,
        min_size: int = MIN_ARRAY_SIZE,
        max_size: int = MAX_ARRAY_SIZE,
    ):
        self.sink         = Sink()
        self.scheduler    = Scheduler(self.sink, timer_factory)
        self.recorder     = recorder or Recorder()
        self.algo_key     = DEFAULT_ALGORITHM
        self.show_numbers = True
        self.min_size     = min_size
        self.max_size     = max_size

        self._delay_ms   = clamp_delay(delay_ms)
        self._lock       = threading.Lock()
        self._generation = 0
        self._pending: Optional[Future] = None
        self._current_run: Optional[CompiledRun] = None
        self._status     = "Ready"

        self.sink.generate_random(size, seed=seed)

    # ------------------------------------------------------------------
    # Array source
    # ------------------------------------------------------------------
    def generate_random(self, size: int, seed: Optional[int] = None) -> None:
        if not (self.min_size <= size <= self.max_size):
            raise InvalidInput(
                f"Array size must be between {self.min_size} and {self.max_size} (got {size})."
            )
        with self._lock:
            self._ensure_idle("generate")
            self._clear_finished()
            self.sink.generate_random(size, seed=seed)
            self._current_run = None
            self._status = "Randomized"

    def load_custom_array(self, values: Union[str, Sequence[Any]]) -> int:
        with self._lock:
            self._ensure_idle("load")
            self._clear_finished()
            try:
                parsed = self.sink.load_custom_array(values)
            except InvalidInput:
                self._status = "Error parsing array."
                raise
            self._current_run = None
            self._status = f"Custom array loaded ({len(parsed)} elements)"
            return len(parsed)

    def _clear_finished(self) -> None:
        # a new array drops the "Completed" status of the previous run
        if self.scheduler.is_finished:
            self.scheduler.stop()

    def _ensure_idle(self, action: str) -> None:
        if self.is_busy():
            logger.info("rejected_while_playing", action=action)
            raise PlaybackActive("Stop or reset the current run first.")

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------
    def select_algorithm(self, name: str) -> str:
        self.algo_key = resolve_algorithm(name).key
        return self.algo_key

    def start_sorting(self, name: Optional[str] = None) -> Optional["Future[CompiledRun]"]:
        """
        Compile the current array in the background, then start playback.
        Returns the compile future, or None if a run is already active.
        Raises UnsupportedOperation straight away for radix + negatives.
        """
        info = resolve_algorithm(name or self.algo_key)
        with self._lock:
            if self.is_busy():
                logger.debug("invalid_transition", action="start_sorting")
                return None
            values = self.sink.array_copy()
            if info.requires_non_negative:
                check_non_negative(values)

            self.algo_key = info.key
            self.sink.reset_highlights()
            self._generation += 1
            generation = self._generation
            self._status = "Generating operations..."
            future = self.recorder.submit(info.key, values)
            self._pending = future

        future.add_done_callback(lambda f: self._on_compiled(f, generation))
        return future

    def _on_compiled(self, future: "Future[CompiledRun]", generation: int) -> None:
        with self._lock:
            try:
                if generation != self._generation or future.cancelled():
                    logger.debug("stale_compile_discarded", generation=generation)
                    return
                error = future.exception()
                if error is not None:
                    self._status = f"Error: {error}"
                    logger.warning("compile_failed", error=str(error))
                    return
                run = future.result()
                self._current_run = run
                self.scheduler.start(run.log, self._delay_ms, on_complete=self._on_complete)
            finally:
                if future is self._pending:
                    self._pending = None

    def _on_complete(self, played: int) -> None:
        logger.info("run_completed", algo=self.algo_key, operations=played)

    def toggle_pause(self) -> bool:
        return self.scheduler.toggle_pause()

    def step(self) -> bool:
        return self.scheduler.step_once()

    def reset(self) -> None:
        """Stop playback and put the original array back."""
        with self._lock:
            self._generation += 1
            self._pending = None
        self.scheduler.stop()
        self.sink.reset_to_original()
        self._status = "Reset"

    def is_compiling(self) -> bool:
        # stays set until _on_compiled has handed the log to the scheduler
        return self._pending is not None

    def is_busy(self) -> bool:
        return self.is_compiling() or self.scheduler.is_playing()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_delay(self, delay_ms: float) -> int:
        self._delay_ms = self.scheduler.set_delay(delay_ms)
        return self._delay_ms

    def set_speed(self, slider_value: int) -> int:
        return self.set_delay(speed_to_delay(slider_value))

    def set_preset(self, preset: str) -> int:
        self._delay_ms = self.scheduler.set_speed(preset)
        return self._delay_ms

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    # ------------------------------------------------------------------
    # Comparison Mode
    # ------------------------------------------------------------------
    def compare(self, left: str, right: str) -> ComparisonResult:
        """Compile two algorithms over the current array and compare them."""
        values = self.sink.array_copy()
        for name in (left, right):
            info = get_algorithm(name)
            if info is not None and info.requires_non_negative:
                check_non_negative(values)
        left_run = self.recorder.submit(left, values).result()
        right_run = self.recorder.submit(right, values).result()
        return compare_runs(left_run, right_run)

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------
    @property
    def current_run(self) -> Optional[CompiledRun]:
        return self._current_run

    def status_text(self) -> str:
        if self.is_compiling():
            return "Generating operations..."
        if self.scheduler.is_playing() or self.scheduler.is_finished:
            text = self.scheduler.status_text()
            if self.scheduler.state == SchedulerState.PLAYING and self._current_run:
                text = f"{text} ({self._current_run.algo_label})"
            return text
        return self._status

    def state(self) -> Dict[str, Any]:
        run = self._current_run
        return {
            "algo_key":     self.algo_key,
            "status":       self.status_text(),
            "show_numbers": self.show_numbers,
            "compiling":    self.is_compiling(),
            "playback":     self.scheduler.to_dict(),
            "sink":         self.sink.snapshot().to_dict(),
            "stats":        run.stats.to_dict() if run else None,
        }

    def close(self) -> None:
        self.reset()
        self.recorder.shutdown(wait=False)
