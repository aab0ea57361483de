"""
engine/
-------
Playback & recording layer.

    from engine import Scheduler, Recorder, VisualizerSession
"""

from engine.timer     import IntervalTimer, ManualTimer, MIN_DELAY_MS, MAX_DELAY_MS
from engine.scheduler import Scheduler, SchedulerState, SPEED_PRESETS, DEFAULT_DELAY_MS, speed_to_delay
from engine.recorder  import Recorder, CompiledRun, LogStats, ComparisonResult, compare_runs, compile_run
from engine.session   import VisualizerSession

__all__ = [
    "IntervalTimer",
    "ManualTimer",
    "MIN_DELAY_MS",
    "MAX_DELAY_MS",
    "Scheduler",
    "SchedulerState",
    "SPEED_PRESETS",
    "DEFAULT_DELAY_MS",
    "speed_to_delay",
    "Recorder",
    "CompiledRun",
    "LogStats",
    "ComparisonResult",
    "compare_runs",
    "compile_run",
    "VisualizerSession",
]
