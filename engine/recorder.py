"""
recorder.py — Background Log Compilation & Analytics
=====================================================
Compiles an algorithm's operation log off the request / render path,
then computes the numbers the Analytics panel shows.

Usage:
    rec = Recorder()
    future = rec.submit("quick", [5, 3, 8, 1])
    run = future.result()            # CompiledRun
    run.log                          # the immutable OperationLog
    run.stats                        # LogStats for the analytics card

Compilation for O(n²) algorithms over a few hundred elements produces
tens of thousands of operations, so it runs on a single worker thread.
One worker means compile requests are handled strictly in order.

Comparison Mode:
    Compile two algorithms over the SAME input, then call
    compare_runs(left, right) → ComparisonResult.
"""

import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Sequence

import structlog

from algorithms import compile_log, resolve_algorithm
from algorithms.operation import OperationLog, OpType, count_by_type


logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# Stats dataclass — what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class LogStats:
    algo_key:     str   = ""
    algo_label:   str   = ""
    input_size:   int   = 0
    compares:     int   = 0
    swaps:        int   = 0
    overwrites:   int   = 0
    marks:        int   = 0
    total:        int   = 0
    wall_time_ms: float = 0.0        # time spent compiling the log

    @property
    def writes(self) -> int:
        """Array slots touched: a swap writes two, an overwrite one."""
        return self.swaps * 2 + self.overwrites

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.__dict__)
        data["writes"] = self.writes
        return data


@dataclass(frozen=True)
class CompiledRun:
    algo_key:   str
    algo_label: str
    values:     tuple
    log:        OperationLog
    stats:      LogStats


# ---------------------------------------------------------------------------
# ComparisonResult — side-by-side analytics
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:  LogStats = field(default_factory=LogStats)
    right: LogStats = field(default_factory=LogStats)
    # derived
    winner_compares: str = ""   # fewer comparisons
    winner_writes:   str = ""   # fewer array writes
    winner_total:    str = ""   # shorter animation


def compile_run(algo: str, values: Sequence[int]) -> CompiledRun:
    """Compile synchronously and measure it."""
    info = resolve_algorithm(algo)
    snapshot = tuple(values)

    started = time.monotonic()
    log = compile_log(info.key, snapshot)
    wall_ms = (time.monotonic() - started) * 1000

    counts = count_by_type(log)
    stats = LogStats(
        algo_key=info.key,
        algo_label=info.label,
        input_size=len(snapshot),
        compares=counts[OpType.COMPARE],
        swaps=counts[OpType.SWAP],
        overwrites=counts[OpType.OVERWRITE],
        marks=counts[OpType.MARK_FINAL],
        total=len(log),
        wall_time_ms=round(wall_ms, 2),
    )
    return CompiledRun(info.key, info.label, snapshot, log, stats)


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    def __init__(self):
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="compile")

    def submit(self, algo: str, values: Sequence[int]) -> "Future[CompiledRun]":
        """
        Queue a compile of `values` (copied now, so later changes to the
        caller's list cannot leak in).  Errors surface from the future.
        """
        snapshot = tuple(values)
        logger.debug("compile_submitted", algo=algo, size=len(snapshot))
        future = self._executor.submit(compile_run, algo, snapshot)
        future.add_done_callback(self._log_finished)
        return future

    def _log_finished(self, future: "Future[CompiledRun]") -> None:
        if future.cancelled() or future.exception() is not None:
            return
        run = future.result()
        logger.info(
            "compile_finished",
            algo=run.algo_key,
            size=run.stats.input_size,
            operations=run.stats.total,
            wall_time_ms=run.stats.wall_time_ms,
        )

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def compare_runs(left: CompiledRun, right: CompiledRun) -> ComparisonResult:
    """Given two runs over the same input, produce a ComparisonResult."""
    l, r = left.stats, right.stats

    def winner(l_val, r_val):
        if l_val == r_val:
            return "tie"
        return l.algo_label if l_val < r_val else r.algo_label

    return ComparisonResult(
        left=l,
        right=r,
        winner_compares=winner(l.compares, r.compares),
        winner_writes=winner(l.writes, r.writes),
        winner_total=winner(l.total, r.total),
    )
