"""
algorithms/__init__.py — Sorting Algorithm Registry
====================================================
Single source of truth for every sorting algorithm the visualizer knows
about.

    from algorithms import REGISTRY, get_algorithm, compile_log

REGISTRY is a dict:
    {
        "bubble": AlgoInfo(key, label, fn, pseudocode, tags, stable, …),
        …
    }

Every compiler shares one signature, `fn(values, ops) -> None`, so the
registry is a plain name → function table.  Adding an algorithm is:
write the compiler, add one entry here.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

import structlog

from algorithms.errors import UnsupportedOperation
from algorithms.operation import Operation, OperationLog

# ---------------------------------------------------------------------------
# Import all compiler modules
# ---------------------------------------------------------------------------
from algorithms.bubble    import bubble_sort    as _bubble,    PSEUDOCODE as _bubble_pc
from algorithms.selection import selection_sort as _selection, PSEUDOCODE as _selection_pc
from algorithms.insertion import insertion_sort as _insertion, PSEUDOCODE as _insertion_pc
from algorithms.merge     import merge_sort     as _merge,     PSEUDOCODE as _merge_pc
from algorithms.quick     import quick_sort     as _quick,     PSEUDOCODE as _quick_pc
from algorithms.heap      import heap_sort      as _heap,      PSEUDOCODE as _heap_pc
from algorithms.shell     import shell_sort     as _shell,     PSEUDOCODE as _shell_pc
from algorithms.radix     import radix_sort     as _radix,     PSEUDOCODE as _radix_pc
from algorithms.radix     import check_non_negative

logger = structlog.get_logger()

Compiler = Callable[[List[int], List[Operation]], None]


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:                   str                    # registry key, e.g. "bubble"
    label:                 str                    # menu label, e.g. "Bubble Sort"
    fn:                    Compiler               # the compiler function
    pseudocode:            List[str]              # lines for the side-panel
    tags:                  List[str] = field(default_factory=list)
    stable:                bool     = False       # keeps equal keys in order?
    requires_non_negative: bool     = False       # radix only
    complexity_time:       str      = ""          # e.g. "O(n²)"
    complexity_space:      str      = ""          # e.g. "O(1)"
    description:           str      = ""          # one-liner for the UI card


# ---------------------------------------------------------------------------
# THE REGISTRY  (insertion order is menu order)
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "bubble": AlgoInfo(
        key="bubble", label="Bubble Sort", fn=_bubble, pseudocode=_bubble_pc,
        tags=["comparison", "in-place", "quadratic"], stable=True,
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Swaps adjacent pairs until a pass makes no swaps.",
    ),

    "selection": AlgoInfo(
        key="selection", label="Selection Sort", fn=_selection, pseudocode=_selection_pc,
        tags=["comparison", "in-place", "quadratic"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Finds the minimum of the unsorted suffix and swaps it into place.",
    ),

    "insertion": AlgoInfo(
        key="insertion", label="Insertion Sort", fn=_insertion, pseudocode=_insertion_pc,
        tags=["comparison", "in-place", "quadratic"], stable=True,
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Shifts larger elements right and drops each key into the gap.",
    ),

    "merge": AlgoInfo(
        key="merge", label="Merge Sort", fn=_merge, pseudocode=_merge_pc,
        tags=["comparison", "divide-and-conquer"], stable=True,
        complexity_time="O(n log n)", complexity_space="O(n)",
        description="Sorts both halves recursively, then merges them.",
    ),

    "quick": AlgoInfo(
        key="quick", label="Quick Sort", fn=_quick, pseudocode=_quick_pc,
        tags=["comparison", "in-place", "divide-and-conquer"],
        complexity_time="O(n log n) avg, O(n²) worst", complexity_space="O(log n)",
        description="Lomuto partition around the last element, then recurse.",
    ),

    "heap": AlgoInfo(
        key="heap", label="Heap Sort", fn=_heap, pseudocode=_heap_pc,
        tags=["comparison", "in-place"],
        complexity_time="O(n log n)", complexity_space="O(1)",
        description="Builds a max-heap, then pops the root to the end repeatedly.",
    ),

    "shell": AlgoInfo(
        key="shell", label="Shell Sort", fn=_shell, pseudocode=_shell_pc,
        tags=["comparison", "in-place"],
        complexity_time="O(n²) worst (n/2 gaps)", complexity_space="O(1)",
        description="Insertion sort over shrinking gaps n/2, n/4, …, 1.",
    ),

    "radix": AlgoInfo(
        key="radix", label="Radix Sort", fn=_radix, pseudocode=_radix_pc,
        tags=["non-comparison", "integer"], stable=True, requires_non_negative=True,
        complexity_time="O(d · (n + 10))", complexity_space="O(n)",
        description="Stable counting sort on each decimal digit, ones first. Non-negative only.",
    ),
}

DEFAULT_ALGORITHM = "bubble"


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(name: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key ("radix") or label ("Radix Sort"), or None."""
    if not isinstance(name, str) or not name:
        return None
    wanted = name.strip().lower()
    if wanted in REGISTRY:
        return REGISTRY[wanted]
    for info in REGISTRY.values():
        if info.label.lower() == wanted:
            return info
    return None


def resolve_algorithm(name: str) -> AlgoInfo:
    """Like get_algorithm, but unknown names fall back to bubble sort."""
    info = get_algorithm(name)
    if info is None:
        logger.warning("unknown_algorithm_fallback", requested=name, fallback=DEFAULT_ALGORITHM)
        info = REGISTRY[DEFAULT_ALGORITHM]
    return info


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in menu order."""
    return list(REGISTRY.values())


def algorithms_by_tag(tag: str) -> List[AlgoInfo]:
    """Filter registry by tag."""
    return [a for a in REGISTRY.values() if tag in a.tags]


# ---------------------------------------------------------------------------
# Compile
# ---------------------------------------------------------------------------
def compile_log(name: str, values: Sequence[int]) -> OperationLog:
    """
    Run the named compiler on a working copy of `values` and return the
    finished, immutable operation log.  The caller's sequence is never
    touched.

    Raises UnsupportedOperation before recording anything if the
    algorithm cannot handle the input.
    """
    info = resolve_algorithm(name)
    working = list(values)
    if info.requires_non_negative:
        try:
            check_non_negative(working)
        except UnsupportedOperation:
            logger.info("compile_rejected", algo=info.key, size=len(working))
            raise

    ops: List[Operation] = []
    info.fn(working, ops)
    logger.debug("compiled", algo=info.key, size=len(working), operations=len(ops))
    return tuple(ops)


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "DEFAULT_ALGORITHM",
    "get_algorithm",
    "resolve_algorithm",
    "list_algorithms",
    "algorithms_by_tag",
    "compile_log",
]
