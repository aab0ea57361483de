"""
sink.py — Array Buffer & Highlight State
=========================================
The one object the scheduler mutates and the renderer reads.

Responsibilities:
  1. Hold the live array and a snapshot of the original for reset
  2. Track the two "last touched" indices for highlighting (-1 = none)
  3. Track which indices have been marked final
  4. Array factories                         (random / custom)
  5. Apply one Operation at a time           (scheduler only)
  6. Read-only snapshot for rendering        (renderer only)

Design decisions:
  - Every public method takes the lock, so a snapshot never sees half
    of a swap.
  - Compilers never get this object's list.  `array_copy()` hands out a
    working copy; the display array is only changed through `apply()`.
  - Loading a bad custom array raises InvalidInput before anything is
    assigned, so the previous array survives a failed load.
"""

import random
import threading
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

import structlog

from algorithms.errors import InvalidInput
from algorithms.operation import Operation, OpType


logger = structlog.get_logger()

NO_HIGHLIGHT = -1

# random arrays: values in [DEFAULT_MIN_VALUE, DEFAULT_MAX_VALUE)
DEFAULT_MIN_VALUE = 5
DEFAULT_MAX_VALUE = 405


@dataclass(frozen=True)
class SinkSnapshot:
    array:       Tuple[int, ...]
    highlight_a: int
    highlight_b: int
    marked:      FrozenSet[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "array":       list(self.array),
            "highlight_a": self.highlight_a,
            "highlight_b": self.highlight_b,
            "marked":      sorted(self.marked),
        }


def parse_custom_array(values: Union[str, Sequence[Any]]) -> List[int]:
    """
    Turn user input into a list of positive ints.

    Accepts "50, 20, 80, 10" or a sequence such as [50, 20, "80"].
    Raises InvalidInput for anything non-integer, non-positive or empty.
    """
    if isinstance(values, str):
        text = values.strip()
        if not text:
            raise InvalidInput("Empty array.")
        items: Sequence[Any] = text.split(",")
    elif isinstance(values, (list, tuple)):
        items = values
    else:
        raise InvalidInput(f"Expected a comma-separated string or a list (got {type(values).__name__}).")

    result: List[int] = []
    for raw in items:
        if isinstance(raw, bool):
            raise InvalidInput(f"Not an integer: {raw!r}")
        if isinstance(raw, int):
            value = raw
        elif isinstance(raw, str):
            try:
                value = int(raw.strip())
            except ValueError:
                raise InvalidInput(f"Not an integer: {raw.strip()!r}") from None
        else:
            raise InvalidInput(f"Not an integer: {raw!r}")
        if value <= 0:
            raise InvalidInput(f"Value must be positive (got {value}).")
        result.append(value)

    if not result:
        raise InvalidInput("Empty array.")
    return result


class Sink:
    """
    Attributes:
        current     : The live array the renderer draws.
        original    : Copy taken at load / generate time, for reset.
        highlight_a : Last touched index (or -1).
        highlight_b : Second touched index for COMPARE / SWAP (or -1).
        marked      : Indices that received MARK_FINAL in this run.
    """

    def __init__(self, values: Optional[Sequence[int]] = None):
        self._lock = threading.Lock()
        self.current:     List[int] = list(values or [])
        self.original:    List[int] = list(self.current)
        self.highlight_a: int       = NO_HIGHLIGHT
        self.highlight_b: int       = NO_HIGHLIGHT
        self.marked:      set       = set()

    # ==================================================================
    # ARRAY FACTORIES
    # ==================================================================
    def load_custom_array(self, values: Union[str, Sequence[Any]]) -> List[int]:
        parsed = parse_custom_array(values)
        self._replace(parsed)
        logger.info("custom_array_loaded", size=len(parsed))
        return parsed

    def generate_random(
        self,
        size: int,
        max_value: int = DEFAULT_MAX_VALUE,
        min_value: int = DEFAULT_MIN_VALUE,
        seed: Optional[int] = None,
    ) -> List[int]:
        """Fill with `size` values uniform in [min_value, max_value)."""
        if size < 1:
            raise InvalidInput(f"Array size must be at least 1 (got {size}).")
        if max_value <= min_value:
            raise InvalidInput("max_value must be greater than min_value.")
        rnd = random.Random(seed)
        values = [rnd.randrange(min_value, max_value) for _ in range(size)]
        self._replace(values)
        logger.debug("random_array_generated", size=size, seed=seed)
        return values

    def _replace(self, values: List[int]) -> None:
        with self._lock:
            self.current  = list(values)
            self.original = list(values)
            self._clear_marks()

    # ==================================================================
    # RESET
    # ==================================================================
    def reset_to_original(self) -> None:
        with self._lock:
            self.current = list(self.original)
            self._clear_marks()

    def reset_highlights(self) -> None:
        """Clear highlights and final marks (a new log is about to play)."""
        with self._lock:
            self._clear_marks()

    def _clear_marks(self) -> None:
        self.highlight_a = NO_HIGHLIGHT
        self.highlight_b = NO_HIGHLIGHT
        self.marked.clear()

    # ==================================================================
    # APPLY  (scheduler only)
    # ==================================================================
    def apply(self, op: Operation) -> None:
        with self._lock:
            if op.type == OpType.COMPARE:
                self.highlight_a, self.highlight_b = op.i, op.j
            elif op.type == OpType.SWAP:
                a = self.current
                a[op.i], a[op.j] = a[op.j], a[op.i]
                self.highlight_a, self.highlight_b = op.i, op.j
            elif op.type == OpType.OVERWRITE:
                self.current[op.i] = op.value
                self.highlight_a, self.highlight_b = op.i, NO_HIGHLIGHT
            elif op.type == OpType.MARK_FINAL:
                self.marked.add(op.i)
                self.highlight_a, self.highlight_b = op.i, NO_HIGHLIGHT

    # ==================================================================
    # READ-ONLY ACCESS
    # ==================================================================
    def snapshot(self) -> SinkSnapshot:
        with self._lock:
            return SinkSnapshot(
                array=tuple(self.current),
                highlight_a=self.highlight_a,
                highlight_b=self.highlight_b,
                marked=frozenset(self.marked),
            )

    def array_copy(self) -> List[int]:
        """Working copy for a compiler — never the display list itself."""
        with self._lock:
            return list(self.current)

    def __len__(self) -> int:
        return len(self.current)

    def to_dict(self) -> Dict[str, Any]:
        data = self.snapshot().to_dict()
        with self._lock:
            data["original"] = list(self.original)
        return data
