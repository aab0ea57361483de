"""
operation.py — Recorded Sorting Operations
===========================================
Every sorting compiler appends Operation objects to a list instead of
drawing anything.  An Operation is a *delta*, not a snapshot:

    • COMPARE     – two indices are being compared (no mutation)
    • SWAP        – exchange the values at i and j
    • OVERWRITE   – write `value` into slot i
    • MARK_FINAL  – index i has reached its sorted position

Design decisions:
  - Operation is a frozen dataclass.  The compiler is the only writer;
    the scheduler / renderer are pure readers.
  - A finished log is a tuple (OperationLog) so nobody can append to it
    once playback starts.
  - Order is everything.  Later operations assume earlier ones were
    already applied, so a log must be replayed front to back.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple


class OpType(Enum):
    COMPARE    = "compare"
    SWAP       = "swap"
    OVERWRITE  = "overwrite"
    MARK_FINAL = "mark_final"


@dataclass(frozen=True)
class Operation:
    """
    Attributes:
        type  : Which of the four mutations this is.
        i     : Primary index.
        j     : Secondary index for COMPARE / SWAP, -1 otherwise.
        value : New value for OVERWRITE, 0 otherwise.
    """

    type:  OpType
    i:     int
    j:     int = -1
    value: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type.value, "i": self.i}
        if self.type in (OpType.COMPARE, OpType.SWAP):
            data["j"] = self.j
        if self.type == OpType.OVERWRITE:
            data["value"] = self.value
        return data


OperationLog = Tuple[Operation, ...]


# ---------------------------------------------------------------------------
# Constructors — what the compilers actually call
# ---------------------------------------------------------------------------
def compare(i: int, j: int) -> Operation:
    return Operation(OpType.COMPARE, i, j)


def swap(i: int, j: int) -> Operation:
    return Operation(OpType.SWAP, i, j)


def overwrite(i: int, value: int) -> Operation:
    return Operation(OpType.OVERWRITE, i, value=value)


def mark_final(i: int) -> Operation:
    return Operation(OpType.MARK_FINAL, i)


# ---------------------------------------------------------------------------
# Replay
# ---------------------------------------------------------------------------
def apply_to(values: List[int], op: Operation) -> None:
    """Apply one operation's data effect to `values` in place."""
    if op.type == OpType.SWAP:
        values[op.i], values[op.j] = values[op.j], values[op.i]
    elif op.type == OpType.OVERWRITE:
        values[op.i] = op.value


def replay(values: Iterable[int], log: Iterable[Operation]) -> List[int]:
    """
    Replay a whole log against a copy of `values` and return the result.
    For a correct compiler this is the sorted input.
    """
    out = list(values)
    for op in log:
        apply_to(out, op)
    return out


def count_by_type(log: Iterable[Operation]) -> Dict[OpType, int]:
    counts = {t: 0 for t in OpType}
    for op in log:
        counts[op.type] += 1
    return counts
