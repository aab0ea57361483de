"""
radix.py — Radix Sort (LSD, base 10)
=====================================
One stable counting-sort pass per decimal digit, ones first.  Each pass
is visualised purely as Overwrites of the output slots, left to right;
radix sort never compares two elements, so no Compare is ever recorded.

Only non-negative integers are supported.  The registry checks this
before calling in, and `radix_sort` checks again so a direct call cannot
produce a misleading log either.
"""

from typing import List

from algorithms.errors import UnsupportedOperation
from algorithms.operation import Operation, overwrite, mark_final


BASE = 10

PSEUDOCODE: List[str] = [
    "def RadixSort(a):",                           # 0
    "    m ← max(a)",                              # 1
    "    exp ← 1",                                 # 2
    "    while m / exp > 0:",                      # 3
    "        count digits (a[i] / exp) % 10",      # 4
    "        prefix-sum the counts",               # 5
    "        place a[n-1] .. a[0] into output",    # 6
    "        copy output back into a",             # 7
    "        exp ← exp * 10",                      # 8
]


def check_non_negative(a: List[int]) -> None:
    negatives = [v for v in a if v < 0]
    if negatives:
        raise UnsupportedOperation(
            f"Radix sort only supports non-negative integers (got {negatives[0]})."
        )


def radix_sort(a: List[int], ops: List[Operation]) -> None:
    if not a:
        return
    check_non_negative(a)

    largest = max(a)
    exp = 1
    while largest // exp > 0:
        _counting_pass(a, exp, ops)
        exp *= BASE
    for k in range(len(a)):
        ops.append(mark_final(k))


def _counting_pass(a: List[int], exp: int, ops: List[Operation]) -> None:
    n = len(a)
    output = [0] * n
    count = [0] * BASE

    for value in a:
        count[(value // exp) % BASE] += 1
    for d in range(1, BASE):
        count[d] += count[d - 1]
    # walk backwards so equal digits keep their relative order
    for value in reversed(a):
        digit = (value // exp) % BASE
        count[digit] -= 1
        output[count[digit]] = value

    for i, value in enumerate(output):
        ops.append(overwrite(i, value))
        a[i] = value
