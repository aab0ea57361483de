"""
insertion.py — Insertion Sort
==============================
Shifts larger elements one slot right with Overwrite (no swaps), then
writes the key into the gap it leaves behind.
"""

from typing import List

from algorithms.operation import Operation, compare, overwrite, mark_final


PSEUDOCODE: List[str] = [
    "def InsertionSort(a):",                       # 0
    "    for i in 1 .. n-1:",                      # 1
    "        key ← a[i]; j ← i-1",                 # 2
    "        while j ≥ 0 and a[j] > key:",         # 3
    "            a[j+1] ← a[j]; j ← j-1",          # 4
    "        a[j+1] ← key",                        # 5
    "    mark every index final",                  # 6
]


def insertion_sort(a: List[int], ops: List[Operation]) -> None:
    """
    The settle Overwrite is emitted even when the key did not move, so
    every outer iteration ends with exactly one write of the key.
    """
    n = len(a)
    for i in range(1, n):
        key = a[i]
        j = i - 1
        while j >= 0:
            ops.append(compare(j, j + 1))
            if a[j] > key:
                ops.append(overwrite(j + 1, a[j]))
                a[j + 1] = a[j]
                j -= 1
            else:
                break
        ops.append(overwrite(j + 1, key))
        a[j + 1] = key
    for k in range(n):
        ops.append(mark_final(k))
