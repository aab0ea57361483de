"""
selection.py — Selection Sort
==============================
Scans the unsorted suffix comparing against the running minimum.
Moving the minimum pointer emits nothing; only the final Swap (when the
minimum actually moved) touches the array.
"""

from typing import List

from algorithms.operation import Operation, compare, swap, mark_final


PSEUDOCODE: List[str] = [
    "def SelectionSort(a):",                       # 0
    "    for i in 0 .. n-2:",                      # 1
    "        min ← i",                             # 2
    "        for j in i+1 .. n-1:",                # 3
    "            if a[j] < a[min]: min ← j",       # 4
    "        if min ≠ i: swap(a[i], a[min])",      # 5
    "        mark a[i] final",                     # 6
    "    mark a[n-1] final",                       # 7
]


def selection_sort(a: List[int], ops: List[Operation]) -> None:
    n = len(a)
    for i in range(n - 1):
        min_idx = i
        for j in range(i + 1, n):
            ops.append(compare(min_idx, j))
            if a[j] < a[min_idx]:
                min_idx = j
        if min_idx != i:
            ops.append(swap(i, min_idx))
            a[i], a[min_idx] = a[min_idx], a[i]
        ops.append(mark_final(i))
    # the last slot is sorted by elimination
    if n > 0:
        ops.append(mark_final(n - 1))
