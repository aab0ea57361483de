"""
bubble.py — Bubble Sort
========================
Records a Compare for every adjacent pair, a Swap whenever the pair is
out of order, and a MarkFinal for the slot each pass fixes.

The early exit is kept: a pass with no swaps still emits its MarkFinal
and then stops, so the slots in front of it are never marked
individually.  The log records only what the algorithm actually proved.
"""

from typing import List

from algorithms.operation import Operation, compare, swap, mark_final


PSEUDOCODE: List[str] = [
    "def BubbleSort(a):",                          # 0
    "    for i in 0 .. n-2:",                      # 1
    "        swapped ← false",                     # 2
    "        for j in 0 .. n-2-i:",                # 3
    "            if a[j] > a[j+1]:",               # 4
    "                swap(a[j], a[j+1])",          # 5
    "                swapped ← true",              # 6
    "        mark a[n-1-i] final",                 # 7
    "        if not swapped: break",               # 8
]


def bubble_sort(a: List[int], ops: List[Operation]) -> None:
    n = len(a)
    for i in range(n - 1):
        swapped = False
        for j in range(n - 1 - i):
            ops.append(compare(j, j + 1))
            if a[j] > a[j + 1]:
                ops.append(swap(j, j + 1))
                a[j], a[j + 1] = a[j + 1], a[j]
                swapped = True
        ops.append(mark_final(n - 1 - i))
        if not swapped:
            break
