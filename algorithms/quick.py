"""
quick.py — Quick Sort (Lomuto partition)
=========================================
Pivot is always the last element of the range.  Each scanned index is
compared against the pivot's index; smaller elements are swapped to
the partition boundary, and a closing Swap drops the pivot into place.

Ranges are processed from an explicit stack rather than by recursion:
already-sorted input degrades Lomuto to O(n) depth, which would blow
Python's recursion limit at the larger array sizes the UI allows.  The
stack pushes the right range first so the left range is always recorded
first, exactly as the recursive version would.
"""

from typing import List, Tuple

from algorithms.operation import Operation, compare, swap, mark_final


PSEUDOCODE: List[str] = [
    "def QuickSort(a, lo, hi):",                   # 0
    "    if lo < hi:",                             # 1
    "        p ← Partition(a, lo, hi)",            # 2
    "        QuickSort(a, lo, p-1)",               # 3
    "        QuickSort(a, p+1, hi)",               # 4
    "def Partition(a, lo, hi):",                   # 5
    "    pivot ← a[hi]; b ← lo",                   # 6
    "    for j in lo .. hi-1:",                    # 7
    "        if a[j] < pivot: swap(a[b], a[j]); b++",  # 8
    "    swap(a[b], a[hi]); return b",             # 9
]


def quick_sort(a: List[int], ops: List[Operation]) -> None:
    pending: List[Tuple[int, int]] = [(0, len(a) - 1)]
    while pending:
        lo, hi = pending.pop()
        if lo >= hi:
            continue
        p = _partition(a, lo, hi, ops)
        pending.append((p + 1, hi))
        pending.append((lo, p - 1))
    for k in range(len(a)):
        ops.append(mark_final(k))


def _partition(a: List[int], lo: int, hi: int, ops: List[Operation]) -> int:
    pivot = a[hi]
    boundary = lo
    for j in range(lo, hi):
        ops.append(compare(j, hi))
        if a[j] < pivot:
            ops.append(swap(boundary, j))
            a[boundary], a[j] = a[j], a[boundary]
            boundary += 1
    ops.append(swap(boundary, hi))
    a[boundary], a[hi] = a[hi], a[boundary]
    return boundary
