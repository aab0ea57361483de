"""
merge.py — Merge Sort (top-down)
=================================
Operations interleave depth-first: the whole left half is recorded
before the right half, then the merge of the two.

During a merge the Compare indices are the two *source* heads in the
array, while the merged run is collected in a scratch list.  The write
back into [lo, hi] is one Overwrite per slot, left to right, covering
both merged and drained elements.
"""

from typing import List

from algorithms.operation import Operation, compare, overwrite, mark_final


PSEUDOCODE: List[str] = [
    "def MergeSort(a, lo, hi):",                   # 0
    "    if lo ≥ hi: return",                      # 1
    "    mid ← (lo + hi) / 2",                     # 2
    "    MergeSort(a, lo, mid)",                   # 3
    "    MergeSort(a, mid+1, hi)",                 # 4
    "    merge heads of both halves into tmp",     # 5
    "    drain whichever half is left",            # 6
    "    copy tmp back into a[lo..hi]",            # 7
]


def merge_sort(a: List[int], ops: List[Operation]) -> None:
    _merge_sort(a, 0, len(a) - 1, ops)
    for k in range(len(a)):
        ops.append(mark_final(k))


def _merge_sort(a: List[int], lo: int, hi: int, ops: List[Operation]) -> None:
    # recursion depth is log2(n), so plain recursion is fine here
    if lo >= hi:
        return
    mid = (lo + hi) // 2
    _merge_sort(a, lo, mid, ops)
    _merge_sort(a, mid + 1, hi, ops)
    _merge(a, lo, mid, hi, ops)


def _merge(a: List[int], lo: int, mid: int, hi: int, ops: List[Operation]) -> None:
    tmp: List[int] = []
    i, j = lo, mid + 1
    while i <= mid and j <= hi:
        ops.append(compare(i, j))
        # <= keeps equal keys in their original order (stable)
        if a[i] <= a[j]:
            tmp.append(a[i])
            i += 1
        else:
            tmp.append(a[j])
            j += 1
    tmp.extend(a[i:mid + 1])
    tmp.extend(a[j:hi + 1])

    for t, value in enumerate(tmp):
        ops.append(overwrite(lo + t, value))
        a[lo + t] = value
