"""
heap.py — Heap Sort
====================
Builds a max-heap bottom-up, then repeatedly swaps the root with the
end of the heap and sifts the new root down.

Sift-down compares each existing child against the current largest
(left child first), and swaps only when the node is not already the
largest.  The extraction loop runs all the way to index 0, so the
final Swap(0, 0) and MarkFinal(0) are part of the log.
"""

from typing import List

from algorithms.operation import Operation, compare, swap, mark_final


PSEUDOCODE: List[str] = [
    "def HeapSort(a):",                            # 0
    "    for i in n/2-1 .. 0: SiftDown(a, n, i)",  # 1
    "    for end in n-1 .. 0:",                    # 2
    "        swap(a[0], a[end])",                  # 3
    "        SiftDown(a, end, 0)",                 # 4
    "        mark a[end] final",                   # 5
    "def SiftDown(a, size, i):",                   # 6
    "    largest ← max(i, left(i), right(i))",     # 7
    "    if largest ≠ i:",                         # 8
    "        swap(a[i], a[largest]); SiftDown(a, size, largest)",  # 9
]


def heap_sort(a: List[int], ops: List[Operation]) -> None:
    n = len(a)
    for i in range(n // 2 - 1, -1, -1):
        _sift_down(a, n, i, ops)
    for end in range(n - 1, -1, -1):
        ops.append(swap(0, end))
        a[0], a[end] = a[end], a[0]
        _sift_down(a, end, 0, ops)
        ops.append(mark_final(end))


def _sift_down(a: List[int], size: int, i: int, ops: List[Operation]) -> None:
    while True:
        largest = i
        left, right = 2 * i + 1, 2 * i + 2
        if left < size:
            ops.append(compare(left, largest))
            if a[left] > a[largest]:
                largest = left
        if right < size:
            ops.append(compare(right, largest))
            if a[right] > a[largest]:
                largest = right
        if largest == i:
            return
        ops.append(swap(i, largest))
        a[i], a[largest] = a[largest], a[i]
        i = largest
