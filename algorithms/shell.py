"""
shell.py — Shell Sort
======================
Gapped insertion sort with the classic n/2, n/4, …, 1 gap sequence.
Same recording rules as insertion sort, just with stride `gap`.
"""

from typing import List

from algorithms.operation import Operation, compare, overwrite, mark_final


PSEUDOCODE: List[str] = [
    "def ShellSort(a):",                           # 0
    "    gap ← n / 2",                             # 1
    "    while gap > 0:",                          # 2
    "        for i in gap .. n-1:",                # 3
    "            key ← a[i]; j ← i",               # 4
    "            while j ≥ gap and a[j-gap] > key:",   # 5
    "                a[j] ← a[j-gap]; j ← j-gap",  # 6
    "            a[j] ← key",                      # 7
    "        gap ← gap / 2",                       # 8
]


def shell_sort(a: List[int], ops: List[Operation]) -> None:
    n = len(a)
    gap = n // 2
    while gap > 0:
        for i in range(gap, n):
            key = a[i]
            j = i
            while j >= gap:
                ops.append(compare(j - gap, j))
                if a[j - gap] > key:
                    ops.append(overwrite(j, a[j - gap]))
                    a[j] = a[j - gap]
                    j -= gap
                else:
                    break
            ops.append(overwrite(j, key))
            a[j] = key
        gap //= 2
    for k in range(n):
        ops.append(mark_final(k))
