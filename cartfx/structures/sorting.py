from __future__ import annotations

"""Stable merge sort with an explicit three-way comparator.

O(n log n) time, O(n) auxiliary space. The input sequence is never mutated.
"""
from typing import Any, Callable, List, Optional, Sequence, TypeVar

T = TypeVar("T")

Comparator = Callable[[T, T], int]


def natural_order(a: Any, b: Any) -> int:
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def merge_sort(items: Sequence[T], compare: Optional[Comparator] = None) -> List[T]:
    cmp = compare or natural_order
    if len(items) <= 1:
        return list(items)
    mid = len(items) // 2
    left = merge_sort(items[:mid], cmp)
    right = merge_sort(items[mid:], cmp)
    return _merge(left, right, cmp)


def _merge(left: List[T], right: List[T], cmp: Comparator) -> List[T]:
    result: List[T] = []
    i = j = 0
    while i < len(left) and j < len(right):
        # <= keeps equal elements from the left half first (stability)
        if cmp(left[i], right[j]) <= 0:
            result.append(left[i])
            i += 1
        else:
            result.append(right[j])
            j += 1
    result.extend(left[i:])
    result.extend(right[j:])
    return result
