# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: TopK
# -----------------------------------------------------------------------------
from functools import cmp_to_key
from typing import Callable, List, Sequence, TypeVar

T = TypeVar("T")


def _sort_key(is_before: Callable[[T, T], bool]):
    def compare(a: T, b: T) -> int:
        if is_before(a, b):
            return -1
        if is_before(b, a):
            return 1
        return 0

    return cmp_to_key(compare)


def _insertion_point(buffer: List[T], element: T, is_before: Callable[[T, T], bool]) -> int:
    """First position whose occupant `element` is strictly before."""
    lo, hi = 0, len(buffer)
    while lo < hi:
        mid = (lo + hi) // 2
        if is_before(element, buffer[mid]):
            hi = mid
        else:
            lo = mid + 1
    return lo


def top_k(elements: Sequence[T], count: int, is_before: Callable[[T, T], bool]) -> List[T]:
    """
    Return the `count` best elements, best first, where is_before(a, b)
    means a ranks ahead of b.

    Small selections out of large inputs keep a sorted buffer instead of
    sorting everything. For a strict total order the result equals the
    prefix of a full sort. With ties, a later element equal to the current
    worst replaces it, so the buffered path can pick a different member
    of a tied group than a stable sort would.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    if count == 0:
        return []

    key = _sort_key(is_before)
    prefix_count = min(count, len(elements))

    if prefix_count >= len(elements) // 10:
        return sorted(elements, key=key)[:prefix_count]

    buffer = sorted(elements[:prefix_count], key=key)
    for element in elements[prefix_count:]:
        if is_before(buffer[-1], element):
            continue

        idx = _insertion_point(buffer, element, is_before)
        if idx == len(buffer):
            buffer[-1] = element
        else:
            buffer.pop()
            buffer.insert(idx, element)

    return buffer
