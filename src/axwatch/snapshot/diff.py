"""Multiset diff of snapshot lines."""

from collections import Counter
from typing import Iterable

from .types import AXDiff


def compute_diff(a: Iterable[str], b: Iterable[str]) -> AXDiff:
    """Compute the multiset symmetric difference between two line lists.

    Lines are compared by value and counted, so reordering (scrolling) is not
    a change while duplicate identical lines are still accounted for exactly.
    Output lines appear in the order they were first seen.

    Args:
        a: Lines of the older snapshot.
        b: Lines of the newer snapshot.

    Returns:
        AXDiff where ``b == a - removed + added`` as multisets.
    """
    count_a = Counter(a)
    count_b = Counter(b)

    added: list[str] = []
    removed: list[str] = []

    for line, count in count_b.items():
        delta = count - count_a[line]
        if delta > 0:
            added.extend([line] * delta)

    for line, count in count_a.items():
        delta = count - count_b[line]
        if delta > 0:
            removed.extend([line] * delta)

    return AXDiff(added=added, removed=removed)
