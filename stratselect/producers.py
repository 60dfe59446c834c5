"""
Producer factories for DistributionSelector.fill().

A producer is a callable that receives the selector's current total count
and returns the next item, or None once it has nothing left. Depending on how
fill() is called, an item is either a bare element (fixed category) or a
(category, element) pair.

Producers built here are single-use: once exhausted they keep returning None.
"""

import numpy as np
from typing import Any, Callable, Hashable, Iterable, Optional, Sequence, Tuple

Producer = Callable[[int], Any]


def from_iterable(iterable: Iterable[Any]) -> Producer:
    """
    Producer returning successive items of an iterable, then None.

    Args:
        iterable: Elements, or (category, element) pairs. Any iterable works,
                  including generators.

    Example:
        selector.fill(from_iterable(user_ids), category="control")
        selector.fill(from_iterable(zip(labels, rows)))
    """
    iterator = iter(iterable)

    def producer(total_count: int) -> Optional[Any]:
        return next(iterator, None)

    return producer


def from_labels(elements: Sequence[Any], labels: Sequence[Hashable]) -> Producer:
    """
    Producer of (label, element) pairs from two parallel sequences.

    Useful with numpy arrays, e.g. a feature matrix and its label vector:
    each row of `elements` is paired with the matching entry of `labels`.
    numpy scalar labels are converted to plain Python values so they match
    the keys of an ordinary distribution dict.

    Args:
        elements: (n,) sequence or array of elements (rows for 2-D arrays).
        labels: (n,) sequence or array of category labels.

    Raises:
        ValueError: If the lengths differ.

    Example:
        selector = DistributionSelector({0: 0.5, 1: 0.5})
        selector.fill(from_labels(X, y))
    """
    n = len(elements)
    if len(labels) != n:
        raise ValueError(f"elements and labels differ in length ({n} vs {len(labels)}).")

    def pairs() -> Iterable[Tuple[Hashable, Any]]:
        for i in range(n):
            label = labels[i]
            if isinstance(label, np.generic):
                label = label.item()
            yield label, elements[i]

    return from_iterable(pairs())


def until_count(producer: Producer, max_total: int) -> Producer:
    """
    Wrap a producer so fill() stops once the selector holds max_total elements.

    The limit applies to the selector's running total (the argument fill()
    passes), so elements added before this fill() call count towards it.
    """
    def limited(total_count: int) -> Optional[Any]:
        if total_count >= max_total:
            return None
        return producer(total_count)

    return limited
