"""
Per-category element storage.
"""

import numpy as np
from typing import Any, Hashable, List, Optional, Union

RandomState = Union[None, int, np.random.Generator]


class CategoryPool:
    """
    Ordered collection of the elements added to one category.

    Insertion order is kept so that prefix selection is deterministic.
    Selection methods return new lists and never reorder the pool.

    Example:
        pool = CategoryPool("control")
        pool.append("user-1")
        pool.append("user-2")
        pool.prefix(1)               # ["user-1"]
        pool.random_sample(rng=0)    # both elements, shuffled
    """

    def __init__(self, name: Hashable):
        self.name = name
        self._elements: List[Any] = []

    def append(self, element: Any):
        self._elements.append(element)

    def prefix(self, n: Optional[int] = None) -> List[Any]:
        """
        First n elements in insertion order.

        Args:
            n: Number of elements. None (default) returns all of them.
               Values above count() return everything.

        Returns:
            A new list.
        """
        if n is None:
            return list(self._elements)
        return self._elements[:n]

    def random_sample(self, n: Optional[int] = None, rng: RandomState = None) -> List[Any]:
        """
        n elements drawn uniformly without replacement.

        Args:
            n: Number of elements. None (default) returns a full random
               permutation. Values above count() return every element,
               in random order.
            rng: Seed or numpy Generator, for reproducible draws.

        Returns:
            A new list; the pool itself is left untouched.
        """
        generator = np.random.default_rng(rng)
        order = generator.permutation(len(self._elements))
        if n is not None:
            order = order[:n]
        return [self._elements[i] for i in order]

    def count(self) -> int:
        return len(self._elements)

    def is_empty(self) -> bool:
        return self.count() == 0

    def __len__(self):
        return self.count()

    def __repr__(self):
        return f"CategoryPool({self.name!r}, count={self.count()})"
