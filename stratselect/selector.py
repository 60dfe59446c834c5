"""
DistributionSelector — stratified selection against a wanted distribution.

Elements are collected per category (add / fill), then select() returns a
subset whose category proportions follow the wanted distribution:

    collect → check feasibility → compute quotas → take elements → trim/top up
"""

import logging
import numpy as np
from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional
from tqdm import tqdm

from . import quotas
from .errors import DistributionUnsatisfied, InvalidCategory, InvalidDistribution
from .pool import CategoryPool, RandomState

logger = logging.getLogger(__name__)

DISTRIBUTION_TOLERANCE = 1e-9


class DistributionSelector:
    """
    Collects elements into categories and selects a proportional subset.

    Args:
        wanted_distribution: Mapping category -> fraction, e.g.
                             {"a": 0.2, "b": 0.5, "c": 0.3}. Every fraction
                             must be in (0, 1] and they must sum to 1.0
                             (within 1e-9).
        wanted_count: Optional exact number of elements select() must
                      return. Default: None (select as many as the
                      distribution allows).

    Raises:
        InvalidDistribution: On a malformed distribution or wanted_count.

    Not thread-safe: callers must serialise access to one instance.

    Example:
        selector = DistributionSelector({"control": 0.5, "variant": 0.5}, 100)
        selector.fill(from_iterable(users), category="control")
        selector.fill(from_iterable(other_users), category="variant")
        if selector.is_satisfied():
            groups = selector.select(random=True, rng=42)
    """

    def __init__(
        self,
        wanted_distribution: Mapping[Hashable, float],
        wanted_count: Optional[int] = None,
    ):
        total = sum(wanted_distribution.values())
        if not np.isclose(total, 1.0, rtol=0.0, atol=DISTRIBUTION_TOLERANCE):
            raise InvalidDistribution(f"Distribution must sum to 1.0 (got {total}).")
        out_of_range = [c for c, f in wanted_distribution.items() if not 0 < f <= 1]
        if out_of_range:
            raise InvalidDistribution(
                f"Fractions must be in (0, 1]; invalid for: {', '.join(map(str, out_of_range))}."
            )
        if wanted_count is not None:
            if isinstance(wanted_count, bool) or not isinstance(wanted_count, (int, np.integer)):
                raise InvalidDistribution(f"wanted_count must be an integer (got {wanted_count!r}).")
            if wanted_count < 0:
                raise InvalidDistribution(f"wanted_count must be non-negative (got {wanted_count}).")
            wanted_count = int(wanted_count)

        self.wanted_distribution = dict(wanted_distribution)
        self.wanted_count = wanted_count
        self.pools = {category: CategoryPool(category) for category in self.wanted_distribution}
        self.total_count = 0

    # ------------------------------------------------------------------
    # Filling
    # ------------------------------------------------------------------

    def add(self, category: Hashable, element: Any):
        """Add a single element to a category."""
        if category not in self.wanted_distribution:
            raise InvalidCategory(f"{category!r} is not a valid category.")
        self.pools[category].append(element)
        self.total_count += 1

    def fill(
        self,
        producer: Callable[[int], Any],
        category: Optional[Hashable] = None,
        progress: bool = False,
    ) -> int:
        """
        Add elements from a producer until it runs dry.

        The producer is called with the current total count. Without a
        category it must return (category, element) pairs; with one, just
        the element. None (or False) stops the loop.

        Args:
            producer: Callable(total_count) -> element, pair, or None.
            category: If given, every produced element goes to it.
            progress: Show a tqdm progress bar.

        Returns:
            Number of elements added by this call.

        Example:
            selector.fill(from_iterable([("a", 1), ("b", 2)]))
            selector.fill(from_iterable(["x", "y"]), category="a")
        """
        added = 0
        with tqdm(desc="fill", unit="element", disable=not progress) as bar:
            while True:
                result = producer(self.total_count)
                if result is None or result is False:
                    break
                if category is not None:
                    self.add(category, result)
                else:
                    self.add(*result)
                added += 1
                bar.update(1)

        logger.debug("Filled %d elements (total %d).", added, self.total_count)
        return added

    # ------------------------------------------------------------------
    # Feasibility
    # ------------------------------------------------------------------

    def counts(self) -> Dict[Hashable, int]:
        """Pool size per category, in declaration order."""
        return {category: pool.count() for category, pool in self.pools.items()}

    def is_satisfied(self) -> bool:
        """True if select() would succeed right now."""
        try:
            self.assert_satisfied()
        except DistributionUnsatisfied:
            return False
        return True

    def assert_satisfied(self):
        """
        Raise DistributionUnsatisfied if the wanted distribution (and count,
        if set) cannot be met with the current pools.
        """
        if self.total_count < len(self.wanted_distribution):
            raise DistributionUnsatisfied(f"Not enough elements ({self.total_count}).")

        empty = [category for category, pool in self.pools.items() if pool.is_empty()]
        if empty:
            raise DistributionUnsatisfied(
                f"The following categories are empty: {', '.join(map(str, empty))}."
            )

        if self.wanted_count is not None:
            if self.total_count < self.wanted_count:
                raise DistributionUnsatisfied(
                    f"Not enough elements ({self.total_count}) to satisfy "
                    f"the wanted count ({self.wanted_count})."
                )
            if self.estimated_final_count() < self.wanted_count:
                raise DistributionUnsatisfied(
                    f"Distribution prevents the satisfaction of the wanted count "
                    f"({self.wanted_count}); limited by {self.limiter_category()!r}."
                )

    def limiter_category(self) -> Hashable:
        """Category currently limiting the size of the selection."""
        return quotas.limiter(self.counts(), self.wanted_distribution)

    def estimated_final_count(self) -> int:
        """
        Projected number of elements select() will aim for.

        If this is below wanted_count, the wanted count cannot be met.
        """
        return quotas.final_count(self.counts(), self.wanted_distribution, self.wanted_count)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, random: bool = False, rng: RandomState = None) -> Dict[Hashable, List[Any]]:
        """
        Select elements matching the wanted distribution.

        Args:
            random: If True, draw each category's elements uniformly without
                    replacement; otherwise take them in insertion order.
            rng: Seed or numpy Generator for random mode.

        Returns:
            Dict category -> list of selected elements, in declaration order.
            Exactly wanted_count elements in total when wanted_count is set.

        Raises:
            DistributionUnsatisfied: If the pools cannot satisfy the request.
        """
        self.assert_satisfied()

        target = self.estimated_final_count()
        category_quotas = quotas.compute_quotas(target, self.wanted_distribution)
        logger.debug(
            "Selecting %d elements (limiter %r): quotas %s",
            target, self.limiter_category(), category_quotas,
        )

        generator = np.random.default_rng(rng) if random else None
        sources = {
            category: pool.random_sample(rng=generator) if random else pool.prefix()
            for category, pool in self.pools.items()
        }
        selected = {category: sources[category][:category_quotas[category]] for category in sources}

        if self.wanted_count is not None:
            size = sum(len(v) for v in selected.values())
            if size > self.wanted_count:
                selected = quotas.trim(selected, self.wanted_distribution, self.wanted_count)
            elif size < self.wanted_count:
                selected = quotas.top_up(selected, sources, self.wanted_distribution, self.wanted_count)

        return selected

    def neediest_categories(self) -> List[Hashable]:
        """
        Categories ordered by how much they need more elements, neediest first.

        Measured on the full pools, not on a selection. Useful to decide which
        category to fetch more elements for next.
        """
        multipliers = quotas.need_multipliers(self.counts(), self.wanted_distribution)
        return sorted(multipliers, key=multipliers.__getitem__, reverse=True)

    def __len__(self):
        return self.total_count

    def __repr__(self):
        return (
            f"DistributionSelector({self.wanted_distribution!r}, "
            f"wanted_count={self.wanted_count!r}, total_count={self.total_count})"
        )
