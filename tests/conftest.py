import pytest

from stratselect import DistributionSelector


def fill_with_counts(selector: DistributionSelector, a: int, b: int, c: int) -> DistributionSelector:
    """Add a elements to "a" ("10", "11", ...), b to "b" ("20", ...), c to "c" ("30", ...)."""
    for prefix, category, count in (("1", "a", a), ("2", "b", b), ("3", "c", c)):
        for i in range(count):
            selector.add(category, f"{prefix}{i}")
    return selector


@pytest.fixture
def make_selector():
    """Build a selector and fill it with the given per-category counts."""
    def factory(distribution, counts, wanted_count=None):
        return fill_with_counts(DistributionSelector(distribution, wanted_count), *counts)
    return factory
