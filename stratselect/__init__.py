"""
stratselect — Stratified selection against a wanted distribution.

Collect elements into named categories, then select a subset whose category
proportions follow a wanted distribution, optionally with an exact total.
Infeasible requests raise DistributionUnsatisfied instead of silently
returning a skewed sample.

Quick start:
    from stratselect import DistributionSelector
    from stratselect.producers import from_iterable

    selector = DistributionSelector({"a": 0.2, "b": 0.5, "c": 0.3}, 10)
    selector.fill(from_iterable(pairs))       # (category, element) pairs
    if selector.is_satisfied():
        selected = selector.select()          # {"a": [...], "b": [...], "c": [...]}
    else:
        print(selector.neediest_categories()) # what to fetch next
"""

import logging

__version__ = "0.1.0"

from .errors import (
    StratSelectError,
    InvalidDistribution,
    InvalidCategory,
    DistributionUnsatisfied,
)
from .pool import CategoryPool
from .selector import DistributionSelector
from .producers import from_iterable, from_labels, until_count
from .quotas import round_half_away, need_multipliers, compute_quotas

logging.getLogger(__name__).addHandler(logging.NullHandler())
