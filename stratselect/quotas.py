"""
Quota math for stratified selection.

Pure functions over plain mappings: category -> count, category -> fraction,
category -> list of selected elements. DistributionSelector wires them to its
pools; they are public so the arithmetic can be reused (or inspected) on its
own.

Terminology:
- need multiplier: wanted fraction / current share. Above 1 the category is
  under-represented, below 1 it is over-represented. A category with no
  share at all has an infinite multiplier.
- limiter: the category with the smallest count / fraction ratio. It bounds
  how many elements can be selected while keeping the distribution.
"""

import logging
import math
import numpy as np
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Hashable, List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


def round_half_away(x: float) -> int:
    """
    Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3).

    Python's round() rounds halves to even, which would move the extra unit
    to a different category near the .5 boundary. Decimal(x) is the exact
    binary value of the float, so nothing is lost in the conversion.
    """
    return int(Decimal(x).to_integral_value(rounding=ROUND_HALF_UP))


def _as_arrays(counts: Mapping[Hashable, int], distribution: Mapping[Hashable, float]):
    keys = list(counts.keys())
    sizes = np.array([counts[k] for k in keys], dtype=np.float64)
    fractions = np.array([distribution[k] for k in keys], dtype=np.float64)
    return keys, sizes, fractions


def need_multipliers(
    counts: Mapping[Hashable, int], distribution: Mapping[Hashable, float]
) -> Dict[Hashable, float]:
    """
    Multiplier each category needs to reach its wanted share.

    Args:
        counts: category -> number of elements (selected or pooled).
        distribution: category -> wanted fraction.

    Returns:
        Dict category -> multiplier, in the iteration order of counts.
        Categories with zero elements (or every category, if the total is
        zero) get float("inf").
    """
    keys, sizes, fractions = _as_arrays(counts, distribution)
    total = sizes.sum()
    if total == 0:
        return {k: math.inf for k in keys}

    shares = sizes / total
    with np.errstate(divide="ignore"):
        multipliers = np.where(shares > 0, fractions / shares, np.inf)
    return {k: float(m) for k, m in zip(keys, multipliers)}


def limiter(counts: Mapping[Hashable, int], distribution: Mapping[Hashable, float]) -> Hashable:
    """
    Category whose supply bounds the selection size.

    Ties go to the first category in iteration order.
    """
    keys, sizes, fractions = _as_arrays(counts, distribution)
    if not keys:
        raise ValueError("limiter() needs at least one category")
    return keys[int(np.argmin(sizes / fractions))]


def final_count(
    counts: Mapping[Hashable, int],
    distribution: Mapping[Hashable, float],
    wanted_count: Optional[int] = None,
) -> int:
    """
    Largest total selectable while keeping the distribution.

    Args:
        counts: category -> pool size.
        distribution: category -> wanted fraction.
        wanted_count: Optional cap on the result.

    Returns:
        floor(limiter count / limiter fraction), capped at wanted_count.
    """
    key = limiter(counts, distribution)
    achievable = math.floor(counts[key] / distribution[key])
    if wanted_count is not None:
        achievable = min(wanted_count, achievable)
    return achievable


def compute_quotas(
    total: int, distribution: Mapping[Hashable, float], min_per_category: int = 1
) -> Dict[Hashable, int]:
    """
    Per-category element counts for a selection of `total` elements.

    Each quota is round_half_away(total * fraction), raised to
    min_per_category. The quotas may therefore sum to more (or, through
    rounding down, fewer) than `total`; see trim() and top_up().
    """
    return {
        category: max(min_per_category, round_half_away(total * fraction))
        for category, fraction in distribution.items()
    }


def trim(
    selected: Mapping[Hashable, Sequence[Any]],
    distribution: Mapping[Hashable, float],
    size: int,
) -> Dict[Hashable, List[Any]]:
    """
    Remove elements one at a time until `selected` holds `size` elements.

    Each step pops the last element of the most over-represented category
    (smallest need multiplier) among those with something left to remove.
    Ties go to the category that comes last in iteration order. The choice is
    greedy and never revisited.

    Args:
        selected: category -> selected elements. Not modified.
        distribution: category -> wanted fraction.
        size: Wanted combined size.

    Returns:
        New dict category -> list with at most `size` elements in total.
    """
    result = {category: list(elements) for category, elements in selected.items()}
    total = sum(len(v) for v in result.values())

    while total > size:
        candidates = [c for c, elements in result.items() if elements]
        if not candidates:
            logger.warning("Trim stopped at %d elements, wanted %d: nothing left to remove.", total, size)
            break

        multipliers = need_multipliers({c: len(v) for c, v in result.items()}, distribution)
        victim = min(reversed(candidates), key=multipliers.__getitem__)
        result[victim].pop()
        total -= 1
        logger.debug("Trimmed %r (multiplier %.4f), %d left.", victim, multipliers[victim], total)

    return result


def top_up(
    selected: Mapping[Hashable, Sequence[Any]],
    sources: Mapping[Hashable, Sequence[Any]],
    distribution: Mapping[Hashable, float],
    size: int,
) -> Dict[Hashable, List[Any]]:
    """
    Add elements one at a time until `selected` holds `size` elements.

    The counterpart of trim() for quotas that rounded down below the wanted
    total. Each step appends the next unselected element of the neediest
    category (largest need multiplier) that still has one. Ties go to the
    category that comes first in iteration order.

    Args:
        selected: category -> selected elements. Each list must be a prefix
                  of the matching sources list. Not modified.
        sources: category -> every candidate element, in selection order.
        distribution: category -> wanted fraction.
        size: Wanted combined size.

    Returns:
        New dict category -> list with at most `size` elements in total.
    """
    result = {category: list(elements) for category, elements in selected.items()}
    total = sum(len(v) for v in result.values())

    while total < size:
        candidates = [c for c, elements in result.items() if len(elements) < len(sources[c])]
        if not candidates:
            logger.warning("Top-up stopped at %d elements, wanted %d: pools exhausted.", total, size)
            break

        multipliers = need_multipliers({c: len(v) for c, v in result.items()}, distribution)
        chosen = max(candidates, key=multipliers.__getitem__)
        result[chosen].append(sources[chosen][len(result[chosen])])
        total += 1
        logger.debug("Topped up %r (multiplier %.4f), %d selected.", chosen, multipliers[chosen], total)

    return result
