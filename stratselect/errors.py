"""
Exceptions raised by stratselect.

All three derive from StratSelectError so callers can catch everything the
package raises in one clause.
"""


class StratSelectError(Exception):
    """Base class for stratselect errors."""


class InvalidDistribution(StratSelectError, ValueError):
    """The wanted distribution or wanted count is malformed."""


class InvalidCategory(StratSelectError, KeyError):
    """An element was added to a category the distribution does not define."""

    def __str__(self):
        # KeyError repr()s its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class DistributionUnsatisfied(StratSelectError):
    """
    The current pools cannot satisfy the wanted distribution and/or count.

    Recoverable: add more elements and select again.
    """
