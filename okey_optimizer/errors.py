"""
Exceptions raised by the optimizer.

Input is validated once, before the search starts. The search itself never
raises: every hand has at least the all-leftover partition.
"""


class OkeyOptimizerError(Exception):
    """Base class for all optimizer errors"""


class InvalidTileError(OkeyOptimizerError, ValueError):
    """A tile is not a member of the physical tile set"""


class CapacityExceeded(OkeyOptimizerError, ValueError):
    """Wild count is negative or above what the rules allow"""


class HandSizeExceeded(CapacityExceeded):
    """Hand holds more tiles than the rules allow (checked by callers)"""
