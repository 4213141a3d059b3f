"""Exception taxonomy for dot-plot statistics."""

from __future__ import annotations


class BioDotError(Exception):
    """Base class for all biodot errors."""


class InvalidGroupError(BioDotError, ValueError):
    """Group or block labels do not cover the observations one-to-one."""


class UnknownLabelError(InvalidGroupError, KeyError):
    """A metadata column, feature or observation name could not be found."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0]) if self.args else ""


class InsufficientBlockDataError(BioDotError, ValueError):
    """Block effects cannot be separated from group effects."""


class InvalidRangeError(BioDotError, ValueError):
    """Clamp bounds are malformed."""


class DimensionMismatchError(BioDotError, ValueError):
    """Statistic matrices or auxiliary fields disagree in shape."""
