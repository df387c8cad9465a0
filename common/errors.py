"""
Exceptions raised when an invariant of the series pipeline is broken.

These indicate a bug upstream of the pipeline (in the recording or in the
grouping logic), never a recoverable runtime condition. They propagate out
of the assembly unchanged so no partially valid result is ever returned.
"""


class InvariantViolation(RuntimeError):
    """Base class for fatal precondition violations."""


class GridAlignmentError(InvariantViolation):
    """A series that must be grid-aligned was queried or built off its grid."""


class MissingCategoryError(InvariantViolation):
    """A combined series was requested without the categories it is made of."""


class DuplicateCategoryError(InvariantViolation):
    """A test run holds more than one stream group for the same category."""
