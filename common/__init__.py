"""
Common utilities for the throughput series pipeline.
"""

from .categories import StreamCategory
from .errors import (
    InvariantViolation,
    GridAlignmentError,
    MissingCategoryError,
    DuplicateCategoryError,
)

__all__ = [
    'StreamCategory',
    'InvariantViolation',
    'GridAlignmentError',
    'MissingCategoryError',
    'DuplicateCategoryError',
]
