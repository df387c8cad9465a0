"""
Series algorithms: resampling, aggregation, rates and result assembly.
"""

from .grid_series import GridSeries
from .resample import resample
from .aggregate import aggregate
from .rates import to_rate
from .result_assembler import DerivedResult, ResultAssembler, assemble

__all__ = [
    'GridSeries',
    'resample',
    'aggregate',
    'to_rate',
    'DerivedResult',
    'ResultAssembler',
    'assemble',
]
