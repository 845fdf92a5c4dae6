"""Domain models for the Sage timecard converter.

Cells read from the raw worksheet, the inferred date column range, the
employees and shifts extracted from it, and the metrics of one conversion.
"""

from .cell import Cell, CellKind, GridCell
from .conversion_result import ConversionResult
from .date_range import DateColumnRange
from .employee import Employee, Shift, sum_of_hours

__all__ = [
    # Raw worksheet
    "Cell",
    "CellKind",
    "GridCell",
    # Timecard data
    "DateColumnRange",
    "Employee",
    "Shift",
    "sum_of_hours",
    # Run metrics
    "ConversionResult",
]
