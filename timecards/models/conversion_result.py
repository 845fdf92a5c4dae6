from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

"""Conversion result model.

Aggregated metrics for one run of the converter, rendered as the SUMMARY line
by ``timecards.services.summary``.
"""


@dataclass(frozen=True)
class ConversionResult:
    """Metrics for one workbook conversion."""
    sheet_name: str  # source sheet
    output_path: Path  # written workbook
    employees: int  # employees written to Timecard_Header
    shifts: int  # rows written to Timecard_Detail
    total_hours: float  # sum of written shift hours
    start: date  # confirmed first day
    end: date  # confirmed last day (PEREND)
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    skipped_employees: int = 0  # employees with no positive hours
