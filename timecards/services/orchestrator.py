from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import ConvertConfig
from ..excel.reader import WorkbookReadError, WorksheetNotFound, load_sheet
from ..excel.sage import WorkbookWriteError, build_detail_rows, build_header_rows, write_timecards
from ..excel.timecards import InvalidShiftValue, UnresolvedDateRange, parse_date_range, parse_employees
from ..models.conversion_result import ConversionResult
from ..models.employee import sum_of_hours
from .confirmation import InteractionPort, confirm_date_range

"""Service orchestration for the Sage timecard converter.

raw worksheet -> date range inference -> operator confirmation ->
employee extraction -> Sage header/detail rows -> output workbook

Each stage failure is re-raised as ProcessingError naming the stage, with the
original error kept as ``__cause__``.
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error in one conversion stage."""


def convert(
    path: Path,
    sheet_name: str,
    output: Path,
    config: ConvertConfig,
    interaction: InteractionPort,
    *,
    period: str | None = None,
) -> ConversionResult:
    """Convert one raw timecard sheet into a Sage import workbook.

    Args:
        path: raw timecard workbook
        sheet_name: sheet holding the timecards
        output: workbook to write
        config: converter settings
        interaction: operator port used to confirm the date range
        period: TIMECARD label, defaults to ``sheet_name``

    Raises:
        ProcessingError: a stage failed
        ConfirmationAborted: the operator left the confirmation
    """
    start_time = datetime.now(UTC)
    period = period or sheet_name

    try:
        grid = load_sheet(path, sheet_name)
    except (WorkbookReadError, WorksheetNotFound) as e:
        raise ProcessingError(f"failed to read workbook sheet `{sheet_name}`: {e}") from e
    logger.debug(f"opened excel workbook {path} sheet={sheet_name} shape={grid.frame.shape}")

    try:
        date_range = parse_date_range(grid.cells())
    except UnresolvedDateRange as e:
        raise ProcessingError(f"failed to parse dates from workbook sheet `{sheet_name}`: {e}") from e

    date_range = confirm_date_range(date_range, interaction)
    bounds = date_range.range()
    if bounds is None:
        raise ProcessingError(f"failed to parse dates from workbook sheet `{sheet_name}`: date range left unresolved")
    start, end = bounds

    try:
        employees = parse_employees(grid.cells(), date_range)
    except (UnresolvedDateRange, InvalidShiftValue) as e:
        raise ProcessingError(f"failed to parse employee data from workbook sheet `{sheet_name}`: {e}") from e

    logger.info(f"Total employees: {len(employees)}")
    for e in employees:
        logger.debug(e.id)
        for shift in e.hours:
            logger.debug(f"  {shift.date.isoformat()} col={shift.column} hours={shift.hours()}")

    header_rows = build_header_rows(employees, date_range, period)
    detail_rows = build_detail_rows(
        employees,
        date_range,
        period,
        category=config.category,
        earnings_code=config.earnings_code,
    )
    skipped = len(employees) - len(header_rows)
    if skipped:
        logger.info(f"skipped {skipped} employees without hours")

    try:
        write_timecards(
            output,
            header_rows,
            detail_rows,
            header_sheet=config.header_sheet,
            detail_sheet=config.detail_sheet,
            define_names=config.define_names,
        )
    except WorkbookWriteError as e:
        raise ProcessingError(f"an error occurred while trying to generate spreadsheet: {e}") from e

    end_time = datetime.now(UTC)
    total_hours = sum(sum_of_hours(e.worked_shifts()) for e in employees)
    return ConversionResult(
        sheet_name=sheet_name,
        output_path=output,
        employees=len(header_rows),
        shifts=len(detail_rows),
        total_hours=total_hours,
        start=start,
        end=end,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        skipped_employees=skipped,
    )
