from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from pathlib import Path

import pandas as pd

from ..models.date_range import DateColumnRange
from ..models.employee import Employee
from ..services.progress import ProgressTracker
from .columns import to_letters

"""Sage timecard import workbook.

Two sheets, each blessed as a workbook-level named range of the same name so
the Sage import picks them up:

- Timecard_Header: one row per employee with hours in the period
- Timecard_Detail: one row per worked shift

Every cell is written as a string. Columns not listed in the row builders are
left blank for Sage to fill in during its own processing.
"""

__all__ = [
    "DEFAULT_CATEGORY",
    "DEFAULT_EARNINGS_CODE",
    "TIMECARD_DETAIL_HEADERS",
    "TIMECARD_HEADER_HEADERS",
    "WorkbookWriteError",
    "build_detail_rows",
    "build_header_rows",
    "named_range_reference",
    "write_timecards",
]

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
DEFAULT_CATEGORY = "2"
DEFAULT_EARNINGS_CODE = "HRLY"
DAYS_VALUE = "1"

# Column order as expected by the Sage import; CSICKHRSP appears twice there.
TIMECARD_HEADER_HEADERS: tuple[str, ...] = (
    "EMPLOYEE", "PEREND", "TIMECARD", "TCARDDESC", "TIMESLATE", "REUSECARD",
    "ACTIVE", "SEPARATECK", "PROCESSED", "CREGHRS", "CSHIFTHRS", "CVACHRSP",
    "CVACHRSA", "CSICKHRSP", "CSICKHRSP", "CCOMPHRSP", "CCOMPHRSA", "CVACAMTP",
    "CVACAMTA", "CSICKAMTP", "CSICKAMTA", "CCOMPAMTP", "CCOMPAMTA", "CDISIHRSP",
    "CDISIHRSA", "CDISIAMTP", "CDISIAMTA", "LASTNAME", "FIRSTNAME", "MIDDLENAME",
    "GREGHRS", "GSHIFTHRS", "GVACHRSP", "GVACHRSA", "GSICKHRSP", "GSICKHRSA",
    "GCOMPHRSP", "GCOMPHRSA", "GVACAMTP", "GVACAMTA", "GSICKAMTP", "GSICKAMTA",
    "GCOMPAMTP", "GCOMPAMTA", "KEYACTION", "GDISIHRSP", "GDISIHRSA", "GDISIAMTP",
    "GDISIAMTA", "HIREDATE", "FIREDATE", "PARTTIME", "PAYFREQ", "OTSCHED",
    "COMPTIME", "SHIFTSCHED", "SHIFTNUM", "WORKPROV", "STATUS", "INACTDATE",
    "PROCESSCMD", "GOTHOURS", "OTCALCTYPE", "HRSPERDAY", "WORKCODE", "TOTALJOBS",
    "USERSEC", "WKLYFLSA", "VALUES", "OTOVERRIDE", "COTHOURS", "TCDLINES",
    "SWJOB", "SRCEAPPL",
)

TIMECARD_DETAIL_HEADERS: tuple[str, ...] = (
    "EMPLOYEE", "PEREND", "TIMECARD", "LINENUM", "CATEGORY", "EARNDED",
    "EARDEDTYPE", "EARDEDDATE", "STARTTIME", "STOPTIME", "GLSEG1", "GLSEG2",
    "GLSEG3", "HOURS", "CALCMETH", "LIMITBASE", "CNTBASE", "RATE", "PAYORACCR",
    "EXPACCT", "LIABACCT", "OTACCT", "SHIFTACCT", "ASSETACCT", "OTSCHED",
    "SHIFTSCHED", "SHIFTNUM", "WCC", "TAXWEEKS", "TAXANNLIZ", "WEEKLYNTRY",
    "ENTRYTYPE", "POOLEDTIPS", "DESC", "GLSEGID1", "GLSEGDESC1", "GLSEGID2",
    "GLSEGDESC2", "GLSEGID3", "GLSEGDESC3", "KEYACTION", "WORKPROV", "PROCESSCMD",
    "NKEMPLOYEE", "NKPEREND", "NKTIMECARD", "NKLINENUM", "DAYS", "WCCGROUP",
    "VALUES", "OTHOURS", "OTRATE", "SWFLSA", "DISTCODE", "REXPACCT", "RLIABACCT",
    "SWALLOCJOB", "JOBS", "WORKCODE", "JOBHOURS", "JOBBASE", "RCALCMETH",
    "RLIMITBASE", "RRATEOVER", "RRATE", "DEFRRATE",
)

# Timecard_Detail column positions (letters as seen in Excel)
DETAIL_EMPLOYEE = 0  # A
DETAIL_PEREND = 1  # B
DETAIL_TIMECARD = 2  # C
DETAIL_LINENUM = 3  # D
DETAIL_CATEGORY = 4  # E
DETAIL_EARNDED = 5  # F
DETAIL_EARDEDDATE = 7  # H
DETAIL_HOURS = 13  # N
DETAIL_EXPACCT = 19  # T
DETAIL_OTACCT = 21  # V
DETAIL_OTSCHED = 24  # Y
DETAIL_DAYS = 47  # AV
DETAIL_DISTCODE = 53  # BB


class WorkbookWriteError(Exception):
    """Raised when the Sage workbook cannot be written."""


def _period_end(date_range: DateColumnRange) -> date:
    bounds = date_range.range()
    if bounds is None:
        raise ValueError("date range is unresolved; PEREND cannot be determined")
    return bounds[1]


def format_hours(hours: float) -> str:
    return str(round(hours, 2))


def payable_employees(employees: Sequence[Employee]) -> list[Employee]:
    """Employees whose shifts add up to a positive number of hours."""
    return [e for e in employees if e.total_hours() > 0]


def build_header_rows(
    employees: Sequence[Employee], date_range: DateColumnRange, period: str
) -> list[list[str]]:
    perend = _period_end(date_range).strftime(DATE_FORMAT)
    rows: list[list[str]] = []
    for employee in payable_employees(employees):
        row = [""] * len(TIMECARD_HEADER_HEADERS)
        row[0] = employee.id
        row[1] = perend
        row[2] = period
        rows.append(row)
    return rows


def build_detail_rows(
    employees: Sequence[Employee],
    date_range: DateColumnRange,
    period: str,
    *,
    category: str = DEFAULT_CATEGORY,
    earnings_code: str = DEFAULT_EARNINGS_CODE,
) -> list[list[str]]:
    """One row per worked shift. LINENUM restarts at 1000 for every employee."""
    perend = _period_end(date_range).strftime(DATE_FORMAT)
    payable = payable_employees(employees)
    rows: list[list[str]] = []
    with ProgressTracker(len(payable), description="Building timecard detail") as progress:
        for employee in payable:
            progress.start_item(employee.id)
            for i, shift in enumerate(employee.worked_shifts()):
                row = [""] * len(TIMECARD_DETAIL_HEADERS)
                row[DETAIL_EMPLOYEE] = employee.id
                row[DETAIL_PEREND] = perend
                row[DETAIL_TIMECARD] = period
                row[DETAIL_LINENUM] = str((i + 1) * 1000)
                row[DETAIL_CATEGORY] = category
                row[DETAIL_EARNDED] = earnings_code
                row[DETAIL_EARDEDDATE] = shift.date.strftime(DATE_FORMAT)
                row[DETAIL_HOURS] = format_hours(shift.hours())
                row[DETAIL_EXPACCT] = employee.exp_account
                row[DETAIL_OTACCT] = employee.exp_account
                row[DETAIL_OTSCHED] = employee.overtime_schedule
                row[DETAIL_DAYS] = DAYS_VALUE
                row[DETAIL_DISTCODE] = employee.dist_code
                rows.append(row)
            progress.finish_item()
            progress.set_postfix(lines=len(rows))
    return rows


def named_range_reference(sheet_name: str, columns: int, rows: int) -> str:
    """Absolute reference covering ``rows`` x ``columns`` from A1."""
    last_col = to_letters(max(columns, 1) - 1)
    last_row = max(rows, 1)
    return f"{sheet_name}!$A$1:${last_col}${last_row}"


def _write_sheet(
    writer: pd.ExcelWriter,
    sheet_name: str,
    headers: Sequence[str],
    rows: list[list[str]],
    define_names: bool,
) -> None:
    # header row written as plain data so duplicate names survive
    frame = pd.DataFrame([list(headers), *rows])
    frame.to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    if define_names:
        reference = named_range_reference(sheet_name, len(headers), len(rows) + 1)
        # xlsxwriter warns and returns -1 instead of raising on an illegal name
        if writer.book.define_name(sheet_name, f"={reference}") == -1:
            raise WorkbookWriteError(f"`{sheet_name}` cannot be used as a defined name")
        logger.debug(f"named range {sheet_name} -> {reference}")


def write_timecards(
    path: Path,
    header_rows: list[list[str]],
    detail_rows: list[list[str]],
    *,
    header_sheet: str = "Timecard_Header",
    detail_sheet: str = "Timecard_Detail",
    define_names: bool = True,
) -> Path:
    """Write both Sage sheets to ``path`` (xlsxwriter engine).

    Raises:
        WorkbookWriteError: the workbook could not be created or closed
    """
    try:
        with pd.ExcelWriter(path, engine="xlsxwriter") as writer:
            _write_sheet(writer, header_sheet, TIMECARD_HEADER_HEADERS, header_rows, define_names)
            _write_sheet(writer, detail_sheet, TIMECARD_DETAIL_HEADERS, detail_rows, define_names)
    except Exception as e:
        raise WorkbookWriteError(f"could not write workbook `{path}`: {e}") from e
    logger.debug(f"wrote {len(header_rows)} header rows, {len(detail_rows)} detail rows to {path}")
    return path
