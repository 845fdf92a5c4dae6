from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import date, timedelta

from ..models.cell import Cell, CellKind, GridCell
from ..models.date_range import DateColumnRange
from ..models.employee import Employee, Shift

"""Timecard worksheet parsing.

Two single passes over the raw ``(row, column, cell)`` stream:

1. ``infer_date_range``: find the serial-date header row and the column block
   it spans.
2. ``parse_employees``: build one Employee per row keyed by row index, using
   the confirmed date range to turn in-range numbers into shifts.

Worksheet layout assumed by the extractor:
- column 0: employee id (text)
- column 1: overtime schedule
- column 2: distribution code
- column 3: expense account
- columns head..tail: fraction of a day worked (1.0 == 24 hours)
"""

__all__ = [
    "SERIAL_EPOCH",
    "InvalidSerialDate",
    "InvalidShiftValue",
    "UnresolvedDateRange",
    "infer_date_range",
    "parse_date_range",
    "parse_employees",
    "serial_to_date",
]

logger = logging.getLogger(__name__)

# Day numbers count from 1900-01-01 with a two day offset (serial 1 is
# 1900-01-01 itself and 1900-02-29 exists in the serial numbering).
SERIAL_EPOCH = date(1900, 1, 1)
SERIAL_OFFSET = 2

ID_COLUMN = 0
METADATA_COLUMNS = {
    1: "overtime_schedule",
    2: "dist_code",
    3: "exp_account",
}


class UnresolvedDateRange(Exception):
    """Raised when no header row with at least two serial dates was found."""


class InvalidSerialDate(UnresolvedDateRange):
    """A number too large (or not finite) to be a calendar day."""


class InvalidShiftValue(ValueError):
    """An in-range number that cannot be a worked duration."""


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def serial_to_date(serial: float) -> date:
    try:
        return SERIAL_EPOCH + timedelta(days=_round_half_away(serial) - SERIAL_OFFSET)
    except (OverflowError, ValueError) as e:
        raise InvalidSerialDate(f"{serial!r} is not a serial date") from e


def _serial_date_or_none(serial: float) -> date | None:
    try:
        return serial_to_date(serial)
    except InvalidSerialDate:
        return None


def infer_date_range(cells: Iterable[GridCell]) -> DateColumnRange:
    """Locate the serial-date header in a raw cell stream.

    The first row holding a float cell becomes the header row; its first
    float sets ``head``/``start`` and each later float on that row moves
    ``tail``/``end``. Floats on other rows are ignored, as are floats that no
    calendar day can represent (a phone number stored as a number, say). The
    result is unresolved when the header row holds fewer than two floats.
    """
    row: int | None = None
    head = tail = 0
    start: date | None = None
    end: date | None = None
    for r, c, cell in cells:
        if cell.kind is not CellKind.FLOAT:
            continue
        parsed = _serial_date_or_none(cell.value)
        if parsed is None:
            logger.warning(f"ignoring {cell.value!r} at row {r + 1} column {c + 1}: not a serial date")
            continue
        if row is None:
            row = r
            head = tail = c
            start = parsed
        elif r == row:
            tail = c
            end = parsed
    return DateColumnRange(row=row, head=head, tail=tail, start=start, end=end)


def parse_date_range(cells: Iterable[GridCell]) -> DateColumnRange:
    """``infer_date_range`` that refuses an unresolved result."""
    date_range = infer_date_range(cells)
    if date_range.row is None:
        raise UnresolvedDateRange("no date cells found in worksheet")
    if not date_range.is_resolved:
        raise UnresolvedDateRange(
            f"date header on row {date_range.row + 1} holds a single date; "
            "at least two are needed"
        )
    logger.debug(
        f"date header row={date_range.row} head={date_range.head} tail={date_range.tail} "
        f"start={date_range.start} end={date_range.end}"
    )
    return date_range


def _coerce_metadata(kind: CellKind, value: object) -> str | None:
    if kind is CellKind.TEXT:
        return str(value)
    if kind is CellKind.INTEGER:
        return str(int(value))  # type: ignore[call-overload]
    if kind is CellKind.FLOAT:
        return str(_round_half_away(float(value)))  # type: ignore[arg-type]
    return None


def _shift_duration(row: int, col: int, days: float) -> timedelta:
    try:
        return timedelta(minutes=round(days * 24 * 60))
    except (OverflowError, ValueError) as e:
        raise InvalidShiftValue(f"{days!r} at row {row + 1} column {col + 1} is not a worked duration") from e


def _is_header_date(cell: Cell, expected: date | None) -> bool:
    return cell.kind is CellKind.FLOAT and expected is not None and _serial_date_or_none(cell.value) == expected


def parse_employees(cells: Iterable[GridCell], date_range: DateColumnRange) -> list[Employee]:
    """Extract employees and their shifts from a raw cell stream.

    A row is captured only if it has a text id in column 0; metadata and
    shift cells of rows without one are dropped.

    The range's own row is read like any other row. It is left out of the
    result only when one of its in-range cells is the serial of the date its
    column stands for, i.e. it really is the date header and its column-0
    text is a label. A row taken as the header by mistake and corrected in
    the confirmation loop keeps its employee.

    Raises:
        UnresolvedDateRange: ``date_range`` has no start or end
        InvalidShiftValue: an in-range number too large for a duration
    """
    if not date_range.is_resolved:
        raise UnresolvedDateRange("cannot extract shifts with an unresolved date range")

    employees: dict[int, Employee] = {}
    header_confirmed = False
    for row, col, cell in cells:
        shift_date = date_range.date_from_column(col)
        if row == date_range.row and _is_header_date(cell, shift_date):
            header_confirmed = True

        if cell.kind is CellKind.TEXT and col == ID_COLUMN and row not in employees:
            employees[row] = Employee(id=cell.value)

        employee = employees.get(row)
        if employee is None:
            continue

        if cell.kind is CellKind.FLOAT and cell.value > 0 and shift_date is not None:
            duration = _shift_duration(row, col, cell.value)
            if duration > timedelta(0):
                employee.hours.append(Shift(column=col, duration=duration, date=shift_date))

        field_name = METADATA_COLUMNS.get(col)
        if field_name is not None:
            text = _coerce_metadata(cell.kind, cell.value)
            if text is not None:
                setattr(employee, field_name, text)

    if header_confirmed and date_range.row is not None:
        label = employees.pop(date_range.row, None)
        if label is not None:
            logger.debug(f"`{label.id}` on row {date_range.row + 1} labels the date header")

    result = list(employees.values())
    logger.debug(f"parsed {len(result)} employees")
    return result
