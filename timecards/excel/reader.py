from __future__ import annotations

import datetime as dt
import numbers
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.utils.datetime import to_excel

from ..models.cell import Cell, GridCell

"""Excel reader for raw timecard worksheets.

The worksheet is read without a header (``header=None``) and every populated
cell is handed out as a ``(row, column, Cell)`` triple, zero-based from A1.

Cell classification:
- str: TEXT (stripped, blank strings are skipped)
- int / float: FLOAT. xlsx stores every number as a double; pandas returns
  integral values as ``int``, so the distinction is not meaningful here.
- datetime / date: FLOAT serial day number (1900 date system)
- time: FLOAT fraction of a day
- timedelta: FLOAT days
- bool and anything else: EMPTY
"""

__all__ = [
    "SheetGrid",
    "WorkbookReadError",
    "WorksheetNotFound",
    "classify_value",
    "load_sheet",
]


class WorksheetNotFound(Exception):
    """Raised when the requested sheet does not exist in the workbook."""

    def __init__(self, sheet_name: str) -> None:
        super().__init__(f"worksheet not found '{sheet_name}'")
        self.sheet_name = sheet_name


class WorkbookReadError(Exception):
    """Raised when the workbook cannot be opened or a sheet cannot be parsed."""


@dataclass
class SheetGrid:
    sheet_name: str
    frame: pd.DataFrame  # raw values, header=None, dtype=object

    def cells(self) -> Iterator[GridCell]:
        """Yield every populated cell exactly once, row by row."""
        for row_idx, raw in enumerate(self.frame.itertuples(index=False, name=None)):
            for col_idx, val in enumerate(raw):
                cell = classify_value(val)
                if cell is None:
                    continue
                yield row_idx, col_idx, cell


def classify_value(val: Any) -> Cell | None:
    """Map a raw pandas value to a Cell. Blank values return None."""
    if val is None:
        return None
    if isinstance(val, bool):
        return Cell.empty()
    if isinstance(val, str):
        stripped = val.strip()
        if stripped == "":
            return None
        return Cell.text(stripped)
    if isinstance(val, numbers.Real):
        if pd.isna(val):
            return None
        return Cell.float_(float(val))
    if isinstance(val, dt.timedelta):
        # pd.Timedelta is a timedelta subclass; NaT is caught first
        if pd.isna(val):
            return None
        return Cell.float_(val.total_seconds() / 86400.0)
    if isinstance(val, (dt.datetime, dt.date)):
        if pd.isna(val):
            return None
        if isinstance(val, pd.Timestamp):
            val = val.to_pydatetime()
        return Cell.float_(float(to_excel(val)))
    if isinstance(val, dt.time):
        seconds = val.hour * 3600 + val.minute * 60 + val.second + val.microsecond / 1e6
        return Cell.float_(seconds / 86400.0)
    if pd.isna(val):
        return None
    return Cell.empty()


def load_sheet(path: Path, sheet_name: str) -> SheetGrid:
    """Read one worksheet of an Excel file as a raw grid.

    Raises:
        WorksheetNotFound: the workbook has no sheet named ``sheet_name``
        WorkbookReadError: the file cannot be opened or parsed
    """
    try:
        xls = pd.ExcelFile(path)
    except Exception as e:
        raise WorkbookReadError(f"could not open excel workbook at `{path}`: {e}") from e
    try:
        if sheet_name not in [str(n) for n in xls.sheet_names]:
            raise WorksheetNotFound(sheet_name)
        try:
            df = xls.parse(sheet_name, header=None, dtype=object)
        except Exception as e:
            raise WorkbookReadError(f"could not parse sheet '{sheet_name}' in `{path}`: {e}") from e
    finally:
        xls.close()
    return SheetGrid(sheet_name=sheet_name, frame=df)
