from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

"""Cell domain model for raw timecard worksheets.

A raw worksheet carries no header describing its columns, so every cell is
handled as a small tagged variant and each consumer switches on ``kind``.

The reader (``timecards.excel.reader``) produces the ``(row, column, Cell)``
triples that the inferer and extractor consume.
"""

__all__ = [
    "Cell",
    "CellKind",
    "GridCell",
]


class CellKind(Enum):
    """Closed set of cell value kinds.

    - TEXT: string content
    - INTEGER: integral number (only from sources that keep int vs float apart)
    - FLOAT: any other number, including serial dates and day fractions
    - EMPTY: blank or unsupported content (booleans, errors)
    """
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    EMPTY = "empty"


@dataclass(frozen=True)
class Cell:
    kind: CellKind
    value: Any = None

    @staticmethod
    def text(value: str) -> Cell:
        return Cell(CellKind.TEXT, value)

    @staticmethod
    def integer(value: int) -> Cell:
        return Cell(CellKind.INTEGER, int(value))

    @staticmethod
    def float_(value: float) -> Cell:
        return Cell(CellKind.FLOAT, float(value))

    @staticmethod
    def empty() -> Cell:
        return Cell(CellKind.EMPTY, None)


# (row, column, cell) - zero-based positions
GridCell = tuple[int, int, Cell]
