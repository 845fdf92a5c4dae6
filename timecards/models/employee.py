from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta

"""Employee / Shift domain models.

An Employee is created when the extractor first sees its id cell (column 0)
and is filled in as the rest of that row is visited.
"""

__all__ = [
    "Employee",
    "Shift",
    "sum_of_hours",
]


@dataclass(frozen=True)
class Shift:
    """One worked period for one employee on one date."""
    column: int  # source column index
    duration: timedelta
    date: date

    def hours(self) -> float:
        """Duration in decimal hours, counted in whole minutes."""
        minutes = int(self.duration.total_seconds() // 60)
        return minutes / 60.0


@dataclass
class Employee:
    id: str
    hours: list[Shift] = field(default_factory=list)  # column order as encountered
    overtime_schedule: str = ""
    dist_code: str = ""
    exp_account: str = ""

    def total_hours(self) -> float:
        return sum_of_hours(self.hours)

    def worked_shifts(self) -> list[Shift]:
        """Shifts with a positive number of hours."""
        return [s for s in self.hours if s.hours() > 0]


def sum_of_hours(shifts: Iterable[Shift]) -> float:
    return sum((s.hours() for s in shifts), 0.0)
