from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace
from datetime import date, timedelta

"""DateColumnRange model.

Describes the contiguous block of worksheet columns holding per-day hours:
one calendar day per column, ascending from ``head`` to ``tail``.

Lifecycle: built by the inferer (``timecards.excel.timecards``), possibly
replaced field by field by the confirmation loop, then used read-only by the
extractor and the Sage output mapper.
"""

__all__ = [
    "DateColumnRange",
]


@dataclass(frozen=True)
class DateColumnRange:
    """Inclusive column block ``[head, tail]`` mapped onto ``[start, end]``.

    A range with ``start`` or ``end`` unset is unresolved and must not be used
    for extraction.
    """
    row: int | None = None  # row holding the serial-date header
    head: int = 0
    tail: int = 0
    start: date | None = None
    end: date | None = None

    @property
    def is_resolved(self) -> bool:
        return self.start is not None and self.end is not None

    def range(self) -> tuple[date, date] | None:
        if self.start is None or self.end is None:
            return None
        return self.start, self.end

    @property
    def span(self) -> int:
        """Number of days between ``head`` and ``tail`` (``tail - head``)."""
        return self.tail - self.head

    def in_range(self, column: int) -> bool:
        if not self.is_resolved:
            return False
        return self.head <= column <= self.tail

    def date_from_column(self, column: int) -> date | None:
        if self.start is None or not self.in_range(column):
            return None
        return self.start + timedelta(days=column - self.head)

    def dates(self) -> Iterator[date]:
        for column in range(self.head, self.tail + 1):
            d = self.date_from_column(column)
            if d is None:
                return
            yield d

    def with_recomputed_end(self) -> DateColumnRange:
        """Return a copy whose ``end`` is re-derived from ``start`` and the span."""
        if self.start is None:
            return self
        return replace(self, end=self.start + timedelta(days=self.span))
