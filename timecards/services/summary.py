from __future__ import annotations

from ..models.conversion_result import ConversionResult

"""Summary line rendering service.

Format:
SUMMARY employees={n} shifts={m} hours={h} start={YYYY-MM-DD} end={YYYY-MM-DD}
output={path} elapsed_sec={elapsed}
"""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small numbers
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 6))


def render_summary_line(result: ConversionResult) -> str:
    """Render a SUMMARY line from a ConversionResult.

    Examples:
        >>> from datetime import date, datetime, timezone
        >>> from pathlib import Path
        >>> t = datetime(2021, 1, 8, 10, 0, 0, tzinfo=timezone.utc)
        >>> result = ConversionResult(
        ...     sheet_name="Week 1", output_path=Path("output.xlsx"), employees=2,
        ...     shifts=7, total_hours=56.5, start=date(2021, 1, 1), end=date(2021, 1, 7),
        ...     start_time=t, end_time=t, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY employees=2 shifts=7 hours=56.5 start=2021-01-01 end=2021-01-07 output=output.xlsx elapsed_sec=2'
    """
    return (
        f"SUMMARY employees={result.employees} "
        f"shifts={result.shifts} "
        f"hours={_format_number(round(result.total_hours, 2))} "
        f"start={result.start.isoformat()} "
        f"end={result.end.isoformat()} "
        f"output={result.output_path} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)}"
    )
