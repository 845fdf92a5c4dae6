# Shared pytest fixtures
from __future__ import annotations
import logging
import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from timecards.logging.init import LOGGER_NAME, reset_logging
from timecards.models.cell import Cell, GridCell

# serial day numbers (1900 date system)
SERIAL_2021_01_01 = 44197.0
SERIAL_2021_05_02 = 44318.0


@pytest.fixture(autouse=True)
def _detach_log_handlers():
    # handlers bound to a previous test's captured stdout must not leak
    yield
    reset_logging()
    app_logger = logging.getLogger(LOGGER_NAME)
    for handler in app_logger.handlers[:]:
        app_logger.removeHandler(handler)
    app_logger.setLevel(logging.NOTSET)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("TIMECARDS_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """output: out/sage.xlsx
header_sheet: Timecard_Header
detail_sheet: Timecard_Detail
category: "2"
earnings_code: HRLY
define_names: true
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "timecards.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    (temp_workdir / "out").mkdir()
    return cfg


def make_excel(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    with pd.ExcelWriter(path) as writer:
        for sheet, rows in sheets.items():
            df = pd.DataFrame(rows)
            df.to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


def timecard_rows() -> list[list[object]]:
    """Raw sheet: date header on row 0 (E..G = 2021-01-01..03), two employees."""
    return [
        ["Employee", "OT Sched", "Dist", "Exp Acct", SERIAL_2021_01_01, SERIAL_2021_01_01 + 1, SERIAL_2021_01_01 + 2],
        ["E1", "OT1", "D1", "EXP1", 0.5, 1.0, 0.0],
        ["E2", "OT2", "D2", "EXP2", 0.0, 0.0, 0.0],
        ["E3", 2.6, 7, "EXP3", 0.25, None, 0.375],
    ]


@pytest.fixture()
def make_timecard_workbook(temp_workdir: Path) -> Callable[..., Path]:
    def _make(name: str = "timecards.xlsx", sheet: str = "Week 1", rows: list[list[object]] | None = None) -> Path:
        return make_excel(temp_workdir / "data" / name, {sheet: rows if rows is not None else timecard_rows()})
    return _make


def grid(rows: list[list[object]]) -> list[GridCell]:
    """Build (row, column, Cell) triples from Python values; None is blank."""
    cells: list[GridCell] = []
    for r, values in enumerate(rows):
        for c, v in enumerate(values):
            if v is None:
                continue
            if isinstance(v, Cell):
                cells.append((r, c, v))
            elif isinstance(v, str):
                cells.append((r, c, Cell.text(v)))
            elif isinstance(v, int):
                cells.append((r, c, Cell.integer(v)))
            else:
                cells.append((r, c, Cell.float_(v)))
    return cells
