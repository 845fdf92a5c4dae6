from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from timecards.config.loader import ConfigError, load_config
from timecards.logging.init import log_summary, setup_logging
from timecards.services.confirmation import (
    AssumeYesInteraction,
    ConfirmationAborted,
    InteractionPort,
    TerminalInteraction,
)
from timecards.services.orchestrator import ProcessingError, convert
from timecards.services.summary import render_summary_line

"""CLI entrypoint.

    sage-timecards SHEET PATH [OUTPUT] [--period LABEL] [--config FILE] [--yes] [--debug]

Flow:
- Load .env (TIMECARDS_CONFIG may point at the config file)
- Load config
- Convert SHEET of PATH, confirming the date range with the operator
- Print the SUMMARY line
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_ABORTED = 2


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env using python-dotenv. Variables already set win by default."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Raw timecard workbook -> Sage timecard import workbook")
    p.add_argument("sheet", help="Worksheet holding the timecards (also the default TIMECARD label)")
    p.add_argument("path", type=Path, help="Raw timecard workbook (.xlsx)")
    p.add_argument("output", nargs="?", default=None, help="Output workbook (default from config: output.xlsx)")
    p.add_argument("--period", default=None, help="TIMECARD label written to every row (default: SHEET)")
    p.add_argument("--config", type=Path, default=None, help="Config YAML (default: config/timecards.yml)")
    p.add_argument("--yes", action="store_true", help="Accept the inferred date range without asking")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    # None only: an empty list from tests must not pick up pytest's own argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    _load_env_file(Path(".env"))
    logger.debug("debug mode enabled")

    config_path = args.config
    if config_path is None and os.getenv("TIMECARDS_CONFIG"):
        config_path = Path(os.environ["TIMECARDS_CONFIG"])
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    output = Path(args.output or cfg.output)
    logger.info(f"Converting sheet `{args.sheet}` of {args.path} -> {output}")

    interaction: InteractionPort = AssumeYesInteraction() if args.yes else TerminalInteraction()
    try:
        result = convert(args.path, args.sheet, output, cfg, interaction, period=args.period)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL
    except ConfirmationAborted as e:
        logger.error(f"confirmation: {e}")
        return EXIT_ABORTED

    log_summary(render_summary_line(result))
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
