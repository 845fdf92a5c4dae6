from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import date, datetime
from typing import Protocol

from ..excel.columns import from_letters, to_letters
from ..excel.timecards import UnresolvedDateRange
from ..models.date_range import DateColumnRange

"""Operator confirmation of the inferred date range.

The inferer can pick the wrong row or block, so before any extraction the
operator confirms (or corrects) the dates and the column span:

    AwaitDateConfirm -> AwaitColumnConfirm -> Resolved
            ^                                    |
            +------------- any "no" -------------+

``end`` is always re-derived as ``start + (tail - head)`` days. The loop only
finishes on a pass where both answers are "yes".

Interaction goes through an ``InteractionPort`` so tests can script answers.
"""

__all__ = [
    "DATE_FORMAT",
    "AssumeYesInteraction",
    "ConfirmationAborted",
    "InteractionPort",
    "MalformedColumnInput",
    "MalformedDateInput",
    "ScriptedInteraction",
    "TerminalInteraction",
    "confirm_date_range",
    "format_date",
    "parse_column_pair",
    "parse_date_text",
]

logger = logging.getLogger(__name__)

DATE_FORMAT = "%B %d, %Y"  # January 01, 2021
DATE_EXAMPLE = "January 01, 2021"

YES_ANSWERS = {"y", "yes"}
NO_ANSWERS = {"n", "no"}


class ConfirmationAborted(Exception):
    """Raised when the operator leaves the confirmation (EOF / Ctrl-C)."""


class MalformedDateInput(ValueError):
    """Operator date text does not match DATE_FORMAT."""


class MalformedColumnInput(ValueError):
    """Operator column text is not a usable column letter pair."""


class InteractionPort(Protocol):
    def confirm(self, prompt: str) -> bool: ...

    def read_text(self, prompt: str) -> str: ...

    def notify(self, message: str) -> None: ...


class TerminalInteraction:
    """Interactive port reading answers from the terminal via ``input()``."""

    def _input(self, label: str) -> str:
        try:
            return input(label).strip()
        except (EOFError, KeyboardInterrupt) as e:
            print()
            raise ConfirmationAborted("confirmation aborted by operator") from e

    def confirm(self, prompt: str) -> bool:
        while True:
            answer = self._input(f"{prompt} [y/n]: ").lower()
            if answer in YES_ANSWERS:
                return True
            if answer in NO_ANSWERS:
                return False
            print("Please answer 'y' or 'n'.")

    def read_text(self, prompt: str) -> str:
        while True:
            value = self._input(f"{prompt}: ")
            if value:
                return value
            print("A value is required.")

    def notify(self, message: str) -> None:
        print(message)


class ScriptedInteraction:
    """Port answering from a fixed script; records every prompt and message."""

    def __init__(self, answers: Iterable[bool | str]) -> None:
        self._answers = list(answers)
        self.prompts: list[str] = []
        self.messages: list[str] = []

    def _next(self, prompt: str) -> bool | str:
        self.prompts.append(prompt)
        if not self._answers:
            raise ConfirmationAborted(f"no scripted answer left for prompt: {prompt}")
        return self._answers.pop(0)

    def confirm(self, prompt: str) -> bool:
        return bool(self._next(prompt))

    def read_text(self, prompt: str) -> str:
        return str(self._next(prompt))

    def notify(self, message: str) -> None:
        self.messages.append(message)

    @property
    def remaining(self) -> int:
        return len(self._answers)


class AssumeYesInteraction:
    """Non-interactive port accepting every proposal (``--yes``)."""

    def confirm(self, prompt: str) -> bool:
        logger.info(f"{prompt} yes (assumed)")
        return True

    def read_text(self, prompt: str) -> str:
        raise ConfirmationAborted(f"cannot answer '{prompt}' in non-interactive mode")

    def notify(self, message: str) -> None:
        logger.info(message)


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def parse_date_text(text: str) -> date:
    try:
        return datetime.strptime(text.strip(), DATE_FORMAT).date()
    except ValueError as e:
        raise MalformedDateInput(f"please enter date in the format: {DATE_EXAMPLE}") from e


def parse_column_pair(head_text: str, tail_text: str) -> tuple[int, int]:
    head = from_letters(head_text)
    tail = from_letters(tail_text)
    if head < 0 or tail < 0:
        raise MalformedColumnInput("please enter columns as letters, for example `E` and `K`")
    if tail < head:
        raise MalformedColumnInput(
            f"end column `{to_letters(tail)}` comes before start column `{to_letters(head)}`"
        )
    return head, tail


def _ask_start_date(port: InteractionPort) -> date:
    port.notify(f"Please enter a date in the format {format_date(date.today())}")
    while True:
        try:
            return parse_date_text(port.read_text("What is the start date?"))
        except MalformedDateInput as e:
            port.notify(str(e))


def _ask_columns(port: InteractionPort) -> tuple[int, int]:
    while True:
        head_text = port.read_text("What column does the start date appear on?")
        tail_text = port.read_text("What column does the end date appear on?")
        try:
            return parse_column_pair(head_text, tail_text)
        except MalformedColumnInput as e:
            port.notify(str(e))


def confirm_date_range(date_range: DateColumnRange, port: InteractionPort) -> DateColumnRange:
    """Have the operator confirm or correct ``date_range``.

    Raises:
        UnresolvedDateRange: ``date_range`` has no start or end
        ConfirmationAborted: the port gave up (EOF, script exhausted, ...)
    """
    current = date_range
    passes = 0
    while True:
        passes += 1
        bounds = current.range()
        if bounds is None:
            raise UnresolvedDateRange("cannot confirm an unresolved date range")
        for d in current.dates():
            logger.debug(format_date(d))

        start, end = bounds
        port.notify(f"From {format_date(start)} to {format_date(end)}")
        dates_ok = port.confirm("Do these dates look correct?")
        if not dates_ok:
            current = replace(current, start=_ask_start_date(port))

        columns_ok = port.confirm(
            f"Do the dates range from columns `{to_letters(current.head)}` to `{to_letters(current.tail)}`"
        )
        if not columns_ok:
            head, tail = _ask_columns(port)
            current = replace(current, head=head, tail=tail)

        current = current.with_recomputed_end()

        if dates_ok and columns_ok:
            logger.debug(f"date range confirmed after {passes} pass(es)")
            return current
