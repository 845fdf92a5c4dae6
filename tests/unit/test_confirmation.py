from __future__ import annotations

from datetime import date
from unittest.mock import patch

import pytest

from timecards.excel.timecards import UnresolvedDateRange
from timecards.models.date_range import DateColumnRange
from timecards.services.confirmation import (
    AssumeYesInteraction,
    ConfirmationAborted,
    MalformedColumnInput,
    MalformedDateInput,
    ScriptedInteraction,
    TerminalInteraction,
    confirm_date_range,
    format_date,
    parse_column_pair,
    parse_date_text,
)

INFERRED = DateColumnRange(row=0, head=5, tail=8, start=date(2021, 5, 2), end=date(2021, 5, 5))


def test_format_and_parse_date_text():
    assert format_date(date(2021, 1, 1)) == "January 01, 2021"
    assert parse_date_text("January 01, 2021") == date(2021, 1, 1)
    assert parse_date_text("  March 7, 2021 ") == date(2021, 3, 7)


def test_parse_date_text_malformed():
    with pytest.raises(MalformedDateInput) as e:
        parse_date_text("2021-01-01")
    assert "January 01, 2021" in str(e.value)


def test_parse_column_pair():
    assert parse_column_pair("F", "i") == (5, 8)
    with pytest.raises(MalformedColumnInput):
        parse_column_pair("12", "I")
    with pytest.raises(MalformedColumnInput):
        parse_column_pair("I", "F")


def test_both_confirmed_is_idempotent():
    port = ScriptedInteraction([True, True])
    result = confirm_date_range(INFERRED, port)
    assert result == INFERRED
    assert result.end == INFERRED.end
    assert port.remaining == 0
    assert port.messages[0] == "From May 02, 2021 to May 05, 2021"
    assert port.prompts == [
        "Do these dates look correct?",
        "Do the dates range from columns `F` to `I`",
    ]


def test_date_correction_path():
    port = ScriptedInteraction([
        False, "January 01, 2021", True,  # pass 1: fix the start date
        True, True,  # pass 2: confirm both
    ])
    result = confirm_date_range(INFERRED, port)
    assert (result.head, result.tail) == (5, 8)
    assert result.start == date(2021, 1, 1)
    assert result.end == date(2021, 1, 4)
    assert port.remaining == 0
    assert "From January 01, 2021 to January 04, 2021" in port.messages


def test_column_correction_path():
    port = ScriptedInteraction([
        True, False, "E", "K",  # pass 1: move the block
        True, True,
    ])
    result = confirm_date_range(INFERRED, port)
    assert (result.head, result.tail) == (4, 10)
    assert result.start == date(2021, 5, 2)
    assert result.end == date(2021, 5, 8)
    assert port.prompts[-1] == "Do the dates range from columns `E` to `K`"


def test_malformed_date_reprompts():
    port = ScriptedInteraction([False, "01/01/2021", "January 01, 2021", True, True, True])
    result = confirm_date_range(INFERRED, port)
    assert result.start == date(2021, 1, 1)
    assert any("January 01, 2021" in m for m in port.messages if m.startswith("please enter"))
    assert port.prompts.count("What is the start date?") == 2


def test_malformed_columns_reprompt_both():
    port = ScriptedInteraction([True, False, "K", "E", "E", "K", True, True])
    result = confirm_date_range(INFERRED, port)
    assert (result.head, result.tail) == (4, 10)
    assert port.prompts.count("What column does the start date appear on?") == 2


def test_repeated_rejections_loop_without_recursion():
    answers: list[bool | str] = []
    for _ in range(1500):
        answers += [False, "January 01, 2021", True]
    answers += [True, True]
    port = ScriptedInteraction(answers)
    result = confirm_date_range(INFERRED, port)
    assert result.start == date(2021, 1, 1)
    assert port.remaining == 0


def test_unresolved_range_rejected():
    port = ScriptedInteraction([True, True])
    with pytest.raises(UnresolvedDateRange):
        confirm_date_range(DateColumnRange(row=0, head=5, tail=5, start=date(2021, 1, 1)), port)
    assert port.prompts == []


def test_script_exhausted_aborts():
    with pytest.raises(ConfirmationAborted):
        confirm_date_range(INFERRED, ScriptedInteraction([False]))


def test_assume_yes():
    assert confirm_date_range(INFERRED, AssumeYesInteraction()) == INFERRED
    with pytest.raises(ConfirmationAborted):
        AssumeYesInteraction().read_text("What is the start date?")


class TestTerminalInteraction:

    def test_confirm_reasks_until_yes_or_no(self, capsys):
        with patch("builtins.input", side_effect=["maybe", "Y"]):
            assert TerminalInteraction().confirm("Ok?") is True
        assert "Please answer 'y' or 'n'." in capsys.readouterr().out
        with patch("builtins.input", side_effect=["no"]):
            assert TerminalInteraction().confirm("Ok?") is False

    def test_read_text_requires_value(self):
        with patch("builtins.input", side_effect=["", "  E "]) as mock_input:
            assert TerminalInteraction().read_text("Column") == "E"
        mock_input.assert_called_with("Column: ")

    def test_eof_aborts(self):
        with patch("builtins.input", side_effect=EOFError):
            with pytest.raises(ConfirmationAborted):
                TerminalInteraction().confirm("Ok?")
