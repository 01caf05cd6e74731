"""Unit tests for ConfirmationGate module."""

import io

import pytest

from PageDiff.ConfirmationGate import CallableGate, ConsoleGate, FixedAnswerGate, parse_answer


@pytest.mark.parametrize("text", ["", "\n", "y", "Y", "yes", "Yes", "YES", "  y  \n"])
def test_parse_yes(text):
    assert parse_answer(text) is True


@pytest.mark.parametrize("text", ["n", "N", "no", "No", "NO", "no\n"])
def test_parse_no(text):
    assert parse_answer(text) is False


@pytest.mark.parametrize("text", ["maybe", "yess", "0", "ja"])
def test_parse_unknown(text):
    assert parse_answer(text) is None


class TestConsoleGate:

    def test_empty_answer_defaults_to_yes(self):
        stderr = io.StringIO()
        gate = ConsoleGate(stdin=io.StringIO("\n"), stderr=stderr)

        assert gate.confirm("Do you want to continue?") is True
        assert stderr.getvalue() == "Do you want to continue? [Y/n] "

    def test_repeats_until_valid_answer(self):
        stderr = io.StringIO()
        gate = ConsoleGate(stdin=io.StringIO("what\nmaybe\nNo\n"), stderr=stderr)

        assert gate.confirm("Continue?") is False
        assert stderr.getvalue().count("Continue? [Y/n] ") == 3

    def test_closed_input_is_the_default_answer(self):
        gate = ConsoleGate(stdin=io.StringIO(""), stderr=io.StringIO())

        assert gate.confirm("Continue?") is True

    def test_input_closed_after_invalid_answer(self):
        stderr = io.StringIO()
        gate = ConsoleGate(stdin=io.StringIO("invalid\n"), stderr=stderr)

        assert gate.confirm("Continue?") is True
        assert stderr.getvalue().count("Continue? [Y/n] ") == 2


def test_fixed_answer_gate_records_questions():
    gate = FixedAnswerGate(False)

    assert gate.confirm("first") is False
    assert gate.confirm("second") is False
    assert gate.questions == ["first", "second"]


def test_callable_gate():
    gate = CallableGate(lambda message: message.startswith("Do"))

    assert gate.confirm("Do you want to continue?") is True
    assert gate.confirm("Abort?") is False
