"""Yes/no decision sources used whenever a run needs operator consent."""

import sys
from abc import ABC, abstractmethod
from typing import Callable, Optional, TextIO

YES_ANSWERS = ("", "y", "yes")
NO_ANSWERS = ("n", "no")


def parse_answer(text: str) -> Optional[bool]:
    """Return True for yes (or an empty answer), False for no, None otherwise."""
    answer = text.strip().lower()
    if answer in YES_ANSWERS:
        return True
    if answer in NO_ANSWERS:
        return False
    return None


class ConfirmationGate(ABC):

    @abstractmethod
    def confirm(self, message: str) -> bool:
        """Ask ``message`` and return the decision."""


class ConsoleGate(ConfirmationGate):
    """Asks on the terminal and repeats the question until it gets a valid answer.

    Closed input counts as the empty answer, which is yes.
    """

    def __init__(self, stdin: TextIO = None, stderr: TextIO = None):
        self.stdin = stdin
        self.stderr = stderr

    def confirm(self, message: str) -> bool:
        stdin = self.stdin or sys.stdin
        stderr = self.stderr or sys.stderr
        while True:
            stderr.write(f"{message} [Y/n] ")
            stderr.flush()
            decision = parse_answer(stdin.readline())
            if decision is not None:
                return decision


class FixedAnswerGate(ConfirmationGate):
    """Always gives the same answer, for batch and CI runs."""

    def __init__(self, answer: bool = True):
        self.answer = answer
        self.questions = []

    def confirm(self, message: str) -> bool:
        self.questions.append(message)
        return self.answer


class CallableGate(ConfirmationGate):

    def __init__(self, decide: Callable[[str], bool]):
        self.decide = decide

    def confirm(self, message: str) -> bool:
        return bool(self.decide(message))
