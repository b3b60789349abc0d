from __future__ import annotations

import logging
import sys
from typing import Callable, TextIO

from .exceptions import ConfirmationRequiredError, OperatorDeclined

LOGGER = logging.getLogger(__name__)

Confirm = Callable[[str], bool]

POLICY_ASK = "ask"
POLICY_CONTINUE = "continue"
POLICY_ABORT = "abort"
POLICY_FAIL = "fail"
POLICIES = (POLICY_ASK, POLICY_CONTINUE, POLICY_ABORT, POLICY_FAIL)


class TerminalConfirm:
    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self._stdin = stdin
        self._stdout = stdout

    def __call__(self, message: str) -> bool:
        stdin = self._stdin or sys.stdin
        stdout = self._stdout or sys.stdout
        stdout.write(f"warning: {message}\ncontinue? [Y/n] ")
        stdout.flush()
        answer = stdin.readline()
        if not answer:
            # end of input
            return False
        return "n" not in answer.lower()


class AssumeConfirm:
    def __init__(self, answer: bool) -> None:
        self.answer = answer

    def __call__(self, message: str) -> bool:
        LOGGER.warning("%s (%s)", message, "continuing" if self.answer else "stopping")
        return self.answer


class FailFastConfirm:
    def __call__(self, message: str) -> bool:
        raise ConfirmationRequiredError(
            f"Confirmation required but prompting is disabled: {message}"
        )


def confirm_for_policy(policy: str) -> Confirm:
    if policy == POLICY_ASK:
        return TerminalConfirm()
    if policy == POLICY_CONTINUE:
        return AssumeConfirm(True)
    if policy == POLICY_ABORT:
        return AssumeConfirm(False)
    if policy == POLICY_FAIL:
        return FailFastConfirm()
    raise ValueError(f"Unknown prompt policy '{policy}'. Expected one of: {', '.join(POLICIES)}.")


def continue_or_stop(confirm: Confirm, message: str) -> None:
    if not confirm(message):
        raise OperatorDeclined(message)
