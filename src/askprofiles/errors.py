"""Exceptions raised by askprofiles."""

from __future__ import annotations


class ToolExecutionError(RuntimeError):
    """The ASK CLI could not be run or exited with an unexpected failure."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"ASK CLI is not functional. {detail}")
        self.detail = detail
