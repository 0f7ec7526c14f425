"""Failure taxonomy for the completion path."""

from __future__ import annotations


class EmmetLsError(RuntimeError):
    pass


class ScannerFault(EmmetLsError):
    """The abbreviation scanner raised instead of declining.

    A decline ("nothing here") is not an error and never produces this.
    """

    def __init__(self, line: str, cursor: int, cause: BaseException):
        super().__init__(f"scanner failed at offset {cursor}: {cause}")
        self.line = line
        self.cursor = cursor
        self.cause = cause


class ExpansionError(EmmetLsError):
    def __init__(self, abbreviation: str, grammar: str, cause: BaseException):
        super().__init__(f"cannot expand {abbreviation!r} as {grammar}: {cause}")
        self.abbreviation = abbreviation
        self.grammar = grammar
        self.cause = cause


class DocumentNotFound(EmmetLsError):
    def __init__(self, uri: str):
        super().__init__(f"failed to find document {uri}")
        self.uri = uri


class InvariantViolation(EmmetLsError):
    """Raised by ``never()`` when a path assumed unreachable is reached."""

    def __init__(self, message: str, *, env: dict[str, object] | None = None):
        super().__init__(message)
        self.env = dict(env or {})
