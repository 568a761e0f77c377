# offside/errors.py
from __future__ import annotations


class IndentError(Exception):
    """Base class for errors reported to the caller of an indentation request."""


class StructuralImpossible(IndentError):
    """The segmented clause matched no row of the decision table."""

    def __init__(self, line_type: str, test: str) -> None:
        super().__init__(f"{line_type}: impossible case {test}")
        self.line_type = line_type
        self.test = test


class UnsupportedOperation(IndentError):
    """The engine works one line at a time; region re-indentation is refused."""


class NestingTooDeep(IndentError):
    """Bracket or virtual-indentation recursion exceeded the configured depth."""

    def __init__(self, depth: int) -> None:
        super().__init__(f"nesting deeper than {depth} levels")
        self.depth = depth


class ScanFailure(Exception):
    """
    A forward/backward move could not complete (buffer edge, unbalanced bracket).
    Raised by the text adapter and always caught inside the engine.
    """
