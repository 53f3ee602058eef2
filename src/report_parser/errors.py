# src/report_parser/errors.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List


class ReportParseError(Exception):
    """
    Base class for every failure raised while extracting a review report.

    Besides the message, each error carries a ``context`` list of short labels
    (outermost first) that identifies where in the report the failure happened,
    e.g. ``["parse round kyoku-0-0", "parse turn 3", "parse role player"]``.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.context: List[str] = []

    def add_context(self, label: str) -> None:
        self.context.insert(0, label)

    def __str__(self) -> str:
        return ": ".join([*self.context, self.message])


class StructureError(ReportParseError):
    """A node, class or attribute does not have the expected shape."""


class MissingAttributeError(StructureError):
    pass


class MissingIdError(StructureError):
    pass


class MissingParentError(StructureError):
    pass


class RoleCountError(ReportParseError):
    """A turn carries fewer than two role labels."""


class UnexpectedRoleError(ReportParseError):
    """A turn carries more than two role labels."""


class RoleLabelMismatchError(ReportParseError):
    pass


class RowShapeError(ReportParseError):
    """An action row is not made of exactly three cells."""


class EmptyActionError(ReportParseError):
    pass


class ActionNotFoundError(ReportParseError):
    """A role's action is not listed among the turn's scored rows."""


class NumericFormatError(ReportParseError):
    pass


@contextmanager
def error_context(label: str) -> Iterator[None]:
    """
    Prefixes any ReportParseError raised inside the block with ``label``.

    The original exception object is re-raised, so callers can still catch
    the concrete error type.
    """
    try:
        yield
    except ReportParseError as err:
        err.add_context(label)
        raise
