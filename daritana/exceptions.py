"""Exception hierarchy for the compliance evaluator and its lifecycle."""

from __future__ import annotations


class DaritanaError(Exception):
    """Base class for all Daritana compliance errors."""


class NotFoundError(DaritanaError, KeyError):
    """Raised when a requested identifier does not exist in a store."""

    kind = "record"

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(identifier)

    def __str__(self) -> str:
        return f"{self.kind.capitalize()} '{self.identifier}' not found."


class CheckNotFoundError(NotFoundError):
    """Raised when a compliance check id is unknown."""

    kind = "compliance check"


class ReportNotFoundError(NotFoundError):
    """Raised when a compliance report id is unknown."""

    kind = "compliance report"


class ClauseNotFoundError(NotFoundError):
    """Raised when a clause id is unknown."""

    kind = "clause"


class ViolationNotFoundError(NotFoundError):
    """Raised when a check holds no violation for the given clause."""

    kind = "violation for clause"


class InvalidInputError(DaritanaError, ValueError):
    """Raised when building parameters or request bodies are malformed."""


class ClauseDataError(DaritanaError):
    """Raised when clause reference data cannot be loaded."""
