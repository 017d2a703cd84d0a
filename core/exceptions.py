"""Custom exceptions for the Fountain parser."""

from typing import Any


class FountainException(Exception):
    """Base exception for the Fountain parser."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(FountainException):
    """Raised when request or input validation fails."""

    pass


class ParsingException(FountainException):
    """Raised when a document cannot be parsed."""

    pass


class SameKindNestingException(ParsingException):
    """Raised when a ranged element opens inside an open range of the same kind.

    Only raised under ``NestingPolicy.REJECT``.
    """

    pass


class IndexMapInconsistencyError(FountainException):
    """Stripped text no longer inverts to the raw line.

    This is a defect in the stripper, not a property of the input, so it
    does not derive from ``ParsingException``.
    """

    pass
