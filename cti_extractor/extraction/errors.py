"""Typed failures of the model call."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    AUTH = 'auth'
    FORMAT = 'format'
    UNKNOWN = 'unknown'


class ExtractionError(Exception):
    """
    An extraction request failed.

    The ``kind`` is decided where the failure happens so callers never have
    to inspect the message text.
    """

    kind = ErrorKind.UNKNOWN

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    def __str__(self) -> str:
        return self.message


class AuthError(ExtractionError):
    """Missing, invalid or unauthorized credential."""

    kind = ErrorKind.AUTH


class FormatError(ExtractionError):
    """Model output could not be parsed into an ExtractionResult."""

    kind = ErrorKind.FORMAT
